import sys

from jsinterp.main import main

sys.exit(main())
