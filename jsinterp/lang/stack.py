"""Host stack control. Every JavaScript call or nesting level costs several Python frames, so the parser and the
evaluator run with a raised recursion limit instead of the interpreter default.
"""

import sys
from contextlib import contextmanager

RECURSION_LIMIT = 10000


@contextmanager
def recursion_limit(limit=RECURSION_LIMIT):
    """Raises the recursion limit to at least limit for the duration of the block. Never lowers it."""
    previous = sys.getrecursionlimit()
    sys.setrecursionlimit(max(previous, limit))
    try:
        yield
    finally:
        sys.setrecursionlimit(previous)
