"""Error handling for jsinterp. Only JSExceptions should be encountered during running: if another type of error is
raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.

Hierarchy:

```
JSException
 +-- LexError          ; malformed token at a source position
 +-- ParseError        ; grammar violation, expected vs found
 +-- JSRuntimeError    ; anything raised while walking the tree
      +-- JSReferenceError
      +-- JSTypeError
      +-- JSSyntaxError  ; structurally illegal, only detectable at evaluation time (stray return)
      +-- JSRangeError   ; host stack exhausted
```
"""

import sys

from termcolor import colored


class JSException(Exception):
    """Templates an error message so that it can be reported against the source that caused it. start and end are
    character offsets into that source; start=-1 means the position is unknown.
    """
    kind = "Error"

    def __init__(self, msg, start=-1, end=-1, internal=False):
        super().__init__(msg)
        self.msg = msg
        self.start = start
        if end == -1 and start != -1:
            end = start + 1  # needed for error display
        self.end = end
        self.internal = internal

    def __str__(self):
        return f"{self.kind}: {self.msg}"


class LexError(JSException):
    """Raised when no token can start at position."""
    kind = "LexError"

    def __init__(self, position, char, msg=None):
        if msg is None:
            msg = f"unexpected character '{char}'"
        super().__init__(msg, start=position)
        self.position = position
        self.char = char


class ParseError(JSException):
    """Raised when the token at position is not what the grammar expected."""
    kind = "ParseError"

    def __init__(self, position, expected, found, end=-1, msg=None):
        if msg is None:
            msg = f"expected {expected}, found {found}"
        super().__init__(msg, start=position, end=end)
        self.position = position
        self.expected = expected
        self.found = found


class JSRuntimeError(JSException):
    kind = "RuntimeError"


class JSReferenceError(JSRuntimeError):
    kind = "ReferenceError"

    def __init__(self, name, start=-1):
        super().__init__(f"{name} is not defined", start=start, end=start + len(name) if start != -1 else -1)
        self.name = name


class JSTypeError(JSRuntimeError):
    kind = "TypeError"


class JSSyntaxError(JSRuntimeError):
    kind = "SyntaxError"


class JSRangeError(JSRuntimeError):
    kind = "RangeError"


class ErrorHandler:
    """Context manager that will report jsinterp errors against the registered source instead of letting Python print
    a traceback.
    """
    ERROR = "red"

    def __init__(self, fatal=True, color=None):
        """color=None colors only when stdout is a terminal; True and False force it on or off."""
        self.fatal = fatal
        self.color = color
        self.path = None
        self.source = ""

    def register_source(self, path, source):
        """Registers the source being run, used to locate error positions. Should be called prior to Session run."""
        self.path = path
        self.source = source

    def _colored(self, text, color=None, bold=True):
        return colored(text, color, attrs=["bold"] if bold else None,
                       no_color=self.color is False, force_color=self.color is True)

    def locate(self, offset):
        """Returns (line, line_num, col) of offset in the registered source, line_num and col being 1-based."""
        offset = max(0, min(offset, len(self.source)))
        line_start = self.source.rfind("\n", 0, offset) + 1
        line_end = self.source.find("\n", offset)
        if line_end == -1:
            line_end = len(self.source)

        line_num = self.source.count("\n", 0, offset) + 1
        return self.source[line_start:line_end], line_num, offset - line_start + 1

    def diagnose(self, error):
        """Returns the offending line with the erroneous part highlighted and underlined."""
        line, __, col = self.locate(error.start)
        start = col - 1
        end = max(min(start + (error.end - error.start), len(line)), start + 1)

        diagnosis = "  " + line[:start]
        diagnosis += self._colored(line[start:end], ErrorHandler.ERROR)
        diagnosis += line[end:] + "\n"

        diagnosis += "  " + " " * start
        diagnosis += self._colored("^" + "~" * (end - start - 1), ErrorHandler.ERROR)

        return diagnosis

    def format(self, error):
        """Formats error as '<path>:<line>:<col>: <kind>: <msg>', followed by a diagnosis when the position is known."""
        error_msg = ""
        has_position = error.start != -1 and not error.internal and self.source

        if has_position:
            __, line_num, col = self.locate(error.start)
            error_msg += self._colored(f"{self.path}:{line_num}:{col}: ")
        elif self.path:
            error_msg += self._colored(f"{self.path}: ")

        if error.internal:
            error_msg += self._colored("[internal] ", ErrorHandler.ERROR)

        error_msg += self._colored(f"{error.kind}: ", ErrorHandler.ERROR) + error.msg

        if has_position:
            error_msg += "\n" + self.diagnose(error)

        return error_msg

    def throw(self, error):
        """Prints error. If self.fatal, exits with status 1."""
        print(self.format(error), file=sys.stderr)

        if self.fatal:
            sys.exit(1)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(JSException("keyboard interrupt"))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is not None and issubclass(exc_type, JSException):
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(JSException(f"unknown error: '{exc_type.__name__}: {exc_val}'", internal=True))
            do_exit = True

        return not do_exit
