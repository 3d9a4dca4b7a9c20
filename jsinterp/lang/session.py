"""Session control for jsinterp. Implements the single entry point, execute_source, and Session, which keeps one root
Environment alive across several pieces of source (used by the shell and file mode).
"""

import logging

from jsinterp.lang.error import JSException, LexError
from jsinterp.runtime.environment import Environment
from jsinterp.runtime.evaluator import Evaluator
from jsinterp.syntax.lexical import TokenKind, tokenize
from jsinterp.syntax.parser import parse_source

logger = logging.getLogger("jsinterp.session")
logger.addHandler(logging.NullHandler())


def execute_source(source):
    """Evaluates source in a fresh root Environment and returns the resulting Value. Raises the first LexError,
    ParseError or JSRuntimeError encountered; no statement runs after an error.
    """
    return Evaluator().evaluate(parse_source(source), Environment.root())


class Session:
    """Governs a jsinterp session, with control over the global scope. Each Session owns its own root Environment, so
    separate Sessions never see each other's bindings.
    """
    SH_FILE = "<in>"  # command-line interpreter filename
    EVAL_FILE = "<eval>"  # `-e` source filename

    def __init__(self, error_handler, path, cmd_line=False):
        self.error_handler = error_handler
        self.path = path          # used for error messages
        self.cmd_line = cmd_line  # whether or not in command-line mode

        self.env = Environment.root()
        self.evaluator = Evaluator()
        self.results = []         # values of successfully run sources, most recent last

        if self.cmd_line:
            self.error_handler.fatal = False

    @classmethod
    def from_file(cls, error_handler, path):
        """Returns a Session that has run the file at path."""
        sess = cls(error_handler, path)
        sess.run(cls.read_source(path))
        return sess

    @staticmethod
    def read_source(path):
        """Returns the contents of the file at path."""
        try:
            with open(path, "r") as file:
                return file.read()
        except OSError as e:
            raise JSException(f"'{path}' could not be opened: {e.strerror}") from None

    @staticmethod
    def needs_continuation(line):
        """Whether line opens more braces/parentheses than it closes, i.e. the shell should keep reading. Brackets inside
        strings and comments do not count. Source that does not lex is left for run to report.
        """
        depth = {"{": 0, "(": 0}
        closing = {"}": "{", ")": "("}
        try:
            for token in tokenize(line):
                if token.kind is not TokenKind.PUNCTUATION:
                    continue
                if token.text in depth:
                    depth[token.text] += 1
                elif token.text in closing:
                    depth[closing[token.text]] -= 1
        except LexError:
            return False
        return any(count > 0 for count in depth.values())

    def run(self, source):
        """Parses and evaluates source in this session's global scope. The resulting Value is appended to
        self.results and returned. Errors propagate to the caller (normally inside self.error_handler).
        """
        self.error_handler.register_source(self.path, source)

        program = parse_source(source)
        logger.debug("running %d statement(s) from %s", len(program.body), self.path)

        value = self.evaluator.evaluate(program, self.env)
        self.results.append(value)
        return value

    def pop(self):
        """Removes and returns the most recent result."""
        return self.results.pop()
