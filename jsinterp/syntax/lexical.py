"""Lexical analysis for jsinterp. Converts raw source text into a lazy stream of Tokens; carries no semantic
knowledge beyond keyword recognition.

Token grammar can be loosely defined as follows:

```
<number>     ::= <digit>+ ["." <digit>+]           ; decimal only, no exponent or hex
<string>     ::= "'" <char>* "'" | '"' <char>* '"'  ; no escape processing, must be terminated on the same quote
<identifier> ::= (<letter> | "_" | "$") (<letter> | <digit> | "_" | "$")*
<keyword>    ::= "let" | "function" | "return" | "if" | "else" | "true" | "false"
<operator>   ::= "+" | "-" | "*" | "/" | "=" | "==" | "===" | "!=" | "!==" | "<" | "<=" | ">" | ">="
<punctuation>::= "(" | ")" | "{" | "}" | "," | ";"

<comment>    ::= "//" <char>* <newline> | "/*" <char>* "*/"
```

Whitespace and comments never become tokens.
"""

from dataclasses import dataclass
from enum import Enum

from jsinterp.lang.error import LexError


class TokenKind(Enum):
    IDENTIFIER = "identifier"
    NUMBER = "number"
    STRING = "string"
    OPERATOR = "operator"
    PUNCTUATION = "punctuation"
    KEYWORD = "keyword"
    EOF = "end of input"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    value: object
    pos: int
    line: int = 1
    col: int = 1

    @property
    def end(self):
        return self.pos + len(self.text)

    def describe(self):
        """Human-readable form used in parse errors: the kind, plus the text where it adds information."""
        if self.kind is TokenKind.EOF:
            return self.kind.value
        return f"{self.kind.value} '{self.text}'"

    def __repr__(self):
        return f"<{self.line}:{self.col} {self.kind.name} '{self.text}'>"


class Lexer:
    """Scans source one token at a time. Iterating over a Lexer yields every Token in order, ending with exactly one
    EOF token. Errors are raised lazily, when the scan reaches the offending character.
    """
    KEYWORDS = {"let", "function", "return", "if", "else", "true", "false"}
    PUNCTUATION = {"(", ")", "{", "}", ",", ";"}
    OPERATORS = ["===", "!==", "==", "!=", "<=", ">=", "+", "-", "*", "/", "=", "<", ">"]  # longest match first
    QUOTES = {"'", "\""}

    def __init__(self, source):
        self.source = source
        self._pos = 0
        self._line = 1
        self._line_start = 0

    def __iter__(self):
        while True:
            token = self.next_token()
            yield token
            if token.kind is TokenKind.EOF:
                return

    def next_token(self):
        """Scans and returns the next Token, raising a LexError if no production can start at the current character."""
        self._skip_ignored()

        if not self._has_more():
            return self._token(TokenKind.EOF, "", None, self._pos)

        start = self._pos
        char = self._current()

        if Lexer.is_digit(char):
            return self._lex_number()

        if char.isalpha() or char in "_$":
            return self._lex_word()

        if char in Lexer.QUOTES:
            return self._lex_string()

        if char in Lexer.PUNCTUATION:
            self._pos += 1
            return self._token(TokenKind.PUNCTUATION, char, char, start)

        for op in Lexer.OPERATORS:
            if self.source.startswith(op, self._pos):
                self._pos += len(op)
                return self._token(TokenKind.OPERATOR, op, op, start)

        raise LexError(start, char)

    def _lex_number(self):
        start = self._pos
        self._consume_digits()

        # a trailing '.' only belongs to the number if a fractional part follows it
        if self._peek() == "." and Lexer.is_digit(self._peek(1)):
            self._pos += 1
            self._consume_digits()

        text = self.source[start:self._pos]
        if self._has_more() and (self._current().isalpha() or self._current() in "_$"):
            raise LexError(self._pos, self._current(), f"invalid numeric literal '{text}{self._current()}'")

        return self._token(TokenKind.NUMBER, text, float(text), start)

    def _lex_word(self):
        start = self._pos
        while self._has_more() and (self._current().isalnum() or self._current() in "_$"):
            self._pos += 1

        word = self.source[start:self._pos]
        if word in Lexer.KEYWORDS:
            return self._token(TokenKind.KEYWORD, word, word, start)
        return self._token(TokenKind.IDENTIFIER, word, word, start)

    def _lex_string(self):
        start = self._pos
        quote = self._current()

        end = self.source.find(quote, start + 1)
        newline = self.source.find("\n", start + 1)
        if end == -1 or newline != -1 and newline < end:
            raise LexError(start, quote, "unterminated string literal")

        self._pos = end + 1
        return self._token(TokenKind.STRING, self.source[start:self._pos], self.source[start + 1:end], start)

    def _skip_ignored(self):
        """Skips whitespace and comments, keeping line bookkeeping current."""
        while self._has_more():
            char = self._current()

            if char.isspace():
                self._advance()

            elif self.source.startswith("//", self._pos):
                while self._has_more() and self._current() != "\n":
                    self._pos += 1

            elif self.source.startswith("/*", self._pos):
                end = self.source.find("*/", self._pos + 2)
                if end == -1:
                    raise LexError(self._pos, "/", "unterminated block comment")
                while self._pos < end + 2:
                    self._advance()

            else:
                return

    def _consume_digits(self):
        while self._has_more() and Lexer.is_digit(self._current()):
            self._pos += 1

    def _advance(self):
        if self._current() == "\n":
            self._line += 1
            self._line_start = self._pos + 1
        self._pos += 1

    @staticmethod
    def is_digit(char):
        """ASCII digits only: str.isdigit accepts characters float() cannot parse."""
        return len(char) == 1 and "0" <= char <= "9"

    def _current(self):
        return self.source[self._pos]

    def _peek(self, ahead=0):
        pos = self._pos + ahead
        return self.source[pos] if pos < len(self.source) else ""

    def _has_more(self):
        return self._pos < len(self.source)

    def _token(self, kind, text, value, start):
        return Token(kind, text, value, start, self._line, start - self._line_start + 1)


def tokenize(source):
    """Returns a lazy iterator of the Tokens in source."""
    return iter(Lexer(source))
