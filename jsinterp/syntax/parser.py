"""Recursive-descent parser for jsinterp. Statements are parsed by recursive descent, binary expressions by precedence
climbing over BINARY_PRECEDENCE. The parser only validates syntax: scoping and `return` placement are left to the
evaluator.

Grammar:

```
<program>    ::= <statement>* EOF
<statement>  ::= <let> | <function> | <block> | <if> | <return> | <expr_stmt> | ";"
<let>        ::= "let" <identifier> ["=" <expr>] <end>
<function>   ::= "function" <identifier> "(" [<identifier> ("," <identifier>)*] ")" <block>
<block>      ::= "{" <statement>* "}"
<if>         ::= "if" "(" <expr> ")" <statement> ["else" <statement>]
<return>     ::= "return" [<expr>] <end>
<expr_stmt>  ::= <expr> <end>
<end>        ::= ";" | (before "}" or EOF)      ; semicolons are optional at a block boundary

<expr>       ::= <identifier> "=" <expr>       ; right-associative, left side must be a bare identifier
               | <binary>
<binary>     ::= <unary> (<binary_op> <unary>)*  ; resolved by precedence climbing, all left-associative
<unary>      ::= "-" <unary> | <call>
<call>       ::= <primary> ("(" [<expr> ("," <expr>)*] ")")*
<primary>    ::= <number> | <string> | "true" | "false" | <identifier> | "(" <expr> ")"
```
"""

from jsinterp.lang.error import ParseError
from jsinterp.lang.stack import recursion_limit
from jsinterp.syntax import nodes
from jsinterp.syntax.lexical import TokenKind, tokenize


BINARY_PRECEDENCE = {
    "==": 1, "!=": 1, "===": 1, "!==": 1,
    "<": 2, "<=": 2, ">": 2, ">=": 2,
    "+": 3, "-": 3,
    "*": 4, "/": 4,
}


class Parser:
    """Consumes a token sequence and produces a nodes.Program. Raises ParseError on the first grammar violation."""

    def __init__(self, tokens):
        self._tokens = list(tokens)
        if not self._tokens or self._tokens[-1].kind is not TokenKind.EOF:
            raise ValueError("token stream must end with an EOF token")
        self._pos = 0

    def parse(self):
        """Parses the whole token stream as a Program."""
        body = []
        try:
            with recursion_limit():
                while not self._check(TokenKind.EOF):
                    stmt = self.parse_statement()
                    if stmt is not None:
                        body.append(stmt)
        except RecursionError:
            token = self._current()
            raise ParseError(token.pos, "a shallower expression", token.describe(), end=token.end,
                             msg="nesting too deep") from None
        return nodes.Program(body, pos=0)

    # statements

    def parse_statement(self):
        """Parses one statement. Returns None for an empty statement."""
        token = self._current()

        if self._check(TokenKind.PUNCTUATION, ";"):
            self._advance()
            return None
        if self._check(TokenKind.KEYWORD, "let"):
            return self.parse_let()
        if self._check(TokenKind.KEYWORD, "function"):
            return self.parse_function()
        if self._check(TokenKind.KEYWORD, "if"):
            return self.parse_if()
        if self._check(TokenKind.KEYWORD, "return"):
            return self.parse_return()
        if self._check(TokenKind.PUNCTUATION, "{"):
            return self.parse_block()

        expr = self.parse_expression()
        self._expect_end()
        return nodes.ExpressionStatement(expr, pos=token.pos)

    def parse_let(self):
        start = self._expect(TokenKind.KEYWORD, "let")
        name = self._expect(TokenKind.IDENTIFIER)

        init = None
        if self._match(TokenKind.OPERATOR, "="):
            init = self.parse_expression()

        self._expect_end()
        return nodes.LetDeclaration(name.value, init, pos=start.pos)

    def parse_function(self):
        start = self._expect(TokenKind.KEYWORD, "function")
        name = self._expect(TokenKind.IDENTIFIER)

        self._expect(TokenKind.PUNCTUATION, "(")
        params = []
        if not self._check(TokenKind.PUNCTUATION, ")"):
            params.append(self._expect(TokenKind.IDENTIFIER).value)
            while self._match(TokenKind.PUNCTUATION, ","):
                params.append(self._expect(TokenKind.IDENTIFIER).value)
        self._expect(TokenKind.PUNCTUATION, ")")

        body = self.parse_block()
        return nodes.FunctionDeclaration(name.value, params, body, pos=start.pos)

    def parse_block(self):
        start = self._expect(TokenKind.PUNCTUATION, "{")

        body = []
        while not self._check(TokenKind.PUNCTUATION, "}"):
            if self._check(TokenKind.EOF):
                raise self._error("'}'")
            stmt = self.parse_statement()
            if stmt is not None:
                body.append(stmt)

        self._expect(TokenKind.PUNCTUATION, "}")
        return nodes.Block(body, pos=start.pos)

    def parse_if(self):
        start = self._expect(TokenKind.KEYWORD, "if")
        self._expect(TokenKind.PUNCTUATION, "(")
        test = self.parse_expression()
        self._expect(TokenKind.PUNCTUATION, ")")

        consequent = self._parse_branch()
        alternate = None
        if self._match(TokenKind.KEYWORD, "else"):
            alternate = self._parse_branch()

        return nodes.IfStatement(test, consequent, alternate, pos=start.pos)

    def _parse_branch(self):
        token = self._current()
        stmt = self.parse_statement()
        if stmt is None:
            return nodes.Block([], pos=token.pos)  # `if (x);` has an empty branch
        return stmt

    def parse_return(self):
        start = self._expect(TokenKind.KEYWORD, "return")

        value = None
        if not self._at_end():
            value = self.parse_expression()

        self._expect_end()
        return nodes.ReturnStatement(value, pos=start.pos)

    # expressions

    def parse_expression(self):
        """Parses an assignment or a binary expression."""
        target = self.parse_binary(1)

        if self._check(TokenKind.OPERATOR, "="):
            eq = self._current()
            if not isinstance(target, nodes.Identifier):
                raise ParseError(target.pos, "identifier on the left of '='", type(target).__name__, end=eq.pos)
            self._advance()
            value = self.parse_expression()
            return nodes.AssignExpr(target.name, value, pos=target.pos)

        return target

    def parse_binary(self, min_precedence):
        """Precedence climbing: consumes operators binding at least as tightly as min_precedence. Recursing with
        precedence + 1 on the right makes every level left-associative.
        """
        left = self.parse_unary()

        while True:
            token = self._current()
            precedence = BINARY_PRECEDENCE.get(token.text) if token.kind is TokenKind.OPERATOR else None
            if precedence is None or precedence < min_precedence:
                return left

            self._advance()
            right = self.parse_binary(precedence + 1)
            left = nodes.BinaryExpr(token.text, left, right, pos=left.pos)

    def parse_unary(self):
        if self._check(TokenKind.OPERATOR, "-"):
            start = self._advance()
            return nodes.UnaryExpr("-", self.parse_unary(), pos=start.pos)
        return self.parse_call()

    def parse_call(self):
        expr = self.parse_primary()

        while self._match(TokenKind.PUNCTUATION, "("):
            args = []
            if not self._check(TokenKind.PUNCTUATION, ")"):
                args.append(self.parse_expression())
                while self._match(TokenKind.PUNCTUATION, ","):
                    args.append(self.parse_expression())
            self._expect(TokenKind.PUNCTUATION, ")")
            expr = nodes.CallExpr(expr, args, pos=expr.pos)

        return expr

    def parse_primary(self):
        token = self._current()

        if token.kind is TokenKind.NUMBER:
            self._advance()
            return nodes.NumberLiteral(token.value, pos=token.pos)

        if token.kind is TokenKind.STRING:
            self._advance()
            return nodes.StringLiteral(token.value, pos=token.pos)

        if token.kind is TokenKind.IDENTIFIER:
            self._advance()
            return nodes.Identifier(token.value, pos=token.pos)

        if token.kind is TokenKind.KEYWORD and token.text in ("true", "false"):
            self._advance()
            return nodes.BooleanLiteral(token.text == "true", pos=token.pos)

        if self._match(TokenKind.PUNCTUATION, "("):
            expr = self.parse_expression()
            self._expect(TokenKind.PUNCTUATION, ")")
            return expr

        raise self._error("expression")

    # token helpers

    def _current(self):
        return self._tokens[self._pos]

    def _advance(self):
        token = self._tokens[self._pos]
        if token.kind is not TokenKind.EOF:
            self._pos += 1
        return token

    def _check(self, kind, text=None):
        token = self._current()
        return token.kind is kind and (text is None or token.text == text)

    def _match(self, kind, text=None):
        if self._check(kind, text):
            self._advance()
            return True
        return False

    def _expect(self, kind, text=None):
        if self._check(kind, text):
            return self._advance()
        raise self._error(f"'{text}'" if text is not None else kind.value)

    def _at_end(self):
        """Whether the current token implicitly or explicitly terminates a statement."""
        return (self._check(TokenKind.PUNCTUATION, ";") or self._check(TokenKind.PUNCTUATION, "}")
                or self._check(TokenKind.EOF))

    def _expect_end(self):
        if self._match(TokenKind.PUNCTUATION, ";"):
            return
        if self._check(TokenKind.PUNCTUATION, "}") or self._check(TokenKind.EOF):
            return
        raise self._error("';'")

    def _error(self, expected):
        token = self._current()
        return ParseError(token.pos, expected, token.describe(), end=token.end)


def parse(tokens):
    """Parses tokens (any iterable ending with an EOF Token) into a Program."""
    return Parser(tokens).parse()


def parse_source(source):
    """Tokenizes and parses source."""
    return parse(tokenize(source))
