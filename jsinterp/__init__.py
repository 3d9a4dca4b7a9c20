"""Tree-walking interpreter for a small JavaScript subset.

Basic program flow:
    1. Lexer: scans source text into a lazy stream of tokens
        - see jsinterp/syntax/lexical.py
    2. Parser: builds an abstract syntax tree, recursive descent for statements and precedence climbing for binary
       expressions
        - for the grammar, see jsinterp/syntax/parser.py; for the nodes, jsinterp/syntax/nodes.py
    3. Evaluator: walks the tree against a chain of scopes, producing a runtime value
        - see jsinterp/runtime/

The single entry point is execute_source: it evaluates a program in a fresh global scope and returns its value, or
raises the first error encountered.
"""

from jsinterp.lang.session import execute_source

__all__ = ["execute_source"]
