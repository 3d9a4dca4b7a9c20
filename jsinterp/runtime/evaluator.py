"""Tree-walking evaluator. Expressions evaluate to Values; statements execute for their effect and return either None
or a Returning signal, which propagates up through blocks and is unwrapped only by a function call.
"""

import logging
import math
import operator
from dataclasses import dataclass

from jsinterp.lang.error import JSException, JSRangeError, JSSyntaxError, JSTypeError
from jsinterp.lang.stack import recursion_limit
from jsinterp.runtime.values import Boolean, Function, Number, String, UNDEFINED, Value, strict_equals
from jsinterp.syntax import nodes

logger = logging.getLogger("jsinterp.evaluator")
logger.addHandler(logging.NullHandler())


@dataclass(frozen=True)
class Returning:
    """Control-flow signal carrying the value of an executed `return`."""
    value: Value


class Evaluator:
    """Evaluates one Program. An Evaluator keeps no bindings of its own: all scope state lives in the Environment
    chain, so evaluating in a fresh Environment gives an independent run.
    """

    def __init__(self):
        self.completion = UNDEFINED
        self.call_depth = 0
        self._returned_at = -1

    def evaluate(self, program, env):
        """Executes program's statements in env and returns the value of the last evaluated expression statement."""
        self.completion = UNDEFINED

        try:
            with recursion_limit():
                self._run(program, env)
        except RecursionError:
            raise JSRangeError("maximum call stack size exceeded") from None

        return self.completion

    def _run(self, program, env):
        for stmt in program.body:
            signal = self.execute(stmt, env)
            if isinstance(signal, Returning):
                raise JSSyntaxError("illegal return statement outside of a function", start=self._returned_at)

    # statements

    def execute(self, stmt, env):
        """Executes stmt in env. Returns a Returning signal if a `return` was executed, None otherwise."""
        if isinstance(stmt, nodes.ExpressionStatement):
            self.completion = self.eval(stmt.expr, env)
            return None

        if isinstance(stmt, nodes.LetDeclaration):
            value = UNDEFINED if stmt.init is None else self.eval(stmt.init, env)
            env.declare(stmt.name, value)
            return None

        if isinstance(stmt, nodes.Block):
            return self.execute_block(stmt.body, env.child())

        if isinstance(stmt, nodes.FunctionDeclaration):
            env.declare(stmt.name, Function(stmt.name, stmt.params, stmt.body, env))
            return None

        if isinstance(stmt, nodes.ReturnStatement):
            self._returned_at = stmt.pos
            return Returning(UNDEFINED if stmt.value is None else self.eval(stmt.value, env))

        if isinstance(stmt, nodes.IfStatement):
            if self.eval(stmt.test, env).truthy:
                return self.execute(stmt.consequent, env)
            if stmt.alternate is not None:
                return self.execute(stmt.alternate, env)
            return None

        raise JSException(f"cannot execute {type(stmt).__name__}", internal=True)

    def execute_block(self, body, env):
        """Executes body in env, which the caller has already created. Stops at the first Returning signal."""
        for stmt in body:
            signal = self.execute(stmt, env)
            if signal is not None:
                return signal
        return None

    # expressions

    def eval(self, expr, env):
        """Evaluates expr in env to a Value."""
        if isinstance(expr, nodes.NumberLiteral):
            return Number(expr.value)

        if isinstance(expr, nodes.StringLiteral):
            return String(expr.value)

        if isinstance(expr, nodes.BooleanLiteral):
            return Boolean(expr.value)

        if isinstance(expr, nodes.Identifier):
            return env.lookup(expr.name, expr.pos)

        if isinstance(expr, nodes.UnaryExpr):
            operand = self.eval(expr.operand, env)
            if not isinstance(operand, Number):
                raise JSTypeError(f"cannot negate a {operand.type_name}", start=expr.pos)
            return Number(-operand.value)

        if isinstance(expr, nodes.BinaryExpr):
            left = self.eval(expr.left, env)
            right = self.eval(expr.right, env)
            return self.binary(expr, left, right)

        if isinstance(expr, nodes.AssignExpr):
            value = self.eval(expr.value, env)
            env.assign(expr.name, value, expr.pos)
            return value

        if isinstance(expr, nodes.CallExpr):
            return self.call(expr, env)

        raise JSException(f"cannot evaluate {type(expr).__name__}", internal=True)

    def binary(self, expr, left, right):
        """Applies expr.op to already evaluated operands. `+` never coerces between numbers and strings."""
        op = expr.op

        if op in ("==", "==="):
            return Boolean(strict_equals(left, right))
        if op in ("!=", "!=="):
            return Boolean(not strict_equals(left, right))

        if op == "+" and isinstance(left, String) and isinstance(right, String):
            return String(left.value + right.value)

        if op in ("<", "<=", ">", ">="):
            comparable = isinstance(left, Number) and isinstance(right, Number)
            comparable = comparable or isinstance(left, String) and isinstance(right, String)
            if not comparable:
                raise self._operand_error(expr, left, right)
            return Boolean(COMPARISONS[op](left.value, right.value))

        if not (isinstance(left, Number) and isinstance(right, Number)):
            raise self._operand_error(expr, left, right)

        if op == "+":
            return Number(left.value + right.value)
        if op == "-":
            return Number(left.value - right.value)
        if op == "*":
            return Number(left.value * right.value)
        if op == "/":
            return Number(divide(left.value, right.value))

        raise JSException(f"unknown operator '{op}'", internal=True)

    def call(self, expr, env):
        callee = self.eval(expr.callee, env)
        if not isinstance(callee, Function):
            name = expr.callee.name if isinstance(expr.callee, nodes.Identifier) else "expression"
            raise JSTypeError(f"{name} is not a function (got {callee.type_name})", start=expr.pos)

        args = [self.eval(arg, env) for arg in expr.args]

        frame = callee.closure.child()
        for idx, param in enumerate(callee.params):
            frame.declare(param, args[idx] if idx < len(args) else UNDEFINED)

        completion = self.completion  # statements in a function body do not produce the program result
        self.call_depth += 1
        logger.debug("call %s(%d args) at depth %d", callee.name, len(args), self.call_depth)
        try:
            signal = self.execute_block(callee.body.body, frame)
        finally:
            self.call_depth -= 1
            self.completion = completion

        return signal.value if signal is not None else UNDEFINED

    @staticmethod
    def _operand_error(expr, left, right):
        return JSTypeError(f"unsupported operand types for {expr.op}: {left.type_name} and {right.type_name}",
                           start=expr.pos)


COMPARISONS = {"<": operator.lt, "<=": operator.le, ">": operator.gt, ">=": operator.ge}


def divide(dividend, divisor):
    """IEEE-754 division: Python raises on a zero divisor where JavaScript yields Infinity or NaN."""
    if divisor != 0:
        return dividend / divisor
    if dividend == 0 or math.isnan(dividend):
        return math.nan
    return math.copysign(math.inf, dividend) * math.copysign(1.0, divisor)


def evaluate(program, env):
    """Evaluates program in env with a new Evaluator."""
    return Evaluator().evaluate(program, env)
