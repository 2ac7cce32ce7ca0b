"""Binary arithmetic expressions: operators, operands, parsing and evaluation."""
from abc import abstractmethod
from collections.abc import Callable as ABCCallable
from decimal import Decimal
from enum import Enum
import math
import operator
from typing import Annotated, Callable, Dict, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from mathproof.common.errors import (
    InvalidExpressionError,
    InvalidOperatorSymbolError,
    NonNumericOperandError,
)
from mathproof.common.logger import logger


# Type alias for operator functions (taking two floats, returning a float)
OperatorFn: ABCCallable[[float, float], float] = Callable[[float, float], float]


def _divide(left: float, right: float) -> float:
    """
    Divide with IEEE 754 semantics instead of raising ZeroDivisionError.

    :param float left: Dividend
    :param float right: Divisor

    :return: left / right, or +-inf / nan when dividing by zero
    :rtype: float
    """
    if right != 0.0:
        return left / right
    if left == 0.0 or math.isnan(left):
        return math.nan
    return math.copysign(math.inf, left) * math.copysign(1.0, right)


def _is_odd_integer(value: float) -> bool:
    return math.isfinite(value) and value.is_integer() and int(value) % 2 == 1


def _power(base: float, exponent: float) -> float:
    """
    Raise base to exponent the way C's pow() does.

    math.pow raises where C returns a special value, those cases are mapped back:
    overflow gives +-inf, a zero base with a negative exponent gives +-inf and
    a negative base with a fractional exponent gives nan.

    :param float base: Base
    :param float exponent: Exponent

    :return: base ** exponent
    :rtype: float
    """
    try:
        return math.pow(base, exponent)
    except OverflowError:
        if base < 0 and _is_odd_integer(exponent):
            return -math.inf
        return math.inf
    except ValueError:
        if base == 0.0:
            if math.copysign(1.0, base) < 0 and _is_odd_integer(exponent):
                return -math.inf
            return math.inf
        return math.nan


# Mapping of operator symbols to their floating-point implementation
OPERATIONS: Dict[str, OperatorFn] = {
    "+": operator.add,
    "-": operator.sub,
    "*": operator.mul,
    "/": _divide,
    "^": _power,
}


class Operator(str, Enum):
    """Binary operator of an expression, valued by its symbol."""

    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"
    POWER = "^"

    @classmethod
    def parse(cls, symbol: str) -> "Operator":
        """
        Return the operator matching a single-character symbol.

        :param str symbol: One of ``+ - * / ^``

        :return: Matching operator
        :rtype: Operator
        :raises InvalidOperatorSymbolError: If the symbol is not an operator
        """
        for member in cls:
            if member.value == symbol:
                return member
        raise InvalidOperatorSymbolError(symbol)

    def render(self) -> str:
        return self.value

    def apply(self, left: float, right: float) -> float:
        """Apply the operator to two numbers."""
        return OPERATIONS[self.value](left, right)


# Characters an expression is split on
OPERATOR_SYMBOLS = frozenset(member.value for member in Operator)


def _is_number(token: str) -> bool:
    """
    Determine if a token is a floating-point literal.

    Python's float() is more lenient than a plain float literal: it strips
    surrounding whitespace and accepts digit-group underscores and non-ASCII
    digits. Tokens relying on those are not numbers.

    :param str token: Token string

    :return: True if token is a float literal, else False
    :rtype: bool
    """
    if not token.isascii() or "_" in token or token != token.strip():
        return False
    try:
        float(token)
        return True
    except ValueError:
        return False


def _format_number(value: float) -> str:
    """
    Positional display form of a number, without exponent or trailing ``.0``.

    The digits are the shortest ones that round-trip (those of repr), laid out
    in full: ``1e23`` shows as ``100000000000000000000000`` and ``1e-07`` as
    ``0.0000001``.

    :param float value: Number to display

    :return: Display text, ``inf``, ``-inf`` or ``NaN`` for non-finite values
    :rtype: str
    """
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    text: str = format(Decimal(repr(value)), "f")
    if text.endswith(".0"):
        return text[:-2]
    return text


class Operand(BaseModel):
    """
    Leaf of an expression tree.

    Concrete operands are Variable, Number and SubExpression, told apart by
    their ``kind`` field.
    """

    model_config = ConfigDict(frozen=True)

    @staticmethod
    def parse(text: str) -> "Union[Variable, Number]":
        """
        Classify a text segment as a number or a variable.

        :param str text: Operand text, already stripped of whitespace

        :return: Number if text is a float literal, Variable otherwise
        :rtype: Union[Variable, Number]
        """
        if _is_number(text):
            logger.debug(f"Operand {text!r} parsed as number")
            return Number(value=float(text))
        logger.debug(f"Operand {text!r} parsed as variable")
        return Variable(name=text)

    @abstractmethod
    def evaluate(self) -> float:
        """Reduce the operand to a number."""

    @abstractmethod
    def render(self) -> str:
        """Display text of the operand."""


class Variable(Operand):
    """Identifier that could not be read as a number."""

    kind: Literal["variable"] = "variable"
    name: str = Field(..., description="Identifier text")

    def evaluate(self) -> float:
        raise NonNumericOperandError()

    def render(self) -> str:
        return self.name


class Number(Operand):
    """Floating-point literal."""

    kind: Literal["number"] = "number"
    value: float = Field(..., description="Numeric value")

    def evaluate(self) -> float:
        return self.value

    def render(self) -> str:
        return _format_number(self.value)


class SubExpression(Operand):
    """Nested expression owned by its parent operand."""

    kind: Literal["expression"] = "expression"
    expression: "Expression" = Field(..., description="Nested expression")

    def evaluate(self) -> float:
        return self.expression.evaluate().value

    def render(self) -> str:
        return self.expression.render()


OperandType = Annotated[Union[Variable, Number, SubExpression], Field(discriminator="kind")]


class Expression(BaseModel):
    """
    Two operands joined by a binary operator.

    Parsing is a flat leftmost split: the text is cut at the first operator
    character, whatever its precedence. ``2+3*4`` therefore reads as
    ``2 + (3*4)`` with ``3*4`` kept as a single variable operand, and only
    one outer pair of parentheses is removed before scanning.

    Examples:
        - ``Expression.parse("2 + 3").evaluate().render()`` -> ``"5"``
        - ``Expression.parse("(x^2)").render()`` -> ``"(x ^ 2)"``
    """

    model_config = ConfigDict(frozen=True)

    left: OperandType = Field(..., description="Left-hand operand")
    right: OperandType = Field(..., description="Right-hand operand")
    op: Operator = Field(..., description="Binary operator")

    @classmethod
    def parse(cls, text: str) -> "Expression":
        """
        Parse a binary expression from text.

        :param str text: Expression text, whitespace is ignored

        :return: Parsed expression
        :rtype: Expression
        :raises InvalidExpressionError: If the text holds no operator character
        """
        expr: str = "".join(text.split())

        # Strip one outer pair only, without checking that they match
        if expr.startswith("(") and expr.endswith(")"):
            expr = expr[1:-1]

        for index, char in enumerate(expr):
            if char in OPERATOR_SYMBOLS:
                return cls(
                    left=Operand.parse(expr[:index]),
                    right=Operand.parse(expr[index + 1:]),
                    op=Operator.parse(char),
                )

        raise InvalidExpressionError()

    def evaluate(self) -> Number:
        """
        Reduce the expression to a number.

        :return: Result of applying the operator to both operands
        :rtype: Number
        :raises NonNumericOperandError: If either side contains a variable
        """
        left: float = self.left.evaluate()
        right: float = self.right.evaluate()
        return Number(value=self.op.apply(left, right))

    def render(self) -> str:
        return f"({self.left.render()} {self.op.render()} {self.right.render()})"

    def __str__(self) -> str:
        return self.render()


SubExpression.model_rebuild()
Expression.model_rebuild()


def parse_expression(text: str) -> Expression:
    """Parse text into an Expression, see Expression.parse."""
    return Expression.parse(text)
