"""Test Operator, Operand and Expression."""
import math

from pydantic import ValidationError
import pytest

from mathproof.common.errors import (
    InvalidExpressionError,
    InvalidOperatorSymbolError,
    NonNumericOperandError,
)
from mathproof.common.expression import (
    Expression,
    Number,
    Operand,
    Operator,
    SubExpression,
    Variable,
    parse_expression,
)


@pytest.mark.parametrize("symbol", ["+", "-", "*", "/", "^"])
def test_operator_render_inverts_parse(symbol: str) -> None:
    """Rendering a parsed operator gives back its symbol."""
    assert Operator.parse(symbol).render() == symbol


@pytest.mark.parametrize("symbol", ["%", "", "x", "**", "+-"])
def test_operator_rejects_unknown_symbol(symbol: str) -> None:
    """Symbols outside + - * / ^ are a contract violation."""
    with pytest.raises(InvalidOperatorSymbolError):
        Operator.parse(symbol)


@pytest.mark.parametrize("text,expected", [
    ("2", 2.0),
    ("-8.5", -8.5),
    ("+3", 3.0),
    ("1e3", 1000.0),
    (".5", 0.5),
    ("7.", 7.0),
])
def test_operand_parse_number(text: str, expected: float) -> None:
    """Float literals become Number operands."""
    operand = Operand.parse(text)
    assert isinstance(operand, Number)
    assert operand.value == expected


@pytest.mark.parametrize("text", ["x", "", "3*4", "1_000", " 2", "abc1", "٣"])
def test_operand_parse_variable(text: str) -> None:
    """Anything that is not a float literal is kept verbatim as a Variable."""
    assert Operand.parse(text) == Variable(name=text)


def test_operand_parse_special_floats() -> None:
    """inf and nan are float literals too."""
    assert Operand.parse("inf").value == math.inf
    assert math.isnan(Operand.parse("NaN").value)


@pytest.mark.parametrize("value,expected", [
    (5.0, "5"),
    (2.5, "2.5"),
    (-3.0, "-3"),
    (-0.0, "-0"),
    (math.inf, "inf"),
    (-math.inf, "-inf"),
    (math.nan, "NaN"),
    (1e23, "100000000000000000000000"),
    (1e-7, "0.0000001"),
    (123456.789, "123456.789"),
])
def test_number_render(value: float, expected: str) -> None:
    """Numbers render in their shortest form."""
    assert Number(value=value).render() == expected


def test_large_and_small_literals_render_positionally() -> None:
    """Parsed literals display their shortest digits without exponent notation."""
    assert Operand.parse("1e23").render() == "100000000000000000000000"
    assert Operand.parse("1e-7").render() == "0.0000001"
    assert parse_expression("1e22*10").evaluate().render() == "100000000000000000000000"


def test_operand_base_is_abstract() -> None:
    """Only the concrete operand kinds can be built."""
    with pytest.raises(TypeError):
        Operand()


def test_variable_evaluate_fails() -> None:
    """A variable cannot be reduced to a number."""
    with pytest.raises(NonNumericOperandError):
        Variable(name="x").evaluate()


def test_parse_simple_expression() -> None:
    """'2+3' splits into two numbers joined by Add and evaluates to 5."""
    expr = parse_expression("2+3")
    assert expr == Expression(left=Number(value=2), right=Number(value=3), op=Operator.ADD)
    assert expr.evaluate() == Number(value=5.0)


def test_parse_uses_leftmost_operator() -> None:
    """'2+3*4' splits at '+', the right side stays a single variable."""
    expr = parse_expression("2+3*4")
    assert expr.left == Number(value=2)
    assert expr.right == Variable(name="3*4")
    assert expr.op is Operator.ADD
    with pytest.raises(NonNumericOperandError):
        expr.evaluate()


@pytest.mark.parametrize("text", ["(2+3)", " ( 2 + 3 ) ", "2 + 3", "\t2+\n3"])
def test_parse_strips_whitespace_and_outer_parentheses(text: str) -> None:
    """Whitespace and one outer pair of parentheses are ignored."""
    assert parse_expression(text) == parse_expression("2+3")


def test_parse_strips_only_one_pair() -> None:
    """Nested parentheses are not unwrapped recursively."""
    expr = parse_expression("((2+3))")
    assert expr.left == Variable(name="(2")
    assert expr.right == Variable(name="3)")


def test_parse_variable_operand() -> None:
    """'x+1' parses but cannot be evaluated."""
    expr = parse_expression("x+1")
    assert expr.left == Variable(name="x")
    assert expr.right == Number(value=1)
    with pytest.raises(NonNumericOperandError):
        expr.evaluate()


@pytest.mark.parametrize("text", ["hello", "", "   ", "42", "()", "(x)"])
def test_parse_without_operator_fails(text: str) -> None:
    """Text without an operator character is not an expression."""
    with pytest.raises(InvalidExpressionError):
        parse_expression(text)


@pytest.mark.parametrize("text,left,right", [
    ("+5", Variable(name=""), Number(value=5)),
    ("5-", Number(value=5), Variable(name="")),
    ("-5+3", Variable(name=""), Variable(name="5+3")),
])
def test_parse_degenerate_sides(text: str, left: Operand, right: Operand) -> None:
    """An operator at either end leaves an empty variable on that side."""
    expr = parse_expression(text)
    assert expr.left == left
    assert expr.right == right


@pytest.mark.parametrize("text,expected", [
    ("2+3", 5.0),
    ("10-4", 6.0),
    ("3*4", 12.0),
    ("8/2", 4.0),
    ("2^10", 1024.0),
    ("2^-1", 0.5),
    ("1.5*-2", -3.0),
])
def test_evaluate_numbers(text: str, expected: float) -> None:
    """Expressions of two numbers evaluate to the arithmetic result."""
    assert parse_expression(text).evaluate().value == expected


def test_evaluate_fractional_power() -> None:
    """'2^0.5' is the square root of two."""
    assert parse_expression("2^0.5").evaluate().value == pytest.approx(math.sqrt(2))


@pytest.mark.parametrize("text,expected", [
    ("1/0", math.inf),
    ("1/-0", -math.inf),
    ("0^-1", math.inf),
    ("10^400", math.inf),
])
def test_evaluate_ieee_special_values(text: str, expected: float) -> None:
    """Division by zero and overflow follow IEEE 754 instead of raising."""
    assert parse_expression(text).evaluate().value == expected


@pytest.mark.parametrize("left,right,op", [
    (0.0, 0.0, Operator.DIVIDE),
    (-8.0, 0.5, Operator.POWER),
])
def test_evaluate_nan(left: float, right: float, op: Operator) -> None:
    """Undefined results are NaN, not errors."""
    expr = Expression(left=Number(value=left), right=Number(value=right), op=op)
    assert math.isnan(expr.evaluate().value)


def test_evaluate_negative_overflow() -> None:
    """A negative base with a huge odd exponent overflows to -inf."""
    expr = Expression(left=Number(value=-10), right=Number(value=401), op=Operator.POWER)
    assert expr.evaluate().value == -math.inf


def test_sub_expression_evaluates_recursively() -> None:
    """Nested expressions are reduced before the parent operator is applied."""
    inner = parse_expression("1+2")
    expr = Expression(left=SubExpression(expression=inner), right=Number(value=3), op=Operator.MULTIPLY)
    assert expr.evaluate() == Number(value=9)
    assert SubExpression(expression=inner).evaluate() == 3.0


def test_sub_expression_with_variable_fails() -> None:
    """A variable inside a nested expression makes the whole tree non-numeric."""
    inner = parse_expression("y^2")
    expr = Expression(left=Number(value=1), right=SubExpression(expression=inner), op=Operator.ADD)
    with pytest.raises(NonNumericOperandError):
        expr.evaluate()


def test_render() -> None:
    """Expressions render parenthesised with single spaces around the operator."""
    assert parse_expression("2+x").render() == "(2 + x)"
    assert str(parse_expression("1.5 / y")) == "(1.5 / y)"

    nested = Expression(
        left=SubExpression(expression=parse_expression("1+2")),
        right=Variable(name="z"),
        op=Operator.POWER,
    )
    assert nested.render() == "((1 + 2) ^ z)"


def test_expression_from_dict() -> None:
    """Operands are told apart by their kind when validated from plain data."""
    expr = Expression.model_validate({
        "left": {"kind": "expression", "expression": {
            "left": {"kind": "number", "value": 4},
            "right": {"kind": "number", "value": 2},
            "op": "/",
        }},
        "right": {"kind": "variable", "name": "x"},
        "op": "-",
    })
    assert isinstance(expr.left, SubExpression)
    assert expr.right == Variable(name="x")
    assert expr.op is Operator.SUBTRACT
    assert expr.left.evaluate() == 2.0


def test_expression_is_immutable() -> None:
    """Parsed trees cannot be modified after construction."""
    expr = parse_expression("2+3")
    with pytest.raises(ValidationError):
        expr.left = Number(value=7)
