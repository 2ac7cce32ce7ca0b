"""Exceptions raised while parsing and evaluating expressions."""


class MathProofError(ValueError):
    """Base class for every recoverable mathproof error."""


class InvalidOperatorSymbolError(MathProofError):
    """An operator was requested for a symbol outside ``+ - * / ^``."""

    def __init__(self, symbol: str):
        super().__init__(f"Invalid operator: {symbol!r}")
        self.symbol = symbol


class ParseError(MathProofError):
    """Text could not be turned into an expression."""


class InvalidExpressionError(ParseError):
    """No operator character was found in the text."""

    def __init__(self, message: str = "Invalid expression"):
        super().__init__(message)


class EvaluationError(MathProofError):
    """An expression could not be reduced to a number."""


class NonNumericOperandError(EvaluationError):
    """A variable was reached where a number was required."""

    def __init__(self, message: str = "Cannot evaluate variable"):
        super().__init__(message)
