"""Pydantic models for expression evaluation requests and results."""
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from mathproof.common.expression import Number


class EvaluationRequest(BaseModel):
    """Represents a single expression submitted for evaluation."""

    expression: str = Field(..., description="Expression text as entered")

    @field_validator("expression")
    def expression_must_not_be_empty(cls, v: str) -> str:
        """Ensure that the expression is not empty."""
        if not v.strip():
            raise ValueError("Expression cannot be empty")
        return v


class EvaluationResult(BaseModel):
    """Represents the outcome of evaluating one expression: a number or an error message."""

    expression: str = Field(..., description="Original expression text")
    result: Optional[float] = Field(default=None, description="Evaluated numeric result")
    error: Optional[str] = Field(default=None, description="Error message if evaluation failed")

    @model_validator(mode="after")
    def result_xor_error(self) -> "EvaluationResult":
        """Exactly one of result and error must be set."""
        if (self.result is None) == (self.error is None):
            raise ValueError("Exactly one of 'result' and 'error' must be set")
        return self

    @property
    def ok(self) -> bool:
        return self.error is None

    def render(self) -> str:
        """
        Format the result as one line of a results file.

        :return: ``"<expression> = <result>"`` or ``"<expression> -> ERROR: <error>"``
        :rtype: str
        """
        if self.ok:
            return f"{self.expression} = {Number(value=self.result).render()}"
        return f"{self.expression} -> ERROR: {self.error}"
