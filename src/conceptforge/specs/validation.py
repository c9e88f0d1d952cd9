"""
Validation result types shared by extractors and validators.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ValidationSeverity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class ValidationWarning(BaseModel):
    """A single issue found while validating concepts."""

    model_config = ConfigDict(frozen=True)

    severity: ValidationSeverity
    message: str
    source: str = Field(description="NodeId or component the issue refers to")
    suggestion: str | None = None


class ValidationSuggestion(BaseModel):
    """An improvement that is not a defect (accessibility, performance, best practice)."""

    model_config = ConfigDict(frozen=True)

    type: str = Field(
        description="improvement, optimization, best-practice, accessibility or performance"
    )
    message: str
    target: str = Field(description="NodeId the suggestion applies to, or 'component'")
    priority: int = Field(default=3, ge=1, le=5, description="5 is the most important")


class ValidationResult(BaseModel):
    """
    Outcome of validating one concept kind or a whole component.

    ``score`` starts at 1.0, only decreases, and never goes below 0.
    ``is_valid`` is False exactly when an ERROR-severity warning is present.
    """

    model_config = ConfigDict(frozen=True)

    is_valid: bool = True
    warnings: list[ValidationWarning] = Field(default_factory=list)
    suggestions: list[ValidationSuggestion] = Field(default_factory=list)
    score: float = Field(default=1.0, ge=0.0, le=1.0)

    @property
    def errors(self) -> list[ValidationWarning]:
        return [w for w in self.warnings if w.severity == ValidationSeverity.ERROR]
