"""Core validation result type."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from ..errors import ValidationFailed


@dataclass
class ValidationResult:
    """Outcome of a validation gate; every violated rule is listed."""

    errors: List[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

    def raise_for_errors(self, message: str = "Validation failed") -> None:
        """Raise :class:`ValidationFailed` when any rule was violated."""
        if self.errors:
            raise ValidationFailed(f"{message}: {'; '.join(self.errors)}", self.errors)
