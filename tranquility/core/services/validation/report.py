"""
Validation report — accumulated violations for one file.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal


@dataclass(frozen=True)
class Violation:
    """One schema or semantic problem at a location in the document."""

    kind: Literal["schema", "semantic"]
    location: str
    message: str

    def __str__(self) -> str:
        where = self.location or "<root>"
        return f"[{self.kind}] {where}: {self.message}"


@dataclass
class ValidationReport:
    """Outcome of validating one file."""

    path: Path
    kind: str
    violations: list[Violation] = field(default_factory=list)
    error: str | None = None       # fail-fast load error

    @property
    def valid(self) -> bool:
        return self.error is None and not self.violations

    @property
    def schema_violations(self) -> list[Violation]:
        return [v for v in self.violations if v.kind == "schema"]

    @property
    def semantic_violations(self) -> list[Violation]:
        return [v for v in self.violations if v.kind == "semantic"]

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": str(self.path),
            "kind": self.kind,
            "valid": self.valid,
            "error": self.error,
            "violations": [
                {"kind": v.kind, "location": v.location, "message": v.message}
                for v in self.violations
            ],
        }
