"""Data models for change classification."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SeverityLevel(str, Enum):
    """Review-effort bucket for a change set, lowest first."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


class ImpactArea(str, Enum):
    """Functional areas a change set may touch, in report order."""

    TESTING = "Testing"
    API = "API"
    UI_UX = "UI/UX"
    DATA_LAYER = "Data Layer"
    CONFIGURATION = "Configuration"
    SECURITY = "Security"
    PERFORMANCE = "Performance"
    DOCUMENTATION = "Documentation"

    @property
    def description(self) -> str:
        return _IMPACT_DESCRIPTIONS[self]

    def render(self) -> str:
        return f"**{self.value}:** {self.description}"


_IMPACT_DESCRIPTIONS = {
    ImpactArea.TESTING: "Test files have been modified or added",
    ImpactArea.API: "API endpoints or routes affected",
    ImpactArea.UI_UX: "User interface components modified",
    ImpactArea.DATA_LAYER: "Database or data models changed",
    ImpactArea.CONFIGURATION: "Configuration or environment settings updated",
    ImpactArea.SECURITY: "Security-related changes detected",
    ImpactArea.PERFORMANCE: "Performance optimizations included",
    ImpactArea.DOCUMENTATION: "Documentation updated",
}


class Metrics(BaseModel):
    """Line and file counts pulled from a `git diff --stat` summary."""

    model_config = ConfigDict(frozen=True)

    insertions: int = 0
    deletions: int = 0
    files_changed: int = 0

    @property
    def lines_changed(self) -> int:
        return self.insertions + self.deletions


class SeverityAssessment(BaseModel):
    """A severity level plus the rules that put the change there."""

    model_config = ConfigDict(frozen=True)

    level: SeverityLevel
    reasons: tuple[str, ...] = ()
    metrics: Metrics = Field(default_factory=Metrics)

    @property
    def reasoning(self) -> str:
        return "; ".join(self.reasons)


class ClassificationResult(BaseModel):
    """Everything the description renderer needs about one change set."""

    model_config = ConfigDict(frozen=True)

    metrics: Metrics
    severity: SeverityLevel
    reasoning: str
    impact_areas: tuple[str, ...] = ()
    risks: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        """Plain-data form for JSON output."""
        return {
            "severity": self.severity.value,
            "reasoning": self.reasoning,
            "metrics": {
                "lines_changed": self.metrics.lines_changed,
                "files_changed": self.metrics.files_changed,
                "insertions": self.metrics.insertions,
                "deletions": self.metrics.deletions,
            },
            "impact_areas": list(self.impact_areas),
            "risks": list(self.risks),
        }
