"""Change classification: severity, impact areas and risk notes for a diff."""

from quickpr.analysis.classifier import (
    classify_changes,
    classify_severity,
    detect_impact_areas,
    detect_impact_tags,
    extract_metrics,
    generate_risk_notes,
)
from quickpr.analysis.models import (
    ClassificationResult,
    ImpactArea,
    Metrics,
    SeverityAssessment,
    SeverityLevel,
)
from quickpr.analysis.renderer import render_description

__all__ = [
    "ClassificationResult",
    "ImpactArea",
    "Metrics",
    "SeverityAssessment",
    "SeverityLevel",
    "classify_changes",
    "classify_severity",
    "detect_impact_areas",
    "detect_impact_tags",
    "extract_metrics",
    "generate_risk_notes",
    "render_description",
]
