"""Heuristic change classifier.

Turns the three text blobs git gives us for a branch (the unified diff, the
commit subjects and the ``--stat`` summary) into a severity level, a list of
affected areas and some reviewer advice. Everything here is plain
case-insensitive substring matching against fixed keyword lists; a word like
"public" buried in an identifier still counts. Tiers are checked in priority
order and the first one that matches wins.
"""

from __future__ import annotations

import re

from quickpr.analysis.models import (
    ClassificationResult,
    ImpactArea,
    Metrics,
    SeverityAssessment,
    SeverityLevel,
)

CRITICAL_COMMIT_KEYWORDS = ("breaking", "security", "critical", "vulnerability", "exploit")
AUTH_KEYWORDS = ("auth", "permission", "token")
DATABASE_KEYWORDS = ("schema", "migration", "database")
API_KEYWORDS = ("export", "public")
CONFIG_KEYWORDS = ("config", ".json", ".env")

HIGH_LINES_THRESHOLD = 500
HIGH_FILES_THRESHOLD = 10
MEDIUM_LINES_THRESHOLD = 100
MEDIUM_FILES_THRESHOLD = 3

IMPACT_KEYWORDS: dict[ImpactArea, tuple[str, ...]] = {
    ImpactArea.TESTING: ("test", "spec"),
    ImpactArea.API: ("api", "endpoint", "route"),
    ImpactArea.UI_UX: ("ui", "component", "view"),
    ImpactArea.DATA_LAYER: ("database", "model", "schema"),
    ImpactArea.CONFIGURATION: ("config", "setting", "env"),
    ImpactArea.SECURITY: ("security", "auth", "permission"),
    ImpactArea.PERFORMANCE: ("performance", "optimize", "cache"),
    ImpactArea.DOCUMENTATION: ("doc", "readme", "comment"),
}

GENERAL_IMPACT = "General code improvements and maintenance"

BASE_RISKS: dict[SeverityLevel, tuple[str, ...]] = {
    SeverityLevel.CRITICAL: (
        "⚠️ **High Priority Review Required:** This PR contains critical changes that need thorough review",
        "🧪 **Extensive Testing Needed:** Ensure comprehensive testing before merging",
        "📋 **Consider Staged Rollout:** May want to deploy incrementally",
    ),
    SeverityLevel.HIGH: (
        "⚠️ **Careful Review Recommended:** Significant changes require detailed review",
        "🧪 **Test Thoroughly:** Verify all affected functionality",
    ),
    SeverityLevel.MEDIUM: (
        "✅ **Standard Review:** Regular review process should be sufficient",
        "🧪 **Test Affected Areas:** Focus testing on modified components",
    ),
    SeverityLevel.LOW: (
        "✅ **Low Risk:** Minor changes with minimal impact",
        "🧪 **Basic Testing:** Standard validation should be adequate",
    ),
}

TODO_RISK = "📝 **TODOs Present:** Code contains TODO/FIXME comments to address"
DEPRECATION_RISK = "⏰ **Deprecation Notice:** Some functionality marked as deprecated"

_INSERTIONS_RE = re.compile(r"(\d+) insertion")
_DELETIONS_RE = re.compile(r"(\d+) deletion")
_FILES_RE = re.compile(r"(\d+) files? changed")


def _first_int(pattern: re.Pattern, text: str) -> int:
    match = pattern.search(text)
    return int(match.group(1)) if match else 0


def _contains_any(text: str, keywords: tuple[str, ...]) -> bool:
    return any(kw in text for kw in keywords)


def extract_metrics(stat_text: str | None) -> Metrics:
    """Pull insertion, deletion and file counts out of ``git diff --stat`` text.

    The three counts are searched for independently; whichever is missing
    stays at zero.
    """
    text = stat_text or ""
    return Metrics(
        insertions=_first_int(_INSERTIONS_RE, text),
        deletions=_first_int(_DELETIONS_RE, text),
        files_changed=_first_int(_FILES_RE, text),
    )


def classify_severity(
    diff_text: str | None,
    commit_messages: str | None,
    stat_text: str | None,
) -> SeverityAssessment:
    """Place a change set in the first severity tier whose rules match.

    Within a tier every rule that fired is recorded, in a fixed order.
    """
    metrics = extract_metrics(stat_text)
    lines = metrics.lines_changed
    files = metrics.files_changed

    commits_lower = (commit_messages or "").lower()
    diff_lower = (diff_text or "").lower()

    has_critical_keyword = _contains_any(commits_lower, CRITICAL_COMMIT_KEYWORDS)
    has_auth_change = _contains_any(diff_lower, AUTH_KEYWORDS)
    has_database_change = _contains_any(diff_lower, DATABASE_KEYWORDS)
    has_api_change = _contains_any(diff_lower, API_KEYWORDS)
    has_config_change = _contains_any(diff_lower, CONFIG_KEYWORDS)

    reasons: list[str] = []

    if has_critical_keyword or has_auth_change or has_database_change:
        level = SeverityLevel.CRITICAL
        if has_critical_keyword:
            reasons.append("Critical keywords in commits")
        if has_auth_change:
            reasons.append("Authentication/authorization changes")
        if has_database_change:
            reasons.append("Database schema changes")
    elif lines > HIGH_LINES_THRESHOLD or files > HIGH_FILES_THRESHOLD or has_api_change:
        level = SeverityLevel.HIGH
        if lines > HIGH_LINES_THRESHOLD:
            reasons.append(f"Large number of changes ({lines} lines)")
        if files > HIGH_FILES_THRESHOLD:
            reasons.append(f"Multiple files affected ({files} files)")
        if has_api_change:
            reasons.append("Public API modifications")
    elif lines > MEDIUM_LINES_THRESHOLD or files > MEDIUM_FILES_THRESHOLD or has_config_change:
        level = SeverityLevel.MEDIUM
        if lines > MEDIUM_LINES_THRESHOLD:
            reasons.append(f"Moderate changes ({lines} lines)")
        if files > MEDIUM_FILES_THRESHOLD:
            reasons.append(f"Several files modified ({files} files)")
        if has_config_change:
            reasons.append("Configuration changes")
    else:
        level = SeverityLevel.LOW
        reasons.append(f"Minimal changes ({lines} lines, {files} files)")
        reasons.append("No critical areas affected")

    return SeverityAssessment(level=level, reasons=tuple(reasons), metrics=metrics)


def detect_impact_tags(diff_text: str | None, commit_messages: str | None) -> list[ImpactArea]:
    """Return every impact area whose keywords appear, in declaration order."""
    content = f"{diff_text or ''} {commit_messages or ''}".lower()
    return [
        area for area, keywords in IMPACT_KEYWORDS.items()
        if _contains_any(content, keywords)
    ]


def detect_impact_areas(diff_text: str | None, commit_messages: str | None) -> list[str]:
    """Rendered impact-area lines, or the general-maintenance fallback."""
    tags = detect_impact_tags(diff_text, commit_messages)
    if not tags:
        return [GENERAL_IMPACT]
    return [area.render() for area in tags]


def generate_risk_notes(severity: SeverityLevel, diff_text: str | None) -> list[str]:
    """Reviewer advice for a severity tier, plus TODO/deprecation warnings."""
    risks = list(BASE_RISKS[severity])

    content = (diff_text or "").lower()
    if "todo" in content or "fixme" in content:
        risks.append(TODO_RISK)
    if "deprecated" in content:
        risks.append(DEPRECATION_RISK)

    return risks


def classify_changes(
    diff_text: str | None,
    commit_messages: str | None,
    stat_text: str | None,
) -> ClassificationResult:
    """Run the full classification over one change set."""
    assessment = classify_severity(diff_text, commit_messages, stat_text)
    return ClassificationResult(
        metrics=assessment.metrics,
        severity=assessment.level,
        reasoning=assessment.reasoning,
        impact_areas=tuple(detect_impact_areas(diff_text, commit_messages)),
        risks=tuple(generate_risk_notes(assessment.level, diff_text)),
    )
