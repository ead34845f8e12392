"""Role and portal-usage category codes.

Registrants pick roles and portal usages from option lists whose labels
changed over time. Older records hold the long-form labels; everything
written now holds the short canonical codes. ``normalize_*`` maps a legacy
label to its code and passes any other value through untouched, so it is
safe to apply to already-canonical input.
"""

from collections.abc import Iterable

OTHER_CATEGORY = "other"

LEGACY_ROLE_CODES: dict[str, str] = {
    "researcher at an academic or not-for-profit institution": "researcher",
    "representative from a for-profit or commercial entity": "representative",
    "tool or algorithm developer": "developer",
    "community member": "community_member",
    "federal employee": "federal_employee",
}

LEGACY_USAGE_CODES: dict[str, str] = {
    "learning more about down syndrome and its health outcomes, management, and/or treatment": (
        "learn_more_about_down_syndrome"
    ),
    "helping me design a new research study": "help_design_new_research_study",
    "identifying datasets that I want to analyze": "identifying_dataset",
    "commercial purposes": "commercial_purpose",
}


def normalize_role(label: str) -> str:
    return LEGACY_ROLE_CODES.get(label, label)


def normalize_usage(label: str) -> str:
    return LEGACY_USAGE_CODES.get(label, label)


def normalize_roles(labels: Iterable[str] | None) -> list[str]:
    """Normalize every role label, keeping order."""
    return [normalize_role(label) for label in labels or []]


def normalize_usages(labels: Iterable[str] | None) -> list[str]:
    """Normalize every portal-usage label, keeping order."""
    return [normalize_usage(label) for label in labels or []]


def is_other(value: str) -> bool:
    return value.strip().lower() == OTHER_CATEGORY
