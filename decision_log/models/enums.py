"""Closed value sets shared by validation, planning and serialization.

Each enum is the single source of truth for its accepted wire values;
validators derive their "must be one of" lists from these classes.
"""

from enum import Enum


class DecisionCategory(str, Enum):
    """Classification of a decision."""

    ARCHITECTURE = "architecture"
    DATA_STORAGE = "data-storage"
    TOOL_SELECTION = "tool-selection"
    PROCESS = "process"
    PROJECT_MANAGEMENT = "project-management"
    STRATEGIC = "strategic"
    TECHNICAL_DEBT = "technical-debt"
    PERFORMANCE = "performance"
    SECURITY = "security"
    SEARCHING = "searching"
    UI = "ui"
    OTHER = "other"

    @property
    def label(self) -> str:
        """Human-readable label, e.g. 'Data Storage'."""
        return CATEGORY_LABELS[self]


CATEGORY_LABELS: dict[DecisionCategory, str] = {
    DecisionCategory.ARCHITECTURE: "Architecture",
    DecisionCategory.DATA_STORAGE: "Data Storage",
    DecisionCategory.TOOL_SELECTION: "Tool Selection",
    DecisionCategory.PROCESS: "Process",
    DecisionCategory.PROJECT_MANAGEMENT: "Project Management",
    DecisionCategory.STRATEGIC: "Strategic",
    DecisionCategory.TECHNICAL_DEBT: "Technical Debt",
    DecisionCategory.PERFORMANCE: "Performance",
    DecisionCategory.SECURITY: "Security",
    DecisionCategory.SEARCHING: "Searching",
    DecisionCategory.UI: "UI",
    DecisionCategory.OTHER: "Other",
}


class DecisionType(str, Enum):
    """Reversibility class of a decision."""

    REVERSIBLE = "reversible"
    SOMEWHAT_REVERSIBLE = "somewhat-reversible"
    IRREVERSIBLE = "irreversible"


class OptimizedFor(str, Enum):
    """Dimension a decision optimized for."""

    SPEED = "speed"
    RELIABILITY = "reliability"
    COST = "cost"
    SIMPLICITY = "simplicity"
    SCALABILITY = "scalability"
    PERFORMANCE = "performance"
    LEARNING = "learning"
    FLEXIBILITY = "flexibility"
    SECURITY = "security"
    MAINTAINABILITY = "maintainability"


class OutcomeStatus(str, Enum):
    """Outcome filter over the tri-state outcome_success field."""

    ALL = "all"
    PENDING = "pending"
    SUCCESS = "success"
    FAILED = "failed"


class SortOption(str, Enum):
    """Ordering of a decision listing."""

    DATE_DESC = "date-desc"
    DATE_ASC = "date-asc"
    CONFIDENCE_DESC = "confidence-desc"
    CONFIDENCE_ASC = "confidence-asc"
    RELEVANCE = "relevance"


class AnalyticsPeriod(str, Enum):
    """Look-back window of an analytics summary."""

    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    ALL = "all"


def enum_values(enum_cls: type[Enum]) -> list[str]:
    """List the wire values of an enum in declaration order."""
    return [member.value for member in enum_cls]
