"""Canonical data models for the decision log.

This module exports the domain models used throughout the application:
- BaseEntity: Base class with id, timestamps
- Decision: A logged decision and its nested option/similarity types
- Enumerations shared by validation, planning and serialization
"""

from decision_log.models.base import BaseEntity
from decision_log.models.decision import (
    PROTECTED_FIELDS,
    Decision,
    DecisionOption,
    SimilarityNote,
)
from decision_log.models.enums import (
    AnalyticsPeriod,
    CATEGORY_LABELS,
    DecisionCategory,
    DecisionType,
    OptimizedFor,
    OutcomeStatus,
    SortOption,
    enum_values,
)

__all__ = [
    # Base
    "BaseEntity",
    # Decision
    "Decision",
    "DecisionOption",
    "PROTECTED_FIELDS",
    "SimilarityNote",
    # Enumerations
    "AnalyticsPeriod",
    "CATEGORY_LABELS",
    "DecisionCategory",
    "DecisionType",
    "OptimizedFor",
    "OutcomeStatus",
    "SortOption",
    "enum_values",
]
