"""Derived full-text search index for decisions.

The index is a pure function of a decision's fields, split into four
weighted sections. The store recomputes it on every write and persists
it in the same statement as the fields, so FTS5 triggers keep
decisions_fts in step with the row.
"""

import re
from collections.abc import Iterable
from dataclasses import astuple, dataclass

from decision_log.models.decision import Decision

# Column order matches the decisions_fts table definition
SEARCH_INDEX_COLUMNS = (
    "search_heading",
    "search_context",
    "search_choice",
    "search_notes",
)

# bm25() weights per column, heaviest first
RELEVANCE_WEIGHTS = (10.0, 4.0, 2.0, 1.0)

_WORD_PATTERN = re.compile(r"\w+")


@dataclass(frozen=True)
class SearchIndex:
    """Weighted text sections of one decision.

    Attributes:
        heading: Title, category, project and tags (highest weight)
        context: Business context, problem statement and reasoning
        choice: Chosen option, options considered, tradeoffs
        notes: Notes, outcome, lessons and review details (lowest weight)
    """

    heading: str = ""
    context: str = ""
    choice: str = ""
    notes: str = ""

    def as_params(self) -> list[str]:
        """Section values in SEARCH_INDEX_COLUMNS order."""
        return list(astuple(self))


def _join(parts: Iterable[str | None]) -> str:
    """Join non-empty parts with whitespace runs collapsed."""
    return " ".join(" ".join(part.split()) for part in parts if part and part.strip())


def reindex(decision: Decision) -> SearchIndex:
    """Compute the search index for the decision's current field values.

    Deterministic: the same decision always yields the same index.
    """
    heading = _join(
        [
            decision.title,
            decision.category.value,
            decision.category.label,
            decision.project_name,
            *decision.tags,
        ]
    )
    context = _join(
        [decision.business_context, decision.problem_statement, decision.reasoning]
    )

    option_text: list[str] = []
    for option in decision.options_considered:
        option_text.extend([option.name, option.description])
    choice = _join(
        [
            decision.chosen_option,
            *option_text,
            *decision.tradeoffs_accepted,
            *decision.tradeoffs_rejected,
            *(item.value for item in decision.optimized_for),
        ]
    )

    notes = _join(
        [
            decision.notes,
            decision.outcome,
            decision.lessons_learned,
            decision.revisit_reason,
            *decision.assumptions,
            *decision.invalidation_conditions,
            *decision.stakeholders,
        ]
    )

    return SearchIndex(heading=heading, context=context, choice=choice, notes=notes)


def compile_match_query(term: str) -> str | None:
    """Compile a sanitized search term into an FTS5 MATCH expression.

    Every word is double-quoted so FTS5 operators and punctuation in user
    input are matched literally; adjacent quoted words are ANDed.

    Args:
        term: Sanitized search term

    Returns:
        MATCH expression, or None when the term has no searchable words

    Example:
        >>> compile_match_query('postgres OR "redis"')
        '"postgres" "OR" "redis"'
    """
    words = _WORD_PATTERN.findall(term)
    if not words:
        return None
    return " ".join(f'"{word}"' for word in words)
