"""Tests for the derived search index."""

from decision_log.models.decision import Decision, DecisionOption
from decision_log.models.enums import DecisionCategory, OptimizedFor
from decision_log.search.index import SearchIndex, compile_match_query, reindex


def _decision(**overrides) -> Decision:
    data = {
        "title": "Adopt  event sourcing",
        "category": DecisionCategory.ARCHITECTURE,
        "project_name": "Ledger",
        "tags": ["events", "audit"],
        "business_context": "Auditors need history",
        "reasoning": "Events give a full audit trail",
        "chosen_option": "Event store",
        "options_considered": [
            DecisionOption(name="CRUD", description="Plain tables"),
        ],
        "tradeoffs_accepted": ["more storage"],
        "optimized_for": [OptimizedFor.RELIABILITY],
        "notes": "Revisit after launch",
    }
    data.update(overrides)
    return Decision(**data)


class TestReindex:
    """Tests for reindex()."""

    def test_sections(self):
        index = reindex(_decision())
        assert index.heading == "Adopt event sourcing architecture Architecture Ledger events audit"
        assert index.context == "Auditors need history Events give a full audit trail"
        assert index.choice == "Event store CRUD Plain tables more storage reliability"
        assert index.notes == "Revisit after launch"

    def test_idempotent(self):
        decision = _decision()
        assert reindex(decision) == reindex(decision)

    def test_every_field_change_changes_index(self):
        base = reindex(_decision())
        assert reindex(_decision(outcome="It worked out well")).notes != base.notes
        assert reindex(_decision(tags=["events"])).heading != base.heading
        assert reindex(_decision(tradeoffs_rejected=["speed"])).choice != base.choice

    def test_empty_parts_skipped(self):
        index = reindex(Decision(title="Minimal"))
        assert index == SearchIndex(heading="Minimal other Other", context="", choice="", notes="")

    def test_as_params_order(self):
        index = SearchIndex(heading="a", context="b", choice="c", notes="d")
        assert index.as_params() == ["a", "b", "c", "d"]


class TestCompileMatchQuery:
    def test_quotes_each_word(self):
        assert compile_match_query("postgres replica") == '"postgres" "replica"'

    def test_operators_and_punctuation_are_literal(self):
        assert compile_match_query('redis OR "cache" (NEAR)') == '"redis" "OR" "cache" "NEAR"'

    def test_no_words(self):
        assert compile_match_query("*** ()") is None
