"""Unit tests for the individual fill rounds."""

import pytest

from diverse_select.selection.grouping import index_by_fine_group
from diverse_select.selection.models import Candidate, SelectionRequest
from diverse_select.selection.rounds import (
    FillState,
    round_remainder,
    round_runners_up,
    round_winners,
)


def _make_candidate(
    candidate_id: str,
    score: float,
    fine_group: str,
    coarse_group: str,
) -> Candidate:
    """Create a test Candidate."""
    return Candidate(
        id=candidate_id,
        score=score,
        fine_group=fine_group,
        coarse_group=coarse_group,
    )


def _food_and_fun_pool() -> list[Candidate]:
    """Two coarse groups, five fine groups, distinct scores."""
    return [
        _make_candidate("p1", 10, "pizza", "food"),
        _make_candidate("p2", 9, "pizza", "food"),
        _make_candidate("p3", 8, "pizza", "food"),
        _make_candidate("s1", 7, "sushi", "food"),
        _make_candidate("s2", 6, "sushi", "food"),
        _make_candidate("b1", 5, "burgers", "food"),
        _make_candidate("w1", 4, "bowling", "fun"),
        _make_candidate("w2", 3, "bowling", "fun"),
        _make_candidate("c1", 2, "cinema", "fun"),
    ]


class TestFillState:
    """Tests for FillState bookkeeping."""

    @pytest.mark.unit
    def test_add_updates_counts(self) -> None:
        """Adding tracks ids and coarse counts."""
        state = FillState(limit=3)
        state.add(_make_candidate("a", 1, "x", "Food "))
        assert state.used_ids == {"a"}
        assert state.coarse_counts == {"food": 1}
        assert state.last_fine_group == "x"
        assert not state.is_full

    @pytest.mark.unit
    def test_under_cap(self) -> None:
        """under_cap compares the normalized coarse count to the cap."""
        state = FillState(limit=5)
        candidate = _make_candidate("a", 1, "x", "food")
        state.add(candidate)
        assert state.under_cap(_make_candidate("b", 1, "y", "FOOD"), 2)
        assert not state.under_cap(_make_candidate("b", 1, "y", "food"), 1)

    @pytest.mark.unit
    def test_empty_state_has_no_last_group(self) -> None:
        """No items, no previous fine group."""
        assert FillState(limit=1).last_fine_group is None


class TestRoundWinners:
    """Tests for round 1."""

    @pytest.mark.unit
    def test_takes_best_per_fine_group_under_strict_cap(self) -> None:
        """Burgers' winner is skipped once food reaches the strict cap."""
        request = SelectionRequest(limit=10)
        buckets = index_by_fine_group(_food_and_fun_pool(), request.seed)
        state = FillState(limit=request.limit)

        report = round_winners(buckets, state, request)

        assert [c.id for c in report.added] == ["p1", "s1", "w1", "c1"]
        assert report.skipped_by_cap == 1
        assert state.coarse_counts == {"food": 2, "fun": 2}

    @pytest.mark.unit
    def test_stops_at_limit(self) -> None:
        """Round 1 never overfills."""
        request = SelectionRequest(limit=2)
        buckets = index_by_fine_group(_food_and_fun_pool(), request.seed)
        state = FillState(limit=request.limit)

        report = round_winners(buckets, state, request)

        assert [c.id for c in report.added] == ["p1", "s1"]
        assert state.is_full


class TestRoundRunnersUp:
    """Tests for round 2."""

    @pytest.mark.unit
    def test_second_per_fine_group(self) -> None:
        """Round 2 draws only bucket position 2."""
        request = SelectionRequest(
            limit=10, max_per_coarse_group_strict=5, max_per_coarse_group_relaxed=5
        )
        buckets = index_by_fine_group(_food_and_fun_pool(), request.seed)
        state = FillState(limit=request.limit)
        round_winners(buckets, state, request)

        report = round_runners_up(buckets, state, request)

        # Burgers and cinema have a single member and contribute nothing
        assert [c.id for c in report.added] == ["p2", "s2", "w2"]

    @pytest.mark.unit
    def test_cap_skips_are_permanent(self) -> None:
        """Runners-up at cap are skipped, not deferred."""
        request = SelectionRequest(limit=10)
        buckets = index_by_fine_group(_food_and_fun_pool(), request.seed)
        state = FillState(limit=request.limit)
        round_winners(buckets, state, request)

        report = round_runners_up(buckets, state, request)

        assert report.added == []
        assert report.skipped_by_cap == 3

    @pytest.mark.unit
    def test_independent_of_round_one(self) -> None:
        """Round 2 can run on a fresh state for isolated testing."""
        request = SelectionRequest(limit=10)
        buckets = index_by_fine_group(_food_and_fun_pool(), request.seed)
        state = FillState(limit=request.limit)

        report = round_runners_up(buckets, state, request)

        assert [c.id for c in report.added] == ["p2", "s2", "w2"]


class TestRoundRemainder:
    """Tests for round 3."""

    @staticmethod
    def _single_coarse_pool() -> list[Candidate]:
        return [
            _make_candidate("p1", 10, "pizza", "food"),
            _make_candidate("p2", 9, "pizza", "food"),
            _make_candidate("p3", 8, "pizza", "food"),
            _make_candidate("p4", 7, "pizza", "food"),
            _make_candidate("p5", 6, "pizza", "food"),
            _make_candidate("s1", 5.5, "sushi", "food"),
            _make_candidate("s2", 5.4, "sushi", "food"),
            _make_candidate("s3", 5.3, "sushi", "food"),
        ]

    def _run_all_rounds(
        self, pool: list[Candidate], request: SelectionRequest
    ) -> tuple[FillState, int]:
        buckets = index_by_fine_group(pool, request.seed)
        state = FillState(limit=request.limit)
        round_winners(buckets, state, request)
        round_runners_up(buckets, state, request)
        report = round_remainder(buckets, state, request)
        return state, report.adjacency_swaps

    @pytest.mark.unit
    def test_avoids_back_to_back_fine_groups(self) -> None:
        """A later sushi item is pulled forward between two pizzas."""
        request = SelectionRequest(
            limit=10, max_per_coarse_group_strict=10, max_per_coarse_group_relaxed=10
        )
        state, swaps = self._run_all_rounds(self._single_coarse_pool(), request)

        assert [c.id for c in state.items] == [
            "p1", "s1", "p2", "s2", "p3", "s3", "p4", "p5",
        ]
        assert swaps == 1

    @pytest.mark.unit
    def test_adjacency_rule_can_be_disabled(self) -> None:
        """Without the rule round 3 is plain rank order."""
        request = SelectionRequest(
            limit=10,
            max_per_coarse_group_strict=10,
            max_per_coarse_group_relaxed=10,
            avoid_adjacent_fine_group=False,
        )
        state, swaps = self._run_all_rounds(self._single_coarse_pool(), request)

        assert [c.id for c in state.items] == [
            "p1", "s1", "p2", "s2", "p3", "p4", "p5", "s3",
        ]
        assert swaps == 0

    @pytest.mark.unit
    def test_passed_over_candidate_is_not_dropped(self) -> None:
        """Swapping ahead defers a candidate instead of discarding it."""
        request = SelectionRequest(
            limit=10, max_per_coarse_group_strict=10, max_per_coarse_group_relaxed=10
        )
        state, _ = self._run_all_rounds(self._single_coarse_pool(), request)

        assert {c.id for c in state.items} == {c.id for c in self._single_coarse_pool()}

    @staticmethod
    def _two_coarse_pool() -> list[Candidate]:
        return [
            _make_candidate("a1", 10, "a", "x"),
            _make_candidate("a2", 9, "a", "x"),
            _make_candidate("a3", 8, "a", "x"),
            _make_candidate("a4", 7, "a", "x"),
            _make_candidate("a5", 6, "a", "x"),
            _make_candidate("b1", 5, "b", "y"),
            _make_candidate("b2", 4, "b", "y"),
            _make_candidate("b3", 3.5, "b", "y"),
            _make_candidate("c1", 3, "c", "y"),
            _make_candidate("c2", 2.5, "c", "y"),
            _make_candidate("d1", 2, "d", "y"),
        ]

    @pytest.mark.unit
    def test_relaxed_cap_applies_in_round_three(self) -> None:
        """Round 3 admits up to the relaxed cap per coarse group."""
        request = SelectionRequest(
            limit=10, max_per_coarse_group_strict=3, max_per_coarse_group_relaxed=4
        )
        state, swaps = self._run_all_rounds(self._two_coarse_pool(), request)

        assert [c.id for c in state.items] == [
            "a1", "b1", "c1", "d1", "a2", "b3", "a3", "a4",
        ]
        assert swaps == 1
        assert state.coarse_counts == {"x": 4, "y": 4}

    @pytest.mark.unit
    def test_adjacency_never_overrides_cap(self) -> None:
        """With no under-cap alternative the same fine group repeats."""
        request = SelectionRequest(
            limit=10, max_per_coarse_group_strict=3, max_per_coarse_group_relaxed=3
        )
        state, swaps = self._run_all_rounds(self._two_coarse_pool(), request)

        assert [c.id for c in state.items] == ["a1", "b1", "c1", "d1", "a2", "a3"]
        assert swaps == 0
        assert state.coarse_counts == {"x": 3, "y": 3}

    @pytest.mark.unit
    def test_only_positions_three_and_beyond(self) -> None:
        """Round 3 alone never takes a bucket's first two members."""
        request = SelectionRequest(
            limit=10, max_per_coarse_group_strict=10, max_per_coarse_group_relaxed=10
        )
        buckets = index_by_fine_group(self._single_coarse_pool(), request.seed)
        state = FillState(limit=request.limit)

        report = round_remainder(buckets, state, request)

        assert [c.id for c in report.added] == ["p3", "s3", "p4", "p5"]
