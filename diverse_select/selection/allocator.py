"""Ranked diverse selection orchestrator."""

import hashlib
import json
from collections.abc import Sequence

import structlog

from diverse_select.selection.constants import DEFAULT_FEATURED_MAX_PER_COARSE_GROUP
from diverse_select.selection.finalize import dedupe_and_truncate
from diverse_select.selection.grouping import index_by_fine_group
from diverse_select.selection.models import (
    Candidate,
    SelectionOutcome,
    SelectionRequest,
    SelectionStats,
)
from diverse_select.selection.rounds import (
    FillState,
    RoundReport,
    round_remainder,
    round_runners_up,
    round_winners,
)


logger = structlog.get_logger()


def compute_checksum(items: Sequence[Candidate]) -> str:
    """Compute SHA-256 checksum of the ordered output ids.

    Args:
        items: Selected candidates in output order.

    Returns:
        SHA-256 hex digest.
    """
    json_str = json.dumps([c.id for c in items], separators=(",", ":"))
    return hashlib.sha256(json_str.encode("utf-8")).hexdigest()


class RankedDiverseSelector:
    """Selects a bounded, category-diverse list from scored candidates.

    Fills the result in three rounds that favour breadth (distinct fine
    groups) over depth, while capping how many items any coarse group
    may contribute:

        Round 1: best per fine group, strict cap
        Round 2: second per fine group, strict cap
        Round 3: the rest, relaxed cap, no back-to-back fine groups

    The selector holds no state between calls; one instance may be
    reused for any number of pools.
    """

    def __init__(self, request: SelectionRequest, run_id: str = "select") -> None:
        """Initialize the selector.

        Args:
            request: Selection parameters.
            run_id: Identifier used in log events.
        """
        self._request = request
        self._log = logger.bind(
            component="selection",
            run_id=run_id,
        )

    @property
    def request(self) -> SelectionRequest:
        """Get the selection parameters."""
        return self._request

    def select(self, candidates: Sequence[Candidate]) -> SelectionOutcome:
        """Run the selection over a candidate pool.

        Args:
            candidates: Materialized candidate pool.

        Returns:
            SelectionOutcome with ordered items, stats and checksum.
        """
        request = self._request
        stats = SelectionStats(pool_size=len(candidates))

        if request.limit == 0 or not candidates:
            return self._finish([], stats)

        buckets = index_by_fine_group(candidates, request.seed)
        stats.bucket_count = len(buckets)
        state = FillState(limit=request.limit)

        for fill_round in (round_winners, round_runners_up, round_remainder):
            report = fill_round(buckets, state, request)
            self._record_round(stats, report)
            if state.is_full:
                break

        items = dedupe_and_truncate(state.items, request.limit, key=_candidate_id)
        return self._finish(items, stats)

    def _record_round(self, stats: SelectionStats, report: RoundReport) -> None:
        """Fold a round report into the call statistics."""
        stats.added_by_round[report.round_number] = len(report.added)
        stats.skipped_by_cap[report.round_number] = report.skipped_by_cap
        stats.adjacency_swaps += report.adjacency_swaps

    def _finish(
        self, items: list[Candidate], stats: SelectionStats
    ) -> SelectionOutcome:
        """Build the outcome and log completion."""
        stats.returned = len(items)
        checksum = compute_checksum(items)

        self._log.info(
            "selection_complete",
            limit=self._request.limit,
            seed=self._request.seed,
            output_checksum=checksum,
            **stats.to_dict(),
        )

        return SelectionOutcome(
            items=items,
            stats=stats.to_dict(),
            output_checksum=checksum,
        )


def _candidate_id(candidate: Candidate) -> str:
    return candidate.id


def select_ranked_diverse(
    candidates: Sequence[Candidate],
    request: SelectionRequest,
) -> list[Candidate]:
    """Pure function API for ranked diverse selection.

    Args:
        candidates: Candidate pool.
        request: Selection parameters.

    Returns:
        Ordered selection, at most ``request.limit`` long, no repeated ids.
    """
    if request.limit == 0 or not candidates:
        return []
    selector = RankedDiverseSelector(request=request, run_id="pure")
    return selector.select(candidates).items


def select_featured(
    candidates: Sequence[Candidate],
    limit: int,
    seed: int = 0,
    max_per_coarse_group: int = DEFAULT_FEATURED_MAX_PER_COARSE_GROUP,
) -> list[Candidate]:
    """Featured selection: one coarse cap for every round, no adjacency rule.

    Args:
        candidates: Candidate pool.
        limit: Maximum items to return.
        seed: Tie-break seed, typically a daily seed.
        max_per_coarse_group: Cap applied in all three rounds.

    Returns:
        Ordered selection.
    """
    request = SelectionRequest(
        limit=limit,
        max_per_coarse_group_strict=max_per_coarse_group,
        max_per_coarse_group_relaxed=max_per_coarse_group,
        seed=seed,
        avoid_adjacent_fine_group=False,
    )
    return select_ranked_diverse(candidates, request)
