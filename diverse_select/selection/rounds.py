"""The three fill rounds of ranked diverse selection.

Each round is a standalone function over the fine-group buckets, the
running ``FillState`` of the current call, and the request. Rounds append
to that state in place and return a report of what they added; they never
reorder or remove what earlier rounds placed.

    Round 1: the best candidate of every fine group, strict coarse cap.
    Round 2: the second-best of every fine group, strict coarse cap.
    Round 3: everything else, relaxed coarse cap, avoiding back-to-back
             repeats of a fine group where possible.

A candidate rejected by the strict cap in rounds 1-2 is not carried into
round 3. Only bucket positions 3 and beyond feed round 3.
"""

import heapq
from collections import deque
from collections.abc import Iterable
from dataclasses import dataclass, field

import structlog

from diverse_select.selection.grouping import coarse_group_of, fine_group_of
from diverse_select.selection.hashing import sort_by_rank
from diverse_select.selection.models import Candidate, SelectionRequest


logger = structlog.get_logger()


@dataclass
class FillState:
    """Running result of one selection call.

    Attributes:
        limit: Target result length.
        items: Candidates appended so far, in order.
        used_ids: Ids already in ``items``.
        coarse_counts: Appended items per normalized coarse group.
    """

    limit: int
    items: list[Candidate] = field(default_factory=list)
    used_ids: set[str] = field(default_factory=set)
    coarse_counts: dict[str, int] = field(default_factory=dict)

    @property
    def is_full(self) -> bool:
        """Whether the result has reached ``limit``."""
        return len(self.items) >= self.limit

    @property
    def last_fine_group(self) -> str | None:
        """Fine group of the most recently appended item."""
        if not self.items:
            return None
        return fine_group_of(self.items[-1])

    def is_used(self, candidate: Candidate) -> bool:
        """Whether a candidate with this id was already appended."""
        return candidate.id in self.used_ids

    def under_cap(self, candidate: Candidate, cap: int) -> bool:
        """Whether the candidate's coarse group is still below ``cap``."""
        return self.coarse_counts.get(coarse_group_of(candidate), 0) < cap

    def add(self, candidate: Candidate) -> None:
        """Append a candidate and update the running counts."""
        coarse = coarse_group_of(candidate)
        self.items.append(candidate)
        self.used_ids.add(candidate.id)
        self.coarse_counts[coarse] = self.coarse_counts.get(coarse, 0) + 1


@dataclass
class RoundReport:
    """What a single round contributed.

    Attributes:
        round_number: 1, 2 or 3.
        added: Candidates appended by this round, in order.
        skipped_by_cap: Candidates rejected because their coarse group was
            at the round's cap.
        adjacency_swaps: Round-3 picks taken out of order to avoid a
            repeated fine group.
    """

    round_number: int
    added: list[Candidate] = field(default_factory=list)
    skipped_by_cap: int = 0
    adjacency_swaps: int = 0


def _fill_in_rank_order(
    pool: Iterable[Candidate],
    state: FillState,
    cap: int,
    seed: int,
    round_number: int,
) -> RoundReport:
    """Append ranked candidates under ``cap``, skipping any at cap."""
    report = RoundReport(round_number=round_number)
    for candidate in sort_by_rank(pool, seed):
        if state.is_full:
            break
        if state.is_used(candidate):
            continue
        if not state.under_cap(candidate, cap):
            report.skipped_by_cap += 1
            continue
        state.add(candidate)
        report.added.append(candidate)

    logger.debug(
        "round_complete",
        component="selection",
        round=round_number,
        added=len(report.added),
        skipped_by_cap=report.skipped_by_cap,
        filled=len(state.items),
        limit=state.limit,
    )
    return report


def round_winners(
    buckets: dict[str, list[Candidate]],
    state: FillState,
    request: SelectionRequest,
) -> RoundReport:
    """Round 1: the top candidate of every fine group under the strict cap.

    Args:
        buckets: Ranked fine-group buckets.
        state: Running fill state, appended to in place.
        request: Selection parameters.

    Returns:
        Report of what was appended.
    """
    winners = [members[0] for members in buckets.values() if members]
    return _fill_in_rank_order(
        winners, state, request.strict_cap, request.seed, round_number=1
    )


def round_runners_up(
    buckets: dict[str, list[Candidate]],
    state: FillState,
    request: SelectionRequest,
) -> RoundReport:
    """Round 2: the second candidate of every fine group under the strict cap.

    Buckets with a single member contribute nothing.

    Args:
        buckets: Ranked fine-group buckets.
        state: Running fill state, appended to in place.
        request: Selection parameters.

    Returns:
        Report of what was appended.
    """
    runners_up = [members[1] for members in buckets.values() if len(members) >= 2]
    return _fill_in_rank_order(
        runners_up, state, request.strict_cap, request.seed, round_number=2
    )


def _queues_by_fine_group(pool: list[Candidate]) -> dict[str, deque[int]]:
    """Positions in ``pool`` per fine group, each in rank order."""
    queues: dict[str, deque[int]] = {}
    for index, candidate in enumerate(pool):
        queues.setdefault(fine_group_of(candidate), deque()).append(index)
    return queues


def _advance(
    heap: list[tuple[int, str]], queues: dict[str, deque[int]], group: str
) -> None:
    """Drop a group's head and publish its next member, if any."""
    queue = queues[group]
    queue.popleft()
    if queue:
        heapq.heappush(heap, (queue[0], group))


def _pop_best_head(
    heap: list[tuple[int, str]],
    queues: dict[str, deque[int]],
    pool: list[Candidate],
    state: FillState,
    cap: int,
    report: RoundReport,
) -> tuple[int, str] | None:
    """Pop the best-ranked group head that may still be appended.

    Heads that are already used or whose coarse group is at ``cap`` are
    discarded on the way. Both conditions are permanent within a call.
    """
    while heap:
        index, group = heapq.heappop(heap)
        candidate = pool[index]
        if state.is_used(candidate):
            _advance(heap, queues, group)
            continue
        if not state.under_cap(candidate, cap):
            report.skipped_by_cap += 1
            _advance(heap, queues, group)
            continue
        return index, group
    return None


def round_remainder(
    buckets: dict[str, list[Candidate]],
    state: FillState,
    request: SelectionRequest,
) -> RoundReport:
    """Round 3: remaining candidates under the relaxed cap.

    Candidates are taken in rank order. When the next one shares a fine
    group with the previously appended item, the best-ranked candidate
    from a different fine group (still under the relaxed cap) is taken
    instead, and the passed-over candidate stays next in line. If no such
    alternative exists the same-group candidate is appended anyway.

    The remainder is split into per-fine-group queues and the queue heads
    are kept in a heap keyed by rank, so each pick costs O(log groups)
    and no candidate is examined more than once after it is discarded.

    Args:
        buckets: Ranked fine-group buckets.
        state: Running fill state, appended to in place.
        request: Selection parameters.

    Returns:
        Report of what was appended.
    """
    cap = request.relaxed_cap
    pool = sort_by_rank(
        (c for members in buckets.values() for c in members[2:]), request.seed
    )
    queues = _queues_by_fine_group(pool)
    heap = [(queue[0], group) for group, queue in queues.items()]
    heapq.heapify(heap)
    report = RoundReport(round_number=3)
    last_group = state.last_fine_group

    while not state.is_full:
        best = _pop_best_head(heap, queues, pool, state, cap, report)
        if best is None:
            break

        index, group = best
        if request.avoid_adjacent_fine_group and group == last_group:
            # The heap holds one head per group, so this is another group
            alternative = _pop_best_head(heap, queues, pool, state, cap, report)
            if alternative is not None:
                heapq.heappush(heap, best)
                index, group = alternative
                report.adjacency_swaps += 1

        chosen = pool[index]
        state.add(chosen)
        report.added.append(chosen)
        last_group = group
        _advance(heap, queues, group)

    logger.debug(
        "round_complete",
        component="selection",
        round=3,
        added=len(report.added),
        skipped_by_cap=report.skipped_by_cap,
        adjacency_swaps=report.adjacency_swaps,
        filled=len(state.items),
        limit=state.limit,
    )
    return report
