"""Layered candidate trellis and unconstrained Viterbi decoding.

The trellis is built once from a sparse score table keyed by node pairs and
stored as flat per-layer adjacency lists, so decoding never touches the
input mapping again.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from fastviterbi.errors import InvalidDimensionsError, MissingTransitionError, NoPathError

logger = logging.getLogger(__name__)

NodeIndex = tuple[int, int]
NodePair = tuple[NodeIndex, NodeIndex]
ScoreTable = Mapping[NodePair, float]

NEG_INF = float("-inf")
VIRTUAL_START: NodeIndex = (-1, -1)


class Trellis:
    """Immutable layered graph with `N` layers of `K` candidates each.

    `scores[VIRTUAL_START, (0, c)]` is the head score of layer-0 candidate
    `c` and `scores[(n, c), (n + 1, c')]` the transition score between
    adjacent layers. Any source layer below 0 counts as `VIRTUAL_START`. Any
    other key shape, or a candidate outside `[0, K)`, is dropped.
    """

    def __init__(self, K: int, N: int, scores: ScoreTable) -> None:
        if K <= 0 or N < 2:
            raise InvalidDimensionsError(f"invalid K, N = {K}, {N}")
        self.K = K
        self.N = N
        self._heads: list[float | None] = [None] * K
        # Slot `layer * K + candidate` for every source node in layers [0, N-1).
        self._links: list[list[tuple[int, float]]] = [[] for _ in range((N - 1) * K)]
        self._lookup: list[dict[int, float]] = [{} for _ in range((N - 1) * K)]

        dropped = 0
        for (source, target), score in sorted(scores.items()):
            if not self._ingest(source, target, float(score)):
                dropped += 1
        if dropped:
            logger.debug("dropped %d score entries outside the %dx%d trellis", dropped, N, K)

    def _ingest(self, source: NodeIndex, target: NodeIndex, score: float) -> bool:
        layer0, cand0 = source
        layer1, cand1 = target
        if layer0 < 0:
            if layer1 == 0 and 0 <= cand1 < self.K:
                self._heads[cand1] = score
                return True
            return False
        if layer0 >= self.N - 1 or layer1 != layer0 + 1:
            return False
        if not (0 <= cand0 < self.K and 0 <= cand1 < self.K):
            return False
        slot = layer0 * self.K + cand0
        self._links[slot].append((cand1, score))
        self._lookup[slot][cand1] = score
        return True

    @property
    def heads(self) -> tuple[float | None, ...]:
        """Head score per layer-0 candidate, `None` where unscored."""
        return tuple(self._heads)

    def has_head(self, candidate: int) -> bool:
        return 0 <= candidate < self.K and self._heads[candidate] is not None

    def head_score(self, candidate: int) -> float:
        if not self.has_head(candidate):
            raise MissingTransitionError(f"no head score for candidate {candidate}")
        return self._heads[candidate]  # type: ignore[return-value]

    def links(self, layer: int, candidate: int) -> list[tuple[int, float]]:
        """Scored outgoing edges of `(layer, candidate)`, ordered by destination."""
        if not (0 <= layer < self.N - 1 and 0 <= candidate < self.K):
            return []
        return list(self._links[layer * self.K + candidate])

    def transition_score(self, layer: int, source: int, target: int) -> float:
        if 0 <= layer < self.N - 1 and 0 <= source < self.K:
            score = self._lookup[layer * self.K + source].get(target)
            if score is not None:
                return score
        raise MissingTransitionError(
            f"no transition score for ({layer}, {source}) -> ({layer + 1}, {target})"
        )

    def cumulative_scores(self, node_path: Sequence[int]) -> list[float]:
        """Running score sums along a full-length candidate path.

        Returns `[]` when the path does not have exactly `N` entries.
        """
        if len(node_path) != self.N:
            return []
        total = self.head_score(node_path[0])
        running = [total]
        for layer in range(self.N - 1):
            total += self.transition_score(layer, node_path[layer], node_path[layer + 1])
            running.append(total)
        return running

    def inference(self) -> list[int]:
        """Run Viterbi over the whole trellis and return one candidate per layer."""
        K = self.K
        best = [NEG_INF if head is None else head for head in self._heads]
        backptrs: list[list[int]] = []

        for layer in range(self.N - 1):
            next_best = [NEG_INF] * K
            backptr = [-1] * K
            offset = layer * K
            for candidate in range(K):
                prev_score = best[candidate]
                if prev_score == NEG_INF:
                    continue
                for target, score in self._links[offset + candidate]:
                    total = prev_score + score
                    # Strict comparison keeps the lowest source index on ties.
                    if total > next_best[target]:
                        next_best[target] = total
                        backptr[target] = candidate
            backptrs.append(backptr)
            best = next_best

        end_candidate = max(range(K), key=best.__getitem__)
        if best[end_candidate] == NEG_INF:
            raise NoPathError("every path through the trellis scores -inf")

        path = [end_candidate]
        cursor = end_candidate
        for backptr in reversed(backptrs):
            cursor = backptr[cursor]
            path.append(cursor)
        path.reverse()
        return path
