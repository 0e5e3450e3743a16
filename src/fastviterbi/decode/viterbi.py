"""Decoder facade over the trellis, road table and connector table.

`FastViterbi` answers two questions:

1) `inference()`: which candidate per layer maximizes the accumulated score?
2) `anchored_inference(road_path)`: which candidate sequence, once stitched
   through the connector table, travels exactly the given road ids?

Setup calls mutate the instance and must be serialized by the caller; every
query only reads the finalized tables.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from fastviterbi.decode.roads import (
    UNSET_ROAD,
    ConnectorMap,
    ConnectorTable,
    RoadTable,
    collapse_repeats,
)
from fastviterbi.decode.seq import Seq
from fastviterbi.decode.trellis import ScoreTable, Trellis
from fastviterbi.errors import (
    ConnectorTableError,
    EmptyTargetError,
    NoConsistentAssignmentError,
    NotConfiguredError,
    RoadsNotInitializedError,
    RoadTableError,
)

logger = logging.getLogger(__name__)


class FastViterbi:
    """Viterbi decoder over `N` layers of at most `K` candidates."""

    def __init__(self, K: int, N: int, scores: ScoreTable) -> None:
        self.trellis = Trellis(K, N, scores)
        self._roads: RoadTable | None = None
        self._connectors: ConnectorTable | None = None

    @property
    def K(self) -> int:
        return self.trellis.K

    @property
    def N(self) -> int:
        return self.trellis.N

    @property
    def roads(self) -> RoadTable | None:
        return self._roads

    @property
    def connectors(self) -> ConnectorTable | None:
        return self._connectors

    def setup_roads(self, roads: Sequence[Sequence[int]]) -> None:
        """Attach one road id list per layer.

        Always discards the connector table, which was validated against the
        previous road ids. On failure the road table is discarded as well.
        """
        self._connectors = None
        self._roads = None
        try:
            self._roads = RoadTable.build(self.K, self.N, roads)
        except RoadTableError as exc:
            logger.warning("road setup failed: %s", exc)
            raise

    def setup_shortest_road_paths(self, sp_paths: ConnectorMap) -> None:
        """Attach connector road sequences; any invalid entry rejects them all."""
        if self._roads is None:
            raise RoadsNotInitializedError("roads must be set up before shortest road paths")
        self._connectors = None
        try:
            self._connectors = ConnectorTable.build(self._roads, sp_paths)
        except ConnectorTableError as exc:
            logger.warning("shortest road path setup failed: %s", exc)
            raise

    def scores(self, node_path: Sequence[int]) -> list[float]:
        return self.trellis.cumulative_scores(node_path)

    def road_path(self, node_path: Sequence[int]) -> list[int]:
        if self._roads is None:
            raise RoadsNotInitializedError("roads not initialized")
        return self._roads.road_path(node_path)

    def inference(self) -> list[int]:
        return self.trellis.inference()

    def anchored_inference(self, road_path: Sequence[int]) -> Seq:
        """Pick the candidate sequence whose stitched road ids equal `road_path`.

        Partial decodings are swept layer by layer and pruned as soon as their
        stitched road ids stop being a prefix of the target. When several
        complete decodings match, the highest total score wins, then the
        lexicographically smallest node path.
        """
        roads = self._roads
        connectors = self._connectors
        if roads is None or not connectors:
            raise NotConfiguredError("roads and shortest road paths must be set up first")
        if not road_path:
            raise EmptyTargetError("empty target road path")
        target = tuple(int(road_id) for road_id in road_path)
        K = self.K

        live: list[set[Seq]] = [set() for _ in range(K)]
        for candidate in range(K):
            road_id = roads.rows[0][candidate]
            if road_id == UNSET_ROAD or not self.trellis.has_head(candidate):
                continue
            if road_id == target[0]:
                live[candidate].add(Seq.start(candidate, road_id))

        for layer in range(self.N - 1):
            if not any(live):
                break
            advanced: list[set[Seq]] = [set() for _ in range(K)]
            for candidate, partials in enumerate(live):
                if not partials:
                    continue
                for next_candidate, _ in self.trellis.links(layer, candidate):
                    if roads.rows[layer + 1][next_candidate] == UNSET_ROAD:
                        continue
                    connector = connectors.get(layer, candidate, next_candidate)
                    if connector is None:
                        continue
                    for partial in partials:
                        extended = _extend_along(partial, next_candidate, connector, target)
                        if extended is not None:
                            advanced[next_candidate].add(extended)
            live = advanced

        matches = [seq for partials in live for seq in partials if seq.road_path == target]
        if not matches:
            raise NoConsistentAssignmentError(
                f"no candidate sequence travels road path {list(target)}"
            )
        if len(matches) > 1:
            logger.debug("%d candidate sequences match the target road path", len(matches))
        return min(matches, key=self._rank)

    def _rank(self, seq: Seq) -> tuple[float, tuple[int, ...]]:
        return -self.trellis.cumulative_scores(seq.node_path)[-1], seq.node_path


def _extend_along(
    seq: Seq,
    candidate: int,
    connector: tuple[int, ...],
    target: tuple[int, ...],
) -> Seq | None:
    more_roads = collapse_repeats(connector, last=seq.road_path[-1])
    start = len(seq.road_path)
    end = start + len(more_roads)
    if end > len(target) or tuple(more_roads) != target[start:end]:
        return None
    return seq.patch((candidate,), more_roads)
