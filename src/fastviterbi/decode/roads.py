"""Road id table and shortest-connector table.

Both tables are validated against the trellis dimensions when they are built
and are immutable afterwards. A table that fails validation is never
returned, so callers only ever hold fully consistent tables.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

from fastviterbi.decode.trellis import NodePair
from fastviterbi.errors import ConnectorTableError, EmptyNodePathError, RoadTableError

UNSET_ROAD = -1

ConnectorMap = Mapping[NodePair, Sequence[int]]


def collapse_repeats(road_ids: Iterable[int], last: int | None = None) -> list[int]:
    """Drop every road id equal to the one emitted right before it.

    `last` is the id already emitted ahead of `road_ids`, if any; it is not
    part of the output.
    """
    collapsed: list[int] = []
    for road_id in road_ids:
        if road_id == last:
            continue
        collapsed.append(road_id)
        last = road_id
    return collapsed


@dataclass(frozen=True)
class RoadTable:
    """`N x K` grid of road ids, `UNSET_ROAD` where a candidate has none."""

    K: int
    N: int
    rows: tuple[tuple[int, ...], ...]

    @classmethod
    def build(cls, K: int, N: int, roads: Sequence[Sequence[int]]) -> RoadTable:
        if len(roads) != N:
            raise RoadTableError(f"expected road ids for {N} layers, got {len(roads)}")
        rows: list[tuple[int, ...]] = []
        for layer, layer_roads in enumerate(roads):
            if len(layer_roads) > K:
                raise RoadTableError(
                    f"invalid road ids at #layer={layer}, #candidates={len(layer_roads)} (K={K})"
                )
            padding = (UNSET_ROAD,) * (K - len(layer_roads))
            rows.append(tuple(int(road_id) for road_id in layer_roads) + padding)
        return cls(K=K, N=N, rows=tuple(rows))

    def road(self, layer: int, candidate: int) -> int:
        if not (0 <= layer < self.N and 0 <= candidate < self.K):
            raise ValueError(f"node ({layer}, {candidate}) is outside the {self.N}x{self.K} table")
        return self.rows[layer][candidate]

    def road_path(self, node_path: Sequence[int]) -> list[int]:
        """Road ids visited by a candidate sequence, consecutive repeats collapsed."""
        if not node_path:
            raise EmptyNodePathError("empty node path")
        if len(node_path) > self.N:
            raise ValueError(f"node path has {len(node_path)} layers, trellis has {self.N}")
        return collapse_repeats(
            self.road(layer, candidate) for layer, candidate in enumerate(node_path)
        )


class ConnectorTable:
    """Road id sequences that physically connect two scored candidates.

    Built all-or-nothing: one bad entry rejects the whole mapping. Head
    connectors can only repeat a layer-0 road, so they are validated and
    counted but not kept.
    """

    def __init__(
        self,
        links: list[dict[int, tuple[int, ...]]],
        K: int,
        head_count: int = 0,
    ) -> None:
        self._links = links
        self.K = K
        self.head_count = head_count

    @classmethod
    def build(cls, road_table: RoadTable, sp_paths: ConnectorMap) -> ConnectorTable:
        K, N = road_table.K, road_table.N
        heads: set[int] = set()
        links: list[dict[int, tuple[int, ...]]] = [{} for _ in range((N - 1) * K)]

        for (source, target), raw_path in sorted(sp_paths.items()):
            path = tuple(int(road_id) for road_id in raw_path)
            if not path:
                raise ConnectorTableError(f"empty connector for {source} -> {target}")
            layer0, cand0 = source
            layer1, cand1 = target

            if layer0 < 0:
                if layer1 == 0 and 0 <= cand1 < K:
                    if path != (road_table.rows[0][cand1],):
                        raise ConnectorTableError(
                            f"head connector {list(path)} for candidate {cand1} "
                            f"does not match road {road_table.rows[0][cand1]}"
                        )
                    heads.add(cand1)
                continue
            if layer0 >= N - 1 or layer1 != layer0 + 1:
                continue
            if not (0 <= cand0 < K and 0 <= cand1 < K):
                continue

            first = road_table.rows[layer0][cand0]
            last = road_table.rows[layer1][cand1]
            if path[0] != first or path[-1] != last:
                raise ConnectorTableError(
                    f"connector {list(path)} for {source} -> {target} "
                    f"does not match roads {first} -> {last}"
                )
            links[layer0 * K + cand0][cand1] = path

        return cls(links=links, K=K, head_count=len(heads))

    def get(self, layer: int, source: int, target: int) -> tuple[int, ...] | None:
        """Connector for `(layer, source) -> (layer + 1, target)`, if one was given."""
        slot = layer * self.K + source
        if not (0 <= source < self.K and 0 <= slot < len(self._links)):
            return None
        return self._links[slot].get(target)

    def __len__(self) -> int:
        return self.head_count + sum(len(slot) for slot in self._links)
