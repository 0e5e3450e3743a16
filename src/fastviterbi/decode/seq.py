"""Path accumulator used by road-anchored decoding."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field


@dataclass(frozen=True)
class Seq:
    """Partial decoding: chosen candidates plus the road ids stitched so far.

    Equality and hashing only look at `node_path`, so a set of accumulators
    never holds two entries with the same candidate sequence.
    """

    node_path: tuple[int, ...] = ()
    road_path: tuple[int, ...] = field(default=(), compare=False)

    @classmethod
    def start(cls, candidate: int, road_id: int) -> Seq:
        """Seed an accumulator at a layer-0 candidate."""
        return cls(node_path=(candidate,), road_path=(road_id,))

    def patch(self, more_nodes: Iterable[int], more_roads: Iterable[int]) -> Seq:
        """Return a new accumulator with both sequences extended."""
        return Seq(
            node_path=self.node_path + tuple(more_nodes),
            road_path=self.road_path + tuple(more_roads),
        )

    def __len__(self) -> int:
        return len(self.node_path)
