"""Layered Viterbi decoding engine."""

from fastviterbi.decode.roads import UNSET_ROAD, ConnectorTable, RoadTable, collapse_repeats
from fastviterbi.decode.seq import Seq
from fastviterbi.decode.trellis import NEG_INF, VIRTUAL_START, Trellis
from fastviterbi.decode.viterbi import FastViterbi

__all__ = [
    "NEG_INF",
    "UNSET_ROAD",
    "VIRTUAL_START",
    "ConnectorTable",
    "FastViterbi",
    "RoadTable",
    "Seq",
    "Trellis",
    "collapse_repeats",
]
