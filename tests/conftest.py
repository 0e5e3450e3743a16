from typing import Any

import pytest

from fastviterbi.decode import VIRTUAL_START

NodePair = tuple[tuple[int, int], tuple[int, int]]


@pytest.fixture
def scenario_scores() -> dict[NodePair, float]:
    """Three layers, two candidates: best path is [0, 0, 0] with total 10."""
    return {
        (VIRTUAL_START, (0, 0)): 5.0,
        (VIRTUAL_START, (0, 1)): 1.0,
        ((0, 0), (1, 0)): 2.0,
        ((0, 0), (1, 1)): 1.0,
        ((1, 0), (2, 0)): 3.0,
        ((1, 1), (2, 1)): 4.0,
    }


@pytest.fixture
def scenario_roads() -> list[list[int]]:
    return [[100, 101], [101, 102], [102, 103]]


@pytest.fixture
def scenario_connectors() -> dict[NodePair, list[int]]:
    return {
        (VIRTUAL_START, (0, 0)): [100],
        (VIRTUAL_START, (0, 1)): [101],
        ((0, 0), (1, 0)): [100, 101],
        ((0, 0), (1, 1)): [100, 101, 102],
        ((1, 0), (2, 0)): [101, 102],
        ((1, 1), (2, 1)): [102, 103],
    }


def _node(node: tuple[int, int]) -> dict[str, int]:
    return {"layer": node[0], "candidate": node[1]}


@pytest.fixture
def scenario_payload(scenario_scores, scenario_roads, scenario_connectors) -> dict[str, Any]:
    return {
        "K": 2,
        "N": 3,
        "scores": [
            {"source": _node(source), "target": _node(target), "score": score}
            for (source, target), score in scenario_scores.items()
        ],
        "roads": scenario_roads,
        "connectors": [
            {"source": _node(source), "target": _node(target), "roads": roads}
            for (source, target), roads in scenario_connectors.items()
        ],
    }
