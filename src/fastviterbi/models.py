"""Shared data models."""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from fastviterbi.decode import VIRTUAL_START

RoadId = Annotated[int, Field(ge=-(2**63), le=2**63 - 1)]


class HealthResponse(BaseModel):
    """Response payload for the API health endpoint."""

    status: Literal["ok"]
    version: str
    env: str


class LimitsResponse(BaseModel):
    """Trellis size limits enforced by the decode endpoint."""

    max_layers: int
    max_candidates: int


class NodeRef(BaseModel):
    """Trellis node; layer -1 is the virtual start whatever the candidate."""

    layer: int = Field(ge=-1)
    candidate: int = Field(ge=-1)

    def as_tuple(self) -> tuple[int, int]:
        if self.layer < 0:
            return VIRTUAL_START
        return (self.layer, self.candidate)


class ScoreEntry(BaseModel):
    """One head or transition score."""

    source: NodeRef
    target: NodeRef
    score: float


class ConnectorEntry(BaseModel):
    """Road ids bridging the source candidate's road to the target's."""

    source: NodeRef
    target: NodeRef
    roads: list[RoadId] = Field(min_length=1)


class DecodeRequest(BaseModel):
    """Decoding request payload used by both CLI and API."""

    K: int = Field(ge=1)
    N: int = Field(ge=2)
    scores: list[ScoreEntry]
    roads: list[list[RoadId]] | None = None
    connectors: list[ConnectorEntry] | None = None
    target_road_path: list[RoadId] | None = None

    @model_validator(mode="after")
    def _target_needs_tables(self) -> DecodeRequest:
        if self.connectors is not None and self.roads is None:
            raise ValueError("connectors require roads")
        if self.target_road_path is not None and (self.roads is None or self.connectors is None):
            raise ValueError("target_road_path requires roads and connectors")
        return self

    def score_table(self) -> dict[tuple[tuple[int, int], tuple[int, int]], float]:
        return {
            (entry.source.as_tuple(), entry.target.as_tuple()): entry.score
            for entry in self.scores
        }

    def connector_table(self) -> dict[tuple[tuple[int, int], tuple[int, int]], list[int]]:
        return {
            (entry.source.as_tuple(), entry.target.as_tuple()): entry.roads
            for entry in self.connectors or []
        }


class DecodeResponse(BaseModel):
    """Canonical decoding output schema."""

    model_config = ConfigDict(ser_json_inf_nan="constants")

    mode: Literal["viterbi", "road_anchored"]
    node_path: list[int]
    road_path: list[int]
    scores: list[float]
