"""Decoding pipeline shared by the CLI and the HTTP API."""

from __future__ import annotations

from fastviterbi.config import DecodeLimits
from fastviterbi.decode import FastViterbi
from fastviterbi.errors import DecodeTooLargeError
from fastviterbi.models import DecodeRequest, DecodeResponse


def run_decode(request: DecodeRequest, limits: DecodeLimits | None = None) -> DecodeResponse:
    """Build a decoder from the request and run the matching inference mode."""
    if limits is not None:
        check_limits(request, limits)
    decoder = build_decoder(request)

    if request.target_road_path is not None:
        seq = decoder.anchored_inference(request.target_road_path)
        return DecodeResponse(
            mode="road_anchored",
            node_path=list(seq.node_path),
            road_path=list(seq.road_path),
            scores=decoder.scores(seq.node_path),
        )

    node_path = decoder.inference()
    road_path = decoder.road_path(node_path) if decoder.roads is not None else []
    return DecodeResponse(
        mode="viterbi",
        node_path=node_path,
        road_path=road_path,
        scores=decoder.scores(node_path),
    )


def check_limits(request: DecodeRequest, limits: DecodeLimits) -> None:
    """Reject requests whose trellis would exceed `limits` before allocating it."""
    if request.N > limits.max_layers:
        raise DecodeTooLargeError(f"N = {request.N} exceeds max_layers = {limits.max_layers}")
    if request.K > limits.max_candidates:
        raise DecodeTooLargeError(
            f"K = {request.K} exceeds max_candidates = {limits.max_candidates}"
        )


def build_decoder(request: DecodeRequest) -> FastViterbi:
    """Construct a decoder and run the setup calls the request asks for."""
    decoder = FastViterbi(request.K, request.N, request.score_table())
    if request.roads is not None:
        decoder.setup_roads(request.roads)
    if request.connectors is not None:
        decoder.setup_shortest_road_paths(request.connector_table())
    return decoder
