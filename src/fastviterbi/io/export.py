"""Decoding request loaders and output serializers."""

from __future__ import annotations

from pathlib import Path

from fastviterbi.models import DecodeRequest, DecodeResponse


def read_request(input_path: str | Path) -> DecodeRequest:
    """Parse a JSON decoding request from disk."""
    path = Path(input_path)
    return DecodeRequest.model_validate_json(path.read_text(encoding="utf-8"))


def to_json(response: DecodeResponse) -> str:
    """Serialize a decoding response to formatted JSON."""
    return response.model_dump_json(indent=2)


def write_json(response: DecodeResponse, output_path: str | Path) -> None:
    """Write decoding response JSON to disk."""
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(to_json(response) + "\n", encoding="utf-8")
