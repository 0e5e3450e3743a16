"""I/O utilities."""

from fastviterbi.io.export import read_request, to_json, write_json

__all__ = ["read_request", "to_json", "write_json"]
