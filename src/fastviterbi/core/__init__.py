"""Core decoding pipeline."""

from fastviterbi.core.pipeline import build_decoder, check_limits, run_decode

__all__ = ["build_decoder", "check_limits", "run_decode"]
