"""fastviterbi: layered Viterbi decoding for map matching."""

from fastviterbi.decode import VIRTUAL_START, FastViterbi, Seq, Trellis

__version__ = "0.1.0"

__all__ = ["VIRTUAL_START", "FastViterbi", "Seq", "Trellis", "__version__"]
