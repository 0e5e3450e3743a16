"""Exceptions raised by the decoder.

All errors subclass `ValueError` so callers that only care about "bad input"
can keep catching that.
"""

from __future__ import annotations


class FastViterbiError(ValueError):
    """Base class for decoder errors."""


# Configuration errors: raised while building the trellis or its tables.


class InvalidDimensionsError(FastViterbiError):
    """Candidate count or layer count is unusable."""


class RoadTableError(FastViterbiError):
    """Road id lists do not fit the trellis dimensions."""


class ConnectorTableError(FastViterbiError):
    """A connector entry is empty or disagrees with the road table."""


class RoadsNotInitializedError(FastViterbiError):
    """Connectors were supplied before the road table."""


# Query errors: raised per call, without side effects.


class MissingTransitionError(FastViterbiError):
    """A head or transition score was looked up but never set."""


class NoPathError(FastViterbiError):
    """Every path through the trellis scores -inf."""


class EmptyNodePathError(FastViterbiError):
    """An empty candidate sequence was given."""


class NotConfiguredError(FastViterbiError):
    """Road-anchored inference needs both road and connector tables."""


class EmptyTargetError(FastViterbiError):
    """Road-anchored inference was given an empty target road path."""


class NoConsistentAssignmentError(FastViterbiError):
    """No candidate sequence stitches into the target road path."""


class DecodeTooLargeError(FastViterbiError):
    """A request asks for a larger trellis than the configured limits allow."""
