"""Request normalization, dispatch and response shaping."""

from .diagnostics import FolderProber, PROBE_VARIANTS
from .dispatcher import Operation, OperationDispatcher, OperationParameter
from .models import OperationKind, OperationRequest
from .normalizer import normalize, parse_values

__all__ = [
    "FolderProber",
    "PROBE_VARIANTS",
    "Operation",
    "OperationDispatcher",
    "OperationParameter",
    "OperationKind",
    "OperationRequest",
    "normalize",
    "parse_values",
]
