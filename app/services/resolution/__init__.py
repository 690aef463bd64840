from .outcomes import (
    ErrorKind,
    Failed,
    NotFound,
    NotFoundReason,
    Resolved,
    ResolutionOutcome,
    ResolutionSource,
)
from .tag_resolver import TagResolver

__all__ = [
    "ErrorKind",
    "Failed",
    "NotFound",
    "NotFoundReason",
    "Resolved",
    "ResolutionOutcome",
    "ResolutionSource",
    "TagResolver",
]
