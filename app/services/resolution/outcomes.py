"""Result types returned by TagResolver.resolve_tag.

Callers match on the variant instead of catching exceptions:

    outcome = resolver.resolve_tag(term)
    if isinstance(outcome, Resolved):
        search(tag_id=outcome.category_id)
    elif isinstance(outcome, NotFound):
        ...  # 404-style "no matching category"
    else:
        ...  # Failed: generic failure response
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from config.exceptions import (
    InferenceProtocolError,
    InferenceUnavailableError,
    PipelineError,
    StoreError,
)


class ResolutionSource(str, Enum):
    CATEGORY = "category"      # term was already a tag name
    PRODUCT = "product"        # dish seen before
    CREATED = "created"        # dish stored on this call
    SUGGESTION = "suggestion"  # random pick for "surprise me"


class NotFoundReason(str, Enum):
    BLANK_INPUT = "blank_input"
    NOT_FOOD = "not_food"
    NO_CATEGORIES = "no_categories"


class ErrorKind(str, Enum):
    INFERENCE_UNAVAILABLE = "inference_unavailable"
    INFERENCE_PROTOCOL = "inference_protocol"
    STORE_UNAVAILABLE = "store_unavailable"
    INTERNAL = "internal"


@dataclass(frozen=True)
class Resolved:
    category_id: int
    source: ResolutionSource
    dish: str | None = None


@dataclass(frozen=True)
class NotFound:
    reason: NotFoundReason


@dataclass(frozen=True)
class Failed:
    kind: ErrorKind
    message: str
    error: PipelineError | None = None


ResolutionOutcome = Union[Resolved, NotFound, Failed]


def classify_error(error: PipelineError) -> ErrorKind:
    if isinstance(error, InferenceUnavailableError):
        return ErrorKind.INFERENCE_UNAVAILABLE
    if isinstance(error, InferenceProtocolError):
        return ErrorKind.INFERENCE_PROTOCOL
    if isinstance(error, StoreError):
        return ErrorKind.STORE_UNAVAILABLE
    return ErrorKind.INTERNAL


__all__ = [
    "ErrorKind",
    "Failed",
    "NotFound",
    "NotFoundReason",
    "Resolved",
    "ResolutionOutcome",
    "ResolutionSource",
    "classify_error",
]
