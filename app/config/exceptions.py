"""Custom exceptions for the tag resolution pipeline."""
from __future__ import annotations

from typing import Optional


class PipelineError(Exception):
    """Base exception for pipeline errors. Raise this instead of sys.exit(1)."""
    pass


# -------------------- Inference -------------------- #

class InferenceError(PipelineError):
    """Anything that went wrong while talking to the oracle."""
    pass


class InferenceUnavailableError(InferenceError):
    """Transport failure, timeout or non-success HTTP status."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        timed_out: bool = False,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.timed_out = timed_out


class InferenceProtocolError(InferenceError):
    """The oracle answered, but the payload is empty or unusable."""
    pass


# -------------------- Storage -------------------- #

class StoreError(PipelineError):
    pass


class StoreUnavailableError(StoreError):
    """Underlying persistence failure."""
    pass


class StoreConflictError(StoreError):
    """A create lost a race against an identical concurrent create."""

    def __init__(self, entity: str, name: str):
        super().__init__(f"{entity} '{name}' already exists")
        self.entity = entity
        self.name = name


class DuplicateTagError(StoreError):
    def __init__(self, name: str):
        super().__init__(f"Tag with name '{name}' already exists")
        self.name = name


class TagNotFoundError(StoreError):
    def __init__(self, tag_id: int):
        super().__init__(f"Tag {tag_id} not found")
        self.tag_id = tag_id


class DuplicateProductError(StoreError):
    def __init__(self, name: str):
        super().__init__(f"Product with name '{name}' already exists")
        self.name = name
