"""Errors raised by the normalization pipeline."""

from __future__ import annotations


class PipelineError(Exception):
    """Base class for pipeline failures."""


class PreconditionError(PipelineError, ValueError):
    """Raised when a caller hands the pipeline input it cannot resolve."""


class EmptyOffenderNameError(PreconditionError):
    """Raised when an offender name is empty once normalized."""


class MalformedProviderResponseError(PreconditionError):
    """Raised when a store or pool provider returns an unusable record."""


class DuplicateKeyError(PipelineError):
    """Raised by stores when an insert collides with an existing unique key."""

    def __init__(self, key: tuple[object, ...]) -> None:
        super().__init__(f"Duplicate key {key!r}")
        self.key = key


class TransientStoreError(PipelineError):
    """Raised when a conflicting insert cannot be resolved by re-reading the store.

    The whole record can be retried later.
    """
