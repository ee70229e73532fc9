"""Outcome model for write operations."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from napalm_ptcl.client.errors import RouterError


class WriteStage(enum.Enum):
    """Steps of the read-merge-submit protocol, in order."""

    IDLE = "idle"
    FETCHING_CURRENT = "fetching_current"
    VALIDATING = "validating"
    SUBMITTING = "submitting"
    DONE = "done"


@dataclass(frozen=True)
class OperationResult:
    """Result of one write operation.

    Attributes:
        success: ``True`` only when the form was submitted (or, for a dry
            run, fully planned).  There is no partial success.
        message: Human-readable outcome.
        stage: :attr:`WriteStage.DONE` on success, otherwise the stage the
            operation failed in.
        error: The error that stopped the operation, if any.
        changes: ``{field: (current, new)}`` for every form field the write
            changes.  Secret values are masked.
    """

    success: bool
    message: str
    stage: WriteStage = WriteStage.DONE
    error: RouterError | None = None
    changes: dict[str, tuple[str, str]] = field(default_factory=dict)

    @classmethod
    def failed(
        cls,
        message: str,
        stage: WriteStage,
        error: RouterError | None = None,
        changes: dict[str, tuple[str, str]] | None = None,
    ) -> OperationResult:
        """Build a failed result."""
        return cls(
            success=False,
            message=message,
            stage=stage,
            error=error,
            changes=changes or {},
        )
