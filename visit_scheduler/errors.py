"""
Scheduling exceptions.

Structural errors abort the single call that raised them. Validation
conflicts are not raised from batch operations; they end up on the draft
or in a per-item error list. ``SchedulingConflictError`` is only raised by
single-appointment inserts.
"""


class SchedulingError(Exception):
    """Base exception for scheduling errors."""

    code = 'scheduling_error'
    status_code = 400

    def __init__(self, message=None):
        super().__init__(message or self.__class__.__doc__)
        self.message = message or self.__class__.__doc__


class InvalidWeekError(SchedulingError):
    """Target week must be a whole number of weeks after the source week."""

    code = 'invalid_week'
    status_code = 400


class DraftNotFoundError(SchedulingError):
    """Draft appointment not found."""

    code = 'draft_not_found'
    status_code = 404


class BatchNotFoundError(SchedulingError):
    """Copy week batch not found."""

    code = 'batch_not_found'
    status_code = 404


class DraftPublishedError(SchedulingError):
    """Draft appointment is already published and can no longer change."""

    code = 'draft_published'
    status_code = 409


class NotRevertibleError(SchedulingError):
    """Batch has published drafts and cannot be reverted."""

    code = 'not_revertible'
    status_code = 409


class SchedulingConflictError(SchedulingError):
    """Appointment conflicts with the current schedule."""

    status_code = 409

    def __init__(self, verdict):
        self.verdict = verdict
        first = verdict.first
        super().__init__(first.message if first else None)
        self.code = first.kind if first else 'conflict'
