"""Exception hierarchy for the timesheet engine and its storage layer."""


class TimesheetError(Exception):
    """Base class for all errors raised by timesheet_mcp."""


class ValidationError(TimesheetError):
    """Input was rejected before any mutation took place."""


class ConflictError(TimesheetError):
    """The operation would violate an identity or integrity rule."""


class NotFoundError(TimesheetError):
    """The addressed task, entry, or project does not exist."""


class StorageError(TimesheetError):
    """The database failed for a reason other than a conflict."""
