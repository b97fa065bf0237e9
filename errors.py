"""
Error types and user-facing messages for DoseKeeper

Internal error details are logged; callers surface ``user_message`` only.
"""

from typing import Optional


class ErrorMessages:
    """User-facing messages, grouped by feature"""

    class MEDICATIONS:
        FETCH_FAILED = "Failed to load medications. Please refresh the page."
        ADD_FAILED = "Failed to add medication. Please try again."
        UPDATE_FAILED = "Failed to update. Please try again."
        DELETE_FAILED = "Failed to delete. Please try again."
        NOT_FOUND = "Medication not found."
        INVALID_TIME = "Deadline must be a valid time (HH:MM)."
        INVALID_INPUT = "Please check the medication details and try again."

    class LOGS:
        FETCH_FAILED = "Failed to load history. Please try again."
        MARK_TAKEN_FAILED = "Failed to mark as taken. Please try again."
        STATS_FAILED = "Failed to load statistics. Please try again."

    class AUTH:
        UNAUTHORIZED = "You don't have permission to perform this action."
        SESSION_EXPIRED = "Your session has expired. Please sign in again."

    GENERIC = "Something went wrong. Please try again."


class DoseKeeperError(Exception):
    """Base error carrying a machine code and a safe user message"""

    code: str = "error"
    default_user_message: str = ErrorMessages.GENERIC

    def __init__(self, message: str, user_message: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.user_message = user_message or self.default_user_message


class InvalidTimeFormat(DoseKeeperError, ValueError):
    """A deadline string is not a valid HH:MM time"""

    code = "invalid_time_format"
    default_user_message = ErrorMessages.MEDICATIONS.INVALID_TIME

    def __init__(self, value: object, user_message: Optional[str] = None):
        super().__init__(f"Invalid time of day: {value!r}", user_message)
        self.value = value


class AlreadyTaken(DoseKeeperError):
    """A dose was already recorded for the day (treated as a no-op)"""

    code = "already_taken"


class PersistenceError(DoseKeeperError):
    """The store was unreachable or rejected a write"""

    code = "persistence_error"


class InputValidationError(DoseKeeperError, ValueError):
    """User input violated sanitization or length bounds"""

    code = "validation_error"
    default_user_message = ErrorMessages.MEDICATIONS.INVALID_INPUT


class MedicationNotFoundError(DoseKeeperError, LookupError):
    """No medication with the given id exists for the owner"""

    code = "medication_not_found"
    default_user_message = ErrorMessages.MEDICATIONS.NOT_FOUND

    def __init__(self, medication_id: str):
        super().__init__(f"Medication {medication_id} not found")
        self.medication_id = medication_id


def get_user_message(error: BaseException) -> str:
    """Safe user-facing message for any raised value"""
    if isinstance(error, DoseKeeperError):
        return error.user_message
    return ErrorMessages.GENERIC


__all__ = [
    "ErrorMessages",
    "DoseKeeperError",
    "InvalidTimeFormat",
    "AlreadyTaken",
    "PersistenceError",
    "InputValidationError",
    "MedicationNotFoundError",
    "get_user_message",
]
