"""
Domain errors raised by the ledger, services and repositories.

Every error carries a machine-readable ``code``, a human message, the HTTP
status the API layer should answer with, and optional structured ``detail``
(the offending value) so callers can render a corrective message.

    LedgerError
    ├── ValidationError       400  caller-recoverable, raised before any write
    ├── NotFoundError         404
    ├── AuthorizationError    403
    └── ConsistencyError      500  stored data breaks a ledger invariant
"""

from typing import Any, Dict, Optional


class LedgerError(Exception):
    """Base class for all domain errors."""

    code = "ledger_error"
    status_code = 500

    def __init__(self, message: str, detail: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail or {}

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.code, "message": self.message, "detail": self.detail}


# ===== VALIDATION =====

class ValidationError(LedgerError):
    code = "validation_error"
    status_code = 400


class ShareSumInvalid(ValidationError):
    code = "share_sum_invalid"

    def __init__(self, total: float):
        super().__init__(
            f"Shares must total 100% (got {total:g}%)",
            {"total": total}
        )
        self.total = total


class UnknownParticipant(ValidationError):
    code = "unknown_participant"

    def __init__(self, participant_id: str):
        super().__init__(
            f"Participant {participant_id} is not part of this trip",
            {"participant_id": participant_id}
        )
        self.participant_id = participant_id


class DuplicateParticipant(ValidationError):
    code = "duplicate_participant"

    def __init__(self, participant_id: str):
        super().__init__(
            f"Participant {participant_id} has more than one share",
            {"participant_id": participant_id}
        )
        self.participant_id = participant_id


class InvalidAmount(ValidationError):
    code = "invalid_amount"

    def __init__(self, amount: Any):
        super().__init__(f"Amount must be positive (got {amount})", {"amount": amount})
        self.amount = amount


class InvalidDescription(ValidationError):
    code = "invalid_description"

    def __init__(self):
        super().__init__("Description must not be empty")


class PayerNotParticipant(ValidationError):
    code = "payer_not_participant"

    def __init__(self, user_id: str):
        super().__init__(
            f"Payer {user_id} is not a participant of this trip",
            {"user_id": user_id}
        )
        self.user_id = user_id


class ParticipantAlreadyExists(ValidationError):
    code = "participant_already_exists"

    def __init__(self, user_id: str):
        super().__init__("User already a participant", {"user_id": user_id})
        self.user_id = user_id


# ===== NOT FOUND =====

class NotFoundError(LedgerError):
    code = "not_found"
    status_code = 404


class TripNotFound(NotFoundError):
    code = "trip_not_found"

    def __init__(self, trip_id: str):
        super().__init__("Trip not found", {"trip_id": trip_id})


class ExpenseNotFound(NotFoundError):
    code = "expense_not_found"

    def __init__(self, expense_id: str):
        super().__init__("Expense not found", {"expense_id": expense_id})


class UserNotFound(NotFoundError):
    code = "user_not_found"

    def __init__(self, identifier: str):
        super().__init__("User not found", {"user": identifier})


# ===== AUTHORIZATION =====

class AuthorizationError(LedgerError):
    code = "forbidden"
    status_code = 403


class Forbidden(AuthorizationError):
    def __init__(self, message: str = "Forbidden"):
        super().__init__(message)


# ===== CONSISTENCY =====

class ConsistencyError(LedgerError):
    """Stored data violates a ledger invariant. Never a user error."""

    code = "consistency_error"
    status_code = 500
