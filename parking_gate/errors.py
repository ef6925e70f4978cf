# parking_gate/errors.py
"""
Domain error taxonomy for the gate protocol.
Each error carries a stable code and the HTTP status the API maps it to.
Messages are user-facing and returned verbatim by the exception handler in main.py.
"""


class GateError(Exception):
    code = "internal"
    http_status = 500
    default_message = "Internal error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


# ── Categories ───────────────────────────────────────────────────────────────
class Unauthenticated(GateError):
    code = "unauthenticated"
    http_status = 401
    default_message = "Authentication required"


class InvalidArgument(GateError):
    code = "invalid-argument"
    http_status = 400
    default_message = "Invalid argument"


class FailedPrecondition(GateError):
    code = "failed-precondition"
    http_status = 409
    default_message = "Request cannot be processed in the current state"


class NotFound(GateError):
    code = "not-found"
    http_status = 404
    default_message = "Not found"


class Expired(GateError):
    code = "expired"
    http_status = 410
    default_message = "Request expired"


class Internal(GateError):
    code = "internal"
    http_status = 500
    default_message = "The parking store is unavailable. Please try again"


# ── Entry / exit ─────────────────────────────────────────────────────────────
class AlreadyActive(FailedPrecondition):
    default_message = "You already have an active parking ticket"


class NoCapacity(FailedPrecondition):
    default_message = "No free parking spots available"


class NoPaidTicket(FailedPrecondition):
    default_message = "No paid ticket found. Please pay before exiting"


class TicketNotPayable(FailedPrecondition):
    default_message = "Only active tickets can be paid"


class NoPendingRequest(NotFound):
    default_message = "No pending request awaiting confirmation"


class RequestExpired(Expired):
    default_message = "Request expired. Please request again from the app"


class ClaimWindowExpired(Expired):
    default_message = "Exit window after payment has expired"


# ── Spots / tickets ──────────────────────────────────────────────────────────
class UnknownSpot(NotFound):
    default_message = "Unknown parking spot"


class NoPendingAssignment(NotFound):
    default_message = "No ticket is waiting for a spot assignment"


class TicketNotFound(NotFound):
    default_message = "Ticket not found"
