"""
Error taxonomy for the interview engine.
"""


class InterviewEngineError(Exception):
    """Base class for all interview engine errors."""
    pass


class ExternalServiceError(InterviewEngineError):
    """A provider was unreachable, timed out, returned non-2xx, or sent a malformed body."""

    def __init__(self, service: str, message: str):
        self.service = service
        super().__init__(f"{service}: {message}")


class GenerationValidationError(InterviewEngineError):
    """Provider output parsed but did not match the expected schema."""
    pass


class SessionNotFoundError(InterviewEngineError):
    """Raised when a session id does not exist."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Interview session not found: {session_id}")


class UnauthorizedSessionAccessError(InterviewEngineError):
    """Raised when the caller does not own the session."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Not authorized to access session: {session_id}")


class InterviewStateError(InterviewEngineError):
    """Base class for lifecycle/state violations."""
    pass


class PaymentRequiredError(InterviewStateError):
    """Raised when starting an interview whose payment is not captured."""

    def __init__(self, session_id: str, payment_status: str):
        self.session_id = session_id
        self.payment_status = payment_status
        super().__init__(
            f"Payment required before starting interview "
            f"(session {session_id}, payment status {payment_status})"
        )


class InterviewNotStartedError(InterviewStateError):
    """Raised when completing an interview that never started a call."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Interview not started: {session_id}")


class ReportNotReadyError(InterviewStateError):
    """Raised when no report has been stored for the session yet."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Report not yet generated: {session_id}")


class StateTransitionError(InterviewStateError):
    """Raised when an invalid state transition is attempted."""
    pass


class StatisticsUpdateError(InterviewEngineError):
    """Raised when user statistics could not be updated."""
    pass


class WebhookSignatureError(InterviewEngineError):
    """Raised when a voice webhook payload fails signature verification."""
    pass
