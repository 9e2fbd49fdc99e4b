"""Error taxonomy shared by repositories, services and routes.

Every failure the core reports is one of the subclasses below. Callers branch
on ``kind`` rather than on the message text.
"""


class QuizAppError(Exception):
    kind = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"kind": self.kind, "message": self.message}


class ValidationError(QuizAppError):
    """Malformed input: too few choices, no correct answer, missing text"""

    kind = "validation"


class NotFoundError(QuizAppError):
    """Referenced quiz/question/choice/attempt is missing or inactive"""

    kind = "not_found"


class AuthorizationError(QuizAppError):
    """Requester is unauthenticated or does not own the resource"""

    kind = "authorization"

    def __init__(self, message: str, authenticated: bool = True):
        super().__init__(message)
        self.authenticated = authenticated


class ConflictError(QuizAppError):
    """State transition refused, e.g. attempt already submitted"""

    kind = "conflict"


class StorageError(QuizAppError):
    """Underlying persistence failure; never retried by the core"""

    kind = "storage"
