"""
Application exceptions.

Routes raise `HTTPException` for request-level problems (404, 403, ...).
Services raise subclasses of `GabAiError`; the handler registered in
`app.main` turns them into JSON responses with the class's status code.
"""


class GabAiError(Exception):
    """Base exception for service-layer errors."""

    status_code: int = 500
    error_code: str = "internal_error"
    public_message: str = "An internal error occurred."

    def __init__(self, message: str, *, provider: str | None = None):
        super().__init__(message)
        self.message = message
        self.provider = provider


class UpstreamServiceError(GabAiError):
    """A hosted AI provider (LLM, TTS, OCR) failed or returned garbage."""

    status_code = 500
    error_code = "upstream_error"
    public_message = "The assistant is temporarily unavailable. Please try again."


class InvalidActionError(GabAiError):
    """An LLM-supplied action does not match any known action shape."""

    status_code = 400
    error_code = "invalid_action"
    public_message = "Invalid action."


class NotFoundError(GabAiError):
    """A referenced resource does not exist or belongs to another user."""

    status_code = 404
    error_code = "not_found"
    public_message = "Resource not found"
