"""
Error taxonomy for the portfolio pipeline.

Each error carries the HTTP status it maps to and the message that is safe to
show to the client. Detail for the server log goes in ``detail``.
"""
from typing import Optional


class PortfolioError(Exception):
    status_code = 500
    public_message = "An unexpected error occurred while generating the portfolio. Please try again."

    def __init__(self, detail: str = "", public_message: Optional[str] = None):
        super().__init__(detail or self.public_message)
        self.detail = detail or self.public_message
        if public_message is not None:
            self.public_message = public_message


class InputError(PortfolioError):
    """Missing or malformed request input."""
    status_code = 400
    public_message = "Invalid request."

    def __init__(self, detail: str = "", public_message: Optional[str] = None):
        # Input errors are the user's own data, so the detail is shown as-is
        super().__init__(detail, public_message or detail or None)


class EmptyInputError(InputError):
    public_message = (
        "Could not extract text from the PDF. The file may be corrupted or scanned as an image."
    )

    def __init__(self, detail: str = "Resume text is empty"):
        super().__init__(detail, self.public_message)


class NotFoundError(PortfolioError):
    status_code = 404
    public_message = "Portfolio not found"


class ExternalServiceError(PortfolioError):
    """The language model call failed or returned something unusable."""


class MalformedExtraction(ExternalServiceError):
    pass


class StorageError(PortfolioError):
    public_message = "Failed to save portfolio"


LOAD_FAILED_MESSAGE = "Failed to load portfolio"
