"""
Exception classes for the conversion pipeline.

Each error carries the machine-readable code and HTTP status surfaced to the
caller in the failure envelope.
"""


class ConversionError(Exception):
    """Base exception for all conversion errors."""

    code = "RENDER_FAILED"
    status_code = 500
    default_message = "Failed to render PDF"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message}


class MethodNotAllowedError(ConversionError):
    """Request used a method other than POST."""

    code = "METHOD_NOT_ALLOWED"
    status_code = 405
    default_message = "Only POST allowed"


class InvalidUrlError(ConversionError):
    """Source URL missing or unusable."""

    code = "INVALID_URL"
    status_code = 400
    default_message = "URL is required"


class InvalidRequestError(ConversionError):
    """Optional request fields failed validation."""

    code = "INVALID_REQUEST"
    status_code = 400
    default_message = "Invalid request body"


class PdfDownloadError(ConversionError):
    """Remote PDF could not be fetched."""

    code = "PDF_DOWNLOAD_FAILED"
    status_code = 502
    default_message = "Failed to download PDF"


class PdfTooLargeError(ConversionError):
    """Remote PDF exceeds the configured size cap."""

    code = "PDF_TOO_LARGE"
    status_code = 413
    default_message = "PDF exceeds size limit"


class RenderError(ConversionError):
    """Document parsing, rasterisation or encoding failed."""

    pass
