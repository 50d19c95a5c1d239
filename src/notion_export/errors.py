# ABOUTME: Exception hierarchy for page exports.
# ABOUTME: Each error carries a machine-readable code and an HTTP status.


class ExportError(Exception):
    """Base class for all export failures."""

    code = "export_error"
    status_code = 500

    def __init__(self, message: str, details: str | None = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        """Convert the error to a JSON-serializable payload."""
        payload = {"error": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class ConfigurationError(ExportError):
    """Raised when the server is missing required configuration."""

    code = "configuration_error"
    status_code = 500


class InvalidRequestError(ExportError):
    """Raised when request input is missing or malformed."""

    code = "invalid_request"
    status_code = 400


class EmptyContentError(ExportError):
    """Raised when a page renders to no text at all.

    Almost always caused by the integration not having access to the page.
    """

    code = "empty_content"
    status_code = 404


class UpstreamError(ExportError):
    """Raised when a Notion API call fails."""

    code = "upstream_error"
    status_code = 500


class DepthExceededError(UpstreamError):
    """Raised when the block tree nests deeper than allowed."""

    code = "depth_exceeded"
