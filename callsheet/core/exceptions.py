"""
Application-wide exception hierarchy.

Services raise these types; blueprints register handlers against them once
and get consistent HTTP status codes everywhere.

Usage:
    from callsheet.core.exceptions import NotFoundError, ValidationError

    raise NotFoundError(resource="DailyCallSheet", resource_id=42)
    raise ValidationError("date is required", details={"date": "missing"})
    raise UpstreamError("Weather provider unavailable", status_code=502)
    raise RenderError("xlsx", cause=exc)
"""


class NotFoundError(Exception):
    """Raised when a requested resource does not exist.

    Args:
        resource: Human-readable model/entity name (e.g. "Project", "DailyCallSheet").
        resource_id: The PK that was looked up. Included in logs and messages.
    """

    def __init__(
        self,
        resource: str,
        resource_id: int | str | None = None,
    ) -> None:
        self.resource = resource
        self.resource_id = resource_id
        msg = f"{resource}"
        if resource_id is not None:
            msg += f" id={resource_id}"
        msg += " not found"
        super().__init__(msg)


class ValidationError(Exception):
    """Raised when input fails business-rule validation in the service layer.

    Distinct from HTTP 400 (malformed input, caught in blueprint) — this
    exception signals that the data was well-formed but violated a rule
    (unknown project status, non-positive shooting day, ...).

    Maps to HTTP 422 in blueprint error handlers.

    Args:
        message: Human-readable explanation of what failed.
        details: Optional field-level breakdown for structured API responses.
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        self.details = details or {}
        super().__init__(message)


class UpstreamError(Exception):
    """Raised when a third-party service call fails.

    Args:
        message: Human-readable explanation for the client.
        status_code: HTTP status to answer with (provider status when known).
    """

    def __init__(self, message: str, status_code: int = 502) -> None:
        self.status_code = status_code
        super().__init__(message)


class RenderError(Exception):
    """Raised when a document renderer cannot assemble its output.

    Renderers build the whole document in memory and raise this instead of
    returning partial bytes. The export endpoint is the only place that
    catches it.

    Args:
        document: Output kind ("pdf", "xlsx", "html").
        cause: The underlying exception, kept for logging.
    """

    def __init__(self, document: str, cause: Exception | None = None) -> None:
        self.document = document
        self.cause = cause
        msg = f"Failed to render {document} document"
        if cause is not None:
            msg += f": {cause}"
        super().__init__(msg)
