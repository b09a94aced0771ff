"""
Error classification for the climate risk service.

Every failure raised by the service derives from ClimateRiskError so the
HTTP layer can serialize it uniformly. None of these errors is retried:
ingestion is fire-and-forget and the webhook acknowledges every delivery.
"""

from typing import Optional, Dict, Any, List


class ClimateRiskError(Exception):
    """
    Base exception for all service errors.

    Attributes:
        message: Human-readable error description
        component: Component that raised it (e.g., 'ingestion', 'webhook')
        status_code: HTTP status code the API layer should use
        details: Structured context for logging
    """

    def __init__(
        self,
        message: str,
        component: Optional[str] = None,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.component = component
        self.status_code = status_code
        self.details = details or {}

    def __str__(self) -> str:
        if self.component:
            return f"[{self.component}] {self.message}"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "component": self.component,
            "status_code": self.status_code,
            "details": self.details,
        }


class PayloadValidationError(ClimateRiskError):
    """
    Request body could not be parsed or failed schema validation.

    Raised at the HTTP boundary before any business logic runs.
    """

    def __init__(
        self,
        message: str = "Invalid request body",
        component: Optional[str] = None,
        errors: Optional[List[Dict[str, Any]]] = None,
    ):
        super().__init__(
            message=message,
            component=component,
            status_code=500,
            details={"errors": errors or []},
        )
        self.errors = errors or []


class EnvelopeDecodeError(PayloadValidationError):
    """
    Pub/Sub push envelope is malformed.

    Covers a missing message, invalid base64 and a non-JSON or
    schema-violating inner payload.
    """

    def __init__(
        self,
        message: str = "Invalid Pub/Sub message format",
        errors: Optional[List[Dict[str, Any]]] = None,
    ):
        super().__init__(message=message, component="webhook", errors=errors)


class PersistenceError(ClimateRiskError):
    """
    A bulk insert for one location failed.

    Logged by the ingestion loop; never surfaced to the caller except as a
    reduced dataPointsInserted count.
    """

    def __init__(
        self,
        message: str,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
    ):
        super().__init__(
            message=message,
            component="ingestion",
            status_code=500,
            details={"latitude": latitude, "longitude": longitude},
        )
        self.latitude = latitude
        self.longitude = longitude


class ConfigurationError(ClimateRiskError):
    """
    Configuration error - missing required settings.

    Fatal: the persistence client cannot be constructed.
    """

    def __init__(self, message: str, missing_config: Optional[str] = None):
        super().__init__(message=message, component="config", status_code=500)
        self.missing_config = missing_config
