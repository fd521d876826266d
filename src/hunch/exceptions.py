"""Hunch exception hierarchy.

Domain scoring never raises: missing evidence falls back to documented
neutral values. Exceptions are reserved for lookups of unknown records,
malformed requests at the boundary, and broken invariants.
"""

from __future__ import annotations


class HunchError(Exception):
    """Base exception for all Hunch errors.

    Attributes:
        message: Human-readable error description.
        code: Machine-readable error code for API responses.
    """

    code: str = "hunch_error"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict[str, object]:
        """Convert exception to API-friendly dictionary."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
            }
        }


class ValidationError(HunchError):
    """Invalid input provided at the service boundary.

    Attributes:
        field: The field that failed validation.
    """

    code: str = "validation_error"

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        super().__init__(f"{field}: {message}")

    def to_dict(self) -> dict[str, object]:
        """Convert exception to API-friendly dictionary."""
        return {
            "error": {
                "code": self.code,
                "field": self.field,
                "message": self.message,
            }
        }


class NotFoundError(HunchError):
    """Resource not found.

    Attributes:
        resource_type: Type of resource (e.g., "memory_record").
        resource_id: ID of the missing resource.
    """

    code: str = "not_found"

    def __init__(self, resource_type: str, resource_id: str) -> None:
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(f"{resource_type} not found: {resource_id}")

    def to_dict(self) -> dict[str, object]:
        """Convert exception to API-friendly dictionary."""
        return {
            "error": {
                "code": self.code,
                "resource_type": self.resource_type,
                "resource_id": self.resource_id,
                "message": self.message,
            }
        }


class InvariantViolationError(HunchError):
    """A memory record broke one of its invariants.

    Always a programming defect in the confidence engine or in a
    collaborator that built records without validation.

    Attributes:
        record_id: ID of the offending record.
    """

    code: str = "invariant_violation"

    def __init__(self, record_id: str, message: str) -> None:
        self.record_id = record_id
        super().__init__(f"memory record {record_id}: {message}")


class ConfigurationError(HunchError):
    """Configuration error.

    Raised when required configuration is missing or invalid.
    """

    code: str = "configuration_error"
