"""Custom exceptions for SmartFilter.

Only a handful of conditions ever surface to callers: the compiler degrades
every malformed or unknown filter to "skipped", and raises solely for a
missing Filterable capability or when a caller opts into strict validation.
"""

from typing import Any, Dict


# Base exception
class SmartFilterError(Exception):
    """Base exception for all SmartFilter errors.

    Attributes:
        message: Error message
        details: Additional error context as key-value pairs
    """

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        """Initialize exception with message and additional details.

        Args:
            message: Human-readable error message
            **kwargs: Additional context (e.g., model, key, relation)
        """
        self.message = message
        self.details: Dict[str, Any] = kwargs
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the complete error message with details."""
        if not self.details:
            return self.message

        details_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
        if self.message:
            return f"{self.message} ({details_str})"
        return details_str

    def __repr__(self) -> str:
        """Return detailed representation of the exception."""
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


class InvalidModelError(SmartFilterError):
    """Raised when an entity does not implement the Filterable contract.

    Example:
        >>> raise InvalidModelError("Model must implement Filterable contract", model="Tag")
    """

    @classmethod
    def for_model(cls, model: Any) -> "InvalidModelError":
        name = model.__name__ if isinstance(model, type) else type(model).__name__
        return cls(f"Model [{name}] must implement the Filterable contract to use smart filter", model=name)


class InvalidConfigurationError(SmartFilterError):
    """Raised when explicit validation finds an unknown configuration key.

    Example:
        >>> raise InvalidConfigurationError("Invalid configuration key", key="max_depth")
    """

    @classmethod
    def for_key(cls, key: str) -> "InvalidConfigurationError":
        return cls(f"Invalid configuration key [{key}] in smart filter options", key=key)


class UnsupportedOperatorError(InvalidConfigurationError):
    """Raised under ``strict_mode`` when a filter names an unknown operator.

    Example:
        >>> raise UnsupportedOperatorError("Unsupported operator", operator="~=", field="name")
    """


class RelationError(SmartFilterError):
    """Raised when strict relation validation rejects a relation path.

    Example:
        >>> raise RelationError("Relation is not filterable", relation="tokens")
    """

    @classmethod
    def for_relation(cls, relation: str, reason: str) -> "RelationError":
        return cls(f"Error filtering relation [{relation}]: {reason}", relation=relation)
