"""Base exception class for the Wavefront Lambda wrapper."""

from typing import Any, ClassVar


class WavefrontLambdaError(Exception):
    """Base exception for all errors raised by the wrapper itself.

    Errors returned or raised by the wrapped handler are never converted into
    this hierarchy; they reach the Lambda runtime untouched.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        context: Additional debugging information.
    """

    error_code: ClassVar[str] = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        *,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            context: Additional key-value pairs for debugging.
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def to_log_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary usable as logging ``extra``.

        Keys avoid the reserved ``LogRecord`` attribute names.

        Returns:
            Dictionary with full error details for logging.
        """
        return {
            "error_code": self.error_code,
            "error_message": self.message,
            "error_context": self.context,
            "exception_type": self.__class__.__name__,
        }

    def __str__(self) -> str:
        """Return string representation."""
        if self.context:
            return f"{self.message} (context: {self.context})"
        return self.message

    def __repr__(self) -> str:
        """Return detailed representation."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"context={self.context!r})"
        )
