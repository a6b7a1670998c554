"""
Standardized exception hierarchy for the progression engine
Provides rich context, consistent logging, and user-friendly error messages
"""

from datetime import datetime, timezone
from typing import Optional, Dict, Any
from uuid import uuid4
import logging

logger = logging.getLogger(__name__)


class ProgressionError(Exception):
    """
    Base exception for all progression engine errors

    Provides:
    - Automatic timestamping
    - Request ID for tracing
    - User-friendly messages
    - Structured context
    - Automatic logging

    Example:
        raise ProgressionError(
            message="Failed to apply reward",
            operation="purchase_reward",
            context={"reward_id": "theme_dark"}
        )
    """

    def __init__(
        self,
        message: str,
        request_id: Optional[str] = None,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        user_message: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.request_id = request_id or str(uuid4())
        self.operation = operation
        self.context = context or {}
        self.cause = cause
        self.user_message = user_message or "An error occurred. Please try again."
        self.timestamp = datetime.now(timezone.utc)

        # Auto-log on creation
        self._log_error()

    def _log_error(self) -> None:
        """Log error with full context"""
        log_data = {
            "error_type": self.__class__.__name__,
            "error_message": self.message,  # Avoid conflict with logging's 'message' field
            "request_id": self.request_id,
            "operation": self.operation,
            "error_context": self.context,
            "timestamp": self.timestamp.isoformat()
        }

        if self.cause:
            log_data["cause"] = str(self.cause)
            logger.error(f"{self.__class__.__name__}: {self.message}", extra=log_data, exc_info=self.cause)
        else:
            logger.error(f"{self.__class__.__name__}: {self.message}", extra=log_data)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize exception for display or API responses"""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "user_message": self.user_message,
            "request_id": self.request_id,
            "timestamp": self.timestamp.isoformat()
        }


# ==========================================
# Validation Errors (caller input)
# ==========================================

class ValidationError(ProgressionError):
    """
    Raised when a mutation is called with invalid input

    Examples:
    - Negative XP or points amount
    - Negative activity distance

    Example:
        raise ValidationError(
            message="Amount must not be negative",
            field="amount",
            value=-5
        )
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        **kwargs
    ):
        self.field = field
        self.value = value
        kwargs.setdefault("user_message", f"Invalid {field}: {message}" if field else message)
        kwargs.setdefault("context", {"field": field, "value": value})
        super().__init__(message=message, **kwargs)


class UnknownPointsCategoryError(ValidationError):
    """Points were credited to a bucket that does not exist"""

    def __init__(self, category: str, **kwargs):
        super().__init__(
            message=f"Unknown points category: {category}",
            field="category",
            value=category,
            **kwargs
        )


class AchievementNotFoundError(ProgressionError):
    """Requested achievement is not in the catalog"""

    def __init__(self, achievement_id: str, **kwargs):
        self.achievement_id = achievement_id
        super().__init__(
            message=f"Achievement not found: {achievement_id}",
            user_message="Achievement not found.",
            context={"achievement_id": achievement_id},
            **kwargs
        )


# ==========================================
# Storage Errors
# ==========================================

class PersistenceError(ProgressionError):
    """Loading or saving the progression snapshot failed"""

    def __init__(
        self,
        message: str,
        location: Optional[str] = None,
        **kwargs
    ):
        self.location = location
        super().__init__(
            message=message,
            user_message="We couldn't save your progress. It will be saved on your next activity.",
            context={"location": location},
            **kwargs
        )


# ==========================================
# Configuration Errors
# ==========================================

class ConfigurationError(ProgressionError):
    """System configuration is invalid or missing"""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        **kwargs
    ):
        self.config_key = config_key
        super().__init__(
            message=message,
            user_message="The system is not properly configured. Please contact support.",
            context={"config_key": config_key},
            **kwargs
        )


# ==========================================
# Helper Functions
# ==========================================

def wrap_storage_exception(
    error: Exception,
    operation: str,
    location: Optional[str] = None,
    context: Optional[Dict[str, Any]] = None
) -> ProgressionError:
    """
    Wrap I/O and decoding exceptions into our exception hierarchy

    Example:
        try:
            path.write_text(blob)
        except OSError as e:
            raise wrap_storage_exception(e, operation="save_snapshot", location=str(path))
    """
    if isinstance(error, (OSError, ValueError)):
        return PersistenceError(
            message=f"{operation} failed: {str(error)}",
            location=location,
            operation=operation,
            cause=error
        )

    return ProgressionError(
        message=f"{operation} failed: {str(error)}",
        operation=operation,
        context=context,
        cause=error
    )
