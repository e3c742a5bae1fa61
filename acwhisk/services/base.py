"""
Base Service - Common service functionality and patterns.

This provides:
1. Common service initialization patterns
2. Error handling utilities
3. Logging helpers
"""

import logging
from typing import NoReturn

from acwhisk.core.exceptions import AppException, ServiceError
from acwhisk.core.store import KeyValueStore

logger = logging.getLogger(__name__)


class BaseService:
    """
    Base service class providing common functionality.

    Services receive the key-value store explicitly, so tests can hand in an
    in-memory store without touching any global state.
    """

    def __init__(self, store: KeyValueStore):
        """
        Initialize service with the key-value store.

        Args:
            store: Key-value store adapter
        """
        self.store = store
        self.logger = logger

    def _handle_service_error(self, error: Exception, operation: str) -> NoReturn:
        """
        Centralized error handling for services.

        Application errors propagate unchanged; anything else is wrapped in
        ServiceError so the API layer reports a generic internal error.

        Args:
            error: The exception that occurred
            operation: Description of the operation that failed
        """
        if isinstance(error, AppException) and not isinstance(error, ServiceError):
            self.logger.warning(f"Rejected {operation}: {error.message}")
            raise error

        self.logger.error(f"Service error in {operation}: {str(error)}")
        if isinstance(error, ServiceError):
            raise error
        raise ServiceError(f"Failed to {operation}: {str(error)}") from error

    def _log_operation(self, operation: str, **kwargs) -> None:
        """
        Log service operations for debugging and monitoring.

        Args:
            operation: Description of the operation
            **kwargs: Additional context to log
        """
        context = " ".join([f"{k}={v}" for k, v in kwargs.items()])
        self.logger.info(f"Service operation: {operation} {context}")
