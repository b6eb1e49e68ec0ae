"""
Error types and in-memory tracking of provider failures during CEP lookups
"""

import threading
from collections import deque
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, List, Dict, Any, Deque

import requests

from src.utils.logger import setup_logger

NOT_FOUND_MESSAGE = "Zip code not found."


class NotFoundError(LookupError):
    """Raised when no provider could resolve a CEP."""

    def __init__(self, message: str = NOT_FOUND_MESSAGE):
        super().__init__(message)
        self.message = message


class ErrorType(Enum):
    """Types of errors that can occur while querying a provider"""
    API_TIMEOUT = "api_timeout"
    API_ERROR = "api_error"
    CEP_NOT_FOUND = "cep_not_found"
    NETWORK_ERROR = "network_error"
    PARSE_ERROR = "parse_error"
    UNKNOWN_ERROR = "unknown_error"


def classify_exception(error: BaseException) -> ErrorType:
    """
    Map an exception raised during a provider query to an ErrorType.

    Args:
        error: Exception caught while querying a provider

    Returns:
        Matching ErrorType
    """
    if isinstance(error, requests.Timeout):
        return ErrorType.API_TIMEOUT
    if isinstance(error, requests.ConnectionError):
        return ErrorType.NETWORK_ERROR
    if isinstance(error, requests.RequestException):
        return ErrorType.API_ERROR
    # requests.JSONDecodeError is also a ValueError, so this check comes last
    if isinstance(error, ValueError):
        return ErrorType.PARSE_ERROR
    return ErrorType.UNKNOWN_ERROR


class ErrorHandler:
    """
    Handler for tracking provider failures.
    Failures are kept in memory only and are safe to record from worker threads.
    Only the most recent max_errors entries are kept.
    """

    def __init__(self, max_errors: int = 1000):
        self.logger = setup_logger(name="error_handler")
        self._errors: Deque[Dict[str, Any]] = deque(maxlen=max_errors)
        self._lock = threading.Lock()

    def record_error(
        self,
        cep: str,
        provider: str,
        error_type: ErrorType,
        error_message: str,
        context: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Record a provider failure.

        Args:
            cep: Normalized CEP that was being queried
            provider: Name of the provider that failed
            error_type: Type of error (ErrorType enum)
            error_message: Error message description
            context: Optional context dictionary with additional information

        Returns:
            The recorded error entry
        """
        entry = {
            'cep': cep,
            'provider': provider,
            'error_type': error_type.value,
            'error_message': error_message,
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'context': context or {}
        }

        with self._lock:
            self._errors.append(entry)

        self.logger.debug(f"{provider} failed for CEP {cep}: [{error_type.value}] {error_message}")
        return entry

    def record_exception(self, cep: str, provider: str, error: BaseException) -> Dict[str, Any]:
        """Record an exception raised while querying a provider."""
        context = {'exception': type(error).__name__}
        response = getattr(error, 'response', None)
        status_code = getattr(response, 'status_code', None)
        if status_code:
            context['status_code'] = status_code
        return self.record_error(cep, provider, classify_exception(error), str(error), context)

    def record_api_error(
        self,
        cep: str,
        provider: str,
        error_message: str,
        status_code: Optional[int] = None
    ) -> Dict[str, Any]:
        """
        Record an error reported by the provider API itself.

        Args:
            cep: Normalized CEP that was being queried
            provider: Name of the provider
            error_message: Error message
            status_code: HTTP status code (if applicable)

        Returns:
            The recorded error entry
        """
        context = {'status_code': status_code} if status_code else None

        error_type = ErrorType.API_ERROR
        if "timeout" in error_message.lower():
            error_type = ErrorType.API_TIMEOUT
        elif "not found" in error_message.lower() or status_code == 404:
            error_type = ErrorType.CEP_NOT_FOUND

        return self.record_error(cep, provider, error_type, error_message, context)

    def get_errors(
        self,
        cep: Optional[str] = None,
        provider: Optional[str] = None,
        error_type: Optional[ErrorType] = None
    ) -> List[Dict[str, Any]]:
        """
        Get recorded errors, optionally filtered.

        Args:
            cep: Filter by CEP (None = all CEPs)
            provider: Filter by provider name (None = all providers)
            error_type: Filter by error type (None = all types)

        Returns:
            List of error dictionaries
        """
        with self._lock:
            errors = list(self._errors)

        return [
            error for error in errors
            if (not cep or error['cep'] == cep)
            and (not provider or error['provider'] == provider)
            and (not error_type or error['error_type'] == error_type.value)
        ]

    def get_error_count(
        self,
        cep: Optional[str] = None,
        provider: Optional[str] = None,
        error_type: Optional[ErrorType] = None
    ) -> int:
        """Get count of errors matching the filters."""
        return len(self.get_errors(cep=cep, provider=provider, error_type=error_type))

    def get_error_summary(self) -> Dict[str, Any]:
        """
        Get summary of all errors.

        Returns:
            Dictionary with error statistics
        """
        errors = self.get_errors()

        summary = {
            'total_errors': len(errors),
            'by_type': {},
            'by_provider': {},
            'unique_ceps_with_errors': len({error['cep'] for error in errors})
        }

        for error in errors:
            error_type = error['error_type']
            summary['by_type'][error_type] = summary['by_type'].get(error_type, 0) + 1

            provider = error['provider']
            summary['by_provider'][provider] = summary['by_provider'].get(provider, 0) + 1

        return summary

    def clear_errors(self):
        """Forget every recorded error."""
        with self._lock:
            self._errors.clear()
