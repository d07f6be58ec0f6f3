"""
Catalog sync error hierarchy with categorization.

This module defines the error types used throughout catalog-sync,
providing clear categorization of validation, catalog API, and
reconciliation failures.
"""


class SyncError(Exception):
    """
    Base error class for all catalog sync exceptions.

    Provides categorization, retry hints, and user guidance for resolution.
    """

    def __init__(
        self,
        message: str,
        category: str,
        retryable: bool = True,
        user_action: str | None = None,
        cause: Exception | None = None,
    ):
        """
        Initialize sync error.

        Args:
            message: Human-readable error description
            category: Error category (validation, external, reconciliation)
            retryable: Whether a later attempt may succeed without changes
            user_action: What user should do to resolve the issue
            cause: Underlying exception that caused this error
        """
        super().__init__(message)
        self.category = category
        self.retryable = retryable
        self.user_action = user_action
        self.cause = cause

    def __str__(self) -> str:
        """Enhanced string representation with user guidance."""
        base_msg = super().__str__()
        if self.user_action:
            return f"{base_msg}\nAction required: {self.user_action}"
        return base_msg


class ValidationError(SyncError):
    """Registration cannot be reconciled as given."""

    def __init__(
        self, message: str, field: str | None = None, user_action: str | None = None
    ):
        action = user_action or "Check the collected service metadata"
        if field:
            message = f"Validation error in field '{field}': {message}"
        super().__init__(
            message=message, category="validation", retryable=False, user_action=action
        )
        self.field = field


class ExternalServiceError(SyncError):
    """Error communicating with external services."""

    def __init__(
        self,
        service: str,
        message: str,
        retryable: bool = True,
        user_action: str | None = None,
    ):
        action = user_action or f"Check {service} connectivity and credentials"
        super().__init__(
            message=f"{service} error: {message}",
            category="external",
            retryable=retryable,
            user_action=action,
        )


class CatalogAPIError(ExternalServiceError):
    """Error returned by the service catalog API."""

    def __init__(
        self, message: str, status_code: int | None = None, retryable: bool = True
    ):
        if status_code:
            message = f"HTTP {status_code}: {message}"

        # 4xx errors are client errors, resending the same request won't help
        if status_code and 400 <= status_code < 500:
            retryable = False

        super().__init__(
            service="Catalog API",
            message=message,
            retryable=retryable,
            user_action="Check catalog availability and API token",
        )
        self.status_code = status_code


class CatalogNotFoundError(CatalogAPIError):
    """Lookup against the catalog resolved nothing."""

    def __init__(self, resource: str, identifier: str):
        super().__init__(
            f"{resource} '{identifier}' not found", status_code=404, retryable=False
        )
        self.resource = resource
        self.identifier = identifier


class ReconciliationError(SyncError):
    """Error raised when reconciliation cannot be completed."""

    def __init__(
        self,
        message: str,
        retryable: bool = True,
        user_action: str | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(
            message=message,
            category="reconciliation",
            retryable=retryable,
            user_action=user_action
            or "Inspect logs and the service registration for issues",
            cause=cause,
        )
