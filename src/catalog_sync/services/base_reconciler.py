"""
Base reconciler class providing the common reconciliation lifecycle.

This module defines the BaseReconciler class that wraps every
reconciliation with correlation ID tracking, timing, and mapping of
errors into a structured result instead of exceptions.
"""

import time
from abc import ABC, abstractmethod

from ..errors import SyncError, ValidationError
from ..models.registration import ServiceRegistration
from ..models.result import ReconcileResult, ReconcileStatus
from ..observability.logging import ReconcileLogger
from ..settings import Settings
from ..settings import settings as default_settings


class BaseReconciler(ABC):
    """
    Base class for registration reconcilers.

    Provides common patterns for:
    - Correlation ID and duration logging
    - Mapping validation failures to rejected results
    - Mapping every other failure to failed results
    """

    def __init__(self, settings: Settings | None = None):
        """
        Initialize base reconciler.

        Args:
            settings: Configuration, defaults to the environment-loaded settings
        """
        self.settings = settings or default_settings
        self.logger = ReconcileLogger(
            self.__class__.__name__,
            correlation_ids_enabled=self.settings.correlation_ids,
        )

    async def reconcile(
        self, registration: ServiceRegistration | None
    ) -> ReconcileResult | None:
        """
        Main reconciliation entry point.

        Never raises: every outcome, including failure, is reported through
        the returned result and the logs.

        Args:
            registration: Desired state of the service, None is a no-op

        Returns:
            Result of the reconciliation, or None when there was nothing to do
        """
        if registration is None:
            return None

        name = registration.name
        start_time = time.time()
        self.logger.log_reconciliation_start(service_name=name)

        try:
            result = await self.do_reconcile(registration)

        except ValidationError as e:
            duration = time.time() - start_time
            self.logger.log_reconciliation_rejected(
                service_name=name, error=e, duration=duration
            )
            return ReconcileResult(
                registration_name=name,
                status=ReconcileStatus.REJECTED,
                message=str(e),
            )

        except SyncError as e:
            duration = time.time() - start_time
            self.logger.log_reconciliation_error(
                service_name=name, error=e, duration=duration
            )
            return ReconcileResult(
                registration_name=name,
                status=ReconcileStatus.FAILED,
                message=str(e),
            )

        except Exception as e:
            duration = time.time() - start_time
            self.logger.log_reconciliation_error(
                service_name=name, error=e, duration=duration
            )
            return ReconcileResult(
                registration_name=name,
                status=ReconcileStatus.FAILED,
                message=f"Unexpected error during reconciliation: {e}",
            )

        duration = time.time() - start_time
        self.logger.log_reconciliation_success(
            service_name=name,
            service_id=result.service_id,
            duration=duration,
            summary=result.summary(),
        )
        return result

    @abstractmethod
    async def do_reconcile(
        self, registration: ServiceRegistration
    ) -> ReconcileResult:
        """
        Perform the actual reconciliation logic.

        Subclasses raise ValidationError to reject a registration and any
        other SyncError to abort it.

        Args:
            registration: Desired state of the service

        Returns:
            Result of the reconciliation
        """
        raise NotImplementedError("Subclasses must implement do_reconcile method")
