"""
Structured outcome of a reconciliation.

Every remote decision the reconciler makes is recorded as an ItemOutcome so
callers can tell full success from partial failure without reading logs.
"""

from enum import StrEnum

from pydantic import BaseModel, Field


class ItemKind(StrEnum):
    SERVICE = "service"
    ALIAS = "alias"
    TAG = "tag"
    TOOL = "tool"
    REPOSITORY = "repository"


class ItemAction(StrEnum):
    CREATED = "created"
    UPDATED = "updated"
    SKIPPED = "skipped"
    FAILED = "failed"


class ReconcileStatus(StrEnum):
    RECONCILED = "reconciled"
    REJECTED = "rejected"
    FAILED = "failed"


class ItemOutcome(BaseModel):
    """What happened to a single service, alias, tag, tool or repository."""

    kind: ItemKind
    key: str = Field(..., description="Human-readable identity of the item")
    action: ItemAction
    message: str = ""


class ReconcileResult(BaseModel):
    """Result of reconciling one registration."""

    registration_name: str
    service_id: str | None = None
    status: ReconcileStatus = ReconcileStatus.RECONCILED
    message: str = ""
    outcomes: list[ItemOutcome] = Field(default_factory=list)

    def record(
        self, kind: ItemKind, key: str, action: ItemAction, message: str = ""
    ) -> ItemOutcome:
        outcome = ItemOutcome(kind=kind, key=key, action=action, message=message)
        self.outcomes.append(outcome)
        return outcome

    def for_kind(self, kind: ItemKind) -> list[ItemOutcome]:
        return [outcome for outcome in self.outcomes if outcome.kind == kind]

    def _with_action(self, action: ItemAction) -> list[ItemOutcome]:
        return [outcome for outcome in self.outcomes if outcome.action == action]

    @property
    def created(self) -> list[ItemOutcome]:
        return self._with_action(ItemAction.CREATED)

    @property
    def updated(self) -> list[ItemOutcome]:
        return self._with_action(ItemAction.UPDATED)

    @property
    def skipped(self) -> list[ItemOutcome]:
        return self._with_action(ItemAction.SKIPPED)

    @property
    def failed(self) -> list[ItemOutcome]:
        return self._with_action(ItemAction.FAILED)

    @property
    def ok(self) -> bool:
        """True when reconciled without any failed item."""
        return self.status == ReconcileStatus.RECONCILED and not self.failed

    def summary(self) -> dict[str, int]:
        counts = {action.value: 0 for action in ItemAction}
        for outcome in self.outcomes:
            counts[outcome.action.value] += 1
        return counts
