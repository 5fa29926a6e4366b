"""Reconciliation queue — paid checkouts that need a human or a retry.

A case is opened whenever money was taken but a later write did not land:
the order itself (``order_persistence``) or the address book update that
follows it (``address_sync``). Cases are durable and stay open until an
operator resolves them or a retry succeeds.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from ordering.domain import ordering
from shared.exceptions import InvalidTransition


class CaseKind(Enum):
    ORDER_PERSISTENCE = "order_persistence"
    ADDRESS_SYNC = "address_sync"


class CaseStatus(Enum):
    OPEN = "open"
    RESOLVED = "resolved"


@ordering.event(part_of="ReconciliationCase")
class ReconciliationCaseOpened:
    __version__ = 1

    case_id = Identifier(required=True)
    kind = String(required=True)
    checkout_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    payment_id = String()
    amount = Float()
    reason = String()


@ordering.event(part_of="ReconciliationCase")
class ReconciliationCaseResolved:
    __version__ = 1

    case_id = Identifier(required=True)
    kind = String(required=True)
    checkout_id = Identifier(required=True)
    note = String()
    resolved_at = DateTime(required=True)


@ordering.aggregate
class ReconciliationCase:
    kind = String(choices=CaseKind, required=True)
    checkout_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    gateway_order_id = String(max_length=255)
    payment_id = String(max_length=255)
    amount = Float()
    currency = String(max_length=3)
    snapshot = Text()  # JSON: lines, shipping and contact at payment time
    reason = String(max_length=1000)
    status = String(choices=CaseStatus, default=CaseStatus.OPEN.value)
    attempts = Integer(default=0)
    resolution_note = String(max_length=1000)
    opened_at = DateTime()
    resolved_at = DateTime()

    @classmethod
    def open(cls, kind, checkout, reason, snapshot=None):
        now = datetime.now(UTC)
        case = cls(
            kind=kind,
            checkout_id=str(checkout.id),
            customer_id=str(checkout.customer_id),
            gateway_order_id=checkout.gateway_order_id,
            payment_id=checkout.payment_id,
            amount=checkout.total_amount,
            currency=checkout.currency,
            snapshot=json.dumps(snapshot) if snapshot is not None else None,
            reason=reason,
            status=CaseStatus.OPEN.value,
            attempts=checkout.persist_attempts or 0,
            opened_at=now,
        )
        case.raise_(
            ReconciliationCaseOpened(
                case_id=str(case.id),
                kind=kind,
                checkout_id=case.checkout_id,
                customer_id=case.customer_id,
                payment_id=case.payment_id,
                amount=case.amount,
                reason=reason,
            )
        )
        return case

    @property
    def is_open(self) -> bool:
        return self.status == CaseStatus.OPEN.value

    def snapshot_data(self) -> dict:
        return json.loads(self.snapshot) if self.snapshot else {}

    def record_attempt(self, reason=None):
        self.attempts = (self.attempts or 0) + 1
        if reason:
            self.reason = reason

    def resolve(self, note):
        if not self.is_open:
            raise InvalidTransition({"status": ["Case is already resolved"]})

        now = datetime.now(UTC)
        self.status = CaseStatus.RESOLVED.value
        self.resolution_note = note
        self.resolved_at = now

        self.raise_(
            ReconciliationCaseResolved(
                case_id=str(self.id),
                kind=self.kind,
                checkout_id=self.checkout_id,
                note=note,
                resolved_at=now,
            )
        )


@ordering.repository(part_of=ReconciliationCase)
class ReconciliationCaseRepository:
    def open_cases(self) -> list[ReconciliationCase]:
        return self._dao.query.filter(status=CaseStatus.OPEN.value).order_by("opened_at").limit(None).all().items

    def for_checkout(self, checkout_id) -> list[ReconciliationCase]:
        return self._dao.query.filter(checkout_id=str(checkout_id)).limit(None).all().items
