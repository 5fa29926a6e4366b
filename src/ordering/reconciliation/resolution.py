"""Operator actions on reconciliation cases — commands and handler."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import logger, ordering
from ordering.reconciliation.case import ReconciliationCase


@ordering.command(part_of="ReconciliationCase")
class ResolveReconciliation:
    """Close a case by hand, e.g. after a refund."""

    case_id = Identifier(required=True)
    note = String(required=True, max_length=1000)


@ordering.command_handler(part_of=ReconciliationCase)
class ReconciliationHandler:
    @handle(ResolveReconciliation)
    def resolve(self, command):
        repo = current_domain.repository_for(ReconciliationCase)
        case = repo.get(command.case_id)
        case.resolve(command.note)
        repo.add(case)
        logger.info("reconciliation_resolved", case_id=str(case.id), kind=case.kind)
