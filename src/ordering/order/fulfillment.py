"""Vendor status updates — commands and handler.

A vendor may move an order only when at least one of its items was sold by
the vendor's company.
"""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import logger, ordering
from ordering.order.order import Order
from shared.exceptions import NotAuthorized


@ordering.command(part_of="Order")
class AdvanceOrderStatus:
    order_id = Identifier(required=True)
    company_id = Identifier(required=True)
    status = String(required=True, max_length=20)


@ordering.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)
    company_id = Identifier(required=True)
    reason = String(max_length=500)


@ordering.command_handler(part_of=Order)
class OrderFulfillmentHandler:
    def _vendor_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        if not order.contains_company(command.company_id):
            raise NotAuthorized(f"Order {command.order_id} has no items from this company")
        return repo, order

    @handle(AdvanceOrderStatus)
    def advance_status(self, command):
        repo, order = self._vendor_order(command)
        order.advance(command.status)
        repo.add(order)
        logger.info("order_status_advanced", order_id=str(order.id), status=order.status)

    @handle(CancelOrder)
    def cancel_order(self, command):
        repo, order = self._vendor_order(command)
        order.cancel(command.reason)
        repo.add(order)
        logger.info("order_cancelled", order_id=str(order.id), stage=order.cancelled_at_stage)
