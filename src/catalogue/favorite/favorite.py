"""Favorite — a product a customer saved for later."""

from datetime import datetime

from protean.fields import DateTime, Identifier

from catalogue.domain import catalogue


@catalogue.event(part_of="Favorite")
class FavoriteAdded:
    __version__ = 1

    favorite_id: Identifier(required=True)
    customer_id: Identifier(required=True)
    product_id: Identifier(required=True)


@catalogue.aggregate
class Favorite:
    customer_id: Identifier(required=True)
    product_id: Identifier(required=True)
    created_at: DateTime(default=datetime.now)


@catalogue.repository(part_of=Favorite)
class FavoriteRepository:
    def for_customer(self, customer_id) -> list[Favorite]:
        return self._dao.query.filter(customer_id=str(customer_id)).order_by("-created_at").limit(None).all().items

    def find(self, customer_id, product_id) -> Favorite | None:
        results = (
            self._dao.query.filter(customer_id=str(customer_id), product_id=str(product_id)).all().items
        )
        return results[0] if results else None
