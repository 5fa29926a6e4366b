"""Product aggregate root with the ProductMedia entity."""

import json
from datetime import datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import (
    Boolean,
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
)

from catalogue.domain import catalogue
from catalogue.shared.pricing import effective_unit_price
from shared.exceptions import NotAuthorized

MAX_PHOTOS = 5
MAX_VIDEOS = 1


class MediaKind(Enum):
    PHOTO = "photo"
    VIDEO = "video"


def _as_json_list(value):
    if value is None or isinstance(value, str):
        return value
    return json.dumps(list(value))


def _as_json_object(value):
    if value is None or isinstance(value, str):
        return value
    return json.dumps(dict(value))


@catalogue.entity(part_of="Product")
class ProductMedia:
    """A stored photo or video shown on the product page."""

    url: String(required=True, max_length=500)
    kind: String(choices=MediaKind, default=MediaKind.PHOTO.value)
    display_order: Integer(default=0)


@catalogue.aggregate
class Product:
    """Product aggregate root.

    Categories are stored as a JSON list of ``main/sub`` tags and nutrients
    as a JSON object of name to value. Products are listed in the shop only
    after a moderator approves them.
    """

    company_id: Identifier(required=True)
    name: String(required=True, max_length=255)
    description: Text()
    original_price: Float(required=True, min_value=0.01)
    discount_price: Float(min_value=0.0)
    stock_quantity: Integer(min_value=0, default=0)
    media: HasMany(ProductMedia)
    categories: Text()
    nutrients: Text()
    is_approved: Boolean(default=False)
    created_at: DateTime(default=datetime.now)
    updated_at: DateTime(default=datetime.now)

    @invariant.post
    def media_cannot_exceed_limits(self):
        photos = [m for m in self.media if m.kind == MediaKind.PHOTO.value]
        videos = [m for m in self.media if m.kind == MediaKind.VIDEO.value]
        if len(photos) > MAX_PHOTOS:
            raise ValidationError({"media": [f"Cannot have more than {MAX_PHOTOS} photos"]})
        if len(videos) > MAX_VIDEOS:
            raise ValidationError({"media": [f"Cannot have more than {MAX_VIDEOS} video"]})

    @classmethod
    def create(
        cls,
        company_id,
        name,
        original_price,
        discount_price=None,
        stock_quantity=0,
        description=None,
        categories=None,
        nutrients=None,
    ):
        from catalogue.product.events import ProductCreated

        now = datetime.now()
        product = cls(
            company_id=company_id,
            name=name,
            description=description,
            original_price=original_price,
            discount_price=discount_price,
            stock_quantity=stock_quantity or 0,
            categories=_as_json_list(categories),
            nutrients=_as_json_object(nutrients),
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductCreated(
                product_id=product.id,
                company_id=company_id,
                name=name,
                original_price=product.original_price,
                discount_price=product.discount_price,
                stock_quantity=product.stock_quantity,
                created_at=now,
            )
        )
        return product

    @property
    def category_list(self) -> list[str]:
        return json.loads(self.categories) if self.categories else []

    @property
    def nutrient_map(self) -> dict:
        return json.loads(self.nutrients) if self.nutrients else {}

    def effective_price(self) -> float:
        return effective_unit_price(self.original_price, self.discount_price)

    def in_category(self, category: str) -> bool:
        """True when a tag equals ``category`` or sits under it (``main/sub``)."""
        return any(tag == category or tag.startswith(f"{category}/") for tag in self.category_list)

    def assert_owned_by(self, company_id):
        if str(self.company_id) != str(company_id):
            raise NotAuthorized(f"Product {self.id} belongs to another company")

    def update_details(self, name=None, description=None, categories=None, nutrients=None):
        from catalogue.product.events import ProductDetailsUpdated

        if name is not None:
            self.name = name
        if description is not None:
            self.description = description
        if categories is not None:
            self.categories = _as_json_list(categories)
        if nutrients is not None:
            self.nutrients = _as_json_object(nutrients)

        self.updated_at = datetime.now()

        self.raise_(
            ProductDetailsUpdated(
                product_id=self.id,
                name=self.name,
                description=self.description,
                categories=self.categories,
                nutrients=self.nutrients,
            )
        )

    def update_pricing(self, original_price=None, discount_price=None, clear_discount=False):
        from catalogue.product.events import ProductPriceChanged

        if original_price is not None and original_price <= 0:
            raise ValidationError({"original_price": ["Price must be a positive number"]})
        if discount_price is not None and discount_price < 0:
            raise ValidationError({"discount_price": ["Discount price cannot be negative"]})

        previous_original = self.original_price
        previous_discount = self.discount_price

        if original_price is not None:
            self.original_price = original_price
        if clear_discount:
            self.discount_price = None
        elif discount_price is not None:
            self.discount_price = discount_price

        self.updated_at = datetime.now()

        self.raise_(
            ProductPriceChanged(
                product_id=self.id,
                previous_original_price=previous_original,
                original_price=self.original_price,
                previous_discount_price=previous_discount,
                discount_price=self.discount_price,
            )
        )

    def update_stock(self, quantity):
        from catalogue.product.events import ProductStockUpdated

        if quantity is None or quantity < 0:
            raise ValidationError({"stock_quantity": ["Stock cannot be negative"]})

        previous = self.stock_quantity or 0
        self.stock_quantity = quantity
        self.updated_at = datetime.now()

        self.raise_(
            ProductStockUpdated(
                product_id=self.id,
                previous_quantity=previous,
                new_quantity=quantity,
            )
        )

    def attach_media(self, url, kind=MediaKind.PHOTO.value):
        from catalogue.product.events import ProductMediaAdded

        item = ProductMedia(url=url, kind=kind, display_order=len(self.media))
        self.add_media(item)
        self.updated_at = datetime.now()

        self.raise_(
            ProductMediaAdded(
                product_id=self.id,
                media_id=item.id,
                url=url,
                kind=item.kind,
            )
        )
        return item

    def detach_media(self, media_id):
        from catalogue.product.events import ProductMediaRemoved

        item = next((m for m in self.media if str(m.id) == str(media_id)), None)
        if item is None:
            raise ValidationError({"media": [f"Media {media_id} not found"]})

        self.remove_media(item)
        self.updated_at = datetime.now()

        self.raise_(
            ProductMediaRemoved(
                product_id=self.id,
                media_id=media_id,
                url=item.url,
            )
        )
        return item

    def approve(self):
        from catalogue.product.events import ProductApproved

        if self.is_approved:
            raise ValidationError({"is_approved": ["Product is already approved"]})

        now = datetime.now()
        self.is_approved = True
        self.updated_at = now

        self.raise_(ProductApproved(product_id=self.id, approved_at=now))

    def revoke_approval(self):
        from catalogue.product.events import ProductApprovalRevoked

        if not self.is_approved:
            raise ValidationError({"is_approved": ["Product is not approved"]})

        now = datetime.now()
        self.is_approved = False
        self.updated_at = now

        self.raise_(ProductApprovalRevoked(product_id=self.id, revoked_at=now))


@catalogue.repository(part_of=Product)
class ProductRepository:
    """Shop-facing queries over products."""

    def approved(self) -> list[Product]:
        return self._dao.query.filter(is_approved=True).limit(None).all().items

    def for_company(self, company_id) -> list[Product]:
        return self._dao.query.filter(company_id=str(company_id)).limit(None).all().items
