"""UserProfile aggregate root with the Address entity and GeoLocation value object."""

from datetime import datetime

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, HasMany, Identifier, String, ValueObject

from identity.domain import identity
from identity.shared.phone import normalize_phone

# Sentinel accepted by select_for_checkout: collect a fresh address inline
NEW_ADDRESS = "new"

ADDRESS_FIELDS = (
    "name",
    "house_number",
    "street",
    "area",
    "city",
    "state",
    "postal_code",
    "country",
    "primary_phone",
    "secondary_phone",
)


@identity.value_object(part_of="UserProfile")
class GeoLocation:
    """Latitude/longitude pair picked on the map. Both are required together."""

    latitude: Float(min_value=-90.0, max_value=90.0)
    longitude: Float(min_value=-180.0, max_value=180.0)

    @invariant.post
    def both_coordinates_required(self):
        if self.latitude is None or self.longitude is None:
            raise ValidationError({"geo": ["Both latitude and longitude are required"]})


def geo_from(latitude, longitude) -> GeoLocation | None:
    if latitude is None and longitude is None:
        return None
    return GeoLocation(latitude=latitude, longitude=longitude)


@identity.entity(part_of="UserProfile")
class Address:
    """A delivery address in the user's address book."""

    name: String(max_length=100)
    house_number: String(required=True, max_length=50)
    street: String(required=True, max_length=255)
    area: String(required=True, max_length=255)
    city: String(required=True, max_length=100)
    state: String(required=True, max_length=100)
    postal_code: String(required=True, max_length=20)
    country: String(required=True, max_length=100)
    primary_phone: String(required=True, max_length=20)
    secondary_phone: String(max_length=20)
    is_default: Boolean(default=False)
    geo: ValueObject(GeoLocation)

    def snapshot(self) -> dict:
        data = {field: getattr(self, field) for field in ADDRESS_FIELDS}
        data["address_id"] = str(self.id)
        data["latitude"] = self.geo.latitude if self.geo else None
        data["longitude"] = self.geo.longitude if self.geo else None
        return data


@identity.aggregate
class UserProfile:
    """A signed-in user's profile, keyed by the identity provider's user id.

    The address book lives inside the profile so that the "at most one
    default" rule is enforced in a single transaction.
    """

    user_id: Identifier(identifier=True)
    name: String(max_length=100)
    email: String(max_length=254)
    phone: String(max_length=20)
    addresses: HasMany(Address)
    created_at: DateTime(default=datetime.now)

    @invariant.post
    def at_most_one_default_address(self):
        defaults = [a for a in self.addresses if a.is_default]
        if len(defaults) > 1:
            raise ValidationError({"addresses": ["Only one address can be the default"]})

    @classmethod
    def create(cls, user_id, name=None, email=None, phone=None):
        from identity.profile.events import ProfileCreated

        now = datetime.now()
        profile = cls(
            user_id=user_id,
            name=name,
            email=email,
            phone=normalize_phone(phone),
            created_at=now,
        )
        profile.raise_(ProfileCreated(user_id=user_id, name=name, email=email, created_at=now))
        return profile

    def update_details(self, name=None, email=None, phone=None):
        from identity.profile.events import ProfileDetailsUpdated

        if name is not None:
            self.name = name
        if email is not None:
            self.email = email
        if phone is not None:
            self.phone = normalize_phone(phone)

        self.raise_(
            ProfileDetailsUpdated(
                user_id=self.user_id,
                name=self.name,
                email=self.email,
                phone=self.phone,
            )
        )

    def find_address(self, address_id) -> Address | None:
        return next((a for a in self.addresses if str(a.id) == str(address_id)), None)

    @property
    def default_address(self) -> Address | None:
        return next((a for a in self.addresses if a.is_default), None)

    def upsert_address(self, address_id=None, is_default=False, latitude=None, longitude=None, **fields):
        """Insert a new address, or replace the one with ``address_id`` wholesale.

        A default address clears every other default first.
        """
        from identity.profile.events import AddressSaved

        values = {field: fields.get(field) for field in ADDRESS_FIELDS}
        values["primary_phone"] = normalize_phone(values["primary_phone"], "primary_phone")
        values["secondary_phone"] = normalize_phone(values["secondary_phone"], "secondary_phone")
        geo = geo_from(latitude, longitude)

        existing = None
        if address_id is not None:
            existing = self.find_address(address_id)
            if existing is None:
                raise ValidationError({"address_id": [f"Address {address_id} not found"]})

        with atomic_change(self):
            if is_default:
                for addr in self.addresses:
                    if addr.is_default and addr is not existing:
                        addr.is_default = False

            if existing is None:
                address = Address(is_default=bool(is_default), geo=geo, **values)
                self.add_addresses(address)
            else:
                address = existing
                for field, value in values.items():
                    setattr(address, field, value)
                address.geo = geo
                address.is_default = bool(is_default)

        self.raise_(
            AddressSaved(
                user_id=self.user_id,
                address_id=address.id,
                city=address.city,
                postal_code=address.postal_code,
                is_default=address.is_default,
                is_new=existing is None,
            )
        )
        return address

    def remove_address(self, address_id):
        """Drop an address if present. No other address is promoted to default."""
        from identity.profile.events import AddressRemoved

        address = self.find_address(address_id)
        if address is None:
            return

        was_default = bool(address.is_default)
        self.remove_addresses(address)

        self.raise_(AddressRemoved(user_id=self.user_id, address_id=address_id, was_default=was_default))

    def select_for_checkout(self, address_id):
        """Return the address snapshot, or ``NEW_ADDRESS`` for inline entry."""
        if address_id == NEW_ADDRESS:
            return NEW_ADDRESS

        address = self.find_address(address_id)
        if address is None:
            raise ValidationError({"address_id": [f"Address {address_id} not found"]})
        return address.snapshot()

    def make_default(self, address_id):
        from identity.profile.events import DefaultAddressChanged

        address = self.find_address(address_id)
        if address is None:
            raise ValidationError({"address_id": [f"Address {address_id} not found"]})

        previous = self.default_address
        if previous is address:
            return address

        with atomic_change(self):
            for addr in self.addresses:
                if addr.is_default:
                    addr.is_default = False
            address.is_default = True

        self.raise_(
            DefaultAddressChanged(
                user_id=self.user_id,
                address_id=address.id,
                previous_default_address_id=previous.id if previous else None,
            )
        )
        return address

    def record_checkout_address(self, address: dict, phone=None, address_id=None):
        """Remember the address a paid order shipped to.

        A selected address becomes the default. A freshly entered one is
        saved as the new default. The contact phone replaces the profile's.
        """
        if address_id and address_id != NEW_ADDRESS and self.find_address(address_id) is not None:
            saved = self.make_default(address_id)
        else:
            fields = {k: v for k, v in address.items() if k in ADDRESS_FIELDS}
            saved = self.upsert_address(
                is_default=True,
                latitude=address.get("latitude"),
                longitude=address.get("longitude"),
                **fields,
            )

        if phone:
            self.phone = normalize_phone(phone)
        return saved


@identity.repository(part_of=UserProfile)
class UserProfileRepository:
    def find(self, user_id) -> UserProfile | None:
        results = self._dao.query.filter(user_id=str(user_id)).all().items
        return results[0] if results else None
