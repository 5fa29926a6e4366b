"""Domain events for the UserProfile aggregate."""

from protean.fields import Boolean, DateTime, Identifier, String

from identity.domain import identity


@identity.event(part_of="UserProfile")
class ProfileCreated:
    __version__ = 1

    user_id: Identifier(required=True)
    name: String()
    email: String()
    created_at: DateTime(required=True)


@identity.event(part_of="UserProfile")
class ProfileDetailsUpdated:
    __version__ = 1

    user_id: Identifier(required=True)
    name: String()
    email: String()
    phone: String()


@identity.event(part_of="UserProfile")
class AddressSaved:
    """An address was added to the book or replaced in place."""

    __version__ = 1

    user_id: Identifier(required=True)
    address_id: Identifier(required=True)
    city: String()
    postal_code: String()
    is_default: Boolean(default=False)
    is_new: Boolean(default=False)


@identity.event(part_of="UserProfile")
class AddressRemoved:
    __version__ = 1

    user_id: Identifier(required=True)
    address_id: Identifier(required=True)
    was_default: Boolean(default=False)


@identity.event(part_of="UserProfile")
class DefaultAddressChanged:
    __version__ = 1

    user_id: Identifier(required=True)
    address_id: Identifier(required=True)
    previous_default_address_id: Identifier()
