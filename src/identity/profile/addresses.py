"""Address book — commands and handler."""

from protean import handle
from protean.fields import Boolean, Float, Identifier, String
from protean.utils.globals import current_domain

from identity.domain import identity
from identity.profile.profile import ADDRESS_FIELDS, UserProfile


@identity.command(part_of="UserProfile")
class UpsertAddress:
    """Add an address, or replace the one with ``address_id``."""

    user_id: Identifier(required=True)
    address_id: Identifier()
    name: String(max_length=100)
    house_number: String(max_length=50)
    street: String(max_length=255)
    area: String(max_length=255)
    city: String(max_length=100)
    state: String(max_length=100)
    postal_code: String(max_length=20)
    country: String(max_length=100)
    primary_phone: String(max_length=20)
    secondary_phone: String(max_length=20)
    is_default: Boolean(default=False)
    latitude: Float()
    longitude: Float()


@identity.command(part_of="UserProfile")
class RemoveAddress:
    user_id: Identifier(required=True)
    address_id: Identifier(required=True)


@identity.command(part_of="UserProfile")
class RecordCheckoutAddress:
    """Sent by checkout once an order is paid for and saved."""

    user_id: Identifier(required=True)
    address_id: Identifier()
    name: String(max_length=100)
    house_number: String(max_length=50)
    street: String(max_length=255)
    area: String(max_length=255)
    city: String(max_length=100)
    state: String(max_length=100)
    postal_code: String(max_length=20)
    country: String(max_length=100)
    primary_phone: String(max_length=20)
    secondary_phone: String(max_length=20)
    latitude: Float()
    longitude: Float()
    phone: String(max_length=20)


def _address_values(command) -> dict:
    return {field: getattr(command, field) for field in ADDRESS_FIELDS}


@identity.command_handler(part_of=UserProfile)
class AddressBookHandler:
    @handle(UpsertAddress)
    def upsert_address(self, command):
        repo = current_domain.repository_for(UserProfile)
        profile = repo.get(command.user_id)
        address = profile.upsert_address(
            address_id=command.address_id,
            is_default=command.is_default,
            latitude=command.latitude,
            longitude=command.longitude,
            **_address_values(command),
        )
        repo.add(profile)
        return str(address.id)

    @handle(RemoveAddress)
    def remove_address(self, command):
        repo = current_domain.repository_for(UserProfile)
        profile = repo.get(command.user_id)
        profile.remove_address(command.address_id)
        repo.add(profile)

    @handle(RecordCheckoutAddress)
    def record_checkout_address(self, command):
        repo = current_domain.repository_for(UserProfile)
        profile = repo.find(command.user_id) or UserProfile.create(user_id=command.user_id)

        address = _address_values(command)
        address["latitude"] = command.latitude
        address["longitude"] = command.longitude

        saved = profile.record_checkout_address(address, phone=command.phone, address_id=command.address_id)
        repo.add(profile)
        return str(saved.id)
