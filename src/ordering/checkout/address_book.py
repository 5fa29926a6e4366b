"""The identity context's address book, as seen from checkout."""

from abc import ABC, abstractmethod

from protean.exceptions import ObjectNotFoundError, ValidationError


class AddressBook(ABC):
    @abstractmethod
    def select(self, customer_id, address_id):
        """Snapshot dict of a saved address, or ``"new"`` for inline entry."""
        ...

    @abstractmethod
    def record(self, customer_id, address: dict, phone=None, address_id=None) -> str:
        """Save the address a paid order shipped to and make it the default."""
        ...


class IdentityAddressBook(AddressBook):
    def select(self, customer_id, address_id):
        from identity.domain import identity
        from identity.profile.profile import NEW_ADDRESS, UserProfile

        if address_id == NEW_ADDRESS:
            return NEW_ADDRESS

        with identity.domain_context():
            try:
                profile = identity.repository_for(UserProfile).get(customer_id)
            except ObjectNotFoundError:
                raise ValidationError({"address_id": [f"Address {address_id} not found"]}) from None
            return profile.select_for_checkout(address_id)

    def record(self, customer_id, address: dict, phone=None, address_id=None) -> str:
        from identity.domain import identity
        from identity.profile.addresses import RecordCheckoutAddress
        from identity.profile.profile import ADDRESS_FIELDS

        fields = {k: v for k, v in address.items() if k in ADDRESS_FIELDS}
        with identity.domain_context():
            return identity.process(
                RecordCheckoutAddress(
                    user_id=customer_id,
                    address_id=address_id,
                    latitude=address.get("latitude"),
                    longitude=address.get("longitude"),
                    phone=phone,
                    **fields,
                ),
                asynchronous=False,
            )
