"""Tests for the UserProfile address book."""

import pytest
from identity.profile.events import AddressRemoved, AddressSaved, DefaultAddressChanged
from identity.profile.profile import NEW_ADDRESS, UserProfile
from protean.exceptions import ValidationError


@pytest.fixture()
def profile():
    return UserProfile.create(user_id="user-001", name="Asha Rao")


def _defaults(profile):
    return [a for a in profile.addresses if a.is_default]


class TestUpsertAddress:
    def test_new_address_is_not_default_on_its_own(self, profile, home):
        address = profile.upsert_address(**home)
        assert address.is_default is False
        assert profile.default_address is None

    def test_phone_is_trimmed(self, profile, home):
        address = profile.upsert_address(**home)
        assert address.primary_phone == "+91 98450 12345"

    def test_bad_phone_rejected(self, profile, home):
        home["primary_phone"] = "call me"
        with pytest.raises(ValidationError) as exc:
            profile.upsert_address(**home)
        assert "primary_phone" in exc.value.messages

    def test_missing_required_field(self, profile, home):
        del home["city"]
        with pytest.raises(ValidationError):
            profile.upsert_address(**home)

    def test_new_default_clears_the_previous_one(self, profile, home, office):
        first = profile.upsert_address(is_default=True, **home)
        second = profile.upsert_address(is_default=True, **office)

        assert _defaults(profile) == [second]
        assert first.is_default is False

    def test_replace_in_place(self, profile, home, office):
        address = profile.upsert_address(**home)
        replaced = profile.upsert_address(address_id=address.id, **office)

        assert replaced.id == address.id
        assert len(profile.addresses) == 1
        assert replaced.street == "Outer Ring Road"

        event = profile._events[-1]
        assert isinstance(event, AddressSaved)
        assert event.is_new is False

    def test_replace_is_wholesale(self, profile, home):
        address = profile.upsert_address(secondary_phone="9999999999", **home)
        profile.upsert_address(address_id=address.id, **home)
        assert address.secondary_phone is None

    def test_replace_unknown(self, profile, home):
        with pytest.raises(ValidationError):
            profile.upsert_address(address_id="missing", **home)

    def test_geo_location(self, profile, home):
        address = profile.upsert_address(latitude=12.99, longitude=77.57, **home)
        assert address.snapshot()["latitude"] == 12.99

    def test_geo_needs_both_coordinates(self, profile, home):
        with pytest.raises(ValidationError):
            profile.upsert_address(latitude=12.99, **home)


class TestRemoveAddress:
    def test_removing_the_default_promotes_nothing(self, profile, home, office):
        default = profile.upsert_address(is_default=True, **home)
        profile.upsert_address(**office)

        profile.remove_address(default.id)

        assert len(profile.addresses) == 1
        assert profile.default_address is None
        event = profile._events[-1]
        assert isinstance(event, AddressRemoved)
        assert event.was_default is True

    def test_removing_the_only_address_leaves_no_default(self, profile, home):
        only = profile.upsert_address(is_default=True, **home)

        profile.remove_address(only.id)

        assert len(profile.addresses) == 0
        assert profile.default_address is None
        assert profile._events[-1].was_default is True

    def test_unknown_is_ignored(self, profile):
        profile.remove_address("missing")
        assert not any(isinstance(e, AddressRemoved) for e in profile._events)


class TestSelectForCheckout:
    def test_new_sentinel(self, profile):
        assert profile.select_for_checkout(NEW_ADDRESS) == NEW_ADDRESS

    def test_returns_a_snapshot(self, profile, home):
        address = profile.upsert_address(**home)
        snapshot = profile.select_for_checkout(address.id)

        assert snapshot["address_id"] == str(address.id)
        assert snapshot["city"] == "Bengaluru"

        snapshot["city"] = "Mysuru"
        assert address.city == "Bengaluru"

    def test_unknown(self, profile):
        with pytest.raises(ValidationError):
            profile.select_for_checkout("missing")


class TestRecordCheckoutAddress:
    def test_selected_address_becomes_default(self, profile, home, office):
        profile.upsert_address(is_default=True, **home)
        chosen = profile.upsert_address(**office)

        saved = profile.record_checkout_address(chosen.snapshot(), address_id=chosen.id)

        assert saved is chosen
        assert _defaults(profile) == [chosen]
        assert isinstance(profile._events[-1], DefaultAddressChanged)

    def test_new_address_is_saved_as_default(self, profile, home, office):
        profile.upsert_address(is_default=True, **home)

        saved = profile.record_checkout_address(office, phone="+91 90000 11111", address_id=NEW_ADDRESS)

        assert len(profile.addresses) == 2
        assert _defaults(profile) == [saved]
        assert profile.phone == "+91 90000 11111"

    def test_stale_address_id_is_saved_fresh(self, profile, office):
        saved = profile.record_checkout_address(office, address_id="deleted-meanwhile")
        assert saved.is_default is True
        assert len(profile.addresses) == 1
