"""Application tests for profile and address book commands."""

import pytest
from identity.profile.addresses import RecordCheckoutAddress, RemoveAddress, UpsertAddress
from identity.profile.profile import UserProfile
from identity.profile.registration import CreateProfile, UpdateProfileDetails
from protean import current_domain

from shared.exceptions import AlreadyExists


def _profile(user_id="user-001"):
    return current_domain.repository_for(UserProfile).get(user_id)


@pytest.fixture()
def profile():
    current_domain.process(CreateProfile(user_id="user-001", name="Asha Rao"), asynchronous=False)
    return _profile()


class TestProfile:
    def test_create(self, profile):
        assert profile.name == "Asha Rao"

    def test_create_twice(self, profile):
        with pytest.raises(AlreadyExists):
            current_domain.process(CreateProfile(user_id="user-001"), asynchronous=False)

    def test_update_details(self, profile):
        current_domain.process(
            UpdateProfileDetails(user_id="user-001", email="asha@example.org", phone=" 9845012345 "),
            asynchronous=False,
        )
        updated = _profile()
        assert updated.email == "asha@example.org"
        assert updated.phone == "9845012345"
        assert updated.name == "Asha Rao"


class TestAddressCommands:
    def test_upsert_returns_the_id(self, profile, home):
        address_id = current_domain.process(UpsertAddress(user_id="user-001", **home), asynchronous=False)
        assert _profile().find_address(address_id).city == "Bengaluru"

    def test_single_default_survives_persistence(self, profile, home, office):
        current_domain.process(UpsertAddress(user_id="user-001", is_default=True, **home), asynchronous=False)
        office_id = current_domain.process(
            UpsertAddress(user_id="user-001", is_default=True, **office), asynchronous=False
        )

        defaults = [a for a in _profile().addresses if a.is_default]
        assert [str(a.id) for a in defaults] == [office_id]

    def test_remove(self, profile, home):
        address_id = current_domain.process(UpsertAddress(user_id="user-001", **home), asynchronous=False)
        current_domain.process(RemoveAddress(user_id="user-001", address_id=address_id), asynchronous=False)
        assert len(_profile().addresses) == 0


class TestRecordCheckoutAddress:
    def test_creates_a_profile_when_missing(self, office):
        address_id = current_domain.process(
            RecordCheckoutAddress(user_id="user-new", address_id="new", phone="9845012345", **office),
            asynchronous=False,
        )

        profile = _profile("user-new")
        assert str(profile.default_address.id) == address_id
        assert profile.phone == "9845012345"

    def test_selected_address_becomes_default(self, profile, home, office):
        current_domain.process(UpsertAddress(user_id="user-001", is_default=True, **home), asynchronous=False)
        office_id = current_domain.process(UpsertAddress(user_id="user-001", **office), asynchronous=False)

        current_domain.process(
            RecordCheckoutAddress(user_id="user-001", address_id=office_id, **office), asynchronous=False
        )

        profile = _profile()
        assert str(profile.default_address.id) == office_id
        assert len(profile.addresses) == 2
