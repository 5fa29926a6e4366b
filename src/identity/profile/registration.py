"""Profile creation and details — commands and handler."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from identity.domain import identity
from identity.profile.profile import UserProfile
from shared.exceptions import AlreadyExists


@identity.command(part_of="UserProfile")
class CreateProfile:
    """Create the profile for a user who just signed in for the first time."""

    user_id: Identifier(required=True)
    name: String(max_length=100)
    email: String(max_length=254)
    phone: String(max_length=20)


@identity.command(part_of="UserProfile")
class UpdateProfileDetails:
    user_id: Identifier(required=True)
    name: String(max_length=100)
    email: String(max_length=254)
    phone: String(max_length=20)


@identity.command_handler(part_of=UserProfile)
class ProfileHandler:
    @handle(CreateProfile)
    def create_profile(self, command):
        repo = current_domain.repository_for(UserProfile)
        if repo.find(command.user_id) is not None:
            raise AlreadyExists({"user_id": ["Profile already exists"]})

        profile = UserProfile.create(
            user_id=command.user_id,
            name=command.name,
            email=command.email,
            phone=command.phone,
        )
        repo.add(profile)
        return str(profile.user_id)

    @handle(UpdateProfileDetails)
    def update_details(self, command):
        repo = current_domain.repository_for(UserProfile)
        profile = repo.get(command.user_id)
        profile.update_details(name=command.name, email=command.email, phone=command.phone)
        repo.add(profile)
