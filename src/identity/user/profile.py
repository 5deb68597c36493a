"""Profile management: command and handler."""

from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from identity.domain import identity
from identity.user.user import User


@identity.command(part_of="User")
class UpdateProfile:
    user_id: Identifier(required=True)
    name: String(max_length=100, sanitize=False)
    address: Text(sanitize=False)
    profile_image: String(max_length=500, sanitize=False)


@identity.command_handler(part_of=User)
class UpdateProfileHandler:
    @handle(UpdateProfile)
    def update_profile(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.update_profile(
            name=command.name,
            address=command.address,
            profile_image=command.profile_image,
        )
        repo.add(user)
