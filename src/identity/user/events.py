"""Domain events for the User aggregate."""

from protean.fields import DateTime, Identifier, String

from identity.domain import identity


@identity.event(part_of="User")
class UserRegistered:
    """A shopper or administrator created an account."""

    __version__ = 1

    user_id: Identifier(required=True)
    name: String(required=True, sanitize=False)
    email: String(required=True, sanitize=False)
    role: String(required=True, sanitize=False)
    registered_at: DateTime(required=True)


@identity.event(part_of="User")
class ProfileUpdated:
    __version__ = 1

    user_id: Identifier(required=True)
    name: String(sanitize=False)
    address: String(sanitize=False)
    profile_image: String(sanitize=False)
