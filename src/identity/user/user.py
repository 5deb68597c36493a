"""User aggregate root.

A user signs in with email and password. The password is only ever stored as a
bcrypt hash; the plain text never leaves the registration command.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, String, Text

from identity.domain import identity
from identity.user.events import ProfileUpdated, UserRegistered


class UserRole(Enum):
    USER = "user"
    ADMIN = "admin"


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


@identity.aggregate
class User:
    name: String(required=True, max_length=100, sanitize=False)
    email: String(required=True, max_length=254, sanitize=False)
    password_hash: String(required=True, max_length=255, sanitize=False)
    role: String(choices=UserRole, default=UserRole.USER.value, sanitize=False)
    address: Text(sanitize=False)
    profile_image: String(max_length=500, sanitize=False)
    created_at: DateTime()

    @invariant.post
    def email_must_look_like_an_address(self):
        email = self.email or ""
        if email.count("@") != 1 or " " in email:
            raise ValidationError({"email": [f"Invalid email address: {email!r}"]})
        local_part, domain_part = email.split("@", 1)
        if not local_part or "." not in domain_part or domain_part.startswith(".") or domain_part.endswith("."):
            raise ValidationError({"email": [f"Invalid email address: {email!r}"]})

    @classmethod
    def register(cls, name, email, password_hash, role=UserRole.USER.value):
        user = cls(
            name=name.strip(),
            email=normalize_email(email),
            password_hash=password_hash,
            role=role,
            created_at=datetime.now(UTC),
        )
        user.raise_(
            UserRegistered(
                user_id=str(user.id),
                name=user.name,
                email=user.email,
                role=user.role,
                registered_at=user.created_at,
            )
        )
        return user

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value

    def update_profile(self, name=None, address=None, profile_image=None):
        """Partial update: ``None`` leaves a field untouched, an empty address clears it."""
        if name is not None:
            if not name.strip():
                raise ValidationError({"name": ["Name cannot be blank"]})
            self.name = name.strip()
        if address is not None:
            self.address = address
        if profile_image is not None:
            self.profile_image = profile_image

        self.raise_(
            ProfileUpdated(
                user_id=str(self.id),
                name=self.name,
                address=self.address,
                profile_image=self.profile_image,
            )
        )
