"""User registration: command and handler."""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import String
from protean.utils.globals import current_domain

from identity.domain import identity
from identity.user.passwords import MAX_PASSWORD_BYTES, MIN_PASSWORD_LENGTH, hash_password
from identity.user.user import User, UserRole, normalize_email

logger = structlog.get_logger(__name__)


@identity.command(part_of="User")
class RegisterUser:
    name: String(required=True, max_length=100, sanitize=False)
    email: String(required=True, max_length=254, sanitize=False)
    password: String(required=True, max_length=255, sanitize=False)
    role: String(choices=UserRole, default=UserRole.USER.value, sanitize=False)


def find_user_by_email(email):
    repo = current_domain.repository_for(User)
    matches = repo._dao.query.filter(email=normalize_email(email)).all().items
    return matches[0] if matches else None


@identity.command_handler(part_of=User)
class RegisterUserHandler:
    @handle(RegisterUser)
    def register_user(self, command):
        password = command.password or ""
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError({"password": [f"Password must be at least {MIN_PASSWORD_LENGTH} characters"]})
        if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValidationError({"password": [f"Password must be at most {MAX_PASSWORD_BYTES} bytes"]})

        if find_user_by_email(command.email) is not None:
            raise ValidationError({"email": ["Email already exists"]})

        user = User.register(
            name=command.name,
            email=command.email,
            password_hash=hash_password(password),
            role=command.role or UserRole.USER.value,
        )
        current_domain.repository_for(User).add(user)

        logger.info("User registered", user_id=str(user.id), role=user.role)
        return str(user.id)
