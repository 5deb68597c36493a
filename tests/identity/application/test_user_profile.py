"""Application tests for profile updates via domain.process()."""

import pytest
from identity.user.profile import UpdateProfile
from identity.user.registration import RegisterUser
from identity.user.user import User
from protean import current_domain
from protean.exceptions import ObjectNotFoundError


@pytest.fixture()
def user_id():
    command = RegisterUser(name="Jane", email="jane@example.com", password="password123")
    return current_domain.process(command, asynchronous=False)


class TestUpdateProfileFlow:
    def test_update_name_and_address(self, user_id):
        current_domain.process(
            UpdateProfile(user_id=user_id, name="Janet", address="1 Orchard Lane"),
            asynchronous=False,
        )
        user = current_domain.repository_for(User).get(user_id)
        assert user.name == "Janet"
        assert user.address == "1 Orchard Lane"

    def test_update_profile_image_only(self, user_id):
        current_domain.process(
            UpdateProfile(user_id=user_id, profile_image="/uploads/profiles/jane.png"),
            asynchronous=False,
        )
        user = current_domain.repository_for(User).get(user_id)
        assert user.profile_image == "/uploads/profiles/jane.png"
        assert user.name == "Jane"

    def test_unknown_user(self):
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(UpdateProfile(user_id="missing", name="Ghost"), asynchronous=False)
