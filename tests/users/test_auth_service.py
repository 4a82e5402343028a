from __future__ import annotations

import pytest
from werkzeug.security import generate_password_hash

from src.hostel_pass.hostel_pass.core.enums import Role
from src.hostel_pass.hostel_pass.core.exceptions import AuthenticationError, ValidationError
from src.hostel_pass.hostel_pass.users.model import User
from src.hostel_pass.hostel_pass.users.service import AuthService


class FakeUsersRepo:
    def __init__(self, *users: User):
        self._by_email = {u.email: u for u in users}

    def get_by_email(self, email):
        return self._by_email.get(email)


@pytest.fixture
def service():
    return AuthService(
        FakeUsersRepo(
            User(1, "Warden", "warden@x.com", generate_password_hash("secret"), Role.WARDEN),
            User(2, "Gone", "gone@x.com", generate_password_hash("secret"), Role.STUDENT, is_active=False),
            User(3, "Legacy", "legacy@x.com", "CHANGE_ME", Role.SECURITY),
        )
    )


def test_authenticate_normalizes_email(service):
    user = service.authenticate("  Warden@X.com ", "secret")

    assert user.user_id == 1
    assert user.role is Role.WARDEN
    assert user.to_dict() == {"id": 1, "name": "Warden", "email": "warden@x.com", "role": "warden"}


@pytest.mark.parametrize(
    "email,password",
    [("warden@x.com", "wrong"), ("nobody@x.com", "secret"), ("gone@x.com", "secret"), ("legacy@x.com", "x")],
)
def test_authenticate_refuses(service, email, password):
    with pytest.raises(AuthenticationError):
        service.authenticate(email, password)


def test_authenticate_requires_email(service):
    with pytest.raises(ValidationError):
        service.authenticate("", "secret")
