"""
Commute Match Backend — User Service Unit Tests
================================================

What:  Registration, login and profile flows of UserService.
How:   AsyncMock repositories, MagicMock hasher/signer; no database.

What we test:
    ✅ Registration field checks, duplicate emails, hashing, credential never returned
    ✅ Login rejects unknown email and wrong password with the same message
    ✅ Profile update: 404, preference validation (age range, commute time),
       sensitive fields ignored, scalar and preference writes kept separate
"""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from commute_api.exceptions import AuthenticationError, DatabaseError, NotFoundError, ValidationError
from commute_api.schemas.user import LoginRequest, ProfileUpdate, RegisterRequest
from commute_api.services.user_service import UserService


class TestUserServiceBase:

    @pytest.fixture(autouse=True)
    def _service(self, user_repo, preferences_repo):
        self.users = user_repo
        self.preferences = preferences_repo
        self.hasher = MagicMock()
        self.hasher.hash.return_value = "hashed-secret"
        self.hasher.verify.return_value = True
        self.signer = MagicMock()
        self.signer.issue.return_value = "signed.jwt.token"
        self.service = UserService(user_repo, preferences_repo, self.hasher, self.signer)


class TestRegister(TestUserServiceBase):

    @pytest.mark.asyncio
    async def test_missing_fields_listed(self):
        with pytest.raises(ValidationError, match="Missing required fields: email, password"):
            await self.service.register(RegisterRequest(full_name="Ada"))

    @pytest.mark.asyncio
    async def test_short_password(self):
        with pytest.raises(ValidationError, match="at least 6 characters"):
            await self.service.register(
                RegisterRequest(full_name="Ada", email="ada@example.com", password="12345")
            )

    @pytest.mark.asyncio
    async def test_email_without_at_sign(self):
        with pytest.raises(ValidationError, match="Invalid email format"):
            await self.service.register(
                RegisterRequest(full_name="Ada", email="ada.example.com", password="123456")
            )

    @pytest.mark.asyncio
    async def test_duplicate_email(self, make_user):
        self.users.find_by_email.return_value = make_user()
        with pytest.raises(ValidationError, match="User already exists"):
            await self.service.register(
                RegisterRequest(full_name="Ada", email="ADA@example.com", password="123456")
            )
        self.users.find_by_email.assert_awaited_once_with("ada@example.com")
        self.users.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_register_hashes_and_issues_token(self, make_user):
        created = make_user(password="hashed-secret")
        self.users.find_by_email.return_value = None
        self.users.create.return_value = created

        result = await self.service.register(
            RegisterRequest(full_name=" Ada ", email=" Ada@Example.com", password="s3cret!")
        )

        stored = self.users.create.await_args.args[0]
        assert stored["password"] == "hashed-secret"
        assert stored["email"] == "ada@example.com"
        assert stored["full_name"] == "Ada"
        assert stored["role"] == "user"
        self.hasher.hash.assert_called_once_with("s3cret!")
        self.signer.issue.assert_called_once_with(created.id)

        assert result.token == "signed.jwt.token"
        assert "password" not in result.user.model_dump()


class TestLogin(TestUserServiceBase):

    @pytest.mark.asyncio
    async def test_unknown_email(self):
        self.users.find_by_email.return_value = None
        with pytest.raises(AuthenticationError, match="Invalid credentials"):
            await self.service.login(LoginRequest(email="nobody@example.com", password="x" * 6))

    @pytest.mark.asyncio
    async def test_wrong_password(self, make_user):
        self.users.find_by_email.return_value = make_user()
        self.hasher.verify.return_value = False
        with pytest.raises(AuthenticationError, match="Invalid credentials") as exc_info:
            await self.service.login(LoginRequest(email="ada@example.com", password="wrong1"))
        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_success(self, make_user):
        user = make_user()
        self.users.find_by_email.return_value = user

        result = await self.service.login(LoginRequest(email="ada@example.com", password="s3cret!"))

        assert result.user.id == user.id
        self.hasher.verify.assert_called_once_with("s3cret!", user.password)

    @pytest.mark.asyncio
    async def test_missing_password(self):
        with pytest.raises(ValidationError, match="Missing required fields: password"):
            await self.service.login(LoginRequest(email="ada@example.com"))


class TestProfile(TestUserServiceBase):

    @pytest.mark.asyncio
    async def test_get_profile_includes_preferences(self, make_user):
        user = make_user()
        self.users.find_by_id.return_value = user
        self.preferences.find_by_user_id.return_value = SimpleNamespace(
            preferences={"profession": "Engineer"}
        )

        profile = await self.service.get_profile(user.id)

        assert profile.email == user.email
        assert profile.matching_preferences == {"profession": "Engineer"}

    @pytest.mark.asyncio
    async def test_get_profile_unknown_user(self):
        self.users.find_by_id.return_value = None
        with pytest.raises(NotFoundError, match="User not found"):
            await self.service.get_profile("a" * 24)

    @pytest.mark.asyncio
    async def test_update_unknown_user(self):
        self.users.find_by_id.return_value = None
        with pytest.raises(NotFoundError, match="User not found"):
            await self.service.update_profile("a" * 24, ProfileUpdate(bio="hi"))

    @pytest.mark.asyncio
    @pytest.mark.parametrize("age_range", [{"min": 35, "max": 25}, {"min": 17, "max": 30}, {"max": 101}])
    async def test_invalid_age_range(self, make_user, age_range):
        self.users.find_by_id.return_value = make_user()
        payload = ProfileUpdate(matching_preferences={"preferred_age_range": age_range})

        with pytest.raises(ValidationError, match="Invalid age range"):
            await self.service.update_profile("a" * 24, payload)
        self.users.update.assert_not_awaited()
        self.preferences.upsert.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_invalid_commute_time(self, make_user):
        self.users.find_by_id.return_value = make_user()
        payload = ProfileUpdate(
            matching_preferences={"preferred_commute_time": {"start": "25:00", "end": "09:00"}}
        )
        with pytest.raises(ValidationError, match="Invalid commute time format. Use HH:mm format"):
            await self.service.update_profile("a" * 24, payload)

    @pytest.mark.asyncio
    async def test_valid_preferences_written_separately(self, make_user):
        user = make_user()
        self.users.find_by_id.return_value = user
        self.users.update.return_value = make_user(id=user.id, bio="Early riser")
        self.preferences.find_by_user_id.return_value = SimpleNamespace(
            preferences={"profession": "Nurse"}
        )
        payload = ProfileUpdate(
            bio="Early riser",
            matching_preferences={
                "preferred_age_range": {"min": 18, "max": 100},
                "preferred_commute_time": {"start": "08:00", "end": "09:00"},
            },
        )

        result = await self.service.update_profile(user.id, payload)

        assert result.bio == "Early riser"
        self.users.update.assert_awaited_once_with(user.id, {"bio": "Early riser"})
        self.preferences.upsert.assert_awaited_once_with(
            user.id,
            {
                "profession": "Nurse",
                "preferred_age_range": {"min": 18, "max": 100},
                "preferred_commute_time": {"start": "08:00", "end": "09:00"},
            },
        )

    @pytest.mark.asyncio
    async def test_sensitive_fields_are_ignored(self, make_user):
        user = make_user()
        self.users.find_by_id.return_value = user
        self.users.update.return_value = user
        payload = ProfileUpdate.model_validate(
            {"full_name": "New Name", "email": "x@y.z", "password": "p", "role": "admin"}
        )

        await self.service.update_profile(user.id, payload)

        self.users.update.assert_awaited_once_with(user.id, {"full_name": "New Name"})

    @pytest.mark.asyncio
    async def test_update_failure_is_500(self, make_user):
        self.users.find_by_id.return_value = make_user()
        self.users.update.return_value = None
        with pytest.raises(DatabaseError, match="Failed to update user profile") as exc_info:
            await self.service.update_profile("a" * 24, ProfileUpdate(bio="x"))
        assert exc_info.value.status_code == 500


def test_user_columns():
    from commute_api.models.user import User

    assert set(User.__table__.columns.keys()) == {
        "id",
        "full_name",
        "email",
        "password",
        "role",
        "phone_number",
        "date_of_birth",
        "gender",
        "profile_image_url",
        "bio",
        "created_at",
        "updated_at",
    }
