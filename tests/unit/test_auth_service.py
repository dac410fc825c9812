from datetime import timezone

import pytest
from sqlmodel import select

from core.database import get_session_factory
from core.exceptions import DuplicateUserError, InvalidCredentialsError, NotFoundError, ValidationError
from core.models import User
from services.auth_service import AuthService


@pytest.fixture
def service(db_session, jwt_manager, password_manager):
    return AuthService(db_session, jwt_manager=jwt_manager, password_manager=password_manager)


@pytest.mark.unit
class TestAuthService:
    """Test AuthService functionality."""

    @pytest.mark.asyncio
    async def test_register_and_load_user(self, service):
        token = await service.register("Jane Doe", "Jane@Example.com", "secret1")

        user = await service.current_user(service.verify(token))

        assert user.name == "Jane Doe"
        assert user.email == "jane@example.com"
        assert user.password != "secret1"
        assert user.avatar.startswith("https://www.gravatar.com/avatar/")

    @pytest.mark.asyncio
    async def test_register_duplicate(self, service):
        await service.register("Jane Doe", "jane@example.com", "secret1")

        with pytest.raises(DuplicateUserError):
            await service.register("Jane Again", "jane@example.com", "secret2")

    @pytest.mark.asyncio
    async def test_register_race_on_same_email(self, service, monkeypatch):
        async def taken_after_check(email):
            async with get_session_factory()() as other:
                other.add(User(name="First", email=email, password="x"))
                await other.commit()
            return None

        monkeypatch.setattr(service, "_find_by_email", taken_after_check)

        with pytest.raises(DuplicateUserError):
            await service.register("Jane Doe", "jane@example.com", "secret1")

        result = await service.session.exec(select(User))
        assert [user.name for user in result.all()] == ["First"]

    @pytest.mark.asyncio
    async def test_stored_date_is_utc(self, service):
        token = await service.register("Jane Doe", "jane@example.com", "secret1")
        user = await service.current_user(service.verify(token))

        await service.session.refresh(user)

        assert user.date.tzinfo == timezone.utc

    @pytest.mark.asyncio
    async def test_register_invalid_input(self, service):
        with pytest.raises(ValidationError) as exc_info:
            await service.register("", "jane@example.com", "short")

        assert [e["param"] for e in exc_info.value.errors] == ["name", "password"]

    @pytest.mark.asyncio
    async def test_authenticate(self, service):
        await service.register("Jane Doe", "jane@example.com", "secret1")

        token = await service.authenticate("JANE@example.com", "secret1")
        assert service.verify(token)

        with pytest.raises(InvalidCredentialsError):
            await service.authenticate("jane@example.com", "secret2")
        with pytest.raises(InvalidCredentialsError):
            await service.authenticate("nobody@example.com", "secret1")

    @pytest.mark.asyncio
    async def test_password_is_not_trimmed(self, service):
        await service.register("Jane Doe", "jane@example.com", " secret1 ")

        with pytest.raises(InvalidCredentialsError):
            await service.authenticate("jane@example.com", "secret1")
        assert await service.authenticate("jane@example.com", " secret1 ")

    @pytest.mark.asyncio
    async def test_current_user_missing(self, service):
        with pytest.raises(NotFoundError):
            await service.current_user("ghost")
