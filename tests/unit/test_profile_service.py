from datetime import date

import pytest
from sqlmodel import select

from core.database import get_session_factory
from core.exceptions import NotFoundError, ValidationError
from core.models import Profile, User
from services.profile_service import ProfileService


@pytest.fixture
async def user(db_session):
    user = User(name="Jane Doe", email="jane@example.com", password="x", avatar="a.png")
    db_session.add(user)
    await db_session.commit()
    return user


@pytest.fixture
def service(db_session):
    return ProfileService(db_session)


@pytest.mark.unit
class TestProfileService:
    """Test ProfileService functionality."""

    @pytest.mark.asyncio
    async def test_upsert_creates_then_updates(self, service, user):
        created = await service.upsert_profile(
            user.id, {"status": "Developer", "skills": "a, b", "bio": "hi", "twitter": "t"}
        )
        updated = await service.upsert_profile(
            user.id, {"status": "Lead", "skills": ["c"], "linkedin": "l"}
        )

        assert updated.profile.id == created.profile.id
        assert updated.profile.status == "Lead"
        assert updated.profile.skills == ["c"]
        assert updated.profile.bio == "hi"
        assert updated.profile.social == {"linkedin": "l"}
        assert updated.user.name == "Jane Doe"

    @pytest.mark.asyncio
    async def test_upsert_race_updates_concurrent_profile(self, service, user, monkeypatch):
        user_id = user.id
        find_profile = service._find_profile
        calls = []

        async def created_after_check(owner_id):
            calls.append(owner_id)
            if len(calls) == 1:
                async with get_session_factory()() as other:
                    other.add(Profile(user_id=owner_id, status="Student", skills=["go"]))
                    await other.commit()
                return None
            return await find_profile(owner_id)

        monkeypatch.setattr(service, "_find_profile", created_after_check)

        view = await service.upsert_profile(user_id, {"status": "Developer", "skills": "python"})

        assert view.profile.status == "Developer"
        assert view.profile.skills == ["python"]
        result = await service.session.exec(select(Profile))
        assert [profile.user_id for profile in result.all()] == [user_id]

    @pytest.mark.asyncio
    async def test_upsert_requires_status_and_skills(self, service, user):
        with pytest.raises(ValidationError) as exc_info:
            await service.upsert_profile(user.id, {"skills": " , "})

        assert [e["param"] for e in exc_info.value.errors] == ["status", "skills"]

    @pytest.mark.asyncio
    async def test_get_own_profile_missing(self, service, user):
        with pytest.raises(NotFoundError) as exc_info:
            await service.get_own_profile(user.id)
        assert exc_info.value.message == "There is no profile for this user"

    @pytest.mark.asyncio
    async def test_list_profiles_joins_owner(self, service, user):
        await service.upsert_profile(user.id, {"status": "Developer", "skills": "python"})

        views = await service.list_profiles()

        assert len(views) == 1
        assert views[0].user.avatar == "a.png"

    @pytest.mark.asyncio
    async def test_experience_lifecycle(self, service, user):
        await service.upsert_profile(user.id, {"status": "Developer", "skills": "python"})

        view = await service.add_experience(
            user.id, {"title": "Engineer", "company": "Acme", "from": date(2019, 1, 1)}
        )
        view = await service.add_experience(
            user.id, {"title": "Lead", "company": "Acme", "from": date(2021, 1, 1)}
        )
        assert [e["title"] for e in view.profile.experience] == ["Lead", "Engineer"]
        assert view.profile.experience[1]["from"] == "2019-01-01"

        unchanged = await service.remove_experience(user.id, "unknown")
        assert len(unchanged.profile.experience) == 2

        lead_id = view.profile.experience[0]["id"]
        view = await service.remove_experience(user.id, lead_id)
        assert [e["title"] for e in view.profile.experience] == ["Engineer"]

    @pytest.mark.asyncio
    async def test_education_lifecycle(self, service, user):
        await service.upsert_profile(user.id, {"status": "Developer", "skills": "python"})

        view = await service.add_education(
            user.id,
            {
                "school": "TU",
                "degree": "BSc",
                "fieldofstudy": "CS",
                "from": "2010-10-01",
                "to": "2013-09-30",
            },
        )
        entry = view.profile.education[0]
        assert entry["to"] == "2013-09-30"

        view = await service.remove_education(user.id, entry["id"])
        assert view.profile.education == []

    @pytest.mark.asyncio
    async def test_add_experience_without_profile(self, service, user):
        with pytest.raises(NotFoundError):
            await service.add_experience(
                user.id, {"title": "Engineer", "company": "Acme", "from": "2019-01-01"}
            )

    @pytest.mark.asyncio
    async def test_delete_profile(self, service, user):
        await service.upsert_profile(user.id, {"status": "Developer", "skills": "python"})

        await service.delete_profile(user.id)

        with pytest.raises(NotFoundError):
            await service.get_profile_by_user(user.id)
        with pytest.raises(NotFoundError):
            await service.delete_profile(user.id)
