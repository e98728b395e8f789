"""Storage contract, run against both the memory and the SQLite-backed SQL backend."""

from datetime import date

import pytest

from magilearn.storage import MemoryStorage, SqlStorage, Storage
from magilearn.storage.seed import seed_demo_user

DAY = date(2026, 3, 14)


@pytest.fixture(params=["memory", "sql"])
def storage(request) -> Storage:
    if request.param == "memory":
        return MemoryStorage()
    return SqlStorage(request.getfixturevalue("sql_session"))


async def _user(storage: Storage, user_id: str = "kid-1") -> str:
    await storage.create_user(username=f"user-{user_id}", password_hash="hash", user_id=user_id)
    await storage.commit()
    return user_id


class TestUsers:
    async def test_create_and_lookup(self, storage):
        created = await storage.create_user(username="mia", password_hash="hash", name="Mia", age=9)
        await storage.commit()

        assert created.id
        assert await storage.get_user(created.id) == created
        assert (await storage.get_user_by_username("mia")).id == created.id
        assert await storage.get_user_by_username("nobody") is None
        assert created.interests == []
        assert created.created_at is not None

    async def test_lookup_by_email_ignores_case(self, storage):
        created = await storage.create_user(username="mia", password_hash="hash", email="mia@example.com")
        await storage.commit()

        assert (await storage.get_user_by_email("MIA@Example.com")).id == created.id
        assert await storage.get_user_by_email("leo@example.com") is None

    async def test_update_merges_fields(self, storage):
        user_id = await _user(storage)
        updated = await storage.update_user(user_id, name="Mia", subjects=["math"])
        assert updated.name == "Mia"
        assert updated.subjects == ["math"]
        assert updated.username == "user-kid-1"
        assert updated.password_hash == "hash"

    async def test_update_missing_user(self, storage):
        assert await storage.update_user("ghost", name="x") is None


class TestProgress:
    async def test_upsert_creates_with_defaults(self, storage):
        user_id = await _user(storage)
        assert await storage.get_progress(user_id) is None

        progress = await storage.update_progress(user_id, total_xp=40)
        assert progress.total_xp == 40
        assert progress.math_skills == 0
        assert progress.learning_streak == 0

    async def test_partial_update_keeps_other_fields(self, storage):
        user_id = await _user(storage)
        await storage.update_progress(user_id, total_xp=40, math_skills=10)
        progress = await storage.update_progress(user_id, art_skills=5)
        assert (progress.total_xp, progress.math_skills, progress.art_skills) == (40, 10, 5)
        assert await storage.get_progress(user_id) == progress


class TestDailySpins:
    async def test_remaining_derived_from_used(self, storage):
        user_id = await _user(storage)
        assert await storage.get_daily_spins(user_id, DAY) is None

        allowance = await storage.update_daily_spins(user_id, DAY, spins_used=2)
        assert (allowance.spins_used, allowance.spins_remaining) == (2, 1)
        assert allowance.date == DAY

        fetched = await storage.get_daily_spins(user_id, DAY, lock=True)
        assert fetched.id == allowance.id
        assert fetched.spins_remaining == 1

    async def test_remaining_never_negative(self, storage):
        user_id = await _user(storage)
        allowance = await storage.update_daily_spins(user_id, DAY, spins_used=5)
        assert allowance.spins_remaining == 0


class TestUnlocksAchievementsStats:
    async def test_unlock_and_list(self, storage):
        user_id = await _user(storage)
        await storage.unlock_game(user_id, "typing-dash")
        await storage.unlock_game(user_id, "code-runner")
        assert sorted(g.game_id for g in await storage.get_unlocked_games(user_id)) == ["code-runner", "typing-dash"]
        assert await storage.get_unlocked_games("someone-else") == []

    async def test_achievements(self, storage):
        user_id = await _user(storage)
        achievement = await storage.add_achievement(user_id, "first-spin", "First Spin", "Spun!")
        assert achievement.earned_at is not None
        assert await storage.get_achievements(user_id) == [achievement]

    async def test_game_stats_upsert(self, storage):
        user_id = await _user(storage)
        assert await storage.get_game_stats(user_id, "math-ninja") is None

        stats = await storage.update_game_stats(user_id, "math-ninja", times_played=1, best_score=30)
        assert stats.total_xp_earned == 0
        assert stats.last_played is not None

        stats = await storage.update_game_stats(user_id, "math-ninja", times_played=2)
        assert (stats.times_played, stats.best_score) == (2, 30)
        assert [s.game_id for s in await storage.list_game_stats(user_id)] == ["math-ninja"]


class TestSeed:
    async def test_seed_is_idempotent(self, storage):
        assert await seed_demo_user(storage, "default-user", today=DAY) is True
        assert await seed_demo_user(storage, "default-user", today=DAY) is False

        user = await storage.get_user("default-user")
        assert user.name == "Alex Martinez"
        assert (await storage.get_progress("default-user")).total_xp == 1247
        assert (await storage.get_daily_spins("default-user", DAY)).spins_remaining == 2
        assert len(await storage.get_unlocked_games("default-user")) == 5
        assert len(await storage.get_achievements("default-user")) == 3


class TestSqlTransactions:
    async def test_rollback_discards_uncommitted_writes(self, sql_storage: SqlStorage):
        user_id = await _user(sql_storage)
        await sql_storage.update_progress(user_id, total_xp=10)
        await sql_storage.commit()

        await sql_storage.update_progress(user_id, total_xp=999)
        await sql_storage.unlock_game(user_id, "typing-dash")
        await sql_storage.rollback()

        assert (await sql_storage.get_progress(user_id)).total_xp == 10
        assert await sql_storage.get_unlocked_games(user_id) == []

    async def test_duplicate_username_is_storage_error(self, sql_storage: SqlStorage):
        from magilearn.errors import StorageUnavailable

        await sql_storage.create_user(username="mia", password_hash="hash")
        await sql_storage.commit()
        with pytest.raises(StorageUnavailable):
            await sql_storage.create_user(username="mia", password_hash="hash")
        await sql_storage.rollback()

    async def test_signup_with_taken_email_is_rejected_before_insert(self, sql_storage: SqlStorage):
        from magilearn.auth.schemas import SignupRequest
        from magilearn.auth.service import signup

        await signup(sql_storage, SignupRequest(username="mia", password="rainbow42", email="mia@example.com"))
        with pytest.raises(ValueError, match="Email already registered"):
            await signup(sql_storage, SignupRequest(username="leo", password="rainbow42", email="Mia@example.com"))
        assert await sql_storage.get_user_by_username("leo") is None
