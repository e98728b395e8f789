"""ProgressionService against the memory backend."""

import asyncio
import random
from datetime import date, timedelta

import pytest

from magilearn.errors import NoSpinsRemaining, ProgressNotFound, ValidationFailed
from magilearn.games.catalog import LOCKABLE_GAMES
from magilearn.progression.locks import UserLocks
from magilearn.progression.rules import CONTINUE_LEARNING_MESSAGE
from magilearn.progression.service import ProgressionService
from magilearn.storage import MemoryStorage

DAY = date(2026, 3, 14)


@pytest.fixture
def service(memory_storage: MemoryStorage) -> ProgressionService:
    return ProgressionService(memory_storage, rng=random.Random(7), locks=UserLocks())


async def _new_learner(storage: MemoryStorage, user_id: str = "kid-1", **progress) -> str:
    await storage.create_user(username=user_id, password_hash="x", user_id=user_id)
    await storage.update_progress(user_id, **progress)
    return user_id


class TestDailySpins:
    async def test_fresh_allowance_created_lazily(self, service, memory_storage):
        user_id = await _new_learner(memory_storage)
        allowance = await service.get_or_create_daily_spins(user_id, DAY)
        assert (allowance.spins_used, allowance.spins_remaining) == (0, 3)
        assert await memory_storage.get_daily_spins(user_id, DAY) == allowance

    async def test_get_or_create_is_idempotent(self, service, memory_storage):
        user_id = await _new_learner(memory_storage)
        first = await service.get_or_create_daily_spins(user_id, DAY)
        second = await service.get_or_create_daily_spins(user_id, DAY)
        assert first.id == second.id

    async def test_three_spins_then_failure(self, service, memory_storage):
        """Remaining goes 2, 1, 0 and the fourth spin changes nothing."""
        user_id = await _new_learner(memory_storage)
        remaining = [(await service.consume_spin(user_id, DAY)).spins.spins_remaining for _ in range(3)]
        assert remaining == [2, 1, 0]

        progress_before = await memory_storage.get_progress(user_id)
        unlocked_before = await memory_storage.get_unlocked_games(user_id)
        with pytest.raises(NoSpinsRemaining):
            await service.consume_spin(user_id, DAY)

        allowance = await memory_storage.get_daily_spins(user_id, DAY)
        assert (allowance.spins_used, allowance.spins_remaining) == (3, 0)
        assert await memory_storage.get_progress(user_id) == progress_before
        assert await memory_storage.get_unlocked_games(user_id) == unlocked_before

    async def test_new_day_resets_allowance(self, service, memory_storage):
        user_id = await _new_learner(memory_storage)
        for _ in range(3):
            await service.consume_spin(user_id, DAY)
        result = await service.consume_spin(user_id, DAY + timedelta(days=1))
        assert result.spins.spins_remaining == 2

    async def test_spin_grants_xp_and_unlocks_a_locked_game(self, service, memory_storage):
        user_id = await _new_learner(memory_storage, total_xp=100)
        result = await service.consume_spin(user_id, DAY)

        assert result.reward.type == "game"
        assert result.reward.game_id in LOCKABLE_GAMES
        assert result.reward.xp == 50
        assert (await memory_storage.get_progress(user_id)).total_xp == 150
        assert [g.game_id for g in await memory_storage.get_unlocked_games(user_id)] == [result.reward.game_id]

    async def test_spin_never_unlocks_twice(self, service, memory_storage):
        """Eight spins over three days unlock all eight lockable games exactly once."""
        user_id = await _new_learner(memory_storage)
        rewards = []
        for offset in range(3):
            for _ in range(3):
                if len(rewards) == len(LOCKABLE_GAMES):
                    break
                rewards.append(await service.consume_spin(user_id, DAY + timedelta(days=offset)))

        game_ids = [r.reward.game_id for r in rewards]
        assert sorted(game_ids) == sorted(LOCKABLE_GAMES)

    async def test_all_unlocked_gives_xp_only(self, service, memory_storage):
        user_id = await _new_learner(memory_storage, total_xp=10)
        for game_id in LOCKABLE_GAMES:
            await memory_storage.unlock_game(user_id, game_id)

        result = await service.consume_spin(user_id, DAY)
        assert result.reward.type == "xp"
        assert result.reward.game_id is None
        assert (await memory_storage.get_progress(user_id)).total_xp == 60
        assert len(await memory_storage.get_unlocked_games(user_id)) == len(LOCKABLE_GAMES)

    async def test_concurrent_spins_respect_cap(self, service, memory_storage):
        user_id = await _new_learner(memory_storage)
        results = await asyncio.gather(
            *(service.consume_spin(user_id, DAY) for _ in range(6)), return_exceptions=True
        )
        successes = [r for r in results if not isinstance(r, Exception)]
        failures = [r for r in results if isinstance(r, NoSpinsRemaining)]
        assert len(successes) == 3
        assert len(failures) == 3
        assert (await memory_storage.get_daily_spins(user_id, DAY)).spins_used == 3


class TestRecordGameResult:
    async def test_math_game_updates_stats_xp_and_skill(self, service, memory_storage):
        user_id = await _new_learner(memory_storage, total_xp=100, math_skills=50)
        stats = await service.record_game_result(user_id, "math-ninja", score=80, xp_earned=20)

        assert stats.times_played == 1
        assert stats.best_score == 80
        assert stats.total_xp_earned == 20
        progress = await memory_storage.get_progress(user_id)
        assert progress.total_xp == 120
        assert progress.math_skills == 52

    async def test_best_score_never_decreases(self, service, memory_storage):
        user_id = await _new_learner(memory_storage)
        await service.record_game_result(user_id, "memory-flip", score=90, xp_earned=10)
        stats = await service.record_game_result(user_id, "memory-flip", score=40, xp_earned=5)
        assert stats.best_score == 90
        assert stats.times_played == 2
        assert stats.total_xp_earned == 15
        assert stats.last_played is not None

    async def test_skill_clamped_at_100(self, service, memory_storage):
        user_id = await _new_learner(memory_storage, art_skills=99)
        await service.record_game_result(user_id, "color-match", score=10, xp_earned=0)
        assert (await memory_storage.get_progress(user_id)).art_skills == 100

    async def test_untagged_game_moves_no_skill(self, service, memory_storage):
        user_id = await _new_learner(memory_storage, total_xp=0)
        before = (await memory_storage.get_progress(user_id)).skills()
        await service.record_game_result(user_id, "quiz-attack", score=5, xp_earned=60)
        progress = await memory_storage.get_progress(user_id)
        assert progress.skills() == before
        assert progress.total_xp == 60

    async def test_negative_values_rejected(self, service, memory_storage):
        user_id = await _new_learner(memory_storage)
        with pytest.raises(ValidationFailed) as exc_info:
            await service.record_game_result(user_id, "math-ninja", score=-1, xp_earned=-5)
        assert {e["field"] for e in exc_info.value.errors} == {"score", "xp_earned"}
        assert await memory_storage.get_game_stats(user_id, "math-ninja") is None


class TestUnlockAndAchievements:
    async def test_unlock_is_idempotent(self, service, memory_storage):
        user_id = await _new_learner(memory_storage)
        first, created = await service.unlock_game(user_id, "typing-dash")
        again, created_again = await service.unlock_game(user_id, "typing-dash")
        assert created is True
        assert created_again is False
        assert again.id == first.id
        assert len(await service.get_unlocked_games(user_id)) == 1

    async def test_award_achievement_once(self, service, memory_storage):
        user_id = await _new_learner(memory_storage)
        _, created = await service.award_achievement(user_id, "first-spin", "First Spin", "Spun the wheel")
        _, created_again = await service.award_achievement(user_id, "first-spin", "First Spin", "Spun the wheel")
        assert (created, created_again) == (True, False)
        assert [a.achievement_id for a in await service.get_achievements(user_id)] == ["first-spin"]


class TestContinueLearning:
    async def test_adds_xp_and_boosts_every_skill(self, service, memory_storage):
        user_id = await _new_learner(memory_storage, total_xp=10, math_skills=98, art_skills=40)
        result = await service.continue_learning(user_id)

        assert result.message == CONTINUE_LEARNING_MESSAGE
        assert result.progress.total_xp == 35
        assert result.progress.math_skills == 100
        assert result.progress.art_skills == 45
        assert result.progress.coding_skills == 5
        assert result.progress.last_active_date is not None

    async def test_missing_progress(self, service):
        with pytest.raises(ProgressNotFound):
            await service.continue_learning("ghost")

    async def test_get_progress_missing(self, service):
        with pytest.raises(ProgressNotFound):
            await service.get_progress("ghost")


class TestSnapshot:
    async def test_snapshot_does_not_create_allowance(self, service, memory_storage):
        user_id = await _new_learner(memory_storage)
        snapshot = await service.get_snapshot(user_id, DAY)
        assert snapshot.spins.spins_remaining == 3
        assert snapshot.spins.id is None
        assert await memory_storage.get_daily_spins(user_id, DAY) is None

    async def test_snapshot_of_seeded_learner(self, seeded_storage):
        service = ProgressionService(seeded_storage, locks=UserLocks())
        snapshot = await service.get_snapshot("default-user", date(2026, 3, 14))
        assert snapshot.progress.total_xp == 1247
        assert snapshot.spins.spins_remaining == 2
        assert len(snapshot.unlocked_games) == 5
        assert len(snapshot.achievements) == 3
