import unittest
from datetime import date

from storage import MemoryStorage

from bitvoyager.app.mission_manager import MissionProgress
from bitvoyager.learning.profile import ProfileStore
from bitvoyager.learning.schema import UserProfile
from bitvoyager.policy.advance import LearningAdvance, Outcome, StandardAdvance, update_streak
from tests.helpers import make_question

TODAY = date(2026, 10, 18)


class StreakTests(unittest.TestCase):
    def test_first_session(self) -> None:
        p = update_streak(UserProfile(), TODAY)
        self.assertEqual((p.consecutive_days, p.last_session_date), (1, TODAY))

    def test_yesterday_extends(self) -> None:
        p = update_streak(UserProfile(last_session_date=date(2026, 10, 17), consecutive_days=2), TODAY)
        self.assertEqual(p.consecutive_days, 3)

    def test_gap_resets(self) -> None:
        p = update_streak(UserProfile(last_session_date=date(2026, 10, 16), consecutive_days=9), TODAY)
        self.assertEqual(p.consecutive_days, 1)

    def test_same_day_is_unchanged(self) -> None:
        before = UserProfile(last_session_date=TODAY, consecutive_days=3)
        self.assertIs(update_streak(before, TODAY), before)

    def test_month_boundary(self) -> None:
        p = update_streak(UserProfile(last_session_date=date(2026, 9, 30), consecutive_days=1), date(2026, 10, 1))
        self.assertEqual(p.consecutive_days, 2)


class StandardAdvanceTests(unittest.TestCase):
    def test_difficulty_follows_position(self) -> None:
        progress = MissionProgress(mode="standard", current_index=2)
        StandardAdvance().record(progress, make_question(9, "easy"), Outcome(completed=True))
        self.assertEqual(progress.completed_difficulties, ["hard"])

    def test_skip_records_nothing(self) -> None:
        progress = MissionProgress(mode="standard")
        StandardAdvance().record(progress, make_question(1), Outcome(completed=False, skipped=True))
        self.assertEqual(progress.completed_difficulties, [])


class LearningAdvanceTests(unittest.TestCase):
    def setUp(self) -> None:
        self.storage = MemoryStorage()
        self.profiles = ProfileStore(self.storage, "profile")
        self.policy = LearningAdvance(profiles=self.profiles, today=lambda: TODAY)

    def test_record_persists_profile(self) -> None:
        progress = MissionProgress(mode="learning", profile=UserProfile())
        self.policy.record(progress, make_question(4, "easy", "loops"), Outcome(completed=True))
        stored = self.profiles.load()
        self.assertEqual(stored.completed_questions, (4,))
        self.assertEqual(stored.skill_levels, {"loops": 0.15})
        self.assertEqual(progress.profile, stored)

    def test_finish_same_day_does_not_write(self) -> None:
        profile = UserProfile(last_session_date=TODAY, consecutive_days=2)
        progress = MissionProgress(mode="learning", profile=profile)
        self.policy.finish(progress)
        self.assertIsNone(self.storage.get_item("profile"))
        self.assertIs(progress.profile, profile)

    def test_finish_updates_streak(self) -> None:
        progress = MissionProgress(mode="learning", profile=UserProfile())
        self.policy.finish(progress)
        self.assertEqual(self.profiles.load().consecutive_days, 1)


if __name__ == "__main__":
    unittest.main()
