import io
import json
import random
import unittest
from contextlib import redirect_stderr

from storage import MemoryStorage

from bitvoyager.metrics.identity import IdentityStore
from bitvoyager.metrics.schema import MetricsState
from bitvoyager.metrics.store import MetricsStore
from tests.helpers import T0, FakeClock

KEY = "bitvoyager_metrics"


class MetricsStoreTests(unittest.TestCase):
    def setUp(self) -> None:
        self.storage = MemoryStorage()
        self.clock = FakeClock()
        self.identity = IdentityStore(self.storage, "bitvoyager_session_id", self.clock)
        self.store = MetricsStore(self.storage, KEY, self.identity, self.clock)

    def stored(self) -> MetricsState:
        return MetricsState.model_validate_json(self.storage.get_item(KEY))

    def test_fresh_state_is_zeroed_and_persisted(self) -> None:
        state = self.store.load()
        self.assertEqual(state.session_id, self.identity.get_or_create())
        self.assertEqual(state.start_time, T0)
        self.assertEqual((state.attempts, state.errors, state.skips, state.completed_challenges), (0, 0, 0, 0))
        self.assertEqual(state.challenge_details, ())
        self.assertEqual(self.stored(), state)

    def test_record_attempt_counts_errors_only_on_failure(self) -> None:
        self.store.load()
        self.store.record_attempt(False)
        state = self.store.record_attempt(True)
        self.assertEqual(state.attempts, 2)
        self.assertEqual(state.errors, 1)
        self.assertEqual(self.stored(), state)

    def test_skip_and_append(self) -> None:
        self.store.load()
        self.store.record_skip()
        self.clock.advance(3)
        state = self.store.append_challenge(7, "medium", 2, 12.5)
        self.assertEqual(state.skips, 1)
        self.assertEqual(state.completed_challenges, 1)
        rec = state.challenge_details[0]
        self.assertEqual((rec.challenge_id, rec.difficulty, rec.attempts, rec.time_spent), (7, "medium", 2, 12.5))
        self.assertEqual(rec.completed_at, self.clock())
        self.assertEqual(self.stored(), state)

    def test_on_disk_keys_are_camel_case(self) -> None:
        self.store.load()
        self.store.append_challenge(1, "easy", 0, 1.0)
        doc = json.loads(self.storage.get_item(KEY))
        self.assertEqual(
            set(doc),
            {"sessionId", "startTime", "attempts", "errors", "skips", "completedChallenges", "challengeDetails"},
        )
        self.assertEqual(set(doc["challengeDetails"][0]), {"challengeId", "difficulty", "timeSpent", "attempts", "completedAt"})

    def test_round_trip_is_idempotent(self) -> None:
        self.store.load()
        self.store.record_attempt(False)
        self.store.append_challenge(3, "hard", 1, 4.25)
        before = self.storage.get_item(KEY)
        again = MetricsStore(self.storage, KEY, self.identity, self.clock)
        loaded = again.load()
        self.assertEqual(self.storage.get_item(KEY), before)
        self.assertEqual(loaded, self.store.state)

    def test_corrupt_document_falls_back_to_fresh(self) -> None:
        self.storage.set_item(KEY, "{broken")
        with redirect_stderr(io.StringIO()):
            state = self.store.load()
        self.assertEqual(state.attempts, 0)
        self.assertEqual(self.stored(), state)

    def test_inconsistent_document_is_treated_as_absent(self) -> None:
        bad = {"sessionId": "s", "startTime": "2026-01-01T00:00:00Z", "attempts": 1, "errors": 2,
               "skips": 0, "completedChallenges": 0, "challengeDetails": []}
        self.storage.set_item(KEY, json.dumps(bad))
        err = io.StringIO()
        with redirect_stderr(err):
            state = self.store.load()
        self.assertEqual(state.errors, 0)
        self.assertIn("malformed", err.getvalue())

    def test_reset_replaces_identity_and_counters(self) -> None:
        first = self.store.load()
        self.store.record_attempt(False)
        self.clock.advance(1)
        state = self.store.reset()
        self.assertNotEqual(state.session_id, first.session_id)
        self.assertEqual(state.session_id, self.storage.get_item("bitvoyager_session_id"))
        self.assertEqual((state.attempts, state.errors), (0, 0))
        self.assertEqual(state.start_time, self.clock())

    def test_snapshot_does_not_mutate(self) -> None:
        self.store.load()
        self.clock.advance(90)
        snap = self.store.snapshot()
        self.assertEqual(snap.duration, 90.0)
        self.assertEqual(snap.export_time, self.clock())
        self.assertEqual(self.stored(), self.store.state)

    def test_counters_never_decrease(self) -> None:
        rng = random.Random(7)
        prev = self.store.load()
        for _ in range(200):
            op = rng.choice(["ok", "fail", "skip", "done"])
            if op == "ok":
                cur = self.store.record_attempt(True)
            elif op == "fail":
                cur = self.store.record_attempt(False)
            elif op == "skip":
                cur = self.store.record_skip()
            else:
                cur = self.store.append_challenge(rng.randint(1, 18), "easy", rng.randint(0, 3), 1.0)
            for field in ("attempts", "errors", "skips", "completed_challenges"):
                self.assertGreaterEqual(getattr(cur, field), getattr(prev, field))
            self.assertLessEqual(cur.errors, cur.attempts)
            self.assertEqual(cur.completed_challenges, len(cur.challenge_details))
            prev = cur


if __name__ == "__main__":
    unittest.main()
