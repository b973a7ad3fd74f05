"""
Unit tests for RosterService and AdminGate.

Tests validation, check-in, bulk updates and the password-protected
stats reset.
"""
import unittest

from courtside.errors import ValidationError
from courtside.models import Player, SessionConfig
from courtside.services import AdminGate, InMemoryRosterStore, RosterService, RoundOrchestrator


class AdminGateTests(unittest.TestCase):
    def test_matching_password(self) -> None:
        gate = AdminGate("s3cret")
        self.assertTrue(gate.configured)
        self.assertTrue(gate.verify("s3cret"))
        self.assertTrue(gate.verify("  s3cret "))
        self.assertFalse(gate.verify("wrong"))
        self.assertFalse(gate.verify(None))

    def test_unconfigured_gate_denies(self) -> None:
        gate = AdminGate(None)
        self.assertFalse(gate.configured)
        self.assertFalse(gate.verify(""))
        self.assertFalse(gate.verify("anything"))


class TestRosterService(unittest.TestCase):
    """Test cases for RosterService functionality."""

    def setUp(self) -> None:
        self.store = InMemoryRosterStore([
            Player(id="1", name="Ana", skill_level=6, is_present=True, bench_count=2, last_played_round=4),
            Player(id="2", name="Ben", skill_level=3, bench_count=1),
        ])
        self.service = RosterService(self.store, admin_gate=AdminGate("pw"))

    def tearDown(self) -> None:
        self.service.persistence.shutdown()

    def test_validate_player_data(self) -> None:
        self.assertEqual(self.service.validate_player_data({"name": "Cat", "skill_level": 5}), [])

        errors = self.service.validate_player_data({"name": " ", "skill_level": 12, "bench_count": -1})
        self.assertEqual(len(errors), 3)
        self.assertIn("Player name is required", errors)

        errors = self.service.validate_player_data({"name": "x" * 61, "skill_level": "high"})
        self.assertEqual(len(errors), 2)

    def test_build_player_assigns_id(self) -> None:
        player = self.service.build_player({"name": "  Cat ", "skill_level": "5"})

        self.assertEqual(player.name, "Cat")
        self.assertEqual(player.skill_level, 5)
        self.assertTrue(player.id)
        self.assertFalse(player.is_present)

    def test_build_player_rejects_invalid(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            self.service.build_player({"name": "", "skill_level": 5})
        self.assertIn("Player validation failed", str(ctx.exception))

    def test_save_players_is_all_or_nothing(self) -> None:
        with self.assertRaises(ValidationError):
            self.service.save_players([
                {"name": "Cat", "skill_level": 5},
                {"name": "Dan", "skill_level": 0},
            ])
        self.assertEqual(len(self.service.list_players()), 2)

        result = self.service.save_players([{"id": "3", "name": "Cat", "skill_level": 5}])
        self.assertTrue(result.ok)
        self.assertEqual(len(self.service.list_players()), 3)

    def test_set_presence(self) -> None:
        result = self.service.set_presence("2", True)

        self.assertTrue(result.ok)
        self.assertTrue(result.rows[0]["is_present"])
        self.assertFalse(self.service.set_presence("missing", True).rows)

    def test_update_players_accepts_both_shapes(self) -> None:
        report = self.service.update_players([
            {"id": "1", "fields": {"skill_level": 7}},
            {"id": "2", "is_present": True},
        ])

        self.assertTrue(report.ok)
        players = {p.id: p for p in self.service.list_players()}
        self.assertEqual(players["1"].skill_level, 7)
        self.assertTrue(players["2"].is_present)

    def test_update_players_rejects_malformed(self) -> None:
        with self.assertRaises(ValidationError):
            self.service.update_players([])
        with self.assertRaises(ValidationError):
            self.service.update_players([{"fields": {"is_present": True}}])

    def test_delete_player(self) -> None:
        with self.assertRaises(ValidationError):
            self.service.delete_player("")

        result = self.service.delete_player("2")
        self.assertEqual(len(result.rows), 1)
        self.assertEqual([p.id for p in self.service.list_players()], ["1"])

    def test_reset_requires_password(self) -> None:
        self.assertIsNone(self.service.reset_all_stats("nope"))
        self.assertEqual(self.service.list_players()[0].bench_count, 2)

    def test_reset_zeroes_stats(self) -> None:
        report = self.service.reset_all_stats("pw")

        self.assertTrue(report.ok)
        self.assertEqual(report.total, 2)
        for player in self.service.list_players():
            self.assertEqual(player.bench_count, 0)
            self.assertEqual(player.last_played_round, 0)

    def test_reset_clears_orchestrator_memory(self) -> None:
        players = [
            Player(id=f"p{i}", name=f"P{i}", skill_level=5, is_present=True) for i in range(5)
        ]
        store = InMemoryRosterStore(players)
        orchestrator = RoundOrchestrator(store, SessionConfig(round_length_seconds=60, warn_seconds=10))
        service = RosterService(store, admin_gate=AdminGate("pw"), orchestrator=orchestrator)
        try:
            orchestrator.start()
            orchestrator.wait_for_writes(timeout=5)
            self.assertTrue(any(p.bench_count for p in orchestrator.known_roster()))

            service.reset_all_stats("pw")

            self.assertFalse(any(p.bench_count for p in orchestrator.known_roster()))
            self.assertFalse(any(p.bench_count for p in store.list()))
        finally:
            orchestrator.shutdown()
            service.persistence.shutdown()


if __name__ == "__main__":
    unittest.main()
