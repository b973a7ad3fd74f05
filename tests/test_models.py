"""
Unit tests for the data models and settings.

Tests Player validation and serialization, SessionConfig clamping,
SessionState memory and environment-driven Settings.
"""
import unittest
from unittest.mock import patch

from courtside.config import Settings
from courtside.models import GroupingMode, Match, Player, Round, SessionConfig, SessionState, pair_key
from courtside.utils import fmt_mmss


class TestPlayer(unittest.TestCase):
    def test_from_dict_fills_defaults(self) -> None:
        player = Player.from_dict({"id": 12, "name": "Kim", "bench_count": None})

        self.assertEqual(player.id, "12")
        self.assertEqual(player.skill_level, 5)
        self.assertFalse(player.is_present)
        self.assertEqual(player.bench_count, 0)
        self.assertEqual(player.last_played_round, 0)

    def test_to_dict_round_trip(self) -> None:
        player = Player(id="a", name="Al", skill_level=9, is_present=True, bench_count=2, last_played_round=7)
        self.assertEqual(Player.from_dict(player.to_dict()), player)

    def test_skill_out_of_range(self) -> None:
        with self.assertRaises(ValueError):
            Player(id="a", name="Al", skill_level=0)
        with self.assertRaises(ValueError):
            Player(id="a", name="Al", skill_level=11)

    def test_negative_counters_are_clamped(self) -> None:
        player = Player(id="a", name="Al", bench_count=-3, last_played_round=-1)
        self.assertEqual((player.bench_count, player.last_played_round), (0, 0))

    def test_with_stats_copies(self) -> None:
        player = Player(id="a", name="Al")
        updated = player.with_stats(bench_count=4)

        self.assertEqual(updated.bench_count, 4)
        self.assertEqual(player.bench_count, 0)


class TestSessionConfig(unittest.TestCase):
    def test_defaults(self) -> None:
        config = SessionConfig()

        self.assertEqual(config.round_length_seconds, 720)
        self.assertEqual(config.warn_seconds, 30)
        self.assertEqual(config.max_courts, 4)
        self.assertEqual(config.grouping_mode, GroupingMode.BAND)

    def test_from_dict_clamps(self) -> None:
        config = SessionConfig.from_dict({
            "round_length_seconds": 99999,
            "warn_seconds": 1,
            "max_courts": 0,
            "grouping_mode": "WINDOW",
            "window_size": 9,
        })

        self.assertEqual(config.round_length_seconds, 2400)
        self.assertEqual(config.warn_seconds, 5)
        self.assertEqual(config.max_courts, 1)
        self.assertEqual(config.grouping_mode, GroupingMode.WINDOW)
        self.assertEqual(config.window_size, 5)

    def test_from_dict_keeps_base_values(self) -> None:
        base = SessionConfig(round_length_seconds=600, grouping_mode=GroupingMode.WINDOW)
        config = SessionConfig.from_dict({"warn_seconds": 45}, base=base)

        self.assertEqual(config.round_length_seconds, 600)
        self.assertEqual(config.warn_seconds, 45)
        self.assertEqual(config.grouping_mode, GroupingMode.WINDOW)

    def test_invalid_values(self) -> None:
        with self.assertRaises(ValueError):
            SessionConfig(round_length_seconds=0)
        with self.assertRaises(ValueError):
            SessionConfig.from_dict({"round_length_seconds": "long"})
        with self.assertRaises(ValueError):
            SessionConfig(grouping_mode="ladder")

    def test_courts_for(self) -> None:
        config = SessionConfig(max_courts=4)

        self.assertEqual(config.courts_for(18), 4)
        self.assertEqual(config.courts_for(9), 2)
        self.assertEqual(config.courts_for(2), 1)


class TestSessionState(unittest.TestCase):
    def make_round(self, number):
        a, b, c, d, e = (Player(id=x, name=x, is_present=True) for x in "abcde")
        match = Match(court=1, team1=(a, b), team2=(c, d), team1_avg=5.0, team2_avg=5.0)
        return Round(number=number, matches=(match,), benched=(e,))

    def test_record_round_updates_memory(self) -> None:
        state = SessionState()
        state.record_round(self.make_round(1))

        self.assertEqual(state.round_number, 1)
        self.assertEqual(state.last_benched_ids, {"e"})
        self.assertEqual(state.bench_counts["e"], 1)
        self.assertEqual(state.last_played["a"], 1)
        self.assertEqual(state.times_teamed("b", "a"), 1)
        self.assertEqual(state.times_opposed("a", "d"), 1)
        self.assertEqual(state.times_teamed("a", "c"), 0)

    def test_overlay_applies_session_stats(self) -> None:
        state = SessionState()
        state.record_round(self.make_round(3))
        stale = [Player(id="e", name="e"), Player(id="z", name="z", bench_count=2)]

        merged = {p.id: p for p in state.overlay(stale)}

        self.assertEqual(merged["e"].bench_count, 1)
        self.assertEqual(merged["z"].bench_count, 2)

    def test_history_is_trimmed(self) -> None:
        state = SessionState(history_window=2)
        for number in range(1, 5):
            state.record_round(self.make_round(number))

        self.assertEqual(state.teammate_history[pair_key("a", "b")], [3, 4])
        self.assertEqual(state.to_json()["round_number"], 4)

    def test_reset_player_stats(self) -> None:
        state = SessionState()
        state.record_round(self.make_round(1))
        state.reset_player_stats()

        self.assertEqual(state.bench_counts, {})
        self.assertEqual(state.last_played, {})


class TestSettings(unittest.TestCase):
    def test_from_env(self) -> None:
        env = {
            "SUPABASE_URL": "https://db.example.com",
            "SUPABASE_SERVICE_ROLE": "",
            "SUPABASE_ANON_KEY": "anon",
            "ADMIN_PASSWORD": "pw",
            "COURTSIDE_PORT": "9000",
            "COURTSIDE_LOG_LEVEL": "debug",
        }
        with patch.dict("os.environ", env, clear=True):
            settings = Settings.from_env()

        self.assertEqual(settings.supabase_key, "anon")
        self.assertEqual(settings.port, 9000)
        self.assertEqual(settings.log_level, "DEBUG")
        self.assertEqual(settings.roster_file, "roster.json")
        self.assertTrue(settings.remote_store_configured)

    def test_defaults_without_env(self) -> None:
        with patch.dict("os.environ", {}, clear=True):
            settings = Settings.from_env()

        self.assertIsNone(settings.admin_password)
        self.assertFalse(settings.remote_store_configured)


def test_fmt_mmss():
    assert fmt_mmss(720) == "12:00"
    assert fmt_mmss(65) == "01:05"
    assert fmt_mmss(-4) == "00:00"
