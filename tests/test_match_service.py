"""
Unit tests for the match lifecycle service.

Drives periods, substitutions, goalie changes and squad edits with explicit
timestamps and checks the resulting playing time.
"""
import unittest

from fairplay.models import MatchState, PlayerRole, PlayerStatus, initialize_players
from fairplay.services import MatchOperationError, MatchService

ROSTER = ["Alma", "Ebba", "Elise", "Filippa", "Fiona", "Ines", "Isabelle", "Julie"]

FORMATION = {
    "goalie": "p1",
    "leftPair": {"defender": "p2", "attacker": "p3"},
    "rightPair": {"defender": "p4", "attacker": "p5"},
    "subPair": {"defender": "p6", "attacker": "p7"},
}


class MatchServiceTests(unittest.TestCase):
    def setUp(self) -> None:
        self.state = MatchState(players=initialize_players(ROSTER))
        self.service = MatchService(self.state)
        self.service.configure_match(period_count=2)
        self.service.set_squad(["p1", "p2", "p3", "p4", "p5", "p6", "p7"])

    def player(self, player_id):
        return self.state.get_player(player_id)

    def test_start_period_records_match_start_snapshot(self) -> None:
        self.service.start_period(FORMATION, 1000)

        goalie = self.player("p1").stats
        self.assertIs(goalie.started_match_as, PlayerRole.GOALIE)
        self.assertIs(goalie.started_at_role, PlayerRole.GOALIE)
        self.assertEqual(goalie.started_at_position, "goalie")

        defender = self.player("p2").stats
        self.assertIs(defender.started_match_as, PlayerRole.ON_FIELD)
        self.assertIs(defender.started_at_role, PlayerRole.DEFENDER)
        self.assertEqual(defender.started_at_position, "leftPair")

        bench = self.player("p6").stats
        self.assertIs(bench.started_match_as, PlayerRole.SUBSTITUTE)
        self.assertIs(bench.current_status, PlayerStatus.SUBSTITUTE)
        self.assertTrue(bench.stint_open)

        self.assertTrue(self.state.match_started)
        self.assertTrue(self.state.period_active)
        self.assertEqual(self.state.period_goalie_ids, {1: "p1"})
        # Not in the squad
        self.assertIsNone(self.player("p8").stats.started_match_as)

    def test_start_period_validation(self) -> None:
        with self.assertRaises(MatchOperationError):
            self.service.start_period({"goalie": "p8"}, 1000)
        with self.assertRaises(MatchOperationError):
            self.service.start_period({"goalie": "p1", "leftDefender": "p1"}, 1000)

        self.service.start_period(FORMATION, 1000)
        with self.assertRaises(MatchOperationError):
            self.service.start_period(FORMATION, 1100)

    def test_configure_after_start_is_rejected(self) -> None:
        self.service.start_period(FORMATION, 1000)
        with self.assertRaises(MatchOperationError):
            self.service.configure_match(period_count=3)

    def test_substitution_swaps_slots_and_time(self) -> None:
        self.service.start_period(FORMATION, 1000)
        self.service.substitute("p2", "p6", 1300)

        self.assertEqual(self.state.formation["leftPair"]["defender"], "p6")
        self.assertEqual(self.state.formation["subPair"]["defender"], "p2")

        out_stats = self.player("p2").stats
        self.assertEqual(out_stats.time_as_defender_seconds, 300)
        self.assertIs(out_stats.current_status, PlayerStatus.SUBSTITUTE)

        in_stats = self.player("p6").stats
        self.assertEqual(in_stats.time_as_sub_seconds, 300)
        self.assertIs(in_stats.current_status, PlayerStatus.ON_FIELD)
        self.assertIs(in_stats.current_role, PlayerRole.DEFENDER)
        self.assertEqual(in_stats.current_pair_key, "leftPair")

        self.service.end_period(1600)
        self.assertEqual(self.player("p2").stats.time_as_sub_seconds, 300)
        self.assertEqual(self.player("p6").stats.time_as_defender_seconds, 300)
        self.assertEqual(self.player("p6").stats.time_on_field_seconds, 300)

    def test_substitution_errors(self) -> None:
        with self.assertRaises(MatchOperationError):
            self.service.substitute("p2", "p6", 1000)

        self.service.start_period(FORMATION, 1000)
        with self.assertRaises(MatchOperationError):
            self.service.substitute("p6", "p2", 1100)
        with self.assertRaises(MatchOperationError):
            self.service.substitute("p2", "p8", 1100)
        with self.assertRaises(MatchOperationError):
            self.service.substitute("p2", "p3", 1100)

    def test_inactive_player_cannot_come_on(self) -> None:
        self.service.start_period(FORMATION, 1000)
        self.service.set_player_inactive("p6", True)

        with self.assertRaises(MatchOperationError):
            self.service.substitute("p2", "p6", 1100)
        with self.assertRaises(MatchOperationError):
            self.service.set_player_inactive("p2", True)

        self.service.set_player_inactive("p6", False)
        self.service.substitute("p2", "p6", 1100)

    def test_end_period_counts_final_roles(self) -> None:
        self.service.start_period(FORMATION, 1000)
        self.service.end_period(1600)

        self.assertEqual(self.player("p1").stats.periods_as_goalie, 1)
        self.assertEqual(self.player("p1").stats.time_as_goalie_seconds, 600)
        self.assertEqual(self.player("p2").stats.periods_as_defender, 1)
        self.assertEqual(self.player("p3").stats.periods_as_attacker, 1)
        self.assertFalse(self.player("p3").stats.stint_open)

        self.assertFalse(self.state.period_active)
        self.assertEqual(self.state.current_period_number, 2)
        self.assertEqual(len(self.state.game_log), 1)
        entry = self.state.game_log[0]
        self.assertEqual(entry["period_number"], 1)
        self.assertEqual(entry["formation"], FORMATION)

        with self.assertRaises(MatchOperationError):
            self.service.end_period(1700)

    def test_match_finishes_after_last_period(self) -> None:
        for start in (0, 1000):
            self.service.start_period(FORMATION, start)
            self.service.end_period(start + 600)

        self.assertTrue(self.state.finished)
        self.assertEqual(self.state.current_period_number, 2)
        with self.assertRaises(MatchOperationError):
            self.service.start_period(FORMATION, 3000)

        points = self.service.role_points()
        self.assertEqual(set(points), {"p1", "p2", "p3", "p4", "p5", "p6", "p7"})
        self.assertEqual(points["p1"].goalie_points, 2)
        self.assertEqual(points["p1"].total, 2)
        self.assertEqual(points["p2"].defender_points, 3)

    def test_pause_excludes_paused_time(self) -> None:
        self.service.start_period(FORMATION, 1000)
        self.service.pause(1100)

        with self.assertRaises(MatchOperationError):
            self.service.substitute("p2", "p6", 1150)
        with self.assertRaises(MatchOperationError):
            self.service.pause(1150)

        self.service.resume(1200)
        self.service.end_period(1300)

        self.assertEqual(self.player("p3").stats.time_as_attacker_seconds, 200)
        self.assertEqual(self.player("p7").stats.time_as_sub_seconds, 200)

        with self.assertRaises(MatchOperationError):
            self.service.resume(1400)

    def test_change_goalie_swaps_with_field_player(self) -> None:
        self.service.start_period(FORMATION, 1000)
        self.service.change_goalie("p3", 1200)

        self.assertEqual(self.state.formation["goalie"], "p3")
        self.assertEqual(self.state.formation["leftPair"]["attacker"], "p1")
        self.assertEqual(self.state.period_goalie_ids[1], "p3")

        self.assertEqual(self.player("p1").stats.time_as_goalie_seconds, 200)
        self.assertIs(self.player("p1").stats.current_role, PlayerRole.ATTACKER)
        self.assertEqual(self.player("p3").stats.time_as_attacker_seconds, 200)
        self.assertIs(self.player("p3").stats.current_status, PlayerStatus.GOALIE)

        with self.assertRaises(MatchOperationError):
            self.service.change_goalie("p3", 1300)

    def test_swap_pair_roles(self) -> None:
        self.service.start_period(FORMATION, 1000)
        self.service.swap_pair_roles("leftPair", 1100)

        self.assertEqual(self.state.formation["leftPair"], {"defender": "p3", "attacker": "p2"})

        self.service.end_period(1200)
        p2 = self.player("p2").stats
        self.assertEqual(p2.time_as_defender_seconds, 100)
        self.assertEqual(p2.time_as_attacker_seconds, 100)
        self.assertEqual(p2.periods_as_attacker, 1)
        self.assertEqual(p2.periods_as_defender, 0)

    def test_swap_pair_roles_requires_pair(self) -> None:
        self.service.start_period(FORMATION, 1000)
        with self.assertRaises(MatchOperationError):
            self.service.swap_pair_roles("goalie", 1100)

    def test_sync_time_keeps_stints_open(self) -> None:
        self.service.start_period(FORMATION, 1000)
        self.service.sync_time(1100)

        stats = self.player("p2").stats
        self.assertEqual(stats.time_as_defender_seconds, 100)
        self.assertTrue(stats.stint_open)

        self.service.end_period(1250)
        self.assertEqual(stats.time_as_defender_seconds, 250)

    def test_squad_change_during_period(self) -> None:
        self.service.set_squad(["p1", "p2", "p3", "p4", "p5", "p6", "p7", "p8"])
        self.service.start_period(FORMATION, 1000)

        extra = self.player("p8").stats
        self.assertIs(extra.current_status, PlayerStatus.SUBSTITUTE)
        self.assertIs(extra.started_match_as, PlayerRole.SUBSTITUTE)

        with self.assertRaises(MatchOperationError):
            self.service.set_squad(["p1", "p3", "p4", "p5", "p6", "p7", "p8"], now=1100)

        self.service.set_squad(["p1", "p2", "p3", "p4", "p5", "p6", "p7"], now=1100)

        self.assertEqual(extra.time_as_sub_seconds, 100)
        self.assertIsNone(extra.started_match_as)
        self.assertIsNone(extra.last_stint_start_time_epoch)
        self.assertNotIn("p8", self.state.selected_squad_ids)

    def test_end_match_closes_everything(self) -> None:
        self.service.start_period(FORMATION, 1000)
        self.service.end_match(1500)

        self.assertTrue(self.state.finished)
        self.assertFalse(self.state.period_active)
        self.assertFalse(any(p.stats.stint_open for p in self.state.players))
        self.assertEqual(self.player("p4").stats.time_as_defender_seconds, 500)

    def test_end_match_mid_period_counts_period(self) -> None:
        self.service.start_period(FORMATION, 1000)
        self.service.end_match(1300)

        self.assertEqual(self.player("p1").stats.periods_as_goalie, 1)
        self.assertEqual(self.player("p2").stats.periods_as_defender, 1)
        self.assertEqual(len(self.state.game_log), 1)
        self.assertEqual(self.service.role_points()["p1"].goalie_points, 1)

    def test_end_match_between_periods_adds_no_period(self) -> None:
        self.service.start_period(FORMATION, 1000)
        self.service.end_period(1600)
        self.service.end_match(1700)

        self.assertEqual(self.player("p1").stats.periods_as_goalie, 1)
        self.assertEqual(len(self.state.game_log), 1)

    def test_configure_validates_options(self) -> None:
        with self.assertRaises(MatchOperationError):
            self.service.configure_match(period_count=5)
        with self.assertRaises(MatchOperationError):
            self.service.configure_match(period_duration_minutes=12)

        self.service.configure_match(period_duration_minutes=20)
        self.assertEqual(self.state.period_duration_minutes, 20)


class RotationQueueServiceTests(unittest.TestCase):
    def setUp(self) -> None:
        self.state = MatchState(players=initialize_players(ROSTER))
        self.service = MatchService(self.state)
        self.service.set_squad(["p1", "p2", "p3", "p4", "p5", "p6", "p7"])
        self.service.start_period(FORMATION, 1000)

    def test_queue_follows_formation(self) -> None:
        self.assertEqual(self.state.rotation_queue.queue, ["p2", "p3", "p4", "p5", "p6", "p7"])
        self.assertEqual(
            self.service.rotation_recommendation(), {"next_off": "p2", "next_on": "p6"}
        )

    def test_substitution_rotates_player_off(self) -> None:
        self.service.substitute("p2", "p6", 1100)

        self.assertEqual(self.state.rotation_queue.queue, ["p3", "p4", "p5", "p6", "p7", "p2"])
        self.assertEqual(
            self.service.rotation_recommendation(), {"next_off": "p3", "next_on": "p7"}
        )

    def test_inactive_player_is_skipped(self) -> None:
        self.service.set_player_inactive("p6", True)

        self.assertNotIn("p6", self.state.rotation_queue)
        self.assertEqual(self.state.rotation_queue.inactive_players, ["p6"])
        self.assertEqual(self.service.rotation_recommendation()["next_on"], "p7")

        self.service.set_player_inactive("p6", False)
        self.assertEqual(self.state.rotation_queue.queue[-1], "p6")
        self.assertEqual(self.state.rotation_queue.inactive_players, [])

    def test_goalie_change_swaps_queue_place(self) -> None:
        self.service.change_goalie("p3", 1100)

        self.assertEqual(self.state.rotation_queue.queue, ["p2", "p1", "p4", "p5", "p6", "p7"])

    def test_squad_changes_update_queue(self) -> None:
        self.service.set_squad(["p1", "p2", "p3", "p4", "p5", "p6", "p7", "p8"], now=1100)
        self.assertEqual(self.state.rotation_queue.queue[-1], "p8")

        self.service.set_squad(["p1", "p2", "p3", "p4", "p5", "p6", "p7"], now=1200)
        self.assertNotIn("p8", self.state.rotation_queue)

        guest = self.service.add_temporary_player("Guest")
        self.assertEqual(self.state.rotation_queue.queue[-1], guest.id)

    def test_squad_overview(self) -> None:
        self.service.set_player_inactive("p7", True)
        overview = self.service.squad_overview()

        self.assertEqual(overview["on_field_ids"], ["p2", "p3", "p4", "p5"])
        self.assertEqual(overview["bench_ids"], ["p6", "p7"])
        self.assertEqual(overview["outfield_ids"], ["p2", "p3", "p4", "p5", "p6", "p7"])
        self.assertEqual(overview["goalie_id"], "p1")
        self.assertTrue(overview["has_inactive_players"])


if __name__ == "__main__":
    unittest.main()
