"""Tests for the pure classification functions."""

from __future__ import annotations

import random
from datetime import timedelta

from team_tracker import classifier
from team_tracker.classifier import GAME_TIME, IN_PROGRESS_OR_COMPLETED, time_until
from team_tracker.config import TIE_POLICY_NONE
from team_tracker.models import GameRecord, GameStatus, Participant, SeasonRecord

from conftest import TEAM, game


class TestTallyRecord:
    """Tests for tally_record."""

    def test_single_win_is_undefeated(self, days):
        games = [game("1", days(-7), team_score=24, opp_score=10)]
        record = classifier.tally_record(games, TEAM)
        assert record == SeasonRecord(1, 0, 0)
        assert classifier.is_undefeated(record) is True

    def test_loss_then_scheduled(self, days, now):
        games = [
            game("1", days(-7), team_score=10, opp_score=24),
            game("2", days(7), status=GameStatus.SCHEDULED),
        ]
        record = classifier.tally_record(games, TEAM)
        assert record == SeasonRecord(0, 1, 0)
        assert classifier.is_undefeated(record) is False
        assert classifier.next_game(games, now).game_id == "2"

    def test_only_final_games_count(self, days):
        games = [
            game("1", days(-1), status=GameStatus.IN_PROGRESS, team_score=3, opp_score=7),
            game("2", days(2), status=GameStatus.SCHEDULED),
        ]
        assert classifier.tally_record(games, TEAM) == SeasonRecord(0, 0, 0)

    def test_matches_score_comparison_counts(self, days):
        rng = random.Random(7)
        games = []
        for i in range(40):
            status = rng.choice([GameStatus.FINAL, GameStatus.FINAL, GameStatus.SCHEDULED])
            games.append(game(str(i), days(-i), status=status,
                              team_score=rng.randint(0, 4), opp_score=rng.randint(0, 4)))

        finals = [g for g in games if g.status is GameStatus.FINAL]
        expected = SeasonRecord(
            wins=sum(1 for g in finals if g.participants[0].score > g.participants[1].score),
            losses=sum(1 for g in finals if g.participants[0].score < g.participants[1].score),
            ties=sum(1 for g in finals if g.participants[0].score == g.participants[1].score),
        )
        assert classifier.tally_record(games, TEAM) == expected

    def test_alternate_abbreviation_is_tracked(self, days):
        g = GameRecord(
            game_id="1",
            when=days(-3),
            status=GameStatus.FINAL,
            participants=(
                Participant("3", "CHI", "Chicago Bears", "home", 7),
                Participant("9", "GNB", "Green Bay Packers", "away", 21),
            ),
        )
        assert classifier.tally_record([g], TEAM) == SeasonRecord(1, 0, 0)

    def test_final_without_participants_is_skipped(self, days):
        bare = GameRecord(game_id="x", when=days(-14), status=GameStatus.FINAL)
        games = [bare, game("1", days(-7), team_score=24, opp_score=10)]
        for policy in (classifier.TIE_POLICY_SCORE, TIE_POLICY_NONE):
            record = classifier.tally_record(games, TEAM, policy)
            assert record == SeasonRecord(1, 0, 0)
            assert classifier.is_undefeated(record) is True


class TestGameResult:
    """Tests for tie handling in game_result."""

    def test_level_score_is_tie(self, days):
        result = classifier.game_result(game("1", days(-1), team_score=17, opp_score=17), TEAM)
        assert result.outcome == "T"
        assert result.score == "17-17"

    def test_winner_flag_breaks_level_score(self, days):
        g = game("1", days(-1), team_score=17, opp_score=17, team_winner=True)
        assert classifier.game_result(g, TEAM).outcome == "W"
        g = game("1", days(-1), team_score=17, opp_score=17, opp_winner=True)
        assert classifier.game_result(g, TEAM).outcome == "L"

    def test_no_tie_policy_counts_level_as_loss(self, days):
        g = game("1", days(-1), team_score=17, opp_score=17)
        assert classifier.game_result(g, TEAM, TIE_POLICY_NONE).outcome == "L"

    def test_missing_scores_default_to_zero(self, days):
        result = classifier.game_result(game("1", days(-1)), TEAM)
        assert (result.team_score, result.opponent_score) == (0, 0)


class TestUndefeated:
    """Tests for the undefeated predicate under both policies."""

    def test_no_losses(self):
        assert classifier.is_undefeated(SeasonRecord(3, 0, 1)) is True

    def test_any_loss(self):
        assert classifier.is_undefeated(SeasonRecord(9, 1, 0)) is False
        assert classifier.is_undefeated(SeasonRecord(9, 1, 0), requires_win=True) is False

    def test_empty_season(self):
        assert classifier.is_undefeated(SeasonRecord()) is True
        assert classifier.is_undefeated(SeasonRecord(), requires_win=True) is False


class TestGameSelection:
    """Tests for previous/next/live selection."""

    def test_previous_and_next(self, days, now):
        games = [
            game("d3", days(3), status=GameStatus.SCHEDULED),
            game("d1", days(-14), team_score=1, opp_score=0),
            game("d4", days(10), status=GameStatus.SCHEDULED),
            game("d2", days(-7), team_score=1, opp_score=0),
        ]
        assert classifier.previous_game(games, now).game_id == "d2"
        assert classifier.next_game(games, now).game_id == "d3"

    def test_none_when_empty(self, now):
        assert classifier.previous_game([], now) is None
        assert classifier.next_game([], now) is None
        assert classifier.live_game([]) is None

    def test_next_ignores_postponed(self, days, now):
        games = [game("1", days(1), status=GameStatus.OTHER)]
        assert classifier.next_game(games, now) is None

    def test_live_includes_halftime(self, days):
        games = [
            game("1", days(-7), team_score=3, opp_score=0),
            game("2", days(0), status=GameStatus.HALFTIME, team_score=7, opp_score=3),
        ]
        assert classifier.live_game(games).game_id == "2"


class TestOpponent:
    """Tests for opponent and home/away resolution."""

    def test_opponent_and_home(self, days):
        g = game("1", days(1), status=GameStatus.SCHEDULED, home=False)
        assert classifier.opponent(g, TEAM).abbreviation == "CHI"
        assert classifier.is_home(g, TEAM) is False

    def test_missing_participants(self, days):
        g = GameRecord(game_id="1", when=days(1), status=GameStatus.SCHEDULED)
        assert classifier.opponent(g, TEAM) is None
        assert classifier.team_participant(g, TEAM) is None


class TestExtractNetwork:
    """Tests for the network strategy pipeline."""

    def test_network_field(self):
        comp = {"broadcasts": [{"network": "FOX", "names": ["CBS"]}]}
        assert classifier.extract_network(comp) == "FOX"

    def test_names_list(self):
        assert classifier.extract_network({"broadcasts": [{"names": ["NBC"]}]}) == "NBC"

    def test_media_short_name(self):
        comp = {"broadcasts": [{"media": {"shortName": "Prime"}}]}
        assert classifier.extract_network(comp) == "Prime"

    def test_geo_broadcast(self):
        comp = {"broadcasts": [], "geoBroadcasts": [{"media": {"shortName": "ESPN"}}]}
        assert classifier.extract_network(comp) == "ESPN"

    def test_default_tbd(self):
        assert classifier.extract_network({}) == "TBD"
        assert classifier.extract_network({"broadcasts": [{"names": []}]}) == "TBD"

    def test_name_map(self):
        comp = {"broadcasts": [{"media": {"shortName": "Prime"}}]}
        assert classifier.extract_network(comp, {"Prime": "Prime Video"}) == "Prime Video"


class TestTimeUntil:
    """Tests for time-until-kickoff formatting."""

    def test_days_and_hours(self, now):
        target = now + timedelta(days=2, hours=3, minutes=15)
        assert time_until(target, now) == "2 days, 3 hours until kickoff"

    def test_skips_zero_units(self, now):
        target = now + timedelta(days=1, minutes=5)
        assert time_until(target, now) == "1 day until kickoff"

    def test_pairs_only_adjacent_units(self, now):
        assert time_until(now + timedelta(hours=2, seconds=9), now) == "2 hours until kickoff"
        assert time_until(now + timedelta(days=3, hours=1, minutes=4), now) == "3 days, 1 hour until kickoff"

    def test_minutes_and_seconds(self, now):
        target = now + timedelta(minutes=1, seconds=30)
        assert time_until(target, now) == "1 minute, 30 seconds until kickoff"

    def test_past_or_now_returns_sentinel(self, now):
        assert time_until(now, now) == IN_PROGRESS_OR_COMPLETED
        assert time_until(now - timedelta(hours=1), now) == IN_PROGRESS_OR_COMPLETED
        assert time_until(now, now, expired=GAME_TIME) == GAME_TIME

    def test_idempotent(self, now):
        target = now + timedelta(hours=5, minutes=2)
        assert time_until(target, now) == time_until(target, now)

    def test_label_changes_as_now_advances(self, now):
        target = now + timedelta(hours=2)
        labels = [time_until(target, now + timedelta(minutes=m)) for m in (0, 30, 90, 119)]
        assert labels == [
            "2 hours until kickoff",
            "1 hour, 30 minutes until kickoff",
            "30 minutes until kickoff",
            "1 minute until kickoff",
        ]
