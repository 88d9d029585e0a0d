import pytest

from tourneyhost.controllers import PlacementEngine
from tourneyhost.exceptions import (
    AlreadyCompletedError,
    EventNotInitializedError,
    InvalidParticipantError,
    InvalidStateError,
    MatchNotReadyError,
    ValidationError,
)
from tourneyhost.models import MatchFormat, PointsDistribution, create_event
from tourneyhost.models.enums import EventVariant, MatchStatus

from conftest import make_players

SEEDS = {"A": 1, "B": 2, "C": 3, "D": 4}


def _four_player_event(build_event, **options):
    return build_event(
        EventVariant.SINGLE_ELIM, make_players("A", "B", "C", "D"), SEEDS, **options
    )


def _match_between(event, p1, p2):
    for match in event.all_matches():
        if set(match.participants()) == {p1, p2}:
            return match
    raise AssertionError(f"no match between {p1} and {p2}")


def test_four_player_single_elim(build_event, advancement):
    event = _four_player_event(build_event)
    event.points_distribution = PointsDistribution(
        event.id, {"1": 100, "2": 60, "3": 30}
    )

    advancement.record_result(event, _match_between(event, "A", "D").id, "A")
    advancement.record_result(event, _match_between(event, "B", "C").id, "C")
    final = event.final_match
    assert final.participants() == ["A", "C"]
    advancement.record_result(event, final.id, "A")

    engine = PlacementEngine()
    assert advancement.is_finished(event)
    assert advancement.champion(event) == "A"
    assert engine.placements(event) == {"A": "1", "C": "2", "B": "3", "D": "3"}
    assert engine.event_points(event) == {"A": 100, "C": 60, "B": 30, "D": 30}


def test_completed_match_rejects_second_result(build_event, advancement):
    event = _four_player_event(build_event)
    match = _match_between(event, "A", "D")
    advancement.record_result(event, match.id, "D")
    with pytest.raises(AlreadyCompletedError):
        advancement.record_result(event, match.id, "A")
    with pytest.raises(InvalidStateError):
        advancement.record_game(event, match.id, 11, 3)
    assert match.winner_id == "D"
    assert match.status is MatchStatus.COMPLETED


def test_unready_match_and_foreign_winner(build_event, advancement):
    event = _four_player_event(build_event)
    with pytest.raises(MatchNotReadyError):
        advancement.record_result(event, event.final_match.id, "A")
    with pytest.raises(InvalidParticipantError):
        advancement.record_result(event, _match_between(event, "A", "D").id, "B")


def test_results_need_an_initialized_event(advancement):
    event = create_event(EventVariant.SINGLE_ELIM, "Main")
    for player in make_players("A", "B", "C"):
        event.add_player(player)
    with pytest.raises(EventNotInitializedError):
        advancement.record_result(event, "Match-missing", "A")


def test_best_of_three_by_games(build_event, advancement):
    event = _four_player_event(build_event, match_format=MatchFormat(games_per_match=3))
    match = _match_between(event, "A", "D")
    assert match.games_required_to_win == 2

    advancement.record_game(event, match.id, 11, 5)
    advancement.record_game(event, match.id, 5, 11)
    advancement.record_game(event, match.id, 7, 7)
    assert not match.completed
    assert match.wins("A") == 1 and match.wins("B") == 1

    advancement.record_game(event, match.id, 11, 3)
    assert match.completed
    assert match.winner_id == "A"
    assert [g.game_number for g in match.games] == [1, 2, 3, 4]
    assert event.final_match.participant_a == "A"


def test_game_scores_must_be_non_negative_integers(build_event, advancement):
    event = _four_player_event(build_event)
    match = _match_between(event, "A", "D")
    with pytest.raises(ValidationError):
        advancement.record_game(event, match.id, -1, 11)
    with pytest.raises(ValidationError):
        advancement.record_game(event, match.id, 11, "3")
    assert match.games == []


@pytest.mark.parametrize(
    "scores",
    [
        [(0, 11), (0, 11)],
        [(11, 0), (11, 0), (11, 0)],
        [(11, 0)],
    ],
)
def test_inconsistent_scores_leave_match_untouched(build_event, advancement, scores):
    event = _four_player_event(build_event, match_format=MatchFormat(games_per_match=3))
    match = _match_between(event, "A", "D")
    with pytest.raises(ValidationError):
        advancement.record_result(event, match.id, "A", scores)
    assert not match.completed
    assert match.games == []
    assert event.final_match.participants() == []


def test_declared_result_replaces_partial_games(build_event, advancement):
    event = _four_player_event(build_event, match_format=MatchFormat(games_per_match=3))
    match = _match_between(event, "A", "D")
    advancement.record_game(event, match.id, 3, 11)
    advancement.record_result(event, match.id, "A", [(11, 9), (11, 8)])
    assert [(g.score_a, g.score_b) for g in match.games] == [(11, 9), (11, 8)]
    assert match.winner_id == "A"


def test_walkover_for_three_players(build_event, advancement):
    event = build_event(EventVariant.SINGLE_ELIM, make_players("A", "B", "C"), {"A": 1})
    first_round = [event.match(m) for m in event.rounds[0].match_ids]
    bye_match = next(m for m in first_round if m.has_participant("A"))
    assert bye_match.walkover
    assert bye_match.winner_id == "A"
    assert bye_match.loser_id is None
    assert bye_match.games == []
    assert event.final_match.participant_a == "A"
    assert event.played_matches() == []

    open_matches = advancement.open_matches(event)
    assert len(open_matches) == 1
    advancement.record_result(event, open_matches[0].id, "B")
    advancement.record_result(event, event.final_match.id, "B")
    assert PlacementEngine().placements(event) == {"B": "1", "A": "2", "C": "3"}


def test_walkovers_for_five_players(build_event, advancement, play_out):
    seeds = {"A": 1, "B": 2, "C": 3, "D": 4, "E": 5}
    event = build_event(EventVariant.SINGLE_ELIM, make_players(*seeds), seeds)
    assert sum(m.walkover for m in event.all_matches()) == 3
    assert len(advancement.open_matches(event)) == 2

    play_out(event)
    assert advancement.is_finished(event)
    placements = PlacementEngine().placements(event)
    assert placements == {"A": "1", "B": "2", "C": "3", "D": "3", "E": "5"}


def test_each_round_halves_the_field(build_event, advancement):
    names = [f"P{i}" for i in range(1, 17)]
    event = build_event(EventVariant.SINGLE_ELIM, make_players(*names))
    for r, bracket_round in enumerate(event.rounds[:-1]):
        for match_id in bracket_round.match_ids:
            match = event.match(match_id)
            advancement.record_result(event, match.id, match.participant_b)
        next_round = [event.match(m) for m in event.rounds[r + 1].match_ids]
        assert len([m for m in next_round if not m.completed]) == 16 // 2 ** (r + 2)
        assert all(m.is_ready for m in next_round)

    final = event.final_match
    advancement.record_result(event, final.id, final.participant_a)
    assert advancement.is_finished(event)
    assert advancement.champion(event) == final.participant_a
