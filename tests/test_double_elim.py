import pytest

from tourneyhost.controllers import PlacementEngine
from tourneyhost.models.enums import EventVariant
from tourneyhost.testing import BracketValidator

from conftest import make_players

NAMES = ["P1", "P2", "P3", "P4", "P5", "P6", "P7", "P8"]


def _seeds(names):
    return {name: seed for seed, name in enumerate(names, start=1)}


def test_eight_players_favourites_win(build_event, advancement, play_out):
    event = build_event(EventVariant.DOUBLE_ELIM, make_players(*NAMES), _seeds(NAMES))
    play_out(event)

    assert advancement.is_finished(event)
    assert advancement.champion(event) == "P1"
    assert event.losers_final.winner_id == "P5"
    assert PlacementEngine().placements(event) == {
        "P1": "1",
        "P2": "2",
        "P5": "2",
        "P3": "3",
        "P4": "3",
        "P6": "6",
        "P7": "7",
        "P8": "7",
    }


def test_eight_players_with_bronze_match(build_event, play_out):
    event = build_event(
        EventVariant.DOUBLE_ELIM,
        make_players(*NAMES),
        _seeds(NAMES),
        third_place_match=True,
    )
    play_out(event)
    placements = PlacementEngine().placements(event)
    assert placements["P3"] == "3"
    assert placements["P4"] == "4"
    assert placements["P2"] == "2" and placements["P5"] == "2"


def test_first_round_losers_drop_into_losers_bracket(build_event, advancement):
    event = build_event(EventVariant.DOUBLE_ELIM, make_players(*NAMES), _seeds(NAMES))
    for match_id in event.winners_bracket[0].match_ids:
        match = event.match(match_id)
        advancement.record_result(event, match.id, match.participant_a)

    first = [event.match(m) for m in event.losers_bracket[0].match_ids]
    assert [m.participants() for m in first] == [["P8", "P5"], ["P7", "P6"]]
    assert all(m.is_ready for m in first)


def test_semifinal_losers_are_out_without_bronze(build_event, play_out):
    names = [f"P{i}" for i in range(1, 17)]
    event = build_event(EventVariant.DOUBLE_ELIM, make_players(*names), _seeds(names))
    play_out(event)
    semifinal_losers = {
        event.match(m).loser_id for m in event.winners_bracket[-2].match_ids
    }
    for bracket_round in event.losers_bracket:
        for match_id in bracket_round.match_ids:
            assert not semifinal_losers & set(event.match(match_id).participants())


@pytest.mark.parametrize("count", [3, 5, 6, 7, 11])
def test_byes_in_double_elimination(build_event, advancement, play_out, count):
    names = [f"P{i}" for i in range(1, count + 1)]
    event = build_event(EventVariant.DOUBLE_ELIM, make_players(*names), rng_seed=count)
    play_out(event)

    assert advancement.is_finished(event)
    placements = PlacementEngine().placements(event)
    assert list(placements.values()).count("1") == 1
    assert BracketValidator().validate_event(event, placements, True) == []


def test_only_early_winners_losers_drop(build_event, play_out):
    names = [f"P{i}" for i in range(1, 17)]
    event = build_event(EventVariant.DOUBLE_ELIM, make_players(*names), _seeds(names))
    play_out(event)

    losers_matches = [
        event.match(m) for r in event.losers_bracket for m in r.match_ids
    ]
    for bracket_round in event.winners_bracket[:-1]:
        for match_id in bracket_round.match_ids:
            loser = event.match(match_id).loser_id
            drop_id = event.match(match_id).loser_next_match_id
            if bracket_round.index < event.feed_in_cutoff_round:
                assert event.match(drop_id).has_participant(loser)
            else:
                assert drop_id is None
                assert not any(m.has_participant(loser) for m in losers_matches)


def test_losers_bracket_labels_count_everyone_above(build_event, play_out):
    names = [f"P{i}" for i in range(1, 17)]
    event = build_event(EventVariant.DOUBLE_ELIM, make_players(*names), _seeds(names))
    play_out(event)
    placements = PlacementEngine().placements(event)

    # champion, two runners-up and two semifinal losers sit above the losers final
    above = 5
    for bracket_round in reversed(event.losers_bracket):
        for match_id in bracket_round.match_ids:
            loser = event.match(match_id).loser_id
            assert placements[loser] == str(above + 1)
        above += len(bracket_round.match_ids)
    assert above == len(names)


def test_walkover_losers_champion_does_not_share_second(build_event, play_out):
    names = ["P1", "P2", "P3", "P4", "P5"]
    event = build_event(EventVariant.DOUBLE_ELIM, make_players(*names), _seeds(names))
    play_out(event)

    losers_final = event.losers_final
    assert losers_final.winner_id == "P5"
    assert losers_final.walkover
    assert PlacementEngine().placements(event) == {
        "P1": "1",
        "P2": "2",
        "P3": "3",
        "P4": "3",
        "P5": "6",
    }
