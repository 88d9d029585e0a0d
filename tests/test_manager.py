import random
import threading
from datetime import datetime

import pytest

from tourneyhost import TournamentManager
from tourneyhost.exceptions import (
    DuplicateRegistrationError,
    EventAlreadyInitializedError,
    InvalidConfigurationError,
    InvalidParticipantError,
    NoScoredEventsError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from tourneyhost.locking import LockRegistry
from tourneyhost.models import (
    Game,
    Match,
    MatchFormat,
    Registration,
    Tournament,
    TournamentConfig,
)
from tourneyhost.models.enums import EventVariant

from conftest import make_players


@pytest.fixture
def manager():
    return TournamentManager(rng=random.Random(5))


def _tournament_with_event(manager, names=("A", "B", "C", "D"), **options):
    tournament = manager.create_tournament({"name": "Open"}, owner="owner")
    manager.add_event(tournament.id, "Singles", EventVariant.SINGLE_ELIM, **options)
    for player in make_players(*names):
        manager.add_player(tournament.id, 0, player)
    return tournament


def test_tournament_names_are_unique(manager):
    manager.create_tournament({"name": "Spring Open"})
    with pytest.raises(ValidationError):
        manager.create_tournament({"name": "  spring   OPEN "})
    with pytest.raises(ValidationError):
        manager.create_tournament(TournamentConfig(name="SpringOpen"))

    other = manager.create_tournament({"name": "Summer Open"})
    with pytest.raises(ValidationError):
        manager.rename_tournament(other.id, "spring open")
    manager.rename_tournament(other.id, "SUMMER OPEN")
    assert manager.get_tournament(other.id).name == "SUMMER OPEN"


def test_tournament_config_dates():
    config = TournamentConfig(
        name="Open", begin="2025-05-01T09:00:00", end="2025-05-02T18:00:00"
    )
    assert config.begin == datetime(2025, 5, 1, 9, 0)
    assert TournamentConfig.from_dict(config.to_dict()) == config

    with pytest.raises(InvalidConfigurationError):
        TournamentConfig(name="Open", begin="2025-05-02", end="2025-05-01")
    with pytest.raises(InvalidConfigurationError):
        TournamentConfig(name="Open", begin="not a date")
    with pytest.raises(InvalidConfigurationError):
        TournamentConfig(name="   ")


@pytest.mark.parametrize("games,required", [(1, 1), (3, 2), (4, 3), (5, 3)])
def test_match_format_games_required(games, required):
    assert MatchFormat(games_per_match=games).games_required_to_win == required


def test_match_format_rejects_impossible_values():
    with pytest.raises(InvalidConfigurationError):
        MatchFormat(games_per_match=0)
    with pytest.raises(InvalidConfigurationError):
        MatchFormat(games_per_match=3, games_required_to_win=4)


def test_event_lifecycle_through_manager(manager):
    tournament = _tournament_with_event(manager)
    manager.set_player_seed(tournament.id, 0, "A", 1)
    manager.set_points_distribution(tournament.id, 0, {"1": 10, "2": 5})
    with pytest.raises(NoScoredEventsError):
        manager.tournament_points(tournament.id)

    event = manager.initialize_event(tournament.id, 0)
    with pytest.raises(EventAlreadyInitializedError):
        manager.initialize_event(tournament.id, 0)
    with pytest.raises(EventAlreadyInitializedError):
        manager.set_player_seed(tournament.id, 0, "B", 2)
    with pytest.raises(EventAlreadyInitializedError):
        manager.set_match_format(tournament.id, 0, MatchFormat(games_per_match=3))
    with pytest.raises(EventAlreadyInitializedError):
        manager.add_player(tournament.id, 0, make_players("E")[0])

    views = manager.draw(tournament.id, 0)
    assert [len(view["matches"]) for view in views] == [2, 1]

    while manager.advancement.open_matches(event):
        match = manager.advancement.open_matches(event)[0]
        winner = "A" if match.has_participant("A") else match.participant_a
        manager.record_result(tournament.id, 0, match.id, winner)

    assert manager.event_placements(tournament.id, 0)["A"] == "1"
    points = manager.tournament_points(tournament.id)
    assert points["A"] == 10
    assert sorted(points.values()) == [0, 0, 5, 10]


def test_initialize_needs_three_participants(manager):
    tournament = _tournament_with_event(manager, names=("A", "B"))
    with pytest.raises(ValidationError):
        manager.initialize_event(tournament.id, 0)
    assert not manager.get_event(tournament.id, 0).initialized


def test_seed_for_unknown_player(manager):
    tournament = _tournament_with_event(manager)
    with pytest.raises(InvalidParticipantError):
        manager.set_player_seed(tournament.id, 0, "Nobody", 1)


def test_entities_are_persisted_and_cleaned_up(manager):
    tournament = _tournament_with_event(manager)
    registration = manager.register(tournament.id, 0, make_players("E")[0])
    manager.approve_registration(tournament.id, 0, registration.id, reviewer="owner")
    event = manager.initialize_event(tournament.id, 0)
    repository = manager.repository
    assert repository.find_by_id(Tournament, tournament.id) is tournament
    assert repository.find_by_id(Registration, registration.id) is registration
    assert repository.count(Match) == len(event.matches) == 7

    match = manager.advancement.open_matches(event)[0]
    manager.record_result(tournament.id, 0, match.id, match.participant_a)
    assert repository.count(Game) == 1

    manager.deinitialize_event(tournament.id, 0)
    assert repository.count(Match) == 0
    assert repository.count(Game) == 0
    with pytest.raises(NotFoundError):
        repository.find_by_id(Match, match.id)


def test_editors_are_managed_by_owner(manager):
    tournament = manager.create_tournament({"name": "Open"}, owner="owner")
    with pytest.raises(PermissionDeniedError):
        manager.add_editor(tournament.id, "editor", "other")
    manager.add_editor(tournament.id, "owner", "editor")
    assert manager.can_user_edit(tournament.id, "editor")
    assert manager.can_user_edit(tournament.id, "owner")
    assert not manager.can_user_edit(tournament.id, "other")
    with pytest.raises(NotFoundError):
        manager.remove_editor(tournament.id, "owner", "other")


def test_concurrent_registration_admits_one(manager):
    tournament = _tournament_with_event(manager)
    (player,) = make_players("E")
    outcomes = []
    barrier = threading.Barrier(8)

    def register():
        barrier.wait()
        try:
            manager.register(tournament.id, 0, player)
            outcomes.append("ok")
        except DuplicateRegistrationError:
            outcomes.append("duplicate")

    threads = [threading.Thread(target=register) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert outcomes.count("ok") == 1
    assert outcomes.count("duplicate") == 7
    assert len(manager.pending_registrations(tournament.id, 0)) == 1


def test_lock_registry_is_reentrant():
    locks = LockRegistry()
    with locks.tournament("t1"):
        with locks.tournament("t1"):
            with locks.league("t1"):
                pass
