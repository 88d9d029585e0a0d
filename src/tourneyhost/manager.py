"""Tournament and league management facades.

Managers look entities up in the repository, run every mutating operation
under the owning tournament's (or league's) lock, delegate to the
controllers, and upsert what changed.
"""

# Tourney Host
# Copyright (C) 2025  Tourney Host developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

import random
from contextlib import ExitStack
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from tourneyhost.controllers import (
    AdvancementEngine,
    EventLifecycle,
    LeagueRankingAggregator,
    PlacementEngine,
    RegistrationWorkflow,
    entered_participants,
    seeds_from_rankings,
    team_seeds_from_rankings,
)
from tourneyhost.exceptions import PermissionDeniedError, ValidationError
from tourneyhost.locking import LockRegistry
from tourneyhost.models import (
    Event,
    EventVariant,
    Game,
    League,
    LeaguePlayerRanking,
    Match,
    MatchFormat,
    Player,
    PointsDistribution,
    Registration,
    Team,
    Tournament,
    TournamentConfig,
    create_event,
)
from tourneyhost.models.tournament import EditableMixin
from tourneyhost.repository import InMemoryRepository, Repository
from tourneyhost.type_hints import GameScores, ParticipantSource, Placements
from tourneyhost.utils import normalize_name, setup_logger

logger = setup_logger(__name__)


def verify_owner(entity: EditableMixin, user: Optional[str]) -> None:
    """Only the owner may manage the editor list."""
    if user is None or user != entity.owner:
        raise PermissionDeniedError(
            f"Only the owner can change editors of {entity.name}"
        )


class TournamentManager:
    """Main tournament management class.

    This class coordinates all tournament operations through specialized
    controllers:
    - RegistrationWorkflow: registrations and team formation
    - EventLifecycle: draw, bracket and schedule generation
    - AdvancementEngine: result entry and bracket progression
    - PlacementEngine: placements and points
    """

    def __init__(
        self,
        repository: Optional[Repository] = None,
        locks: Optional[LockRegistry] = None,
        rng: Optional[random.Random] = None,
        participant_source: ParticipantSource = entered_participants,
    ) -> None:
        self.repository = repository or InMemoryRepository()
        self.locks = locks or LockRegistry()
        self.registration = RegistrationWorkflow()
        self.advancement = AdvancementEngine()
        self.lifecycle = EventLifecycle(
            participant_source=participant_source,
            rng=rng,
            advancement=self.advancement,
        )
        self.placement = PlacementEngine()

    # ========== Tournaments ==========

    def create_tournament(
        self,
        config: Union[TournamentConfig, Mapping[str, Any]],
        owner: Optional[str] = None,
    ) -> Tournament:
        """Create a tournament; names are unique ignoring case and whitespace."""
        if not isinstance(config, TournamentConfig):
            config = TournamentConfig.from_dict(dict(config))
        self._ensure_unique_name(config.name)
        tournament = Tournament(config, owner=owner)
        self.repository.save(tournament)
        logger.info(f"Created tournament '{tournament.name}' ({tournament.id})")
        return tournament

    def get_tournament(self, tournament_id: str) -> Tournament:
        return self.repository.find_by_id(Tournament, tournament_id)

    def list_tournaments(self) -> List[Tournament]:
        return self.repository.find_all(Tournament)

    def rename_tournament(self, tournament_id: str, name: str) -> Tournament:
        with self.locks.tournament(tournament_id):
            tournament = self.get_tournament(tournament_id)
            if normalize_name(name) != normalize_name(tournament.name):
                self._ensure_unique_name(name)
            tournament.name = name
            self.repository.save(tournament)
            return tournament

    def _ensure_unique_name(self, name: str) -> None:
        key = normalize_name(name)
        if any(normalize_name(t.name) == key for t in self.list_tournaments()):
            raise ValidationError(f"A tournament named '{name}' already exists")

    def add_editor(self, tournament_id: str, user: str, editor: str) -> None:
        with self.locks.tournament(tournament_id):
            tournament = self.get_tournament(tournament_id)
            verify_owner(tournament, user)
            tournament.add_editor(editor)
            self.repository.save(tournament)

    def remove_editor(self, tournament_id: str, user: str, editor: str) -> None:
        with self.locks.tournament(tournament_id):
            tournament = self.get_tournament(tournament_id)
            verify_owner(tournament, user)
            tournament.remove_editor(editor)
            self.repository.save(tournament)

    def can_user_edit(self, tournament_id: str, user: Optional[str]) -> bool:
        return self.get_tournament(tournament_id).can_user_edit(user)

    def tournament_players(self, tournament_id: str) -> List[Player]:
        return self.get_tournament(tournament_id).all_players()

    # ========== Events ==========

    def add_event(
        self,
        tournament_id: str,
        name: str,
        variant: Union[EventVariant, str],
        match_format: Optional[MatchFormat] = None,
        **options: Any,
    ) -> Event:
        """Add an event.

        ``options`` are variant fields such as ``third_place_match``.
        """
        with self.locks.tournament(tournament_id):
            tournament = self.get_tournament(tournament_id)
            event = create_event(
                variant, name, match_format=match_format or MatchFormat(), **options
            )
            tournament.add_event(event)
            self._persist(tournament, event)
            return event

    def get_event(self, tournament_id: str, event_index: int) -> Event:
        return self.get_tournament(tournament_id).event(event_index)

    def set_match_format(
        self, tournament_id: str, event_index: int, match_format: MatchFormat
    ) -> Event:
        with self.locks.tournament(tournament_id):
            tournament, event = self._lookup(tournament_id, event_index)
            event.set_match_format(match_format)
            self._persist(tournament, event)
            return event

    def add_player(self, tournament_id: str, event_index: int, player: Player) -> None:
        with self.locks.tournament(tournament_id):
            tournament, event = self._lookup(tournament_id, event_index)
            event.add_player(player)
            self._persist(tournament, event)

    def remove_player(
        self, tournament_id: str, event_index: int, player_id: str
    ) -> None:
        with self.locks.tournament(tournament_id):
            tournament, event = self._lookup(tournament_id, event_index)
            event.remove_player(player_id)
            self._persist(tournament, event)

    # ========== Registrations ==========

    def register(
        self,
        tournament_id: str,
        event_index: int,
        player: Player,
        desired_partner: Optional[str] = None,
    ) -> Registration:
        with self.locks.tournament(tournament_id):
            tournament, event = self._lookup(tournament_id, event_index)
            registration = self.registration.register(event, player, desired_partner)
            self._persist(tournament, event)
            return registration

    def cancel_registration(
        self, tournament_id: str, event_index: int, registration_id: str
    ) -> Registration:
        with self.locks.tournament(tournament_id):
            tournament, event = self._lookup(tournament_id, event_index)
            registration = self.registration.cancel(event, registration_id)
            self.repository.delete(Registration, registration.id)
            self._persist(tournament, event)
            return registration

    def approve_registration(
        self,
        tournament_id: str,
        event_index: int,
        registration_id: str,
        reviewer: Optional[str] = None,
    ) -> Registration:
        with self.locks.tournament(tournament_id):
            tournament, event = self._lookup(tournament_id, event_index)
            registration = self.registration.approve(event, registration_id, reviewer)
            self._persist(tournament, event)
            return registration

    def approve_registrations(
        self,
        tournament_id: str,
        event_index: int,
        registration_ids: List[str],
        reviewer: Optional[str] = None,
    ) -> List[Registration]:
        with self.locks.tournament(tournament_id):
            tournament, event = self._lookup(tournament_id, event_index)
            approved = self.registration.approve_all(event, registration_ids, reviewer)
            self._persist(tournament, event)
            return approved

    def reject_registration(
        self,
        tournament_id: str,
        event_index: int,
        registration_id: str,
        reviewer: Optional[str] = None,
    ) -> Registration:
        with self.locks.tournament(tournament_id):
            tournament, event = self._lookup(tournament_id, event_index)
            registration = self.registration.reject(event, registration_id, reviewer)
            self._persist(tournament, event)
            return registration

    def pending_registrations(
        self, tournament_id: str, event_index: int
    ) -> List[Registration]:
        return self.registration.pending(self.get_event(tournament_id, event_index))

    def create_team(
        self,
        tournament_id: str,
        event_index: int,
        player1_id: str,
        player2_id: Optional[str] = None,
    ) -> Team:
        with self.locks.tournament(tournament_id):
            tournament, event = self._lookup(tournament_id, event_index)
            team = self.registration.create_team(event, player1_id, player2_id)
            self._persist(tournament, event)
            return team

    # ========== Seeding ==========

    def set_player_seed(
        self, tournament_id: str, event_index: int, player_id: str, seed: int
    ) -> None:
        with self.locks.tournament(tournament_id):
            tournament, event = self._lookup(tournament_id, event_index)
            event.set_player_seed(player_id, seed)
            self._persist(tournament, event)

    def set_team_seed(
        self, tournament_id: str, event_index: int, team_id: str, seed: int
    ) -> None:
        with self.locks.tournament(tournament_id):
            tournament, event = self._lookup(tournament_id, event_index)
            event.set_team_seed(team_id, seed)
            self._persist(tournament, event)

    def clear_seeds(self, tournament_id: str, event_index: int) -> None:
        with self.locks.tournament(tournament_id):
            tournament, event = self._lookup(tournament_id, event_index)
            event.clear_seeds()
            self._persist(tournament, event)

    def auto_seed(
        self,
        tournament_id: str,
        event_index: int,
        rankings: List[LeaguePlayerRanking],
        number_of_seeds: int,
    ) -> Dict[str, int]:
        """Replace the event's seeds with the top league-ranked entrants."""
        with self.locks.tournament(tournament_id):
            tournament, event = self._lookup(tournament_id, event_index)
            if event.is_doubles:
                seeds = team_seeds_from_rankings(event.teams, rankings, number_of_seeds)
            else:
                seeds = seeds_from_rankings(
                    [p.id for p in event.players], rankings, number_of_seeds
                )
            event.clear_seeds()
            for participant_id, seed in seeds.items():
                if event.is_doubles:
                    event.set_team_seed(participant_id, seed)
                else:
                    event.set_player_seed(participant_id, seed)
            self._persist(tournament, event)
            return seeds

    # ========== Lifecycle ==========

    def initialize_event(self, tournament_id: str, event_index: int) -> Event:
        with self.locks.tournament(tournament_id):
            tournament, event = self._lookup(tournament_id, event_index)
            self.lifecycle.initialize(event)
            self._persist(tournament, event)
            return event

    def deinitialize_event(self, tournament_id: str, event_index: int) -> Event:
        with self.locks.tournament(tournament_id):
            tournament, event = self._lookup(tournament_id, event_index)
            stale_ids = set(event.matches)
            self.lifecycle.deinitialize(event)
            for game in self.repository.find_all(Game):
                if game.match_id in stale_ids:
                    self.repository.delete(Game, game.id)
            for match_id in stale_ids:
                self.repository.delete(Match, match_id)
            self._persist(tournament, event)
            return event

    def draw(self, tournament_id: str, event_index: int) -> List[Dict[str, Any]]:
        """Rounds of match ids, for display."""
        return self.get_event(tournament_id, event_index).round_views()

    # ========== Results ==========

    def record_result(
        self,
        tournament_id: str,
        event_index: int,
        match_id: str,
        winner_id: str,
        scores: Optional[GameScores] = None,
    ) -> Match:
        with self.locks.tournament(tournament_id):
            tournament, event = self._lookup(tournament_id, event_index)
            replaced = list(event.match(match_id).games)
            match = self.advancement.record_result(event, match_id, winner_id, scores)
            for game in replaced:
                self.repository.delete(Game, game.id)
            self._persist(tournament, event)
            return match

    def record_game(
        self,
        tournament_id: str,
        event_index: int,
        match_id: str,
        score_a: int,
        score_b: int,
    ) -> Game:
        with self.locks.tournament(tournament_id):
            tournament, event = self._lookup(tournament_id, event_index)
            game = self.advancement.record_game(event, match_id, score_a, score_b)
            self._persist(tournament, event)
            return game

    # ========== Points ==========

    def set_points_distribution(
        self, tournament_id: str, event_index: int, points: Mapping[str, int]
    ) -> PointsDistribution:
        with self.locks.tournament(tournament_id):
            tournament, event = self._lookup(tournament_id, event_index)
            if event.points_distribution is None:
                event.points_distribution = PointsDistribution(event.id, dict(points))
            else:
                event.points_distribution.replace(points)
            self._persist(tournament, event)
            return event.points_distribution

    def event_placements(self, tournament_id: str, event_index: int) -> Placements:
        with self.locks.tournament(tournament_id):
            event = self.get_event(tournament_id, event_index)
            return self.placement.placements(event)

    def event_points(self, tournament_id: str, event_index: int) -> Dict[str, int]:
        with self.locks.tournament(tournament_id):
            event = self.get_event(tournament_id, event_index)
            return self.placement.event_points(event)

    def tournament_points(self, tournament_id: str) -> Dict[str, int]:
        with self.locks.tournament(tournament_id):
            return self.placement.tournament_points(self.get_tournament(tournament_id))

    # ========== Helpers ==========

    def _lookup(
        self, tournament_id: str, event_index: int
    ) -> Tuple[Tournament, Event]:
        tournament = self.get_tournament(tournament_id)
        return tournament, tournament.event(event_index)

    def _persist(self, tournament: Tournament, event: Event) -> None:
        self.repository.save(tournament)
        self.repository.save(event)
        self.repository.save_all(event.registrations)
        self.repository.save_all(event.teams)
        for match in event.matches.values():
            self.repository.save(match)
            self.repository.save_all(match.games)
        if event.points_distribution is not None:
            self.repository.save(event.points_distribution)


class LeagueManager:
    """Leagues, their member tournaments, and ranking recomputation.

    A league reads its tournaments from the repository and locks them while
    ranking, so it must share the repository and lock registry of the
    TournamentManager that writes them (see ``create_managers``).
    """

    def __init__(
        self,
        repository: Optional[Repository] = None,
        locks: Optional[LockRegistry] = None,
        aggregator: Optional[LeagueRankingAggregator] = None,
    ) -> None:
        self.repository = repository or InMemoryRepository()
        self.locks = locks or LockRegistry()
        self.aggregator = aggregator or LeagueRankingAggregator(PlacementEngine())

    def create_league(self, name: str, owner: Optional[str] = None) -> League:
        if not name or not name.strip():
            raise ValidationError("League name cannot be empty")
        league = League(name.strip(), owner=owner)
        self.repository.save(league)
        logger.info(f"Created league '{league.name}' ({league.id})")
        return league

    def get_league(self, league_id: str) -> League:
        return self.repository.find_by_id(League, league_id)

    def rename_league(self, league_id: str, name: str) -> League:
        with self.locks.league(league_id):
            league = self.get_league(league_id)
            if not name or not name.strip():
                raise ValidationError("League name cannot be empty")
            league.name = name.strip()
            self.repository.save(league)
            return league

    def add_editor(self, league_id: str, user: str, editor: str) -> None:
        with self.locks.league(league_id):
            league = self.get_league(league_id)
            verify_owner(league, user)
            league.add_editor(editor)
            self.repository.save(league)

    def remove_editor(self, league_id: str, user: str, editor: str) -> None:
        with self.locks.league(league_id):
            league = self.get_league(league_id)
            verify_owner(league, user)
            league.remove_editor(editor)
            self.repository.save(league)

    def can_user_edit(self, league_id: str, user: Optional[str]) -> bool:
        return self.get_league(league_id).can_user_edit(user)

    def add_tournament(self, league_id: str, tournament_id: str) -> League:
        with self.locks.league(league_id):
            league = self.get_league(league_id)
            league.add_tournament(self.repository.find_by_id(Tournament, tournament_id))
            self.repository.save(league)
            return league

    def remove_tournament(self, league_id: str, tournament_id: str) -> League:
        """Drop a tournament and recompute, so its points disappear at once."""
        with self.locks.league(league_id):
            league = self.get_league(league_id)
            league.remove_tournament(tournament_id)
            self._recalculate(league)
            return league

    def recalculate_rankings(self, league_id: str) -> List[LeaguePlayerRanking]:
        with self.locks.league(league_id):
            return self._recalculate(self.get_league(league_id))

    def _recalculate(self, league: League) -> List[LeaguePlayerRanking]:
        # Tournament locks are always taken after the league lock, in id order
        with ExitStack() as stack:
            for tournament_id in sorted(t.id for t in league.tournaments):
                stack.enter_context(self.locks.tournament(tournament_id))
            rankings = self.aggregator.recalculate(league)
        self.repository.save(league)
        return rankings

    def get_rankings(self, league_id: str) -> List[LeaguePlayerRanking]:
        return list(self.get_league(league_id).player_rankings)

    def get_player_ranking(
        self, league_id: str, player_id: str
    ) -> LeaguePlayerRanking:
        return self.aggregator.player_ranking(self.get_league(league_id), player_id)

    def statistics(self, league_id: str) -> Dict[str, Any]:
        return self.aggregator.statistics(self.get_league(league_id))


def create_managers(
    repository: Optional[Repository] = None,
    locks: Optional[LockRegistry] = None,
    rng: Optional[random.Random] = None,
) -> Tuple[TournamentManager, LeagueManager]:
    """Tournament and league managers over one repository and lock registry."""
    repository = repository or InMemoryRepository()
    locks = locks or LockRegistry()
    return (
        TournamentManager(repository, locks, rng=rng),
        LeagueManager(repository, locks),
    )
