"""League ranking aggregation over member tournaments."""

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

from typing import Any, Dict, List, Optional

from tourneyhost.controllers.placement import PlacementEngine
from tourneyhost.exceptions import NoScoredEventsError, NotFoundError
from tourneyhost.models.player import Player
from tourneyhost.models.tournament import League, LeaguePlayerRanking
from tourneyhost.utils import setup_logger

logger = setup_logger(__name__)


class LeagueRankingAggregator:
    """Recomputes a league's ranking list from scratch.

    Rankings are a pure function of the member tournaments; the computed
    list replaces the previous one in a single assignment, so a failure
    while computing leaves the old list in place.
    """

    def __init__(self, placement_engine: Optional[PlacementEngine] = None) -> None:
        self.placement_engine = placement_engine or PlacementEngine()

    def compute(self, league: League) -> List[LeaguePlayerRanking]:
        """Build the ranking list without touching ``league``."""
        players: Dict[str, Player] = {}
        points: Dict[str, int] = {}
        records: Dict[str, List[int]] = {}

        for tournament in league.tournaments:
            for player in tournament.all_players():
                players.setdefault(player.id, player)
            try:
                tournament_points = self.placement_engine.tournament_points(tournament)
            except NoScoredEventsError:
                logger.debug(
                    f"League '{league.name}': skipping '{tournament.name}', "
                    "no scored events"
                )
                tournament_points = {}
            for player_id, awarded in tournament_points.items():
                points[player_id] = points.get(player_id, 0) + awarded
            for player_id, record in self.placement_engine.match_records(
                tournament
            ).items():
                totals = records.setdefault(player_id, [0, 0, 0])
                for i, value in enumerate(record):
                    totals[i] += value

        # sorted() is stable: equal rows keep first-appearance order
        ordered = sorted(
            players.values(),
            key=lambda p: (-points.get(p.id, 0), -records.get(p.id, [0, 0, 0])[1]),
        )
        rankings = []
        for index, player in enumerate(ordered):
            played, won, lost = records.get(player.id, [0, 0, 0])
            rankings.append(
                LeaguePlayerRanking(
                    player=player,
                    rank=index + 1,
                    points=points.get(player.id, 0),
                    matches_played=played,
                    matches_won=won,
                    matches_lost=lost,
                )
            )
        return rankings

    def recalculate(self, league: League) -> List[LeaguePlayerRanking]:
        """Recompute and swap in the ranking list of ``league``."""
        rankings = self.compute(league)
        league.player_rankings = rankings
        logger.info(
            f"Recalculated rankings for league '{league.name}': "
            f"{len(rankings)} players over {len(league.tournaments)} tournaments"
        )
        return rankings

    @staticmethod
    def player_ranking(league: League, player_id: str) -> LeaguePlayerRanking:
        ranking = league.ranking_for(player_id)
        if ranking is None:
            raise NotFoundError(
                f"Player {player_id} has no ranking in league '{league.name}'"
            )
        return ranking

    @staticmethod
    def statistics(league: League) -> Dict[str, Any]:
        """Summary counts for a league."""
        player_ids = {
            player.id
            for tournament in league.tournaments
            for player in tournament.all_players()
        }
        return {
            "name": league.name,
            "owner": league.owner,
            "total_tournaments": len(league.tournaments),
            "total_players": len(player_ids),
        }
