"""Placement labels and points.

Elimination events hand out a label once a participant's finish is decided;
round-robin events rank participants by wins, then by the results among
the tied participants, and share a label when that still ties.
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

import functools
from typing import Dict, List, Optional, Tuple

from tourneyhost.constants import (
    CHAMPION_LABEL,
    FOURTH_PLACE_LABEL,
    RUNNER_UP_LABEL,
    THIRD_PLACE_LABEL,
)
from tourneyhost.exceptions import InvalidStateError, NoScoredEventsError
from tourneyhost.models.enums import EventVariant
from tourneyhost.models.event import (
    DoubleElimEvent,
    Event,
    RoundRobinEvent,
    SingleElimEvent,
)
from tourneyhost.models.match import Match
from tourneyhost.models.tournament import Tournament
from tourneyhost.type_hints import ParticipantId, Placements
from tourneyhost.utils import setup_logger

logger = setup_logger(__name__)

# played, won, lost
MatchRecord = Tuple[int, int, int]


class PlacementEngine:
    """Turns finished (or partly finished) events into labels and points."""

    # ========== Placements ==========

    def placements(self, event: Event) -> Placements:
        """Placement label per participant whose finish is already decided."""
        if event.variant is EventVariant.SINGLE_ELIM:
            return self._single_elim_placements(event)
        if event.variant is EventVariant.DOUBLE_ELIM:
            return self._double_elim_placements(event)
        return self._round_robin_placements(event)

    def _single_elim_placements(self, event: SingleElimEvent) -> Placements:
        labels: Placements = {}
        num_rounds = len(event.rounds)
        for r, bracket_round in enumerate(event.rounds):
            if r == num_rounds - 2 and event.bronze_match_id:
                continue
            # 2^(rounds after this one) participants finish ahead of its losers
            label = str(2 ** (num_rounds - 1 - r) + 1)
            for match in self._matches(event, bracket_round.match_ids):
                if match.loser_id is not None:
                    labels[match.loser_id] = label

        final = event.final_match
        if final is not None and final.completed:
            labels[final.winner_id] = CHAMPION_LABEL
        self._bronze_placements(event, event.bronze_match_id, labels)
        return labels

    def _double_elim_placements(self, event: DoubleElimEvent) -> Placements:
        """Labels for a double elimination event.

        Losers-bracket exits are numbered by how many participants the
        bracket structurally places above them: the champion, both "2"
        places, both semifinal losers, then every later losers round.
        A losers-bracket champion whose final was a walkover never played
        for "2" and takes the label of a losers-final exit instead.
        """
        labels: Placements = {}
        winners_final = event.winners_final
        if winners_final is not None and winners_final.completed:
            labels[winners_final.winner_id] = CHAMPION_LABEL
            if winners_final.loser_id is not None:
                labels[winners_final.loser_id] = RUNNER_UP_LABEL

        if len(event.winners_bracket) >= 2 and not event.bronze_match_id:
            semifinals = event.winners_bracket[-2]
            for match in self._matches(event, semifinals.match_ids):
                if match.loser_id is not None:
                    labels[match.loser_id] = THIRD_PLACE_LABEL
        self._bronze_placements(event, event.bronze_match_id, labels)

        losers_final = event.losers_final
        if losers_final is None:
            return labels

        placed_above = 3
        if len(event.winners_bracket) >= 2:
            placed_above += len(event.winners_bracket[-2])
        if losers_final.is_played:
            labels[losers_final.winner_id] = RUNNER_UP_LABEL
        elif losers_final.completed:
            labels[losers_final.winner_id] = str(placed_above + 1)

        # later losers rounds finish ahead of earlier ones
        for bracket_round in reversed(event.losers_bracket):
            for match in self._matches(event, bracket_round.match_ids):
                if match.loser_id is not None:
                    labels[match.loser_id] = str(placed_above + 1)
            placed_above += len(bracket_round)
        return labels

    def _bronze_placements(
        self, event: Event, bronze_match_id: Optional[str], labels: Placements
    ) -> None:
        if not bronze_match_id:
            return
        bronze = event.match(bronze_match_id)
        if not bronze.completed:
            return
        labels[bronze.winner_id] = THIRD_PLACE_LABEL
        if bronze.loser_id is not None:
            labels[bronze.loser_id] = FOURTH_PLACE_LABEL

    @staticmethod
    def _matches(event: Event, match_ids: List[str]) -> List[Match]:
        return [event.match(match_id) for match_id in match_ids]

    # ========== Round Robin ==========

    def round_robin_standings(self, event: RoundRobinEvent) -> List[Dict]:
        """Standings rows (best first) with wins, losses and shared labels.

        Participants are ordered by wins. Within a group on equal wins the
        wins scored against the other group members decide (for two
        participants that is their head-to-head match); participants still
        level share a label, and the next label skips accordingly (1, 2, 2, 4).
        """
        participant_ids = list(event.schedules) or event.participant_ids()
        wins = {pid: 0 for pid in participant_ids}
        losses = {pid: 0 for pid in participant_ids}
        for match in event.played_matches():
            wins[match.winner_id] += 1
            losses[match.loser_id] += 1

        mini_league = {}
        for pid in participant_ids:
            group = {other for other in participant_ids if wins[other] == wins[pid]}
            mini_league[pid] = sum(
                1
                for match in event.played_matches()
                if match.winner_id == pid and match.loser_id in group
            )

        def compare(p1: ParticipantId, p2: ParticipantId) -> int:
            if wins[p1] != wins[p2]:
                return 1 if wins[p1] > wins[p2] else -1
            if mini_league[p1] != mini_league[p2]:
                return 1 if mini_league[p1] > mini_league[p2] else -1
            return 0

        ordered = sorted(
            participant_ids, key=functools.cmp_to_key(compare), reverse=True
        )
        standings = []
        for index, pid in enumerate(ordered):
            if index and compare(pid, ordered[index - 1]) == 0:
                label = standings[-1]["placement"]
            else:
                label = str(index + 1)
            standings.append(
                {
                    "participant_id": pid,
                    "wins": wins[pid],
                    "losses": losses[pid],
                    "head_to_head_wins": mini_league[pid],
                    "placement": label,
                }
            )
        return standings

    def _round_robin_placements(self, event: RoundRobinEvent) -> Placements:
        return {
            row["participant_id"]: row["placement"]
            for row in self.round_robin_standings(event)
        }

    # ========== Points ==========

    @staticmethod
    def is_scored(event: Event) -> bool:
        """Scored events carry a points table and at least one played match."""
        return event.points_distribution is not None and event.has_played_match()

    def event_points(self, event: Event) -> Dict[str, int]:
        """Points per player (team points go to every member).

        Raises:
            InvalidStateError: If the event has no points distribution
        """
        if event.points_distribution is None:
            raise InvalidStateError(f"Event '{event.name}' has no points distribution")
        points = {player.id: 0 for player in event.players}
        for participant_id, label in self.placements(event).items():
            awarded = event.points_distribution.points_for(label)
            for player_id in event.player_ids_for(participant_id):
                points[player_id] = points.get(player_id, 0) + awarded
        return points

    def tournament_points(self, tournament: Tournament) -> Dict[str, int]:
        """Cumulative points per player over the tournament's scored events.

        Raises:
            NoScoredEventsError: If no event is scored yet
        """
        scored = [event for event in tournament.events if self.is_scored(event)]
        if not scored:
            raise NoScoredEventsError(
                f"Tournament '{tournament.name}' has no event with a points "
                "distribution and a played match"
            )
        totals: Dict[str, int] = {}
        for event in scored:
            for player_id, points in self.event_points(event).items():
                totals[player_id] = totals.get(player_id, 0) + points
        logger.debug(
            f"Tournament '{tournament.name}': {len(scored)} scored events, "
            f"{len(totals)} players"
        )
        return totals

    @staticmethod
    def match_records(tournament: Tournament) -> Dict[str, MatchRecord]:
        """Played/won/lost counts per player; walkovers are not counted."""
        records: Dict[str, List[int]] = {}
        for event in tournament.events:
            for match in event.played_matches():
                for participant_id in match.participants():
                    won = participant_id == match.winner_id
                    for player_id in event.player_ids_for(participant_id):
                        record = records.setdefault(player_id, [0, 0, 0])
                        record[0] += 1
                        record[1 if won else 2] += 1
        return {player_id: tuple(record) for player_id, record in records.items()}
