"""Round-robin scheduling."""

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

from typing import List, Optional, Sequence, Tuple

from tourneyhost.constants import MIN_PARTICIPANTS
from tourneyhost.exceptions import UnsupportedOperationError, ValidationError
from tourneyhost.models.enums import EventVariant
from tourneyhost.models.event import Event, Schedule
from tourneyhost.models.match import Match
from tourneyhost.type_hints import ParticipantId
from tourneyhost.utils import setup_logger

logger = setup_logger(__name__)

Pairing = Tuple[ParticipantId, ParticipantId]


def circle_rounds(participant_ids: Sequence[ParticipantId]) -> List[List[Pairing]]:
    """Split all pairings into rounds with the circle method.

    The first participant stays fixed while the others rotate one place per
    round. With an odd count a phantom entrant is added and its pairings are
    dropped, so one participant sits out each round.

    Example:
        >>> circle_rounds(["a", "b", "c", "d"])
        [[('a', 'd'), ('b', 'c')], [('a', 'c'), ('d', 'b')], [('a', 'b'), ('c', 'd')]]
    """
    ring: List[Optional[ParticipantId]] = list(participant_ids)
    if len(ring) % 2 == 1:
        ring.append(None)
    n = len(ring)
    rounds = []
    for _ in range(n - 1):
        pairings = []
        for i in range(n // 2):
            home, away = ring[i], ring[n - 1 - i]
            if home is not None and away is not None:
                pairings.append((home, away))
        rounds.append(pairings)
        ring = [ring[0], ring[-1]] + ring[1:-1]
    return rounds


class RoundRobinScheduler:
    """Creates one match per unordered pair of participants.

    Singles events pair players, doubles events pair teams. Every
    participant receives a :class:`Schedule` listing its N-1 matches.
    """

    def schedule(
        self, event: Event, participant_ids: Sequence[ParticipantId]
    ) -> List[Match]:
        """Create the full round-robin for ``event``.

        Raises:
            UnsupportedOperationError: If the event is not a round-robin
            ValidationError: If fewer than three participants are given
        """
        if event.variant is not EventVariant.ROUND_ROBIN:
            raise UnsupportedOperationError(
                f"Cannot schedule a round-robin for a {event.variant.value} event"
            )
        if len(participant_ids) < MIN_PARTICIPANTS:
            raise ValidationError(
                f"A round-robin needs at least {MIN_PARTICIPANTS} participants, "
                f"got {len(participant_ids)}"
            )
        if len(set(participant_ids)) != len(participant_ids):
            raise ValidationError("Round-robin contains duplicate participants")

        event.reset_structure()
        event.schedules = {pid: Schedule(participant_id=pid) for pid in participant_ids}
        created = []
        for round_index, pairings in enumerate(circle_rounds(participant_ids)):
            for position, (home, away) in enumerate(pairings):
                match = event.add_match(
                    Match(
                        event_id=event.id,
                        games_required_to_win=event.match_format.games_required_to_win,
                        participant_a=home,
                        participant_b=away,
                        round_index=round_index,
                        position=position,
                    )
                )
                event.schedules[home].match_ids.append(match.id)
                event.schedules[away].match_ids.append(match.id)
                created.append(match)

        logger.info(
            f"Scheduled round-robin '{event.name}': {len(participant_ids)} "
            f"participants, {len(created)} matches"
        )
        return created
