"""Event initialization and deinitialization."""

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
from typing import List, Optional

from tourneyhost.constants import MIN_PARTICIPANTS
from tourneyhost.controllers.advancement import AdvancementEngine
from tourneyhost.controllers.bracket_builder import BracketBuilder
from tourneyhost.controllers.round_robin import RoundRobinScheduler
from tourneyhost.controllers.seeding import generate_draw
from tourneyhost.exceptions import EventAlreadyInitializedError, ValidationError
from tourneyhost.models.enums import EventVariant
from tourneyhost.models.event import Event
from tourneyhost.type_hints import Participant, ParticipantSource
from tourneyhost.utils import setup_logger

logger = setup_logger(__name__)


def entered_participants(event: Event) -> List[Participant]:
    """Default participant source: the event's entered players or teams."""
    return event.participants()


class EventLifecycle:
    """Builds and tears down the bracket or schedule of an event.

    Args:
        participant_source: Callable returning the participants to seed
        rng: Random source for unseeded draw positions
        bracket_builder, scheduler, advancement: Collaborators, created when
            not supplied
    """

    def __init__(
        self,
        participant_source: ParticipantSource = entered_participants,
        rng: Optional[random.Random] = None,
        bracket_builder: Optional[BracketBuilder] = None,
        scheduler: Optional[RoundRobinScheduler] = None,
        advancement: Optional[AdvancementEngine] = None,
    ) -> None:
        self.participant_source = participant_source
        self.rng = rng or random.Random()
        self.bracket_builder = bracket_builder or BracketBuilder()
        self.scheduler = scheduler or RoundRobinScheduler()
        self.advancement = advancement or AdvancementEngine()

    def initialize(self, event: Event) -> None:
        """Freeze the entrants and generate matches.

        Raises:
            EventAlreadyInitializedError: If the event is already initialized
            ValidationError: With fewer than three participants or bad seeds
        """
        if event.initialized:
            raise EventAlreadyInitializedError(
                f"Event '{event.name}' is already initialized"
            )
        participant_ids = [p.id for p in self.participant_source(event)]
        if len(participant_ids) < MIN_PARTICIPANTS:
            raise ValidationError(
                f"Event '{event.name}' needs at least {MIN_PARTICIPANTS} "
                f"participants, has {len(participant_ids)}"
            )

        if event.variant is EventVariant.ROUND_ROBIN:
            self.scheduler.schedule(event, participant_ids)
        else:
            draw = generate_draw(participant_ids, event.seeds(), self.rng)
            self.bracket_builder.build(event, draw)

        event.initialized = True
        walkovers = self.advancement.resolve_walkovers(event)
        logger.info(
            f"Initialized {event.variant.value} event '{event.name}' with "
            f"{len(participant_ids)} participants, {len(event.matches)} matches, "
            f"{len(walkovers)} walkovers"
        )

    def deinitialize(self, event: Event) -> None:
        """Drop all generated matches; participants and seeds stay."""
        event.ensure_initialized("deinitialize")
        event.reset_structure()
        event.initialized = False
        logger.info(f"Deinitialized event '{event.name}'")
