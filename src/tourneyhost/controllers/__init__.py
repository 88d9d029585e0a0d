"""Controllers implementing the bracket and ranking engine."""

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

from tourneyhost.controllers.advancement import AdvancementEngine
from tourneyhost.controllers.bracket_builder import BracketBuilder
from tourneyhost.controllers.event_lifecycle import EventLifecycle, entered_participants
from tourneyhost.controllers.league_ranking import LeagueRankingAggregator
from tourneyhost.controllers.placement import PlacementEngine
from tourneyhost.controllers.registration import RegistrationWorkflow
from tourneyhost.controllers.round_robin import RoundRobinScheduler, circle_rounds
from tourneyhost.controllers.seeding import (
    generate_draw,
    next_power_of_two,
    seeds_from_rankings,
    standard_seed_order,
    team_seeds_from_rankings,
)

__all__ = [
    "AdvancementEngine",
    "BracketBuilder",
    "EventLifecycle",
    "LeagueRankingAggregator",
    "PlacementEngine",
    "RegistrationWorkflow",
    "RoundRobinScheduler",
    "circle_rounds",
    "entered_participants",
    "generate_draw",
    "next_power_of_two",
    "seeds_from_rankings",
    "standard_seed_order",
    "team_seeds_from_rankings",
]
