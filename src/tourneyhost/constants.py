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

# --- Constants ---
LOG_LEVEL_ENV_VAR = "TOURNEYHOST_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "INFO"

# Events need at least this many participants to build a bracket or schedule
MIN_PARTICIPANTS = 3

# Match format defaults
DEFAULT_GAMES_PER_MATCH = 1
MATCH_TYPE_SINGLES = "SINGLES"
MATCH_TYPE_DOUBLES = "DOUBLES"

# Event variants
VARIANT_SINGLE_ELIM = "SINGLE_ELIM"
VARIANT_DOUBLE_ELIM = "DOUBLE_ELIM"
VARIANT_ROUND_ROBIN = "ROUND_ROBIN"

# Bracket sides
SLOT_A = "A"
SLOT_B = "B"

# Display name used for an empty slot
BYE_NAME = "BYE"
TEAM_NAME_SEPARATOR = " / "

# Placement labels
CHAMPION_LABEL = "1"
RUNNER_UP_LABEL = "2"
THIRD_PLACE_LABEL = "3"
FOURTH_PLACE_LABEL = "4"

# Unmapped placement labels are worth nothing
UNMAPPED_PLACEMENT_POINTS = 0

# Registration states
REGISTRATION_PENDING = "PENDING"
REGISTRATION_APPROVED = "APPROVED"
REGISTRATION_REJECTED = "REJECTED"

# Example table handed out by the testing tools
DEFAULT_POINTS_TABLE = {
    "1": 100,
    "2": 60,
    "3": 30,
    "4": 20,
    "5": 10,
}
