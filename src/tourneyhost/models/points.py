"""PointsDistribution model: placement label to points for one event."""

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

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping

from tourneyhost.constants import UNMAPPED_PLACEMENT_POINTS
from tourneyhost.utils import generate_id
from tourneyhost.utils.validation import (
    require,
    validate_non_negative_integer,
    validate_placement_label,
    validate_points_table,
)


@dataclass
class PointsDistribution:
    """Points awarded per placement label in one event.

    Example:
        >>> table = PointsDistribution("Event-1", {"1": 100, "2": 60, "3": 30})
        >>> table.points_for("3"), table.points_for("5")
        (30, 0)
    """

    event_id: str
    points: Dict[str, int] = field(default_factory=dict)
    id: str = field(default_factory=lambda: generate_id("Points"))

    def __post_init__(self) -> None:
        self.points = require(validate_points_table(self.points))

    def add_placement_points(self, label: str, points: int) -> None:
        label = require(validate_placement_label(label))
        self.points[label] = require(
            validate_non_negative_integer(points, f"Points for placement {label}")
        )

    def points_for(self, label: str) -> int:
        return self.points.get(label, UNMAPPED_PLACEMENT_POINTS)

    def replace(self, points: Mapping[str, int]) -> None:
        self.points = require(validate_points_table(points))

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "event_id": self.event_id, "points": dict(self.points)}
