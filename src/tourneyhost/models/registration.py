"""Registration model."""

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
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from tourneyhost.models.enums import RegistrationStatus
from tourneyhost.models.player import Player
from tourneyhost.utils import generate_id


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Registration:
    """A player's request to enter an event.

    Attributes
    ----------
    event_id : str
        Event the player wants to enter.
    player : Player
        The applicant.
    desired_partner : str, optional
        Name or username of the wanted doubles partner.
    status : RegistrationStatus
        PENDING until reviewed once.
    """

    event_id: str
    player: Player
    desired_partner: Optional[str] = None
    status: RegistrationStatus = RegistrationStatus.PENDING
    registered_at: datetime = field(default_factory=utc_now)
    reviewed_at: Optional[datetime] = None
    reviewed_by: Optional[str] = None
    id: str = field(default_factory=lambda: generate_id("Registration"))

    @property
    def is_pending(self) -> bool:
        return self.status is RegistrationStatus.PENDING

    @property
    def is_live(self) -> bool:
        """Pending or approved registrations block a second registration."""
        return self.status is not RegistrationStatus.REJECTED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "event_id": self.event_id,
            "player": self.player.to_dict(),
            "desired_partner": self.desired_partner,
            "status": self.status.value,
            "registered_at": self.registered_at.isoformat(),
            "reviewed_at": self.reviewed_at.isoformat() if self.reviewed_at else None,
            "reviewed_by": self.reviewed_by,
        }
