"""Registration workflow: requests to enter an event and team formation."""

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

from typing import Iterable, List, Optional

from tourneyhost.exceptions import (
    DuplicateRegistrationError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from tourneyhost.models.enums import RegistrationStatus
from tourneyhost.models.event import Event
from tourneyhost.models.player import Player, Team
from tourneyhost.models.registration import Registration, utc_now
from tourneyhost.utils import setup_logger

logger = setup_logger(__name__)


class RegistrationWorkflow:
    """Moves registrations from PENDING to APPROVED or REJECTED.

    Approved registrations are the only way players enter through this
    workflow. In doubles events, two approved players naming each other as
    desired partner are paired into a team.
    """

    # ========== Lookup ==========

    @staticmethod
    def find(event: Event, registration_id: str) -> Registration:
        for registration in event.registrations:
            if registration.id == registration_id:
                return registration
        raise NotFoundError(
            f"Registration {registration_id} does not exist in '{event.name}'"
        )

    @staticmethod
    def registrations_for(
        event: Event, status: Optional[RegistrationStatus] = None
    ) -> List[Registration]:
        return [
            r for r in event.registrations if status is None or r.status is status
        ]

    def pending(self, event: Event) -> List[Registration]:
        return self.registrations_for(event, RegistrationStatus.PENDING)

    # ========== Transitions ==========

    def register(
        self, event: Event, player: Player, desired_partner: Optional[str] = None
    ) -> Registration:
        """File a PENDING registration for ``player``.

        Raises:
            EventAlreadyInitializedError: If the event is initialized
            DuplicateRegistrationError: If the player is already entered or
                holds a pending/approved registration
        """
        event.ensure_not_initialized("register")
        live = [
            r for r in event.registrations if r.player.id == player.id and r.is_live
        ]
        if live or event.find_player(player.id) is not None:
            raise DuplicateRegistrationError(
                f"{player.display_name} is already registered for '{event.name}'"
            )
        registration = Registration(
            event_id=event.id,
            player=player,
            desired_partner=(desired_partner or "").strip() or None,
        )
        event.registrations.append(registration)
        logger.info(f"{player.display_name} registered for '{event.name}'")
        return registration

    def cancel(self, event: Event, registration_id: str) -> Registration:
        """Withdraw a registration that has not been reviewed yet."""
        event.ensure_not_initialized("cancel a registration")
        registration = self.find(event, registration_id)
        self._ensure_pending(registration)
        event.registrations.remove(registration)
        logger.info(
            f"{registration.player.display_name} cancelled registration "
            f"for '{event.name}'"
        )
        return registration

    def approve(
        self, event: Event, registration_id: str, reviewer: Optional[str] = None
    ) -> Registration:
        """Approve a pending registration and enter the player.

        Raises:
            EventAlreadyInitializedError: If the event is initialized
            InvalidStateError: If the registration was already reviewed
        """
        event.ensure_not_initialized("approve a registration")
        registration = self.find(event, registration_id)
        self._ensure_pending(registration)

        if event.find_player(registration.player.id) is None:
            event.add_player(registration.player)
        self._review(registration, RegistrationStatus.APPROVED, reviewer)
        logger.info(
            f"Approved {registration.player.display_name} for '{event.name}'"
        )
        if event.is_doubles:
            self._pair_with_partner(event, registration)
        return registration

    def approve_all(
        self,
        event: Event,
        registration_ids: Iterable[str],
        reviewer: Optional[str] = None,
    ) -> List[Registration]:
        return [self.approve(event, rid, reviewer) for rid in registration_ids]

    def reject(
        self, event: Event, registration_id: str, reviewer: Optional[str] = None
    ) -> Registration:
        event.ensure_not_initialized("reject a registration")
        registration = self.find(event, registration_id)
        self._ensure_pending(registration)
        self._review(registration, RegistrationStatus.REJECTED, reviewer)
        logger.info(
            f"Rejected {registration.player.display_name} for '{event.name}'"
        )
        return registration

    @staticmethod
    def _ensure_pending(registration: Registration) -> None:
        if not registration.is_pending:
            raise InvalidStateError(
                f"Registration {registration.id} was already "
                f"{registration.status.value.lower()}"
            )

    @staticmethod
    def _review(
        registration: Registration,
        status: RegistrationStatus,
        reviewer: Optional[str],
    ) -> None:
        registration.status = status
        registration.reviewed_at = utc_now()
        registration.reviewed_by = reviewer

    # ========== Teams ==========

    def create_team(
        self, event: Event, player1_id: str, player2_id: Optional[str] = None
    ) -> Team:
        """Create a team from entered players (one player for a singles team)."""
        event.ensure_not_initialized("create a team")
        if player1_id == player2_id:
            raise ValidationError("A team needs two different players")
        player1 = event.get_player(player1_id)
        player2 = event.get_player(player2_id) if player2_id else None
        team = Team(event_id=event.id, player1=player1, player2=player2)
        event.add_team(team)
        logger.info(f"Created team {team.team_name} in '{event.name}'")
        return team

    def form_teams(self, event: Event) -> List[Team]:
        """Pair every approved, unteamed couple who named each other."""
        event.ensure_not_initialized("form teams")
        created = []
        for registration in self.registrations_for(event, RegistrationStatus.APPROVED):
            team = self._pair_with_partner(event, registration)
            if team is not None:
                created.append(team)
        return created

    def _pair_with_partner(
        self, event: Event, registration: Registration
    ) -> Optional[Team]:
        player = registration.player
        if not registration.desired_partner or event.team_for_player(player.id):
            return None
        for other in self.registrations_for(event, RegistrationStatus.APPROVED):
            partner = other.player
            if (
                partner.id != player.id
                and partner.matches_name(registration.desired_partner)
                and player.matches_name(other.desired_partner)
                and event.team_for_player(partner.id) is None
            ):
                return self.create_team(event, partner.id, player.id)
        return None
