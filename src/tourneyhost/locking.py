"""Per-tournament and per-league locks.

Every mutating operation on a tournament (its events, matches and
registrations) runs under that tournament's lock; ranking recomputation runs
under the league's lock. Different tournaments and leagues never contend.
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

import threading
from contextlib import contextmanager
from typing import Dict, Iterator, Tuple

TOURNAMENT = "tournament"
LEAGUE = "league"


class LockRegistry:
    """Hands out one re-entrant lock per tournament id and per league id."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: Dict[Tuple[str, str], threading.RLock] = {}

    def _lock_for(self, scope: str, key: str) -> threading.RLock:
        with self._guard:
            lock = self._locks.get((scope, key))
            if lock is None:
                lock = self._locks[(scope, key)] = threading.RLock()
            return lock

    @contextmanager
    def tournament(self, tournament_id: str) -> Iterator[None]:
        with self._lock_for(TOURNAMENT, tournament_id):
            yield

    @contextmanager
    def league(self, league_id: str) -> Iterator[None]:
        with self._lock_for(LEAGUE, league_id):
            yield
