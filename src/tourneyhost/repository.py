"""Persistence sink for engine entities.

The engine never talks to a database directly. Managers upsert every entity
they change through a :class:`Repository`; the in-memory implementation
backs tests and the testing tools.
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
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Type, TypeVar

from tourneyhost.exceptions import NotFoundError
from tourneyhost.models import (
    Event,
    Game,
    League,
    Match,
    PointsDistribution,
    Registration,
    Team,
    Tournament,
)

T = TypeVar("T")

# Event variants share one collection
ENTITY_KINDS = (
    Tournament,
    Event,
    Match,
    Game,
    Team,
    League,
    Registration,
    PointsDistribution,
)


def entity_kind(entity_or_type: Any) -> Type:
    """Collection an entity (or entity class) is stored in."""
    cls = entity_or_type if isinstance(entity_or_type, type) else type(entity_or_type)
    for kind in ENTITY_KINDS:
        if issubclass(cls, kind):
            return kind
    raise TypeError(f"{cls.__name__} is not a persistable entity")


class Repository(ABC):
    """Upsert and lookup by id for every entity kind."""

    @abstractmethod
    def save(self, entity: Any) -> None:
        """Insert or replace ``entity``."""

    @abstractmethod
    def find_by_id(self, kind: Type[T], entity_id: str) -> T:
        """Return the entity of ``kind`` with ``entity_id``.

        Raises:
            NotFoundError: If no such entity was saved
        """

    @abstractmethod
    def find_all(self, kind: Type[T]) -> List[T]:
        """All saved entities of ``kind``, in insertion order."""

    @abstractmethod
    def delete(self, kind: Type[T], entity_id: str) -> None:
        """Remove an entity; unknown ids raise :class:`NotFoundError`."""

    def save_all(self, entities: List[Any]) -> None:
        for entity in entities:
            self.save(entity)


class InMemoryRepository(Repository):
    """Dictionary-backed repository, safe to share between threads."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._store: Dict[Type, Dict[str, Any]] = {kind: {} for kind in ENTITY_KINDS}

    def save(self, entity: Any) -> None:
        with self._lock:
            self._store[entity_kind(entity)][entity.id] = entity

    def find_by_id(self, kind: Type[T], entity_id: str) -> T:
        with self._lock:
            try:
                return self._store[entity_kind(kind)][entity_id]
            except KeyError:
                raise NotFoundError(
                    f"{entity_kind(kind).__name__} {entity_id} not found"
                ) from None

    def find_all(self, kind: Type[T]) -> List[T]:
        with self._lock:
            return list(self._store[entity_kind(kind)].values())

    def delete(self, kind: Type[T], entity_id: str) -> None:
        with self._lock:
            collection = self._store[entity_kind(kind)]
            if entity_id not in collection:
                raise NotFoundError(
                    f"{entity_kind(kind).__name__} {entity_id} not found"
                )
            del collection[entity_id]

    def count(self, kind: Type) -> int:
        with self._lock:
            return len(self._store[entity_kind(kind)])
