import random

import pytest

from tourneyhost.controllers import AdvancementEngine, EventLifecycle
from tourneyhost.models import Player, create_event


def make_players(*names):
    return [Player(name=name, username=name.lower(), id=name) for name in names]


def seed_rank(event, participant_id):
    """Lower is stronger; unseeded participants rank last."""
    return event.seeds().get(participant_id, len(event.participants()) + 1)


@pytest.fixture
def advancement():
    return AdvancementEngine()


@pytest.fixture
def build_event(advancement):
    """Create, fill, seed and initialize an event in one call."""

    def _build(variant, players, seeds=None, rng_seed=0, **options):
        event = create_event(variant, "Main", **options)
        for player in players:
            event.add_player(player)
        for player_id, seed in (seeds or {}).items():
            event.set_player_seed(player_id, seed)
        EventLifecycle(rng=random.Random(rng_seed), advancement=advancement).initialize(
            event
        )
        return event

    return _build


@pytest.fixture
def play_out(advancement):
    """Play every open match until none is left; ``pick`` chooses the winner."""

    def _play(event, pick=None):
        pick = pick or (
            lambda match: min(match.participants(), key=lambda p: seed_rank(event, p))
        )
        while True:
            open_matches = advancement.open_matches(event)
            if not open_matches:
                return event
            match = open_matches[0]
            advancement.record_result(event, match.id, pick(match))

    return _play
