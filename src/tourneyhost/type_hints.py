"""Type hints used in Tourney Host."""

from typing import Callable, Dict, List, Literal, Optional, Sequence, Tuple, Union

# Match slot string constants (for runtime use)
A = "A"
B = "B"

# Basically, slot A or slot B
Slot = Literal["A", "B"]

# Which result of a feeder match fills a slot
Outcome = Literal["winner", "loser"]

# Player ids or team ids, depending on the event's match type
ParticipantId = str
# Position -> participant (None is a bye)
Draw = List[Optional[ParticipantId]]
# Participant -> seed number (1 is strongest)
SeedMap = Dict[ParticipantId, int]
# Placement label such as "1", "2", "3", "5"
PlacementLabel = str
Placements = Dict[ParticipantId, PlacementLabel]
# (score_a, score_b) for one game, slot order
GameScore = Tuple[int, int]
GameScores = Sequence[GameScore]

Participant = Union["Player", "Team"]
MaybeParticipant = Optional[Participant]
# Supplies the participants an event is initialized with
ParticipantSource = Callable[["Event"], List[Participant]]

#  LocalWords:  ParticipantId SeedMap
