"""Type hints used in Rally Pairing."""

from typing import Dict, List, Literal, Tuple

# Player gender literals (for type hints)
Gender = Literal["MALE", "FEMALE", "PREFER_NOT_TO_SAY"]

# Gender team mode literals
GenderTeams = Literal["ANY", "MEN", "WOMEN", "MIX_PAIRS"]

# Opaque player identifier
PlayerId = str
# Canonical pair of player ids, smaller id first
PairKey = Tuple[str, str]
# Two pair keys in canonical order
MatchupKey = Tuple[PairKey, PairKey]
# A team as it appears in a match
Team = Tuple[str, ...]

# Usage counters
PairCounts = Dict[PairKey, int]
MatchupCounts = Dict[MatchupKey, int]
PlayedCounts = Dict[str, int]

# List of player ids
PlayerIds = List[str]

#  LocalWords:  PairKey MatchupKey
