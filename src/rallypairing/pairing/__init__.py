"""Scheduling algorithms for round-robin doubles and singles sessions."""

# Rally Pairing
# Copyright (C) 2025  Rally Pairing developers
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

from rallypairing.pairing.eligibility import (
    compute_num_matches,
    filter_fixed_teams,
    filter_participants,
    filter_player_ids,
)
from rallypairing.pairing.fixed_teams import generate_fixed_team_matchups
from rallypairing.pairing.history import (
    HistoryStats,
    last_round_pair_keys,
    matches_played,
    opponent_history,
    team_matchup_history,
    teammate_history,
)
from rallypairing.pairing.matchup_former import form_matchups
from rallypairing.pairing.pair_pool import all_possible_pairs, build_pool
from rallypairing.pairing.pair_selector import select_from_pool, select_team_pairs
from rallypairing.pairing.round_generator import (
    RoundGenerator,
    create_round_generator,
    generate_round,
)

__all__ = [
    "HistoryStats",
    "RoundGenerator",
    "all_possible_pairs",
    "build_pool",
    "compute_num_matches",
    "create_round_generator",
    "filter_fixed_teams",
    "filter_participants",
    "filter_player_ids",
    "form_matchups",
    "generate_fixed_team_matchups",
    "generate_round",
    "last_round_pair_keys",
    "matches_played",
    "opponent_history",
    "select_from_pool",
    "select_team_pairs",
    "team_matchup_history",
    "teammate_history",
]
