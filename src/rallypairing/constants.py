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

# --- Constants ---
SAVE_FILE_EXTENSION = ".json"

# Selection retry budget, per pool
DEFAULT_MAX_ATTEMPTS = 20
# Search nodes allowed for the full-round look-ahead
LOOKAHEAD_SEARCH_BUDGET = 5000

# Team sizes
TEAM_SIZE_SINGLES = 1
TEAM_SIZE_DOUBLES = 2
SUPPORTED_TEAM_SIZES = (TEAM_SIZE_SINGLES, TEAM_SIZE_DOUBLES)
DEFAULT_TEAM_SIZE = TEAM_SIZE_DOUBLES

# Fewest players that can fill one match
MIN_PLAYERS_DOUBLES = 4
MIN_PLAYERS_SINGLES = 2
# Fewest fixed teams that can fill one match
MIN_FIXED_TEAMS = 2

# Player genders
GENDER_MALE = "MALE"
GENDER_FEMALE = "FEMALE"
GENDER_UNDISCLOSED = "PREFER_NOT_TO_SAY"
GENDERS = (GENDER_MALE, GENDER_FEMALE, GENDER_UNDISCLOSED)

# Gender team modes
GENDER_TEAMS_ANY = "ANY"
GENDER_TEAMS_MEN = "MEN"
GENDER_TEAMS_WOMEN = "WOMEN"
GENDER_TEAMS_MIX_PAIRS = "MIX_PAIRS"
GENDER_TEAM_MODES = (
    GENDER_TEAMS_ANY,
    GENDER_TEAMS_MEN,
    GENDER_TEAMS_WOMEN,
    GENDER_TEAMS_MIX_PAIRS,
)
DEFAULT_GENDER_TEAMS = GENDER_TEAMS_ANY

# Simulator defaults
DEFAULT_SIM_PLAYERS = 8
DEFAULT_SIM_COURTS = 2
DEFAULT_SIM_ROUNDS = 7
DEFAULT_SIM_SEED = 42
# Ids beyond this fall back to P001 style
MAX_LETTER_IDS = 26
