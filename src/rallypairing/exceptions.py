"""Exceptions for use in Rally Pairing"""

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


# ========== Base Application Exception ==========


class RallyPairingException(Exception):
    """Base exception for all Rally Pairing errors.

    All custom exceptions in the package inherit from this class, so callers
    can catch every scheduler error with a single except clause.
    """

    pass


# ========== Pairing Exceptions ==========


class PairingException(RallyPairingException):
    """Base exception for pairing-related errors."""

    pass


class InvalidPairingException(PairingException):
    """Raised when a pair or match value is malformed.

    Examples are a pair made of the same player twice, or a match whose two
    teams share a player.
    """

    pass


class NoPairingAvailableException(PairingException):
    """Raised when a caller insists on a full round that cannot be built."""

    pass


# ========== Configuration Exceptions ==========


class ConfigurationException(RallyPairingException):
    """Base exception for session configuration errors."""

    pass


class InvalidConfigurationException(ConfigurationException):
    """Raised when session configuration values are invalid.

    Duplicate player ids, fixed teams sharing a player, an unsupported team
    size or an unknown gender mode all raise this.
    """

    pass


# ========== Validation Exceptions ==========


class ValidationException(RallyPairingException):
    """Raised when a generated round fails structural validation."""

    pass


# ========== Resource Exceptions ==========


class ResourceException(RallyPairingException):
    """Base exception for file and resource errors."""

    pass


class FileLoadException(ResourceException):
    """Raised when an exported session file cannot be loaded."""

    pass


class FileSaveException(ResourceException):
    """Raised when a session cannot be written to disk."""

    pass
