"""Shared helpers for Tourney Host: logging setup and id generation."""

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

import logging
import os
import sys
import uuid

from tourneyhost.constants import DEFAULT_LOG_LEVEL, LOG_LEVEL_ENV_VAR

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logger(name: str) -> logging.Logger:
    """Return the module logger, attaching a stream handler on first use.

    The level comes from the ``TOURNEYHOST_LOG_LEVEL`` environment variable
    and falls back to INFO when unset or unknown.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        level_name = os.environ.get(LOG_LEVEL_ENV_VAR, DEFAULT_LOG_LEVEL).upper()
        logger.setLevel(getattr(logging, level_name, logging.INFO))
    return logger


def generate_id(prefix: str = "") -> str:
    """Generate a unique identifier, optionally prefixed (``Match-1a2b3c4d``)."""
    unique = uuid.uuid4().hex[:12]
    return f"{prefix}-{unique}" if prefix else unique


def normalize_name(name: str) -> str:
    """Lowercase a name and drop all whitespace so "My Cup" equals "mycup"."""
    return "".join(name.split()).lower()
