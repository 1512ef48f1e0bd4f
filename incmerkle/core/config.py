"""
Tree configuration for incmerkle.

Defines the initial tree shape, the hash algorithm and logging options.
Values come from defaults, a ``.env`` file, or ``INCMERKLE_*`` environment
variables.
"""

import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from incmerkle.core.tree import MerkleTree
from incmerkle.crypto import available_hashers, get_hasher
from incmerkle.utils.validation import MAX_HEIGHT

ENV_PREFIX = "INCMERKLE_"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class TreeConfig(BaseModel):
    """Tree and logging configuration parameters"""

    # Tree parameters
    initial_height: int = Field(default=2, ge=0, le=MAX_HEIGHT)
    hash_algorithm: str = "sha256"

    # Logging
    log_level: str = "INFO"
    log_to_file: bool = False
    log_dir: Path = Path("logs")

    @field_validator("hash_algorithm")
    @classmethod
    def _known_hasher(cls, value: str) -> str:
        value = value.lower()
        if value not in available_hashers():
            raise ValueError(f"unknown hash algorithm {value!r}, expected one of {available_hashers()}")
        return value

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        value = value.upper()
        if value not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {_LOG_LEVELS}, got {value!r}")
        return value

    @property
    def log_level_value(self) -> int:
        """Numeric logging level."""
        return getattr(logging, self.log_level)

    def build_tree(self) -> MerkleTree:
        """Create an empty tree with this configuration."""
        return MerkleTree(self.initial_height, get_hasher(self.hash_algorithm))


def load_config(env_file: Optional[str] = None) -> TreeConfig:
    """
    Load configuration from the environment.

    Variables already set in the process environment win over the ones in
    the ``.env`` file.

    Args:
        env_file: Optional path to a .env file (searched for if None)

    Returns:
        TreeConfig instance
    """
    load_dotenv(dotenv_path=env_file, override=False)

    env_fields = {
        "initial_height": "HEIGHT",
        "hash_algorithm": "HASH",
        "log_level": "LOG_LEVEL",
        "log_to_file": "LOG_TO_FILE",
        "log_dir": "LOG_DIR",
    }

    values = {}
    for field_name, suffix in env_fields.items():
        raw = os.environ.get(ENV_PREFIX + suffix)
        if raw is not None and raw != "":
            values[field_name] = raw

    return TreeConfig(**values)
