"""
Static configuration data for the IL module loader, plus the runtime
`LoaderConfig` model used to build a `LoaderState`.
"""

import hashlib
import os
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

DEFAULT_HASH_ALGORITHM = "sha256"

# Requested names starting with this marker are expanded against the user's home directory
HOME_MARKER = "~"

# os.pathsep separated list of directories forming the baseline search path
SEARCH_PATH_ENV_VAR = "ILLOADER_PATH"

DEFAULT_SEARCH_PATH = ["."]

# Read size used when hashing module files
SIGNATURE_CHUNK_SIZE = 64 * 1024


def validate_hash_algorithm(name: str) -> str:
    """
    Returns the normalised name of a hash usable for module signatures. Rejects names
    hashlib cannot build at runtime and variable-length (XOF) hashes such as shake_128.
    """
    normalised = name.lower()
    try:
        digest = hashlib.new(normalised)
    except (ValueError, TypeError):
        raise ValueError(f"Unknown hash algorithm '{name}'.")
    if normalised.startswith("shake_") or digest.digest_size == 0:
        raise ValueError(f"Hash algorithm '{name}' has no fixed digest size.")
    return normalised


class LoaderConfig(BaseModel):
    """Runtime settings for a loader: the baseline search path and the signature hash."""

    search_path: List[str] = Field(default_factory=lambda: list(DEFAULT_SEARCH_PATH))
    hash_algorithm: str = DEFAULT_HASH_ALGORITHM

    @field_validator("hash_algorithm")
    @classmethod
    def check_hash_algorithm(cls, value: str) -> str:
        return validate_hash_algorithm(value)

    @classmethod
    def from_env(cls, environ: Optional[dict] = None, **overrides) -> "LoaderConfig":
        environ = os.environ if environ is None else environ
        raw = environ.get(SEARCH_PATH_ENV_VAR, "")
        entries = [entry for entry in raw.split(os.pathsep) if entry]
        if entries and "search_path" not in overrides:
            overrides["search_path"] = entries
        return cls(**overrides)
