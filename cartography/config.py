"""Shared configuration for the cartography package.

Loads environment variables (and a project-level .env file) and provides
centralized config access.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Project paths
PROJECT_ROOT = Path(__file__).parent.parent
DATASETS_DIR = PROJECT_ROOT / "datasets"
ENV_PATH = PROJECT_ROOT / ".env"

# Load on import; variables already set in the shell take precedence
load_dotenv(ENV_PATH)

_TRUTHY = {"1", "true", "yes", "on"}


def get_datasets_dir() -> Path:
    """Get the directory holding one relation JSON file per domain.

    Returns:
        Path from CARTOGRAPHY_DATASETS_DIR, or PROJECT_ROOT/datasets.
    """
    value = os.environ.get("CARTOGRAPHY_DATASETS_DIR", "").strip()
    return Path(value) if value else DATASETS_DIR


def get_skip_malformed() -> bool:
    """Whether malformed dataset files are skipped instead of aborting the load."""
    value = os.environ.get("CARTOGRAPHY_SKIP_MALFORMED", "")
    return value.strip().lower() in _TRUTHY


def get_dedup_scope() -> str:
    """Get the explored-set scope used when merging domains.

    Returns:
        "global" or "per_domain".

    Raises:
        ValueError: If CARTOGRAPHY_DEDUP_SCOPE holds anything else.
    """
    value = os.environ.get("CARTOGRAPHY_DEDUP_SCOPE", "").strip().lower()
    if not value:
        return "global"
    if value not in ("global", "per_domain"):
        raise ValueError(
            f"CARTOGRAPHY_DEDUP_SCOPE must be 'global' or 'per_domain', got {value!r}"
        )
    return value
