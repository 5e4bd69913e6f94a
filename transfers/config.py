"""
Configuration for the transfer registry.

Single source of truth for storage bounds, file names and the
environment-driven service settings. Entry points call load_dotenv()
before load_settings() so values from a .env file are picked up.
"""

import os
from pathlib import Path
from typing import Literal, Optional, get_args

from pydantic import BaseModel, Field

# Integer bounds for persisted numeric fields
U64_MAX = 2**64 - 1
U32_MAX = 2**32 - 1

# Upper bound for one encoded record, fixed when a store is created
MAX_RECORD_SIZE = 1024

DEFAULT_DATA_DIR = Path(__file__).parent.parent / "data"

# One file per persisted map, plus the shared id counter
COUNTER_FILE = "counter.json"
PLAYERS_FILE = "players.json"
TRANSFERS_FILE = "transfers.json"
TRANSFER_BIDS_FILE = "transfer_bids.json"

ContractUnderflowPolicy = Literal["clamp", "reject"]

_TRUTHY = {"1", "true", "yes", "on"}


class ServiceSettings(BaseModel):
    """Runtime settings for the domain service and its storage."""

    data_dir: Optional[Path] = Field(
        default=None,
        description="Directory for file-backed state; None keeps everything in memory",
    )
    strict_empty_results: bool = Field(
        default=True,
        description="List reads raise NotFound instead of returning an empty list",
    )
    contract_underflow: ContractUnderflowPolicy = Field(
        default="clamp",
        description="clamp: expired contracts carry over as 0 | reject: refuse the bid acceptance",
    )
    max_record_size: int = Field(default=MAX_RECORD_SIZE, gt=0)
    log_level: str = Field(default="INFO")


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in _TRUTHY


def _env_str(name: str, default: str) -> str:
    """Unset and blank both mean the default."""
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip()


def _env_int(name: str, default: int) -> int:
    raw = _env_str(name, str(default))
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def load_settings() -> ServiceSettings:
    """
    Build ServiceSettings from TRANSFERS_* environment variables.

    TRANSFERS_IN_MEMORY wins over TRANSFERS_DATA_DIR; with neither set the
    default data/ directory next to the project is used. Blank values fall
    back to the defaults. Unusable values raise ValueError naming the variable.
    """
    if _env_flag("TRANSFERS_IN_MEMORY", False):
        data_dir = None
    else:
        raw_dir = _env_str("TRANSFERS_DATA_DIR", "")
        data_dir = Path(raw_dir) if raw_dir else DEFAULT_DATA_DIR

    underflow = _env_str("TRANSFERS_CONTRACT_UNDERFLOW", "clamp").lower()
    if underflow not in get_args(ContractUnderflowPolicy):
        raise ValueError(
            f"TRANSFERS_CONTRACT_UNDERFLOW must be one of "
            f"{', '.join(get_args(ContractUnderflowPolicy))}, got {underflow!r}"
        )
    max_record_size = _env_int("TRANSFERS_MAX_RECORD_SIZE", MAX_RECORD_SIZE)
    if max_record_size <= 0:
        raise ValueError(f"TRANSFERS_MAX_RECORD_SIZE must be positive, got {max_record_size}")

    return ServiceSettings(
        data_dir=data_dir,
        strict_empty_results=_env_flag("TRANSFERS_STRICT_EMPTY_RESULTS", True),
        contract_underflow=underflow,
        max_record_size=max_record_size,
        log_level=_env_str("TRANSFERS_LOG_LEVEL", "INFO"),
    )
