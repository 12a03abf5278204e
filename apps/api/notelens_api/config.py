from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Settings:
    vault_dir: Path
    verbose: bool
    api_debug_log: bool


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "false").strip().lower() == "true"


def load_settings() -> Settings:
    vault_dir = Path(os.environ.get("VAULT_DIR", "./vault")).resolve()
    return Settings(
        vault_dir=vault_dir,
        verbose=_env_flag("VERBOSE"),
        api_debug_log=_env_flag("API_DEBUG_LOG"),
    )
