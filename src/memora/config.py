"""Configuration loading from environment variables and memora.toml."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib
from pathlib import Path

from memora.vault.store import STORAGE_KEY

_DEFAULT_HOME = Path.home() / ".memora"
_DEFAULT_DATA_DIR = _DEFAULT_HOME / "vault"
_CONFIG_FILENAME = "memora.toml"

_TRUTHY = ("1", "true", "yes", "on")
_FALSY = ("0", "false", "no", "off")


@dataclass
class VaultConfig:
    """Where the memory collection is mirrored."""

    data_dir: Path = _DEFAULT_DATA_DIR
    storage_key: str = STORAGE_KEY


@dataclass
class EnhancerConfig:
    """Configuration for the narrative enhancer engine."""

    enabled: bool = True
    engine: str = "gemini_api"
    fallback: str | None = None
    model: str | None = None
    timeout: int = 60
    language: str = "Indonesian"


@dataclass
class MemoraConfig:
    """Top-level Memora configuration."""

    vault: VaultConfig = field(default_factory=VaultConfig)
    enhancer: EnhancerConfig = field(default_factory=EnhancerConfig)
    log_level: str = "WARNING"


def _as_bool(value: object, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUTHY:
        return True
    if text in _FALSY:
        return False
    return default


def load_config(config_path: Path | None = None) -> MemoraConfig:
    """Load configuration from environment variables and optional memora.toml.

    Priority: environment variables > memora.toml > defaults.
    """
    file_data: dict = {}
    if config_path and config_path.exists():
        file_data = tomllib.loads(config_path.read_text())
    else:
        # Search current dir and ~/.memora/
        for candidate in [Path.cwd() / _CONFIG_FILENAME, _DEFAULT_HOME / _CONFIG_FILENAME]:
            if candidate.exists():
                file_data = tomllib.loads(candidate.read_text())
                break

    vault_data = file_data.get("vault", {})
    enhancer_data = file_data.get("enhancer", {})

    config = MemoraConfig(
        vault=VaultConfig(
            data_dir=Path(
                os.getenv("MEMORA_DATA_DIR", vault_data.get("data_dir", str(_DEFAULT_DATA_DIR)))
            ).expanduser(),
            storage_key=os.getenv("MEMORA_STORAGE_KEY", vault_data.get("storage_key", STORAGE_KEY)),
        ),
        enhancer=EnhancerConfig(
            enabled=_as_bool(
                os.getenv("MEMORA_ENHANCER", enhancer_data.get("enabled", True)), True
            ),
            engine=os.getenv("MEMORA_ENGINE", enhancer_data.get("engine", "gemini_api")),
            fallback=os.getenv("MEMORA_FALLBACK", enhancer_data.get("fallback")),
            model=os.getenv("MEMORA_MODEL", enhancer_data.get("model")),
            timeout=int(os.getenv("MEMORA_TIMEOUT", enhancer_data.get("timeout", 60))),
            language=os.getenv("MEMORA_LANGUAGE", enhancer_data.get("language", "Indonesian")),
        ),
        log_level=os.getenv("MEMORA_LOG_LEVEL", file_data.get("log_level", "WARNING")),
    )
    return config
