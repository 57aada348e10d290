"""
Configuration loading from config.yaml.

Uses typed dataclasses throughout so the rest of the app gets IDE
completion and type-checker support without touching raw dicts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from gotourney.tournaments.rules import MIN_ROUNDS

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass
class ApiConfig:
    base_url: str = "http://localhost:3000/api"
    timeout: float = 15   # seconds before a REST call is abandoned


@dataclass
class RulesConfig:
    min_rounds: int = MIN_ROUNDS


@dataclass
class LogConfig:
    dir: str = "./logs"
    level: str = "INFO"


@dataclass
class Config:
    api: ApiConfig = field(default_factory=ApiConfig)
    rules: RulesConfig = field(default_factory=RulesConfig)
    logging: LogConfig = field(default_factory=LogConfig)
    session_file: str = ".gotourney_session.json"

    @property
    def log_dir_path(self) -> Path:
        return Path(self.logging.dir)

    @property
    def session_path(self) -> Path:
        return Path(self.session_file)


def load_config(path: str | Path = "config.yaml") -> Config:
    """
    Load and validate config.yaml.

    Raises:
        FileNotFoundError: config.yaml is missing.
        ValueError: required fields are absent or invalid.
    """
    cfg_path = Path(path)
    if not cfg_path.exists():
        raise FileNotFoundError(
            f"Config file not found: {cfg_path.resolve()}\n"
            "Copy config.example.yaml to config.yaml and point api.base_url at your server."
        )

    with cfg_path.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    try:
        api_raw = raw.get("api") or {}
        rules_raw = raw.get("rules") or {}
        log_raw = raw.get("logging") or {}

        config = Config(
            api=ApiConfig(
                base_url=str(api_raw.get("base_url", ApiConfig.base_url)).rstrip("/"),
                timeout=float(api_raw.get("timeout", ApiConfig.timeout)),
            ),
            rules=RulesConfig(
                min_rounds=int(rules_raw.get("min_rounds", MIN_ROUNDS)),
            ),
            logging=LogConfig(
                dir=str(log_raw.get("dir", LogConfig.dir)),
                level=str(log_raw.get("level", LogConfig.level)).upper(),
            ),
            session_file=str(raw.get("session_file", Config.session_file)),
        )
        _validate(config)
        return config

    except (AttributeError, KeyError, TypeError) as exc:
        raise ValueError(f"Invalid config.yaml structure: {exc}") from exc


def _validate(config: Config) -> None:
    if not config.api.base_url.startswith(("http://", "https://")):
        raise ValueError(
            f"api.base_url must be an http(s) URL, got '{config.api.base_url}'"
        )
    if config.api.timeout <= 0:
        raise ValueError("api.timeout must be > 0")
    if config.rules.min_rounds < 1:
        raise ValueError("rules.min_rounds must be >= 1")
    if config.logging.level not in _LOG_LEVELS:
        raise ValueError(
            f"logging.level must be one of {_LOG_LEVELS}, got '{config.logging.level}'"
        )
