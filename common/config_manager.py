import os
from pathlib import Path
from typing import Any, Dict

import yaml
from dotenv import load_dotenv

PROJECT_KEYS = ["user_agent", "logging", "paths"]
SPOTIFY_KEYS = ["timeout_secs", "page_size", "retry"]


class ConfigManager:
    """
    Strict loader for configs/*.yaml plus secrets from the environment.
    """

    def __init__(self, repo_root: Path, config_dirname: str = "configs") -> None:
        self.root = Path(repo_root).resolve()
        self.config_dir = self.root / config_dirname
        # .env only fills gaps; real env vars win
        load_dotenv(self.root / ".env", override=False)
        if not self.config_dir.is_dir():
            raise FileNotFoundError(f"Configs directory not found: {self.config_dir}")

    def project(self) -> Dict[str, Any]:
        """configs/project.yaml: user agent, logging and default paths."""
        cfg = self.load("project.yaml")
        self.require_keys(cfg, PROJECT_KEYS)
        return cfg

    def spotify(self) -> Dict[str, Any]:
        """configs/spotify.yaml: client timeouts, page size and retry policy."""
        cfg = self.load("spotify.yaml")
        self.require_keys(cfg, SPOTIFY_KEYS)
        return cfg

    def load(self, name: str) -> Dict[str, Any]:
        return self._load_yaml(self.config_dir / name)

    def resolve_path(self, value: str | Path) -> Path:
        """Relative paths in the yaml are relative to the repo root."""
        path = Path(value)
        return path if path.is_absolute() else self.root / path

    def env(self, key: str, default: str | None = None, *, required: bool = False) -> str | None:
        """
        Read an environment variable (secrets live here, not in yaml).
        Raises RuntimeError when `required` and the variable is unset.
        """
        val = os.getenv(key, default)
        if required and not val:
            raise RuntimeError(f"Missing required environment variable: {key}")
        return val

    @staticmethod
    def require_keys(config: Dict[str, Any], keys: list[str]) -> None:
        missing = [k for k in keys if k not in config]
        if missing:
            raise KeyError(f"Missing required key(s) in config: {', '.join(missing)}")

    @staticmethod
    def _load_yaml(path: Path) -> Dict[str, Any]:
        if not path.is_file():
            raise FileNotFoundError(f"Config file not found: {path}")
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Config must be a YAML mapping (dict): {path}")
        return data
