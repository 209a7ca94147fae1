"""Configuration utilities."""

import json
import os
from pathlib import Path
from typing import Any

import yaml


def load_config(path: str) -> Any:
    """
    Load configuration from JSON or YAML file.

    Args:
        path: Path to configuration file

    Returns:
        Parsed file contents
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        if path.suffix in [".yaml", ".yml"]:
            return yaml.safe_load(f)
        elif path.suffix == ".json":
            return json.load(f)
        else:
            raise ValueError(f"Unsupported config format: {path.suffix}")


def save_config(config: dict[str, Any], path: str) -> None:
    """
    Save configuration to JSON or YAML file.

    Args:
        config: Configuration dictionary
        path: Path to save file
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w") as f:
        if path.suffix in [".yaml", ".yml"]:
            yaml.safe_dump(config, f, default_flow_style=False, sort_keys=False)
        elif path.suffix == ".json":
            json.dump(config, f, indent=2)
        else:
            raise ValueError(f"Unsupported config format: {path.suffix}")


def _split_origins(value: str) -> list[str]:
    return [origin.strip() for origin in value.split(",") if origin.strip()]


def get_env_config() -> dict[str, Any]:
    """Get configuration from environment variables."""
    return {
        "schema_dir": os.environ.get("SCHEMA_DIR", "schemas"),
        "log_level": os.environ.get("LOG_LEVEL", "INFO").upper(),
        "cors_allow_origins": _split_origins(os.environ.get("CORS_ALLOW_ORIGINS", "*")),
    }
