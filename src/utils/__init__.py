"""Utility functions for payload validation."""
from .config import get_env_config, load_config, save_config
from .paths import find_repo_root, resolve_path

__all__ = ["get_env_config", "load_config", "save_config", "find_repo_root", "resolve_path"]
