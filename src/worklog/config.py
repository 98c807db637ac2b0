"""Configuration management for worklog."""

import copy
import os
from pathlib import Path
from typing import Any

import yaml

from .analysis.terms import DEFAULT_TOKENIZER, TokenizerConfig
from .models import SOURCE_TYPES


DEFAULT_CONFIG = {
    "default_sources": list(SOURCE_TYPES),
    "git_repos": [],
    "git_author": None,
    "github_user": None,
    "paths": {
        "opencode": "~/.local/share/opencode/storage/session",
        "claude": "~/.claude/projects",
        "codex": "~/.codex/sessions",
        "factory": "~/.factory/sessions",
    },
    "analysis": {"threshold": 0.3, "top_keywords": 5, "key_terms": 10, "extra_stop_words": []},
    "filter_noise": True,
    "data_dir": "~/.local/share/worklog",
}


def default_config_path() -> Path:
    return Path.home() / ".config" / "worklog" / "config.yaml"


def _find_config_file() -> Path | None:
    """Look for config.yaml in standard locations."""
    candidates = [
        Path.cwd() / "config.yaml",
        default_config_path(),
    ]
    for p in candidates:
        if p.exists():
            return p
    return None


def _split_list(value: str) -> list[str]:
    return [s.strip() for s in value.split(",") if s.strip()]


def expand_path(path: str) -> str:
    return str(Path(path).expanduser())


def load_config(config_path: str | Path | None = None) -> dict[str, Any]:
    """Load configuration, merging defaults with file and env vars."""
    cfg = copy.deepcopy(DEFAULT_CONFIG)

    path = Path(config_path) if config_path else _find_config_file()
    if path and path.exists():
        with open(path) as f:
            file_cfg = yaml.safe_load(f) or {}
        _deep_merge(cfg, file_cfg)

    # Env overrides
    if sources := os.environ.get("WORKLOG_SOURCES"):
        cfg["default_sources"] = _split_list(sources)
    if repos := os.environ.get("WORKLOG_GIT_REPOS"):
        cfg["git_repos"] = _split_list(repos)
    if user := os.environ.get("WORKLOG_GITHUB_USER"):
        cfg["github_user"] = user
    if data_dir := os.environ.get("WORKLOG_DATA_DIR"):
        cfg["data_dir"] = data_dir
    if threshold := os.environ.get("WORKLOG_THRESHOLD"):
        cfg["analysis"]["threshold"] = threshold

    cfg["analysis"]["threshold"] = validate_threshold(cfg["analysis"].get("threshold"))

    # Expand paths
    for key, value in cfg["paths"].items():
        cfg["paths"][key] = expand_path(value)
    cfg["git_repos"] = [expand_path(r) for r in cfg.get("git_repos") or []]
    cfg["data_dir"] = expand_path(cfg["data_dir"])

    return cfg


def validate_threshold(value: Any) -> float:
    """Coerce a clustering threshold to float in [0, 1]."""
    try:
        threshold = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"analysis.threshold must be a number, got {value!r}")
    if not 0.0 <= threshold <= 1.0:
        raise ValueError(f"analysis.threshold must be between 0 and 1, got {threshold}")
    return threshold


def build_tokenizer(config: dict[str, Any]) -> TokenizerConfig:
    """Tokenizer settings for this config, including extra stop words."""
    extra = config.get("analysis", {}).get("extra_stop_words") or []
    if not extra:
        return DEFAULT_TOKENIZER
    return DEFAULT_TOKENIZER.with_extra_stop_words(extra)


def _deep_merge(base: dict, override: dict) -> None:
    """Merge override into base in-place."""
    for k, v in override.items():
        if k in base and isinstance(base[k], dict) and isinstance(v, dict):
            _deep_merge(base[k], v)
        else:
            base[k] = v
