from __future__ import annotations

import json
import os
from dataclasses import dataclass, replace
from pathlib import Path

from dotenv import load_dotenv

from .date.types import ExtractPolicy

DEFAULT_SKIP_SUFFIXES = (".py", ".js", ".mjs", ".ts", ".sh")
RANGE_SUFFIX_CHOICES = ("keep", "drop")


@dataclass(frozen=True)
class Settings:
    """Run settings: extraction policy plus what the directory walker skips."""

    policy: ExtractPolicy = ExtractPolicy()
    skip_suffixes: tuple[str, ...] = DEFAULT_SKIP_SUFFIXES
    directories: tuple[str, ...] = ()


def _parse_year(value: object, key: str) -> int | None:
    if value is None:
        return None
    s = str(value).strip()
    if not s:
        return None
    try:
        return int(s)
    except ValueError:
        raise ValueError(f"{key} must be an integer year, got {value!r}") from None


def _parse_range_suffix(value: object, key: str) -> str:
    s = str(value).strip().lower()
    if s not in RANGE_SUFFIX_CHOICES:
        raise ValueError(f"{key} must be one of {', '.join(RANGE_SUFFIX_CHOICES)}, got {value!r}")
    return s


def _parse_suffixes(value: object, key: str) -> tuple[str, ...]:
    if isinstance(value, str):
        items = value.split(",")
    elif isinstance(value, (list, tuple)):
        items = [str(x) for x in value]
    else:
        raise ValueError(f"{key} must be a list or a comma separated string")
    out = []
    for item in items:
        item = item.strip().lower()
        if not item:
            continue
        out.append(item if item.startswith(".") else "." + item)
    return tuple(out)


def _apply(settings: Settings, values: dict) -> Settings:
    """Overlay the known keys of values onto settings."""
    policy = settings.policy
    out = settings

    key = "range_suffix"
    if values.get(key) not in (None, ""):
        policy = replace(policy, range_suffix=_parse_range_suffix(values[key], key))

    key = "min_year"
    min_year = _parse_year(values.get(key), key)
    if min_year is not None:
        policy = replace(policy, min_year=min_year)

    key = "max_year"
    if key in values:
        policy = replace(policy, max_year=_parse_year(values[key], key))

    key = "skip_suffixes"
    if values.get(key) is not None:
        out = replace(out, skip_suffixes=_parse_suffixes(values[key], key))

    key = "directories"
    if values.get(key) is not None:
        dirs = values[key]
        if not isinstance(dirs, list):
            raise ValueError(f"{key} must be a list of paths")
        out = replace(out, directories=tuple(str(d) for d in dirs))

    return replace(out, policy=policy)


def settings_from_env(*, dotenv: bool = True) -> Settings:
    """Read DATEPREFIX_* variables (optionally from .env)."""
    if dotenv:
        load_dotenv()
    env = {
        k[len("DATEPREFIX_") :].lower(): v
        for k, v in os.environ.items()
        if k.startswith("DATEPREFIX_") and k != "DATEPREFIX_DIRECTORIES"
    }
    return _apply(Settings(), env)


def load_settings(config_path: Path | None = None, *, dotenv: bool = True) -> Settings:
    """Environment first, then the optional JSON config file on top."""
    settings = settings_from_env(dotenv=dotenv)
    if not config_path:
        return settings

    if not config_path.exists():
        raise ValueError(f"Config file not found: {config_path}")
    try:
        obj = json.loads(config_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Config file is not valid JSON: {config_path} ({e})") from e
    if not isinstance(obj, dict):
        raise ValueError(f"Config file must hold a JSON object: {config_path}")
    return _apply(settings, obj)
