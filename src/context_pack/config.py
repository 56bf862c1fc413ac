"""Configuration management for Context Pack CLI."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

# Conditional import for Python 3.10 compatibility
if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[import-not-found]

from context_pack.core.classifier import LARGE_FILE_THRESHOLD
from context_pack.core.scanner import parse_size


@dataclass
class ScanConfig:
    """Walker and classifier settings."""

    respect_gitignore: bool = True
    large_file_threshold: str = "10KB"
    extra_ignore: list[str] = field(default_factory=list)

    @property
    def large_file_threshold_bytes(self) -> int:
        """Convert large_file_threshold to bytes."""
        try:
            return parse_size(self.large_file_threshold)
        except ValueError:
            return LARGE_FILE_THRESHOLD


@dataclass
class ReportConfig:
    """Report display settings."""

    top_files: int = 15
    show_all: bool = False


@dataclass
class GenerateConfig:
    """File generation settings."""

    overwrite: bool = False
    claudeignore: bool = True
    claudemd: bool = True


@dataclass
class Config:
    """Root configuration container."""

    scan: ScanConfig = field(default_factory=ScanConfig)
    report: ReportConfig = field(default_factory=ReportConfig)
    generate: GenerateConfig = field(default_factory=GenerateConfig)

    # Metadata (not from TOML)
    _source: Path | None = field(default=None, repr=False)


def get_xdg_config_home() -> Path:
    """Get XDG config home, respecting environment variable."""
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg)
    return Path.home() / ".config"


def get_config_paths() -> tuple[Path, Path]:
    """
    Get config file paths in priority order.

    Returns:
        (xdg_path, cwd_path) - XDG is base, CWD overrides
    """
    xdg_path = get_xdg_config_home() / "context-pack" / "config.toml"
    cwd_path = Path.cwd() / "contextpack.toml"
    return xdg_path, cwd_path


def _load_toml(path: Path) -> dict[str, Any]:
    """Load and parse a TOML file."""
    with open(path, "rb") as f:
        result: dict[str, Any] = tomllib.load(f)
        return result


def _merge_dicts(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries, override takes precedence."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _merge_dicts(result[key], value)
        else:
            result[key] = value
    return result


def _validate_config(data: dict[str, Any]) -> list[str]:
    """Validate TOML data and return list of errors."""
    errors: list[str] = []

    threshold = data.get("scan", {}).get("large_file_threshold")
    if threshold:
        try:
            parse_size(threshold)
        except (ValueError, AttributeError):
            errors.append(
                f"Invalid scan.large_file_threshold: '{threshold}' (use: 10KB, 1MB)"
            )

    extra = data.get("scan", {}).get("extra_ignore")
    if extra is not None and (
        not isinstance(extra, list) or not all(isinstance(p, str) for p in extra)
    ):
        errors.append("Invalid scan.extra_ignore: expected a list of strings")

    top_files = data.get("report", {}).get("top_files")
    if top_files is not None and (not isinstance(top_files, int) or top_files < 1):
        errors.append(f"Invalid report.top_files: '{top_files}' (use a positive integer)")

    return errors


def _filter_known_keys(data: dict[str, Any], dataclass_type: type) -> dict[str, Any]:
    """Filter dict to only include keys that are valid fields for the dataclass."""
    valid_fields = {f.name for f in fields(dataclass_type)}
    return {k: v for k, v in data.items() if k in valid_fields}


# Mapping of section names to their config classes
SECTION_TYPES = {
    "scan": ScanConfig,
    "report": ReportConfig,
    "generate": GenerateConfig,
}


def _dict_to_config(data: dict[str, Any], source: Path | None = None) -> Config:
    """Convert parsed TOML dict to Config dataclass."""
    sections = {
        name: cls(**_filter_known_keys(data.get(name, {}), cls))
        for name, cls in SECTION_TYPES.items()
    }
    return Config(**sections, _source=source)


def load_config() -> Config:
    """
    Load configuration with XDG + CWD override precedence.

    Priority (highest to lowest):
    1. ./contextpack.toml (CWD override)
    2. ~/.config/context-pack/config.toml (XDG base)
    3. Built-in defaults

    Returns:
        Merged Config instance

    Raises:
        ValueError: If TOML syntax is invalid in either config file
    """
    xdg_path, cwd_path = get_config_paths()

    merged_data: dict[str, Any] = {}
    active_source: Path | None = None

    if xdg_path.exists():
        try:
            merged_data = _load_toml(xdg_path)
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid TOML in {xdg_path}: {e}") from e
        active_source = xdg_path

    if cwd_path.exists():
        try:
            cwd_data = _load_toml(cwd_path)
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid TOML in {cwd_path}: {e}") from e
        merged_data = _merge_dicts(merged_data, cwd_data)
        active_source = cwd_path

    if merged_data:
        errors = _validate_config(merged_data)
        if errors:
            raise ValueError(f"Config validation failed ({active_source}): {'; '.join(errors)}")

    return _dict_to_config(merged_data, active_source)


def load_config_from_file(path: Path) -> Config:
    """Load configuration from a specific file."""
    try:
        data = _load_toml(path)
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Invalid TOML in {path}: {e}") from e
    errors = _validate_config(data)
    if errors:
        raise ValueError(f"Config validation failed: {'; '.join(errors)}")
    return _dict_to_config(data, path)


# Default config template for `config init`
DEFAULT_CONFIG_TEMPLATE = """\
# Context Pack Configuration

[scan]
respect_gitignore = true        # Also apply rules from .gitignore
large_file_threshold = "10KB"   # Unclassified files above this are listed for review
extra_ignore = []               # Additional ignore rules, e.g. ["*.min.js", "docs/api/"]

[report]
top_files = 15                  # Largest files shown by `context-pack scan`
show_all = false                # Show every large file in `context-pack suggest`

[generate]
overwrite = false               # Replace existing files (same as --overwrite)
claudeignore = true             # Write .claudeignore
claudemd = true                 # Write CLAUDE.md
"""
