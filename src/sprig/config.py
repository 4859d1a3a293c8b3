"""TOML config loading for sprig.toml."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path

CONFIG_NAME = "sprig.toml"
SOURCE_SUFFIX = ".spg"


@dataclass
class PackageConfig:
    name: str = "untitled"
    version: str = "0.0.0"


@dataclass
class CheckConfig:
    source_dir: str = "src"
    color: bool = True


@dataclass
class SprigConfig:
    package: PackageConfig = field(default_factory=PackageConfig)
    check: CheckConfig = field(default_factory=CheckConfig)


def find_config(start_path: Path | None = None) -> Path:
    """Walk up directories to find sprig.toml. Raises FileNotFoundError."""
    path = (start_path or Path.cwd()).resolve()
    if path.is_file():
        path = path.parent
    while True:
        candidate = path / CONFIG_NAME
        if candidate.exists():
            return candidate
        parent = path.parent
        if parent == path:
            raise FileNotFoundError(f"No {CONFIG_NAME} found in any parent directory")
        path = parent


def load_config(path: Path) -> SprigConfig:
    """Parse a sprig.toml file into a SprigConfig."""
    with open(path, "rb") as f:
        data = tomllib.load(f)

    config = SprigConfig()

    if "package" in data:
        pkg = data["package"]
        config.package = PackageConfig(
            name=pkg.get("name", "untitled"),
            version=pkg.get("version", "0.0.0"),
        )

    if "check" in data:
        chk = data["check"]
        config.check = CheckConfig(
            source_dir=chk.get("source_dir", "src"),
            color=chk.get("color", True),
        )

    return config


def source_files(project_dir: Path, config: SprigConfig) -> list[Path]:
    """All Sprig sources of a project, falling back to the project root."""
    src_dir = project_dir / config.check.source_dir
    if not src_dir.is_dir():
        src_dir = project_dir
    return sorted(src_dir.rglob(f"*{SOURCE_SUFFIX}"))
