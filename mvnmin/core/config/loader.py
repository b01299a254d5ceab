"""
Configuration loader — reads mvnmin.yml into domain models.

mvnmin looks for its hints file in the directory it is run from (the
root of the Maven tree). YAML is the native format; the legacy
mvnmin.xml layout is still understood so existing trees keep working.
A missing file is not an error: every section defaults to empty.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from mvnmin.core.models.config import MvnMinConfig

logger = logging.getLogger(__name__)

# Searched in this order
CONFIG_FILE_NAMES = ("mvnmin.yml", "mvnmin.yaml", "mvnmin.xml")


class ConfigError(Exception):
    """Raised when mvnmin configuration is invalid."""


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Return the first config file present in ``start_dir`` (default: cwd)."""
    directory = start_dir or Path.cwd()
    for name in CONFIG_FILE_NAMES:
        candidate = directory / name
        if candidate.is_file():
            return candidate
    return None


def load_config(path: Path | None = None, start_dir: Path | None = None) -> MvnMinConfig:
    """Load and validate mvnmin configuration.

    Args:
        path: Explicit config file. If None, looks in ``start_dir``.
        start_dir: Directory to look in (default: cwd).

    Returns:
        Validated MvnMinConfig. Empty if no file exists.

    Raises:
        ConfigError: If the file cannot be read or is invalid.
    """
    if path is None:
        path = find_config_file(start_dir)

    if path is None:
        logger.debug("No mvnmin config file found, using defaults")
        return MvnMinConfig()

    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading mvnmin config from %s", path)

    if path.suffix == ".xml":
        data = _read_xml(path)
    else:
        data = _read_yaml(path)

    try:
        config = MvnMinConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid mvnmin configuration in {path}: {e}") from e

    logger.info(
        "Loaded %s: %d reactors, %d build-ifs, %d ignored modules",
        path.name,
        len(config.reactors),
        len(config.build_ifs),
        len(config.ignored_modules),
    )
    return config


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # Allow everything to sit under a top-level "mvnmin:" key
    if set(data) == {"mvnmin"} and isinstance(data["mvnmin"], dict):
        return data["mvnmin"]
    return data


# ── Legacy XML ──────────────────────────────────────────────────


def _texts(parent: ET.Element | None, tag: str) -> list[str]:
    if parent is None:
        return []
    return [(e.text or "").strip() for e in parent.findall(tag) if (e.text or "").strip()]


def _xml_bool(value: str | None) -> bool | None:
    if value is None:
        return None
    return value.strip().lower() == "true"


def _read_xml(path: Path) -> dict[str, Any]:
    """Translate the legacy ``<mvnmin>`` document into the YAML layout."""
    try:
        root = ET.parse(path).getroot()
    except (ET.ParseError, OSError) as e:
        raise ConfigError(f"Failed to load configuration {path}: {e}") from e

    if root.tag != "mvnmin":
        raise ConfigError(f"Expected <mvnmin> root element in {path}, got <{root.tag}>")

    data: dict[str, Any] = {
        "ignored-modules": _texts(root.find("ignored-modules"), "module"),
        "build-ifs": [],
        "reactors": [],
    }

    command = root.findtext("maven-command")
    if command and command.strip():
        data["maven-command"] = command.strip()

    build_ifs = root.find("build-ifs")
    if build_ifs is not None:
        for build_if in build_ifs.findall("build-if"):
            data["build-ifs"].append({
                "match": [m.get("regex", "") for m in build_if.findall("match") if m.get("regex")],
                "modules": _texts(build_if, "module"),
            })

    reactors = root.find("reactors")
    if reactors is not None:
        for reactor in reactors.findall("reactor"):
            entry: dict[str, Any] = {
                "primary": bool(_xml_bool(reactor.get("primary"))),
                "name": reactor.get("name"),
                "pom": reactor.get("pom"),
                "skip-if": reactor.get("skip-if"),
                "extra-params": reactor.get("extra-params"),
                "single-thread": _xml_bool(reactor.get("single-thread")),
                "patterns": _texts(reactor, "pattern"),
            }
            data["reactors"].append(entry)

    return data
