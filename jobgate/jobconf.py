"""Loading of job configurations from YAML or Hadoop-style XML files."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional, Union

import yaml

from .definition import child_text_trim, iter_children, load_definition


def _load_xml_conf(path: Path) -> dict[str, str]:
    root = load_definition(path)
    conf: dict[str, str] = {}
    for prop in iter_children(root, "property"):
        name = child_text_trim(prop, "name")
        if name:
            conf[name] = child_text_trim(prop, "value") or ""
    return conf


def _load_yaml_conf(path: Path) -> dict[str, str]:
    data = yaml.safe_load(path.read_text()) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Job configuration {path} must be a mapping")
    return {
        str(key): "" if value is None else str(value) for key, value in data.items()
    }


def load_job_conf(path: Optional[Union[str, Path]] = None) -> dict[str, str]:
    """Load a job configuration.

    ``.xml`` files use the ``<configuration><property>`` layout; anything
    else is read as a flat YAML mapping. No path gives an empty configuration.
    """
    if path is None:
        return {}
    path = Path(path)
    if path.suffix.lower() == ".xml":
        return _load_xml_conf(path)
    return _load_yaml_conf(path)


def apply_overrides(conf: dict[str, str], overrides: Iterable[str]) -> dict[str, str]:
    """Apply ``key=value`` overrides to ``conf`` in place and return it."""
    for item in overrides:
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            raise ValueError(f"Override must be key=value, got {item!r}")
        conf[key.strip()] = value
    return conf
