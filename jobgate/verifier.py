"""Verification of the ``<parameters>`` section of a job definition.

A definition may declare the parameters it needs::

    <workflow-app xmlns="uri:oozie:workflow:0.4" name="wf">
        <parameters>
            <property>
                <name>inputDir</name>
            </property>
            <property>
                <name>outputDir</name>
                <value>out-dir</value>
            </property>
        </parameters>
        ...
    </workflow-app>

Declared parameters missing from the job configuration receive their
default value. Parameters with neither a configured value nor a default are
reported together in a single :class:`ParameterVerifierError`.
"""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from enum import Enum
from typing import MutableMapping, Optional

from .config import VerifierConfig
from .definition import child_text_trim, find_child, iter_children, namespace_of
from .errors import ErrorCode, ParameterVerifierError

logger = logging.getLogger(__name__)

NS_VERSION_PATTERN = re.compile(r"uri:[\w.-]+:workflow:(\d+)\.(\d+)")

MISSING_PARAMETERS_ADVISORY = (
    "The application does not define formal parameters in its XML definition"
)

SchemaVersion = tuple[int, int]


class SchemaBehavior(str, Enum):
    """What to do when a definition has no ``<parameters>`` section."""

    IGNORE = "ignore"
    ADVISE = "advise"


@dataclass(frozen=True)
class SchemaVersionRule:
    """Behaviour for schema versions in ``[min_version, max_version)``."""

    min_version: SchemaVersion
    max_version: Optional[SchemaVersion]
    behavior: SchemaBehavior

    def matches(self, version: SchemaVersion) -> bool:
        if version < self.min_version:
            return False
        return self.max_version is None or version < self.max_version


# Formal parameters were introduced with workflow schema 0.4.
SCHEMA_VERSION_RULES: tuple[SchemaVersionRule, ...] = (
    SchemaVersionRule((0, 0), (0, 4), SchemaBehavior.IGNORE),
    SchemaVersionRule((0, 4), None, SchemaBehavior.ADVISE),
)


@dataclass(frozen=True)
class ParameterDeclaration:
    """One ``<property>`` entry of a ``<parameters>`` section."""

    name: str
    default: Optional[str] = None


def schema_version(namespace: str) -> Optional[SchemaVersion]:
    """Extract ``(major, minor)`` from a versioned workflow namespace URI."""
    match = NS_VERSION_PATTERN.fullmatch(namespace or "")
    if match is None:
        return None
    return int(match.group(1)), int(match.group(2))


def legacy_behavior(namespace: str) -> SchemaBehavior:
    """Look up how a definition in ``namespace`` without parameters is handled."""
    version = schema_version(namespace)
    if version is None:
        return SchemaBehavior.IGNORE
    for rule in SCHEMA_VERSION_RULES:
        if rule.matches(version):
            return rule.behavior
    return SchemaBehavior.IGNORE


def read_parameters(
    root: ET.Element, strict_names: bool = False
) -> Optional[list[ParameterDeclaration]]:
    """Return the declared parameters of ``root`` in document order.

    ``None`` means the definition has no ``<parameters>`` section. Entries
    without a name are skipped unless ``strict_names`` is set, in which case
    they raise :class:`ParameterVerifierError`.
    """
    params = find_child(root, "parameters", namespace_of(root))
    if params is None:
        return None

    params_ns = namespace_of(params)
    declarations: list[ParameterDeclaration] = []
    for position, prop in enumerate(iter_children(params, "property", params_ns), 1):
        name = child_text_trim(prop, "name", params_ns)
        if not name:
            if strict_names:
                raise ParameterVerifierError(ErrorCode.E0739, position)
            logger.debug(f"Skipping parameter declaration #{position} without a name")
            continue
        declarations.append(
            ParameterDeclaration(name, child_text_trim(prop, "value", params_ns))
        )
    return declarations


def verify_parameters(
    conf: MutableMapping[str, str],
    root: Optional[ET.Element],
    strict_names: bool = False,
) -> None:
    """Verify the ``<parameters>`` section of ``root`` against ``conf``.

    Values already present in ``conf`` are never overwritten. Declared
    defaults are inserted for absent keys and stay applied even when the
    verification fails.

    Args:
        conf: The job configuration, updated in place.
        root: Root element of the job definition. ``None`` is accepted and
            verifies nothing.
        strict_names: Reject ``<property>`` entries without a name.

    Raises:
        ParameterVerifierError: If required parameters are not defined and
            have no default values, or the section is malformed.
    """
    if conf is None:
        raise ValueError("conf cannot be None")
    if root is None:
        return

    try:
        declarations = read_parameters(root, strict_names=strict_names)
    except ParameterVerifierError:
        raise
    except Exception as exc:
        raise ParameterVerifierError(ErrorCode.E0740, exc) from exc

    if declarations is None:
        namespace = namespace_of(root)
        if legacy_behavior(namespace) is SchemaBehavior.ADVISE:
            logger.warning(MISSING_PARAMETERS_ADVISORY)
        return

    missing: list[str] = []
    for declaration in declarations:
        if conf.get(declaration.name) is not None:
            continue
        if declaration.default is not None:
            logger.debug(f"Using default value for parameter {declaration.name}")
            conf[declaration.name] = declaration.default
        else:
            missing.append(declaration.name)

    if missing:
        raise ParameterVerifierError.missing_parameters(missing)


class ParameterVerifier:
    """Applies :func:`verify_parameters` with settings from configuration."""

    def __init__(self, config: Optional[VerifierConfig] = None) -> None:
        self.config = config or VerifierConfig()

    def verify(
        self, conf: MutableMapping[str, str], root: Optional[ET.Element]
    ) -> None:
        verify_parameters(conf, root, strict_names=self.config.strict_names)
