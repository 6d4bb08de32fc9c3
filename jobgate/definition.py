"""Namespace-aware helpers over parsed job definition documents."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Iterator, Optional, Union


def parse_definition(source: Union[str, bytes]) -> ET.Element:
    """Parse an XML job definition and return its root element."""
    return ET.fromstring(source)


def load_definition(path: Union[str, Path]) -> ET.Element:
    """Read and parse the job definition stored at ``path``."""
    return ET.parse(str(path)).getroot()


def namespace_of(element: ET.Element) -> str:
    """Return the namespace URI of ``element``, or ``""`` if it has none."""
    tag = element.tag
    if isinstance(tag, str) and tag.startswith("{"):
        return tag[1:].partition("}")[0]
    return ""


def _qualified(name: str, namespace: str) -> str:
    return f"{{{namespace}}}{name}" if namespace else name


def find_child(
    element: ET.Element, name: str, namespace: str = ""
) -> Optional[ET.Element]:
    """Return the first direct child called ``name`` in ``namespace``."""
    return element.find(_qualified(name, namespace))


def iter_children(
    element: ET.Element, name: str, namespace: str = ""
) -> Iterator[ET.Element]:
    """Yield the direct children called ``name`` in document order."""
    yield from element.iterfind(_qualified(name, namespace))


def child_text_trim(
    element: ET.Element, name: str, namespace: str = ""
) -> Optional[str]:
    """Return the stripped text of child ``name``.

    ``None`` means the child is absent; an empty child gives ``""``.
    """
    child = find_child(element, name, namespace)
    if child is None:
        return None
    return (child.text or "").strip()
