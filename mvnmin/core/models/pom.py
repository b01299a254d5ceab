"""
POM model — just enough of a Maven pom.xml to name the project.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path

from pydantic import BaseModel

POM_FILE = "pom.xml"
POM_NAMESPACE = "http://maven.apache.org/POM/4.0.0"


class PomError(Exception):
    """Raised when a pom.xml cannot be read or lacks an identity."""


def _child_text(element: ET.Element, tag: str) -> str | None:
    # Poms are usually namespaced, but Maven accepts bare ones too.
    for candidate in (f"{{{POM_NAMESPACE}}}{tag}", tag):
        child = element.find(candidate)
        if child is not None and child.text and child.text.strip():
            return child.text.strip()
    return None


class PomProject(BaseModel):
    """The identity of a Maven project."""

    group_id: str | None = None
    artifact_id: str
    parent_group_id: str | None = None

    @property
    def effective_group_id(self) -> str | None:
        """groupId, inherited from <parent> when not declared."""
        return self.group_id or self.parent_group_id

    @property
    def project_id(self) -> str:
        """``groupId:artifactId`` as Maven's ``--projects`` expects it."""
        return f"{self.effective_group_id}:{self.artifact_id}"

    @classmethod
    def from_file(cls, path: Path) -> PomProject:
        """Parse a pom.xml.

        Raises:
            PomError: If the file is unreadable, not XML, or has no artifactId.
        """
        try:
            root = ET.parse(path).getroot()
        except (ET.ParseError, OSError) as e:
            raise PomError(f"Failed to parse pom: {path}: {e}") from e

        artifact_id = _child_text(root, "artifactId")
        if artifact_id is None:
            raise PomError(f"No artifactId in pom: {path}")

        parent_group_id = None
        for tag in (f"{{{POM_NAMESPACE}}}parent", "parent"):
            parent = root.find(tag)
            if parent is not None:
                parent_group_id = _child_text(parent, "groupId")
                break

        group_id = _child_text(root, "groupId")
        if group_id is None and parent_group_id is None:
            raise PomError(f"No groupId (or parent groupId) in pom: {path}")

        return cls(
            group_id=group_id,
            artifact_id=artifact_id,
            parent_group_id=parent_group_id,
        )
