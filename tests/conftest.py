"""
Shared test fixtures and configuration.
"""

import textwrap
from pathlib import Path

import pytest

POM_TEMPLATE = """\
<?xml version="1.0" encoding="UTF-8"?>
<project xmlns="http://maven.apache.org/POM/4.0.0">
  <modelVersion>4.0.0</modelVersion>
{parent}{group}  <artifactId>{artifact}</artifactId>
</project>
"""


def write_pom(
    directory: Path,
    artifact_id: str,
    group_id: str | None = "com.example",
    parent_group_id: str | None = None,
) -> Path:
    """Write a minimal pom.xml into ``directory``."""
    directory.mkdir(parents=True, exist_ok=True)
    parent = ""
    if parent_group_id:
        parent = textwrap.indent(
            f"<parent>\n  <groupId>{parent_group_id}</groupId>\n"
            "  <artifactId>parent</artifactId>\n</parent>\n",
            "  ",
        )
    group = f"  <groupId>{group_id}</groupId>\n" if group_id else ""
    pom = directory / "pom.xml"
    pom.write_text(POM_TEMPLATE.format(parent=parent, group=group, artifact=artifact_id))
    return pom


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's environment out of the tests."""
    for name in (
        "MVN_COMMAND",
        "MAVEN_OPTS",
        "MVNMIN_MAXDEPTHS",
        "MVNMIN_LOG_LEVEL",
        "MVNMIN_LOG_FILE",
        "DEBUG",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def pom_writer():
    """The ``write_pom`` helper, for tests that build their own trees."""
    return write_pom


@pytest.fixture
def maven_tree(tmp_path: Path) -> Path:
    """A small Maven tree.

        pom.xml            com.example:root
        core/pom.xml       com.example:core (groupId from parent)
        cm/pom.xml         com.example.cm:cm-parent
        cm/ui/pom.xml      com.example.cm:cm-ui
    """
    write_pom(tmp_path, "root")
    write_pom(tmp_path / "core", "core", group_id=None, parent_group_id="com.example")
    write_pom(tmp_path / "cm", "cm-parent", group_id="com.example.cm")
    write_pom(tmp_path / "cm" / "ui", "cm-ui", group_id="com.example.cm")
    (tmp_path / "core" / "src").mkdir()
    (tmp_path / "core" / "src" / "Core.java").write_text("class Core {}\n")
    return tmp_path


@pytest.fixture
def reactors_yml() -> str:
    """A config with two sub-reactors and a chained build-if."""
    return textwrap.dedent("""\
        maven-command: mvn
        ignored-modules:
          - com.example:ignored
        build-ifs:
          - match: ["com\\\\.example:core"]
            modules: ["com.example:api"]
          - match: ["com\\\\.example:api"]
            modules: ["com.example:web"]
        reactors:
          - name: Commerce Manager
            pom: cm/pom.xml
            single-thread: true
            skip-if: "-P!cm"
            patterns:
              - "com\\\\.example\\\\.cm:.*"
          - name: Web
            pom: web/pom.xml
            extra-params: "-Dweb=true -q"
            patterns:
              - "com\\\\.example:web"
    """)
