"""
Configuration models — the hints mvnmin reads from mvnmin.yml.

The file tells mvnmin how a large Maven tree is split into reactors,
which modules drag other modules into a build (build-ifs), and which
modules must never be passed to Maven.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def _compile_all(patterns: list[str]) -> list[str]:
    for pattern in patterns:
        try:
            re.compile(pattern)
        except re.error as e:
            raise ValueError(f"invalid regex {pattern!r}: {e}") from e
    return patterns


def _none_to_list(value: object) -> object:
    return [] if value is None else value


class BuildIfRule(BaseModel):
    """Modules matching any ``match`` regex pull ``modules`` into the build."""

    model_config = ConfigDict(frozen=True)

    match: list[str] = Field(default_factory=list)
    modules: list[str] = Field(default_factory=list)

    @field_validator("match", "modules", mode="before")
    @classmethod
    def _none_as_empty(cls, value: object) -> object:
        return _none_to_list(value)

    @field_validator("match")
    @classmethod
    def _valid_regexes(cls, value: list[str]) -> list[str]:
        return _compile_all(value)

    def matches(self, module: str) -> bool:
        """Whether the module id fully matches one of the rule's patterns."""
        return any(re.fullmatch(pattern, module) for pattern in self.match)


class ReactorDefinition(BaseModel):
    """One ``reactors`` entry.

    Every field except ``patterns`` is optional so that a definition can
    act as a partial override of another (see ``merge_definitions``).
    """

    model_config = ConfigDict(populate_by_name=True)

    primary: bool = False
    name: str | None = None
    pom: str | None = None
    patterns: list[str] = Field(default_factory=list)
    single_thread: bool | None = Field(default=None, alias="single-thread")
    extra_params: str | None = Field(default=None, alias="extra-params")
    skip_if: str | None = Field(default=None, alias="skip-if")

    @field_validator("patterns", mode="before")
    @classmethod
    def _none_as_empty(cls, value: object) -> object:
        return _none_to_list(value)

    @field_validator("patterns")
    @classmethod
    def _valid_patterns(cls, value: list[str]) -> list[str]:
        return _compile_all(value)

    @field_validator("skip_if")
    @classmethod
    def _valid_skip_if(cls, value: str | None) -> str | None:
        if value:
            _compile_all([value])
        return value


DEFAULT_PRIMARY_REACTOR = ReactorDefinition(
    primary=True,
    name="Main reactor",
    pom="pom.xml",
    patterns=[".*"],
    single_thread=False,
    extra_params="",
    skip_if="",
)


def merge_definitions(base: ReactorDefinition, override: ReactorDefinition | None) -> ReactorDefinition:
    """Apply the set fields of ``override`` on top of ``base``.

    Empty strings count as unset. Patterns are never overridden: the
    primary reactor always claims whatever the other reactors left.
    """
    if override is None:
        return base.model_copy()

    update: dict[str, object] = {}
    for field_name in ("name", "pom", "extra_params", "skip_if"):
        value = getattr(override, field_name)
        if value:
            update[field_name] = value
    if override.single_thread is not None:
        update["single_thread"] = override.single_thread

    return base.model_copy(update=update)


class MvnMinConfig(BaseModel):
    """Root of mvnmin.yml. An absent file is an all-empty instance."""

    model_config = ConfigDict(populate_by_name=True)

    maven_command: str | None = Field(default=None, alias="maven-command")
    ignored_modules: list[str] = Field(default_factory=list, alias="ignored-modules")
    build_ifs: list[BuildIfRule] = Field(default_factory=list, alias="build-ifs")
    reactors: list[ReactorDefinition] = Field(default_factory=list)

    @field_validator("ignored_modules", "build_ifs", "reactors", mode="before")
    @classmethod
    def _none_as_empty(cls, value: object) -> object:
        return _none_to_list(value)

    @model_validator(mode="after")
    def _sub_reactors_need_a_pom(self) -> MvnMinConfig:
        for index, reactor in enumerate(self.reactors):
            if reactor.primary:
                continue
            if not reactor.pom:
                label = reactor.name or f"#{index + 1}"
                raise ValueError(f"reactor {label} has no 'pom'")
            if not reactor.name:
                reactor.name = reactor.pom
        return self

    def sub_reactor_definitions(self) -> list[ReactorDefinition]:
        """Non-primary reactors, in declaration order."""
        return [r for r in self.reactors if not r.primary]

    def primary_override(self) -> ReactorDefinition | None:
        """The first ``primary: true`` entry, if any."""
        for reactor in self.reactors:
            if reactor.primary:
                return reactor
        return None

    def primary_definition(self) -> ReactorDefinition:
        """Default primary reactor with the configured overrides applied."""
        return merge_definitions(DEFAULT_PRIMARY_REACTOR, self.primary_override())
