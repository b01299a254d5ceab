"""
Command composition — what Maven command to run for a reactor.

Pure logic: given a reactor, the pass-through Maven arguments and an
executable, produce an ``Invocation``. Running it is the process
runner's job.
"""

from __future__ import annotations

import os
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from mvnmin.core.models.reactor import Reactor

MVN_COMMAND_ENV_VAR = "MVN_COMMAND"
MAVEN_OPTS_ENV_VAR = "MAVEN_OPTS"
JANSI_PASSTHROUGH = "-Djansi.passthrough=true"

_JDWP = (
    '"-Xdebug -Xrunjdwp:transport=dt_socket,server=y,suspend=y,address=8000'
    ' -Xnoagent -Djava.compiler=NONE"'
)

# Convenience flags rewritten into Maven properties
ARGUMENT_TRANSFORMATIONS: dict[str, str] = {
    "--debugsurefire": f"-Dmaven.surefire.debug={_JDWP}",
    "--debugfailsafe": f"-Dmaven.failsafe.debug={_JDWP}",
}

# ... and the goal they force
ARGUMENT_TO_GOAL_TRANSFORMATIONS: dict[str, str] = {
    "--debugsurefire": "test",
    "--debugfailsafe": "test",
}

_COMBINED_THREAD_FLAG = re.compile(r"-T.+|--threads=.*")
_SEPARATE_THREAD_FLAG = re.compile(r"-T|--threads")


@dataclass
class Invocation:
    """A concrete build tool command line."""

    executable: str
    arguments: list[str] = field(default_factory=list)

    @property
    def argv(self) -> list[str]:
        return [self.executable, *self.arguments]

    def __str__(self) -> str:
        return " ".join(self.argv)


def remove_threading_flags(args: Sequence[str]) -> list[str]:
    """Drop every way Maven can be told a thread count.

    Handles ``-T4``, ``-T1C``, ``--threads=4`` and the two-token
    ``-T 4`` / ``--threads 4`` forms.
    """
    result: list[str] = []
    skip_value = False
    for arg in args:
        if skip_value:
            skip_value = False
            continue
        if _COMBINED_THREAD_FLAG.fullmatch(arg):
            continue
        if _SEPARATE_THREAD_FLAG.fullmatch(arg):
            skip_value = True
            continue
        result.append(arg)
    return result


def transform_arguments(args: Sequence[str]) -> tuple[list[str], str | None]:
    """Rewrite convenience flags. Returns ``(arguments, forced_goal)``."""
    goal: str | None = None
    transformed: list[str] = []
    for arg in args:
        transformed.append(ARGUMENT_TRANSFORMATIONS.get(arg, arg))
        if arg in ARGUMENT_TO_GOAL_TRANSFORMATIONS:
            goal = ARGUMENT_TO_GOAL_TRANSFORMATIONS[arg]
    return transformed, goal


def compose_command(
    reactor: Reactor,
    args: Sequence[str],
    executable: str,
    resume_from: str | None = None,
) -> Invocation:
    """Determine the Maven command line for one reactor.

    Args:
        reactor: The reactor, with its claimed modules.
        args: Maven arguments passed to mvnmin (mvnmin's own flags removed).
        executable: Resolved Maven executable.
        resume_from: Optional ``-rf`` module (may be abbreviated).

    Returns:
        The Invocation to run.
    """
    arguments, goal = transform_arguments(args)

    arguments += ["-f", reactor.pom]

    if reactor.extra_params.strip():
        arguments += reactor.extra_params.split()

    if reactor.single_thread:
        arguments = remove_threading_flags(arguments)
        arguments.append("-T1")

    if reactor.has_active_modules:
        arguments += ["--projects", ",".join(sorted(reactor.active_modules))]

    if resume_from and any(resume_from in module for module in reactor.active_modules):
        arguments += ["-rf", resume_from]

    if goal:
        arguments.insert(0, goal)

    return Invocation(executable=executable, arguments=arguments)


def resolve_executable(
    config_command: str | None = None,
    cwd: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> str:
    """Pick the Maven executable.

    Precedence: ``MVN_COMMAND`` env var > ``maven-command`` from config
    > ``./mvnw`` in the working directory > ``mvn`` on the PATH.
    """
    env = os.environ if environ is None else environ

    if env.get(MVN_COMMAND_ENV_VAR) is not None:
        return env[MVN_COMMAND_ENV_VAR]
    if config_command and config_command.strip():
        return config_command.strip()
    if ((cwd or Path.cwd()) / "mvnw").exists():
        return "./mvnw"
    return "mvn"


def subprocess_environment(base: Mapping[str, str] | None = None) -> dict[str, str]:
    """Environment for the Maven child process.

    Appends ``-Djansi.passthrough=true`` to MAVEN_OPTS.
    """
    env = dict(os.environ if base is None else base)
    maven_opts = f"{env.get(MAVEN_OPTS_ENV_VAR, '')} {JANSI_PASSTHROUGH}".strip()
    env[MAVEN_OPTS_ENV_VAR] = maven_opts
    return env
