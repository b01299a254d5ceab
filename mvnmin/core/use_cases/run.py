"""
Run use case — from change signals to Maven invocations.

This is the top-level orchestrator: it gathers module requests, loads
config, resolves reactors, and runs Maven once per reactor that has
work to do. The CLI is a thin shell around ``run_mvnmin``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

import click

from mvnmin.adapters.base import ProcessRunner, ProjectLocatorError, ProjectRepository
from mvnmin.core.config.loader import ConfigError, load_config
from mvnmin.core.engine.command import Invocation, compose_command, resolve_executable
from mvnmin.core.engine.reactor_resolution import (
    ExtendedReactor,
    apply_resume_point,
    apply_skip_conditions,
    build_extended_reactor,
)
from mvnmin.core.models.config import MvnMinConfig
from mvnmin.core.models.requests import ModuleRequests
from mvnmin.core.services.diff import DEFAULT_MAX_DEPTH, RepoDiff, normalize_commit_range
from mvnmin.core.services.printer import ReactorPrinter

logger = logging.getLogger(__name__)

NOTHING_ACTIVATED_HINT = (
    "No modified project files detected. This usually means that you don't have any"
    " uncommitted changes in the repo."
)
MAVEN_FAILED_MESSAGE = "mvnmin: Maven failed to run successfully."


@dataclass
class RunOptions:
    """What the user asked mvnmin to do.

    ``diff`` is None when ``--diff`` was not given and ``""`` when it was
    given without a value.
    """

    maven_args: list[str] = field(default_factory=list)
    projects: list[str] = field(default_factory=list)
    all_projects: bool = False
    diff: str | None = None
    build_if_enabled: bool = True
    print_modules: bool = False
    dry_run: bool = False
    resume_from: str | None = None
    max_depth: int = DEFAULT_MAX_DEPTH
    cwd: Path | None = None
    output_is_terminal: bool = False


@dataclass
class RunResult:
    """Result of one mvnmin run."""

    exit_code: int = 0
    reactor: ExtendedReactor | None = None
    invocations: list[Invocation] = field(default_factory=list)
    error: str | None = None

    def to_dict(self) -> dict:
        result: dict = {"exit_code": self.exit_code}
        if self.error:
            result["error"] = self.error
            return result
        if self.reactor:
            result["reactor"] = self.reactor.to_dict()
        result["invocations"] = [str(i) for i in self.invocations]
        return result


def gather_requests(
    options: RunOptions,
    repository: ProjectRepository,
    stdin_modules: str | None = None,
) -> list[ModuleRequests]:
    """Module requests from stdin, ``-pl`` and the repository diff.

    Raises:
        ProjectLocatorError: If changed files cannot be determined.
    """
    requests: list[ModuleRequests] = []
    if stdin_modules:
        requests.append(ModuleRequests.from_lines(stdin_modules))

    requests.append(ModuleRequests.from_csv(",".join(options.projects)))

    repo_diff = RepoDiff()
    if options.all_projects:
        repo_diff.with_all_projects(options.max_depth)
    else:
        repo_diff.with_dirty_files()
        if options.diff is not None:
            repo_diff.with_commit_range(normalize_commit_range(options.diff))
    requests.append(repo_diff.resolve(repository))

    logger.debug("module requests: %s", requests)
    return requests


def run_mvnmin(
    options: RunOptions,
    repository: ProjectRepository,
    runner: ProcessRunner,
    config: MvnMinConfig | None = None,
    stdin_modules: str | None = None,
    out: Callable[[str], None] = click.echo,
    log: logging.Logger | None = None,
) -> RunResult:
    """Resolve what needs building and run Maven on it.

    Args:
        options: Parsed command line.
        repository: Source of changed files and project ids.
        runner: Executes the composed Maven commands.
        config: Pre-loaded configuration. Loaded from ``options.cwd`` if None.
        stdin_modules: Newline-separated module ids piped on stdin.
        out: Sink for user-facing output.
        log: Logger for diagnostics (default: this module's logger).

    Returns:
        RunResult; ``exit_code`` is what the process should exit with.
    """
    log = log or logger
    result = RunResult()

    # ── Resolve ─────────────────────────────────────────────────
    try:
        requests = gather_requests(options, repository, stdin_modules)
        if config is None:
            config = load_config(start_dir=options.cwd)
    except (ConfigError, ProjectLocatorError) as e:
        result.error = str(e)
        result.exit_code = 1
        return result

    reactor = build_extended_reactor(requests, config, options.build_if_enabled)
    result.reactor = reactor
    log.debug("Resolved %d modules into %d reactors", len(reactor.modules), len(reactor.reactors))

    if options.print_modules:
        out("\n".join(sorted(reactor.modules)))
        return result

    if not reactor.modules:
        if options.output_is_terminal:
            out(NOTHING_ACTIVATED_HINT)
        result.exit_code = 1
        return result

    # ── Execute ─────────────────────────────────────────────────
    apply_skip_conditions(reactor.reactors, options.maven_args)
    apply_resume_point(reactor.reactors, options.resume_from)
    log.debug("Building %d of %d reactors", len(reactor.reactors_to_build), len(reactor.reactors))

    executable = resolve_executable(config.maven_command, options.cwd)
    printer = ReactorPrinter(reactor.max_name_length, out)
    printer.newline()

    for sub_reactor in reactor.reactors:
        invocation = compose_command(
            sub_reactor, options.maven_args, executable, options.resume_from
        )
        printer.command_summary(sub_reactor, invocation)

        if sub_reactor.should_build and not options.dry_run:
            result.invocations.append(invocation)
            result.exit_code = runner.execute(invocation)
        printer.newline()

        if result.exit_code != 0:
            log.debug("%s exited with %d", sub_reactor.name, result.exit_code)
            out(MAVEN_FAILED_MESSAGE)
            break

    return result
