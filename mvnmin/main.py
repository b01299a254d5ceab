"""
mvnmin — CLI entrypoint.

Usage:
    mvnmin install
    mvnmin --diff=origin/master.. clean install -DskipTests
    mvnmin -p | xargs ...
    python -m mvnmin.main --help
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

import click

from mvnmin import __version__
from mvnmin.core.observability.logging_config import (
    LOG_FILE_ENV_VAR,
    resolve_log_level,
    setup_logging,
)
from mvnmin.ui.cli.args import FILE_OPTION_UNSUPPORTED, filter_maven_args, scan_flags

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_EPILOG = """\b
Options handled alongside the Maven arguments:
  --diff[=commit[..commit]]  Activate all projects changed since the
                             specified commit, or range of commits.
                             (default: 'master')
  -p                         Don't invoke Maven, print out activated
                             projects, sorted, newline separated.
  -d                         Same as --dry-run.
  -f, --file                 Not supported, mvnmin will exit.

\b
Projects can also be piped in on stdin, one groupId:artifactId per line.
"""


@click.command(
    epilog=_EPILOG,
    context_settings={
        "ignore_unknown_options": True,
        "allow_interspersed_args": True,
        "help_option_names": ["--help"],
    },
)
@click.version_option(version=__version__, prog_name="mvnmin", message="%(prog)s %(version)s")
@click.option(
    "--all",
    "all_projects",
    is_flag=True,
    help="Activate every pom.xml in all sub directories (max depth: $MVNMIN_MAXDEPTHS, default 6).",
)
@click.option(
    "-pl",
    "--projects",
    multiple=True,
    metavar="<arg>",
    help=(
        "Comma-delimited list of groupId:artifactId projects to build as well as "
        "those otherwise activated. Prefix with '!' or '-' to deactivate."
    ),
)
@click.option("--nbi", is_flag=True, help="No build-if dependencies are considered, just changed modules.")
@click.option("--dry-run", is_flag=True, help="Don't invoke Maven, print the commands that would run.")
@click.option(
    "-rf",
    "--resume-from",
    metavar="<arg>",
    default=None,
    help="Resume reactor from specified project (and sub-reactor).",
)
@click.option(
    "--log-level",
    type=click.Choice(_LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Diagnostic log level (default: $MVNMIN_LOG_LEVEL or WARNING).",
)
@click.argument("maven_args", nargs=-1, type=click.UNPROCESSED)
def cli(
    all_projects: bool,
    projects: tuple[str, ...],
    nbi: bool,
    dry_run: bool,
    resume_from: str | None,
    log_level: str | None,
    maven_args: tuple[str, ...],
) -> None:
    """Run Maven on just the projects that changed.

    usage: mvnmin [options] [<maven goal(s)>] [<maven phase(s)>] [<maven arg(s)>]
    """
    from mvnmin.adapters.shell.command import SubprocessRunner
    from mvnmin.adapters.vcs.git import GitProjectRepository
    from mvnmin.core.services.diff import max_depth_from_env
    from mvnmin.core.use_cases.run import RunOptions, run_mvnmin

    # ── Logging setup (once, at process start) ──────────────────
    setup_logging(
        level=resolve_log_level(log_level, os.environ),
        log_file=os.environ.get(LOG_FILE_ENV_VAR),
    )

    flags = scan_flags(maven_args)
    if flags.file_option:
        click.echo(FILE_OPTION_UNSUPPORTED)
        sys.exit(1)

    stdin = click.get_text_stream("stdin")
    stdin_modules = None if stdin.isatty() else stdin.read()

    cwd = Path.cwd()
    options = RunOptions(
        maven_args=filter_maven_args(maven_args),
        projects=list(projects),
        all_projects=all_projects,
        diff=flags.diff,
        build_if_enabled=not nbi,
        print_modules=flags.print_modules,
        dry_run=dry_run or flags.dry_run,
        resume_from=resume_from,
        max_depth=max_depth_from_env(),
        cwd=cwd,
        output_is_terminal=click.get_text_stream("stdout").isatty(),
    )

    result = run_mvnmin(
        options,
        repository=GitProjectRepository(cwd),
        runner=SubprocessRunner(cwd=cwd),
        stdin_modules=stdin_modules,
    )

    if result.error:
        click.secho(f"mvnmin: {result.error}", fg="red", err=True)
    sys.exit(result.exit_code)


def main() -> None:
    cli(prog_name="mvnmin")


if __name__ == "__main__":
    main()
