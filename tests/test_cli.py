"""
Tests for the CLI — option handling, pass-through args and exit codes.
"""

from pathlib import Path

import pytest
from click.testing import CliRunner

import mvnmin.adapters.shell.command as shell_command
import mvnmin.adapters.vcs.git as vcs_git
from mvnmin.adapters.mock import InMemoryProjectRepository, MockProcessRunner
from mvnmin.main import cli
from mvnmin.ui.cli.args import FILE_OPTION_UNSUPPORTED, filter_maven_args, scan_flags


@pytest.fixture
def fake_adapters(tmp_path: Path, monkeypatch):
    """Run the CLI in tmp_path against in-memory adapters.

    Returns the repository and runner so tests can inspect them.
    """
    monkeypatch.chdir(tmp_path)
    repository = InMemoryProjectRepository(
        projects={"": "g:root", "core": "g:core"},
        dirty_files={"core/src/A.java"},
        ranges={"master..": {"pom.xml"}},
    )
    runner = MockProcessRunner()
    monkeypatch.setattr(vcs_git, "GitProjectRepository", lambda root: repository)
    monkeypatch.setattr(shell_command, "SubprocessRunner", lambda cwd: runner)
    return repository, runner


class TestCLIGlobal:
    def test_help(self):
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "Run Maven on just the projects that changed" in result.output
        assert "--diff[=commit[..commit]]" in result.output

    def test_version(self):
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "mvnmin 0.1.0" in result.output

    @pytest.mark.parametrize("flag", ["-f", "--file"])
    def test_file_option_rejected(self, flag, fake_adapters):
        result = CliRunner().invoke(cli, ["install", flag, "other/pom.xml"])
        assert result.exit_code == 1
        assert FILE_OPTION_UNSUPPORTED in result.output
        assert fake_adapters[1].call_count == 0


class TestCLIRun:
    def test_builds_dirty_projects(self, fake_adapters):
        _, runner = fake_adapters
        result = CliRunner().invoke(cli, ["clean", "install", "-DskipTests"])
        assert result.exit_code == 0, result.output
        assert [str(i) for i in runner.call_log] == [
            "mvn clean install -DskipTests -f pom.xml --projects g:core",
        ]
        assert "RUN  0 Main reactor" in result.output

    def test_projects_option_is_not_passed_through(self, fake_adapters):
        _, runner = fake_adapters
        result = CliRunner().invoke(cli, ["install", "-pl", "g:extra,!g:core"])
        assert result.exit_code == 0, result.output
        assert runner.call_log[0].arguments == ["install", "-f", "pom.xml", "--projects", "g:extra"]

    def test_print_mode(self, fake_adapters):
        result = CliRunner().invoke(cli, ["-p", "--projects", "g:b"])
        assert result.exit_code == 0
        assert result.output == "g:b\ng:core\n"

    def test_stdin_projects(self, fake_adapters):
        result = CliRunner().invoke(cli, ["-p"], input="g:piped\n!g:core\n")
        assert result.output == "g:piped\n"

    def test_print_mode_with_nothing_activated(self, fake_adapters):
        repository, _ = fake_adapters
        repository.dirty_files = set()
        result = CliRunner().invoke(cli, ["-p"])
        assert result.exit_code == 0
        assert result.output == "\n"

    def test_diff(self, fake_adapters):
        repository, _ = fake_adapters
        result = CliRunner().invoke(cli, ["--diff", "-p"])
        assert "diff_range:master.." in repository.calls
        assert result.output == "g:core\ng:root\n"

    def test_all(self, fake_adapters, monkeypatch):
        repository, _ = fake_adapters
        monkeypatch.setenv("MVNMIN_MAXDEPTHS", "4")
        CliRunner().invoke(cli, ["--all", "-p"])
        assert repository.calls == ["find_all_pom_files:4"]

    @pytest.mark.parametrize("flag", ["-d", "--dry-run"])
    def test_dry_run(self, flag, fake_adapters):
        _, runner = fake_adapters
        result = CliRunner().invoke(cli, ["install", flag])
        assert result.exit_code == 0
        assert runner.call_count == 0
        assert "mvn install -f pom.xml --projects g:core" in result.output

    def test_nbi_and_resume_from(self, fake_adapters, tmp_path: Path):
        (tmp_path / "mvnmin.yml").write_text(
            'build-ifs:\n  - match: ["g:core"]\n    modules: ["g:api"]\n'
        )
        _, runner = fake_adapters
        result = CliRunner().invoke(cli, ["install", "--nbi", "-rf", ":core"])
        assert result.exit_code == 0, result.output
        assert runner.call_log[0].arguments == [
            "install", "-f", "pom.xml", "--projects", "g:core", "-rf", ":core",
        ]

    def test_nothing_activated(self, fake_adapters):
        repository, runner = fake_adapters
        repository.dirty_files = set()
        result = CliRunner().invoke(cli, ["install"])
        assert result.exit_code == 1
        assert runner.call_count == 0

    def test_maven_exit_code_propagates(self, fake_adapters):
        _, runner = fake_adapters
        runner._exit_codes = [42]
        result = CliRunner().invoke(cli, ["install"])
        assert result.exit_code == 42
        assert "mvnmin: Maven failed to run successfully." in result.output

    def test_config_error_reported(self, fake_adapters, tmp_path: Path):
        (tmp_path / "mvnmin.yml").write_text("reactors: [unclosed\n")
        result = CliRunner().invoke(cli, ["install"])
        assert result.exit_code == 1
        assert "Invalid YAML" in result.output


class TestScanFlags:
    def test_defaults(self):
        flags = scan_flags(["install"])
        assert not flags.dry_run
        assert not flags.print_modules
        assert flags.diff is None
        assert not flags.file_option

    def test_short_flags(self):
        flags = scan_flags(["-d", "-p"])
        assert flags.dry_run
        assert flags.print_modules

    def test_diff_values(self):
        assert scan_flags(["--diff"]).diff == ""
        assert scan_flags(["--diff=develop"]).diff == "develop"
        assert scan_flags(["--diff=a..b"]).diff == "a..b"

    def test_maven_properties_are_not_flags(self):
        flags = scan_flags(["-Dp=1", "-Pd", "--different"])
        assert not flags.dry_run
        assert not flags.print_modules
        assert flags.diff is None

    def test_file_option(self):
        assert scan_flags(["--file=x/pom.xml"]).file_option


class TestFilterMavenArgs:
    def test_strips_mvnmin_flags(self):
        args = [
            "clean", "--all", "-d", "-p", "--nbi", "--dry-run", "--diff=master",
            "--version", "install", "-DskipTests",
        ]
        assert filter_maven_args(args) == ["clean", "install", "-DskipTests"]

    def test_strips_flags_with_values(self):
        args = ["-pl", "g:a", "install", "--projects", "g:b", "-rf", ":a", "--resume-from", ":b"]
        assert filter_maven_args(args) == ["install"]

    def test_strips_equals_forms(self):
        assert filter_maven_args(["--projects=g:a", "--resume-from=:a", "verify"]) == ["verify"]

    def test_keeps_maven_args(self):
        args = ["-T4", "-Pcm", "-Dx=y", "-q", "--fail-at-end"]
        assert filter_maven_args(args) == args
