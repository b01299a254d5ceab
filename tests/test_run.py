"""
Tests for the run use case — end to end with in-memory adapters.
"""

from pathlib import Path

import click
import pytest

from mvnmin.adapters.mock import InMemoryProjectRepository, MockProcessRunner
from mvnmin.core.models.config import MvnMinConfig
from mvnmin.core.use_cases.run import (
    MAVEN_FAILED_MESSAGE,
    NOTHING_ACTIVATED_HINT,
    RunOptions,
    gather_requests,
    run_mvnmin,
)


@pytest.fixture
def config() -> MvnMinConfig:
    return MvnMinConfig.model_validate({
        "build-ifs": [{"match": ["g:core"], "modules": ["g:api"]}],
        "reactors": [
            {
                "name": "CM",
                "pom": "cm/pom.xml",
                "single-thread": True,
                "skip-if": "-P!cm",
                "patterns": [r"g\.cm:.*"],
            },
        ],
    })


@pytest.fixture
def repository() -> InMemoryProjectRepository:
    return InMemoryProjectRepository(
        projects={"": "g:root", "core": "g:core", "cm/ui": "g.cm:ui"},
        dirty_files={"core/src/A.java", "cm/ui/B.java"},
        ranges={"master..": {"core/pom.xml"}, "develop..": {"cm/ui/C.java"}},
    )


@pytest.fixture
def options(tmp_path: Path) -> RunOptions:
    return RunOptions(maven_args=["install"], cwd=tmp_path)


class Output:
    """Collects printed lines with styling removed."""

    def __init__(self):
        self.lines: list[str] = []

    def __call__(self, line: str) -> None:
        self.lines.append(click.unstyle(line))

    @property
    def text(self) -> str:
        return "\n".join(self.lines)


class TestGatherRequests:
    def test_stdin_projects_and_diff(self, options, repository):
        options.projects = ["g:x,!g:core", "g:y"]
        requests = gather_requests(options, repository, stdin_modules="g:z\n")
        assert [r.enabled for r in requests] == [
            {"g:z"},
            {"g:x", "g:y"},
            {"g:core", "g.cm:ui"},
        ]
        assert requests[1].disabled == {"g:core"}

    def test_blank_project_tokens_ignored(self, options, repository):
        options.projects = ["g:x,,", " g:y "]
        requests = gather_requests(options, repository)
        assert requests[0].enabled == {"g:x", "g:y"}
        assert not requests[0].disabled

    def test_diff_adds_to_dirty_files(self, options, repository):
        options.diff = "develop"
        requests = gather_requests(options, repository)
        assert "diff_range:develop.." in repository.calls
        assert requests[-1].enabled == {"g:core", "g.cm:ui"}

    def test_all_replaces_dirty_files(self, options, repository):
        options.all_projects = True
        options.max_depth = 1
        requests = gather_requests(options, repository)
        assert "find_dirty_files" not in repository.calls
        assert requests[-1].enabled == {"g:root"}


class TestRunMvnmin:
    def test_runs_each_reactor_with_work(self, options, repository, config):
        runner = MockProcessRunner()
        out = Output()
        result = run_mvnmin(options, repository, runner, config=config, out=out)

        assert result.exit_code == 0
        assert result.error is None
        assert [str(i) for i in runner.call_log] == [
            "mvn install -f pom.xml --projects g:api,g:core",
            "mvn install -f cm/pom.xml -T1 --projects g.cm:ui",
        ]
        assert "RUN  0 Main reactor : mvn install" in out.text
        assert "RUN  1 CM           : mvn install" in out.text

    def test_print_mode(self, options, repository, config):
        options.print_modules = True
        runner = MockProcessRunner()
        out = Output()
        result = run_mvnmin(options, repository, runner, config=config, out=out)
        assert result.exit_code == 0
        assert out.lines == ["g.cm:ui\ng:api\ng:core"]
        assert runner.call_count == 0

    def test_print_mode_with_nothing_activated(self, options, config):
        options.print_modules = True
        out = Output()
        result = run_mvnmin(
            options, InMemoryProjectRepository(), MockProcessRunner(), config=config, out=out
        )
        assert result.exit_code == 0
        assert out.lines == [""]

    def test_dry_run_prints_but_does_not_run(self, options, repository, config):
        options.dry_run = True
        runner = MockProcessRunner()
        out = Output()
        result = run_mvnmin(options, repository, runner, config=config, out=out)
        assert result.exit_code == 0
        assert runner.call_count == 0
        assert "RUN  1 CM" in out.text

    def test_nothing_activated(self, options, config):
        out = Output()
        result = run_mvnmin(
            options, InMemoryProjectRepository(), MockProcessRunner(), config=config, out=out
        )
        assert result.exit_code == 1
        assert out.lines == []

    def test_nothing_activated_hint_on_terminal(self, options, config):
        options.output_is_terminal = True
        out = Output()
        run_mvnmin(options, InMemoryProjectRepository(), MockProcessRunner(), config=config, out=out)
        assert out.lines == [NOTHING_ACTIVATED_HINT]

    def test_stops_at_first_failure(self, options, repository, config):
        runner = MockProcessRunner(exit_codes=[3])
        out = Output()
        result = run_mvnmin(options, repository, runner, config=config, out=out)
        assert result.exit_code == 3
        assert runner.call_count == 1
        assert out.lines[-1] == MAVEN_FAILED_MESSAGE

    def test_skip_condition(self, options, repository, config):
        options.maven_args = ["install", "-P!cm"]
        runner = MockProcessRunner()
        out = Output()
        run_mvnmin(options, repository, runner, config=config, out=out)
        assert runner.call_count == 1
        assert "SKIP 1 CM" in out.text

    def test_resume_from_later_reactor(self, options, repository, config):
        options.resume_from = ":ui"
        runner = MockProcessRunner()
        out = Output()
        run_mvnmin(options, repository, runner, config=config, out=out)
        assert [str(i) for i in runner.call_log] == [
            "mvn install -f cm/pom.xml -T1 --projects g.cm:ui -rf :ui",
        ]
        assert "SKIP 0 Main reactor" in out.text

    def test_locator_error(self, options, config):
        repository = InMemoryProjectRepository(failure="fatal: not a git repository")
        result = run_mvnmin(options, repository, MockProcessRunner(), config=config, out=Output())
        assert result.exit_code == 1
        assert result.error == "fatal: not a git repository"

    def test_config_loaded_from_cwd(self, options, repository, tmp_path: Path):
        (tmp_path / "mvnmin.yml").write_text("maven-command: mvnd\nignored-modules: [\"g.cm:ui\"]\n")
        runner = MockProcessRunner()
        run_mvnmin(options, repository, runner, out=Output())
        assert [str(i) for i in runner.call_log] == ["mvnd install -f pom.xml --projects g:core"]

    def test_config_error(self, options, repository, tmp_path: Path):
        (tmp_path / "mvnmin.yml").write_text("reactors: [unclosed\n")
        result = run_mvnmin(options, repository, MockProcessRunner(), out=Output())
        assert result.exit_code == 1
        assert "Invalid YAML" in result.error

    def test_wrapper_used_when_present(self, options, repository, config, tmp_path: Path):
        (tmp_path / "mvnw").write_text("#!/bin/sh\n")
        runner = MockProcessRunner()
        run_mvnmin(options, repository, runner, config=config, out=Output())
        assert all(i.executable == "./mvnw" for i in runner.call_log)

    def test_to_dict(self, options, repository, config):
        result = run_mvnmin(options, repository, MockProcessRunner(), config=config, out=Output())
        data = result.to_dict()
        assert data["exit_code"] == 0
        assert data["reactor"]["modules"] == ["g.cm:ui", "g:api", "g:core"]
        assert len(data["invocations"]) == 2
