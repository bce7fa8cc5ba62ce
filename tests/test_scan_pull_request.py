"""이 파일은 .py 테스트 모듈로 단일 PR 스캔 흐름을 검증합니다."""

import os
from pathlib import Path

import pytest
from conftest import BRANCH_MARKER, FakeScanner, make_vulnerability

from frogbot.adapters.sca import ToolResult
from frogbot.core.errors import ConfigError, ScanExecutionError, SecurityIssueFoundError
from frogbot.core.repo_config import Project
from frogbot.core.types import CommitInfo, ScanResult, Secret
from frogbot.services.reporting import ImageSource, get_simplified_title
from frogbot.services.scan_pull_request import (
    PullRequestScanner,
    create_scan_params,
    get_full_path_working_dirs,
    run_install_if_needed,
)


class RecordingRunner:
    def __init__(self, exit_code: int = 0) -> None:
        self.exit_code = exit_code
        self.calls = []

    def run(self, command, cwd=None):
        self.calls.append((command, cwd))
        return ToolResult(self.exit_code, "", "boom" if self.exit_code else "")


def _source_dir(tmp_path: Path, branch: str = "feature") -> Path:
    source = tmp_path / "source"
    source.mkdir()
    (source / BRANCH_MARKER).write_text(branch, encoding="utf-8")
    return source


def _scanner() -> FakeScanner:
    return FakeScanner(
        {
            "main": [ScanResult(vulnerabilities=[make_vulnerability("XRAY-1", "A")])],
            "feature": [ScanResult(vulnerabilities=[make_vulnerability("XRAY-1", "A", "B")])],
        }
    )


def test_create_scan_params() -> None:
    params = create_scan_params([], "")
    assert params.include_vulnerabilities is True
    assert params.include_licenses is False

    params = create_scan_params(["watch-1", "watch-2"], "")
    assert params.watches == ("watch-1", "watch-2")
    assert params.include_vulnerabilities is False

    params = create_scan_params([], "proj")
    assert params.project_key == "proj"
    assert params.include_vulnerabilities is False


def test_get_full_path_working_dirs() -> None:
    project = Project(working_dirs=[os.path.join("a", "b"), ".", os.path.join("c", "d")])

    assert get_full_path_working_dirs(project, Path("tempDir")) == [
        Path("tempDir", "a", "b"),
        Path("tempDir"),
        Path("tempDir", "c", "d"),
    ]


def test_run_install_if_needed(tmp_path: Path) -> None:
    runner = RecordingRunner()
    run_install_if_needed(Project(), tmp_path, True, runner)
    assert runner.calls == []

    run_install_if_needed(Project(install_command="npm install --legacy-peer-deps"), tmp_path, True, runner)
    assert runner.calls == [(["npm", "install", "--legacy-peer-deps"], tmp_path)]


def test_run_install_failure_respects_flag(tmp_path: Path) -> None:
    project = Project(install_command="npm install")

    with pytest.raises(ScanExecutionError):
        run_install_if_needed(project, tmp_path, True, RecordingRunner(exit_code=1))
    run_install_if_needed(project, tmp_path, False, RecordingRunner(exit_code=1))


def test_scan_pull_request_reports_only_new_issues(tmp_path: Path, vcs_client, repo_config) -> None:
    scanner = _scanner()
    config = repo_config.model_copy(update={"simplified_output": True})

    rows = PullRequestScanner(vcs_client, scanner).scan_pull_request(config, _source_dir(tmp_path))

    assert [(row.issue_id, row.component_id) for row in rows] == [("XRAY-1", "B")]
    ((owner, repository, pr_id, content),) = vcs_client.posted
    assert (owner, repository, pr_id) == ("jfrog", "repo", 1)
    assert content.startswith(get_simplified_title(ImageSource.VULNERABILITIES_BANNER))
    # 타깃 브랜치 임시 디렉토리는 스캔 후 삭제된다.
    assert all(not path.exists() for path in vcs_client.downloaded)


def test_include_all_vulnerabilities_skips_target_download(tmp_path: Path, vcs_client, repo_config) -> None:
    repo_config.scan.include_all_vulnerabilities = True

    rows = PullRequestScanner(vcs_client, _scanner()).scan_pull_request(repo_config, _source_dir(tmp_path))

    assert len(rows) == 2
    assert vcs_client.downloaded == []


def test_security_gate_raises_after_commenting(tmp_path: Path, vcs_client, repo_config) -> None:
    repo_config.scan.fail_on_security_issues = True

    with pytest.raises(SecurityIssueFoundError):
        PullRequestScanner(vcs_client, _scanner()).scan_pull_request(repo_config, _source_dir(tmp_path))
    assert len(vcs_client.posted) == 1


def test_security_gate_passes_without_new_issues(tmp_path: Path, vcs_client, repo_config) -> None:
    repo_config.scan.fail_on_security_issues = True
    scanner = FakeScanner({"main": [], "feature": []})

    assert PullRequestScanner(vcs_client, scanner).scan_pull_request(repo_config, _source_dir(tmp_path)) == []


def test_scanner_failure_is_wrapped(tmp_path: Path, vcs_client, repo_config) -> None:
    scanner = _scanner()
    scanner.failing_branches.add("main")

    with pytest.raises(ScanExecutionError):
        PullRequestScanner(vcs_client, scanner).scan_pull_request(repo_config, _source_dir(tmp_path))
    assert vcs_client.posted == []
    assert all(not path.exists() for path in vcs_client.downloaded)


def test_run_requires_pull_request_id(vcs_client, repo_config) -> None:
    config = repo_config.model_copy(update={"git": repo_config.git.model_copy(update={"pull_request_id": 0})})

    with pytest.raises(ConfigError):
        PullRequestScanner(vcs_client, _scanner()).run([config])
    with pytest.raises(ConfigError):
        PullRequestScanner(vcs_client, _scanner()).run([])


def test_run_scans_given_source_dir(tmp_path: Path, vcs_client, repo_config) -> None:
    rows = PullRequestScanner(vcs_client, _scanner()).run([repo_config], _source_dir(tmp_path))

    assert len(rows) == 1


def test_secrets_trigger_email_alert(tmp_path: Path, vcs_client, repo_config) -> None:
    sent = []

    class FakeSmtp:
        def __init__(self, host, port):
            self.host, self.port = host, port

        def __enter__(self):
            return self

        def __exit__(self, *exc):
            return False

        def starttls(self):
            pass

        def login(self, user, password):
            pass

        def send_message(self, message):
            sent.append((self.host, self.port, message))

    repo_config.scan.email.smtp_server = "smtp.example.com"
    repo_config.scan.email.smtp_user = "bot@example.com"
    vcs_client.commits = [CommitInfo(author_email="dev@example.com")]
    secret = Secret(file="config.py", line_column="3:1", text="AKIA****")
    scanner = FakeScanner({"feature": [ScanResult(secrets=[secret])], "main": []})

    PullRequestScanner(vcs_client, scanner, smtp_factory=FakeSmtp).scan_pull_request(repo_config, _source_dir(tmp_path))

    ((host, port, message),) = sent
    assert (host, port) == ("smtp.example.com", 587)
    assert message["To"] == "dev@example.com"


def test_security_gate_survives_email_failure(tmp_path: Path, vcs_client, repo_config) -> None:
    class DownSmtp:
        def __init__(self, host, port):
            raise OSError("smtp down")

    repo_config.scan.fail_on_security_issues = True
    repo_config.scan.email.smtp_server = "smtp.example.com"
    repo_config.scan.email.email_receivers = ["sec@example.com"]
    secret = Secret(file="config.py", line_column="3:1", text="AKIA****")
    scanner = FakeScanner(
        {"feature": [ScanResult(vulnerabilities=[make_vulnerability("XRAY-1", "A")], secrets=[secret])], "main": []}
    )

    with pytest.raises(SecurityIssueFoundError):
        PullRequestScanner(vcs_client, scanner, smtp_factory=DownSmtp).scan_pull_request(repo_config, _source_dir(tmp_path))
    assert len(vcs_client.posted) == 1
