"""이 파일은 .py PR 스캔 모듈로 소스/타깃 브랜치를 스캔하고 새 취약점을 코멘트로 남깁니다."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Sequence

from frogbot.adapters.base import Scanner, VcsClient
from frogbot.adapters.sca import ScaRunner
from frogbot.core.config import GIT_PULL_REQUEST_ID_ENV, GIT_REPO_ENV
from frogbot.core.errors import AdapterError, ConfigError, ScanExecutionError, SecurityIssueFoundError
from frogbot.core.repo_config import FrogbotConfigAggregator, FrogbotRepoConfig, Project
from frogbot.core.storage import temp_workspace
from frogbot.core.types import ReportRow, ScanParams, ScanResult, Secret

from .diff import create_all_issues_rows, create_new_issues_rows
from .email_alerts import SmtpFactory, alert_secrets_exposed
from .reporting import OutputWriter, SimplifiedOutputWriter, StandardOutputWriter, create_pull_request_message

logger = logging.getLogger(__name__)


def create_scan_params(watches: Sequence[str], project_key: str) -> ScanParams:
    # 워치나 프로젝트가 있으면 정책 위반만, 없으면 전체 취약점을 요청한다.
    return ScanParams(
        watches=tuple(watches or ()),
        project_key=project_key or "",
        include_vulnerabilities=not watches and not project_key,
        include_licenses=False,
    )


def get_full_path_working_dirs(project: Project, base_dir: Path) -> List[Path]:
    base_dir = Path(base_dir)
    return [base_dir if working_dir in ("", ".") else base_dir / working_dir for working_dir in project.working_dirs]


def run_install_if_needed(
    project: Project,
    working_dir: Path,
    fail_on_installation_errors: bool,
    runner: Optional[ScaRunner] = None,
) -> None:
    if not project.install_command:
        return
    runner = runner or ScaRunner()
    command = [project.install_command_name, *project.install_command_args]
    logger.info("Executing '%s' in %s", project.install_command, working_dir)
    try:
        outcome = runner.run(command, cwd=Path(working_dir))
        failure = f"exit code {outcome.exit_code}: {outcome.stderr.strip()[:500]}" if outcome.exit_code else ""
    except AdapterError as exc:
        failure = str(exc)
    if not failure:
        return
    message = f"'{project.install_command}' command failed in {working_dir}: {failure}"
    if fail_on_installation_errors:
        raise ScanExecutionError(message)
    logger.warning(message)


def get_render_writer(repo_config: FrogbotRepoConfig) -> OutputWriter:
    return SimplifiedOutputWriter() if repo_config.simplified_output else StandardOutputWriter()


class PullRequestScanner:
    """단일 PR 스캔 흐름: 소스 스캔 -> 타깃 다운로드/스캔 -> diff -> 렌더링 -> 코멘트."""

    def __init__(
        self,
        client: VcsClient,
        scanner: Scanner,
        runner: Optional[ScaRunner] = None,
        smtp_factory: Optional[SmtpFactory] = None,
    ) -> None:
        self.client = client
        self.scanner = scanner
        self.runner = runner or ScaRunner()
        self.smtp_factory = smtp_factory

    def run(self, aggregator: FrogbotConfigAggregator, source_dir: Optional[Path] = None) -> List[ReportRow]:
        # CI에서 특정 PR 하나를 대상으로 실행되며, 소스 브랜치는 이미 체크아웃되어 있다.
        if not aggregator:
            raise ConfigError("No repository configuration found")
        repo_config = aggregator[0]
        if repo_config.git.pull_request_id <= 0:
            raise ConfigError(f"{GIT_PULL_REQUEST_ID_ENV} is required to scan a pull request")
        if not repo_config.git.repo_name:
            raise ConfigError(f"{GIT_REPO_ENV} is required to scan a pull request")
        return self.scan_pull_request(repo_config, Path(source_dir) if source_dir else Path.cwd())

    def scan_pull_request(
        self,
        repo_config: FrogbotRepoConfig,
        source_dir: Path,
        source_branch: str = "",
    ) -> List[ReportRow]:
        git = repo_config.git
        platform = repo_config.jfrog_platform
        params = create_scan_params(platform.watches, platform.jfrog_project_key)

        # 1) 소스 브랜치(PR 변경분) 스캔
        logger.info("Scanning source branch of pull request #%s in %s/%s", git.pull_request_id, git.repo_owner, git.repo_name)
        source_results = self.audit(repo_config, source_dir, params)

        # 2) 기준 비교가 필요하면 타깃 브랜치를 내려받아 스캔하고 diff한다.
        if repo_config.scan.include_all_vulnerabilities:
            rows = create_all_issues_rows(source_results)
        else:
            target_results = self.audit_branch(repo_config, git.base_branch, params)
            rows = create_new_issues_rows(target_results, source_results)
        logger.info("Found %d new issues in pull request #%s", len(rows), git.pull_request_id)

        # 3) 렌더링 후 코멘트 등록
        message = create_pull_request_message(rows, get_render_writer(repo_config))
        try:
            self.client.add_pull_request_comment(git.repo_owner, git.repo_name, message, git.pull_request_id)
        except Exception as exc:
            raise AdapterError(f"Failed to comment on pull request #{git.pull_request_id}: {exc}") from exc

        # 4) 시크릿이 발견되면 메일 알림
        secrets = _collect_secrets(source_results)
        if secrets and repo_config.scan.email.enabled:
            try:
                alert_secrets_exposed(
                    self.client,
                    git.git_provider,
                    git.repo_owner,
                    git.repo_name,
                    source_branch or git.base_branch,
                    "",
                    secrets,
                    repo_config.scan.email,
                    smtp_factory=self.smtp_factory,
                )
            except AdapterError as exc:
                # 알림 실패가 보안 게이트 판정을 가리면 안 된다.
                logger.error("Secrets alert failed: %s", exc)

        # 5) 보안 게이트
        if repo_config.scan.fail_on_security_issues and rows:
            raise SecurityIssueFoundError()
        return rows

    def audit_branch(self, repo_config: FrogbotRepoConfig, branch: str, params: ScanParams) -> List[ScanResult]:
        git = repo_config.git
        with temp_workspace("target") as workspace:
            try:
                target_dir = self.client.download_repository(git.repo_owner, git.repo_name, branch, workspace)
            except Exception as exc:
                raise AdapterError(f"Failed to download {git.repo_owner}/{git.repo_name}@{branch}: {exc}") from exc
            logger.info("Scanning target branch %s", branch)
            return self.audit(repo_config, target_dir, params)

    def audit(self, repo_config: FrogbotRepoConfig, base_dir: Path, params: ScanParams) -> List[ScanResult]:
        results: List[ScanResult] = []
        for project in repo_config.scan.projects:
            working_dirs = get_full_path_working_dirs(project, base_dir)
            for working_dir in working_dirs:
                run_install_if_needed(project, working_dir, repo_config.scan.fail_on_installation_errors, self.runner)
            try:
                results.extend(self.scanner.scan(working_dirs, params))
            except (ScanExecutionError, AdapterError):
                raise
            except Exception as exc:
                raise ScanExecutionError(f"Scan of {base_dir} failed: {exc}") from exc
        return results


def _collect_secrets(results: Sequence[ScanResult]) -> List[Secret]:
    return [secret for result in results for secret in result.secrets]
