"""이 파일은 .py 오케스트레이터 서비스 모듈로 설정된 모든 저장소의 열린 PR을 순차 스캔합니다."""

import logging
from typing import Optional

from frogbot.adapters.base import Scanner, VcsClient
from frogbot.core.errors import AdapterError
from frogbot.core.repo_config import FrogbotConfigAggregator, FrogbotRepoConfig
from frogbot.core.storage import temp_workspace
from frogbot.core.types import PullRequestInfo, SweepReport

from .decider import should_scan
from .scan_pull_request import PullRequestScanner

logger = logging.getLogger(__name__)


class Orchestrator:
    def __init__(
        self,
        client: VcsClient,
        scanner: Scanner,
        pull_request_scanner: Optional[PullRequestScanner] = None,
    ) -> None:
        self.client = client
        self.pull_request_scanner = pull_request_scanner or PullRequestScanner(client, scanner)

    def run(self, aggregator: FrogbotConfigAggregator) -> SweepReport:
        report = self.scan_all_pull_requests(aggregator)
        logger.info("Sweep finished: %s", report.as_summary())
        # 전체를 끝까지 돈 뒤 마지막 에러만 호출자에게 전달한다.
        if report.last_error is not None:
            raise report.last_error
        return report

    def scan_all_pull_requests(self, aggregator: FrogbotConfigAggregator) -> SweepReport:
        """저장소별로 열린 PR을 나열하고 스캔이 필요한 PR만 처리합니다.

        한 PR 또는 한 저장소의 실패는 기록만 하고 다음 PR/저장소로 넘어간다.
        """
        report = SweepReport()
        for repo_config in aggregator:
            self._scan_repository(repo_config, report)
        return report

    def _scan_repository(self, repo_config: FrogbotRepoConfig, report: SweepReport) -> None:
        git = repo_config.git
        try:
            pull_requests = self.client.list_open_pull_requests(git.repo_owner, git.repo_name)
        except Exception as exc:
            logger.error("Failed to list open pull requests of %s/%s: %s", git.repo_owner, git.repo_name, exc)
            report.errors.append((git.repo_name, None, exc))
            return

        logger.info("Found %d open pull requests in %s/%s", len(pull_requests), git.repo_owner, git.repo_name)
        for pull_request in pull_requests:
            key = (git.repo_name, pull_request.id)
            try:
                selected = should_scan(self.client, git.repo_owner, git.repo_name, pull_request.id)
            except Exception as exc:
                logger.error("Pull request #%s: %s", pull_request.id, exc)
                report.errors.append((git.repo_name, pull_request.id, exc))
                continue
            if not selected:
                logger.info("Pull request #%s was already scanned, skipping", pull_request.id)
                report.skipped.append(key)
                continue
            try:
                self.download_and_scan_pull_request(pull_request, repo_config)
            except Exception as exc:
                logger.error("Pull request #%s: %s", pull_request.id, exc)
                report.errors.append((git.repo_name, pull_request.id, exc))
                continue
            report.scanned.append(key)

    def download_and_scan_pull_request(self, pull_request: PullRequestInfo, repo_config: FrogbotRepoConfig) -> None:
        git = repo_config.git
        source = pull_request.source
        # 소스 브랜치는 PR 전용 임시 디렉토리에 받고, 타깃 브랜치는 PR 스캔 단계에서 받는다.
        with temp_workspace(f"pr{pull_request.id}") as workspace:
            try:
                source_dir = self.client.download_repository(git.repo_owner, source.repository, source.name, workspace)
            except Exception as exc:
                raise AdapterError(
                    f"Failed to download {git.repo_owner}/{source.repository}@{source.name}: {exc}"
                ) from exc
            pull_request_config = repo_config.for_branch(
                pull_request.target.repository,
                pull_request.target.name,
                pull_request.id,
            ).model_copy(update={"simplified_output": True})
            self.pull_request_scanner.scan_pull_request(pull_request_config, source_dir, source_branch=source.name)
