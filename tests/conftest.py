"""이 파일은 .py 테스트 설정 모듈로 경로를 초기화하고 VCS/스캐너 대역을 제공합니다."""

import sys
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Set, Tuple

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from frogbot.adapters.base import Scanner, VcsClient
from frogbot.core.repo_config import FrogbotRepoConfig
from frogbot.core.types import (
    BranchInfo,
    CommitInfo,
    Component,
    PullRequestComment,
    PullRequestInfo,
    ScanParams,
    ScanResult,
    Vulnerability,
)

# 다운로드한 브랜치 디렉토리에 남기는 표식 파일이다. FakeScanner가 이 값으로 결과를 고른다.
BRANCH_MARKER = "BRANCH"


class FakeVcsClient(VcsClient):
    def __init__(self) -> None:
        self.pull_requests: Dict[str, List[PullRequestInfo]] = {}
        self.comments: Dict[int, List[PullRequestComment]] = {}
        self.commits: List[CommitInfo] = []
        self.posted: List[Tuple[str, str, int, str]] = []
        self.downloaded: List[Path] = []
        self.failing_comment_lists: Set[int] = set()
        self.failing_repositories: Set[str] = set()

    def list_open_pull_requests(self, owner: str, repository: str) -> List[PullRequestInfo]:
        if repository in self.failing_repositories:
            raise ConnectionError(f"cannot list {repository}")
        return list(self.pull_requests.get(repository, []))

    def list_pull_request_comments(self, owner: str, repository: str, pull_request_id: int) -> List[PullRequestComment]:
        if pull_request_id in self.failing_comment_lists:
            raise ConnectionError("comments unavailable")
        return list(self.comments.get(pull_request_id, []))

    def add_pull_request_comment(self, owner: str, repository: str, content: str, pull_request_id: int) -> None:
        self.posted.append((owner, repository, pull_request_id, content))

    def download_repository(self, owner: str, repository: str, branch: str, local_path: Path) -> Path:
        target = Path(local_path) / repository
        target.mkdir(parents=True, exist_ok=True)
        (target / BRANCH_MARKER).write_text(branch, encoding="utf-8")
        self.downloaded.append(target)
        return target

    def get_commits(self, owner: str, repository: str, branch: str) -> List[CommitInfo]:
        return list(self.commits)


class FakeScanner(Scanner):
    def __init__(self, results_by_branch: Optional[Dict[str, List[ScanResult]]] = None) -> None:
        self.results_by_branch = results_by_branch or {}
        self.failing_branches: Set[str] = set()
        self.calls: List[Tuple[Tuple[Path, ...], ScanParams]] = []

    def scan(self, working_dirs: Sequence[Path], params: ScanParams) -> List[ScanResult]:
        self.calls.append((tuple(working_dirs), params))
        results: List[ScanResult] = []
        for working_dir in working_dirs:
            marker = Path(working_dir) / BRANCH_MARKER
            branch = marker.read_text(encoding="utf-8") if marker.exists() else "local"
            if branch in self.failing_branches:
                raise RuntimeError(f"scanner crashed on {branch}")
            results.extend(self.results_by_branch.get(branch, []))
        return results


def make_vulnerability(issue_id: str, *component_ids: str, severity: str = "High") -> Vulnerability:
    return Vulnerability(
        issue_id=issue_id,
        severity=severity,
        summary=f"summary of {issue_id}",
        components={component_id: Component() for component_id in component_ids},
    )


def make_pull_request(pr_id: int, source: str = "feature", target: str = "main", repository: str = "repo") -> PullRequestInfo:
    return PullRequestInfo(
        id=pr_id,
        source=BranchInfo(name=f"{source}-{pr_id}", repository=repository),
        target=BranchInfo(name=target, repository=repository),
    )


def make_comment(content: str, hour: int) -> PullRequestComment:
    return PullRequestComment(content=content, created=datetime(2023, 1, 1, hour))


@pytest.fixture
def vcs_client() -> FakeVcsClient:
    return FakeVcsClient()


@pytest.fixture
def repo_config() -> FrogbotRepoConfig:
    return FrogbotRepoConfig.model_validate(
        {
            "git": {"gitProvider": "github", "repoOwner": "jfrog", "repoName": "repo", "baseBranch": "main", "pullRequestId": 1},
            "scan": {"failOnSecurityIssues": False},
        }
    )
