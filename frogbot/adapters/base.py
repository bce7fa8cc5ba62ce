"""이 파일은 .py 외부 협력자 베이스 모듈로 VCS 클라이언트와 스캐너 인터페이스를 제공합니다."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Sequence

from frogbot.core.types import CommitInfo, PullRequestComment, PullRequestInfo, ScanParams, ScanResult


class VcsClient(ABC):
    # 공급자별 구현(GitHub, GitLab 등)은 이 인터페이스만 맞추면 된다.

    @abstractmethod
    def list_open_pull_requests(self, owner: str, repository: str) -> List[PullRequestInfo]:
        raise NotImplementedError

    @abstractmethod
    def list_pull_request_comments(
        self,
        owner: str,
        repository: str,
        pull_request_id: int,
    ) -> List[PullRequestComment]:
        raise NotImplementedError

    @abstractmethod
    def add_pull_request_comment(
        self,
        owner: str,
        repository: str,
        content: str,
        pull_request_id: int,
    ) -> None:
        raise NotImplementedError

    @abstractmethod
    def download_repository(self, owner: str, repository: str, branch: str, local_path: Path) -> Path:
        # local_path 아래에 브랜치 내용을 풀고, 실제 저장소 루트 경로를 반환한다.
        raise NotImplementedError

    @abstractmethod
    def get_commits(self, owner: str, repository: str, branch: str) -> List[CommitInfo]:
        raise NotImplementedError


class Scanner(ABC):
    @abstractmethod
    def scan(self, working_dirs: Sequence[Path], params: ScanParams) -> List[ScanResult]:
        raise NotImplementedError
