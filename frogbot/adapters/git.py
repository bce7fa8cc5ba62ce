"""이 파일은 .py git 어댑터로 수정 브랜치 생성/체크아웃과 HTTPS 클론 URL 생성을 제공합니다."""

from __future__ import annotations

import logging
import os
from pathlib import Path
import shutil
import subprocess
from typing import List

from frogbot.core.errors import AdapterError
from frogbot.core.repo_config import GitParams
from frogbot.core.types import VcsProvider
from frogbot.services.naming import NamingTemplateEngine, validate_branch_name

logger = logging.getLogger(__name__)


class GitManager:
    def __init__(self, repo_path: Path, git_params: GitParams, remote_name: str = "origin", timeout: int = 60) -> None:
        self.repo_path = Path(repo_path)
        self.git_params = git_params
        self.remote_name = remote_name
        self.timeout = timeout
        self.naming = NamingTemplateEngine.from_git_params(git_params)

    def create_branch_and_checkout(self, branch: str) -> None:
        # 생성된 이름이 git ref 규칙에 맞는지 먼저 확인한다.
        validate_branch_name(branch)
        logger.info("Creating branch %s", branch)
        self._run(["checkout", "-b", branch])

    def create_fix_branch(self, impacted_package: str, fix_version: str) -> str:
        # 설정된 템플릿으로 기준 브랜치 기준 수정 브랜치 이름을 만들고 체크아웃한다.
        branch = self.naming.generate_fix_branch_name(self.git_params.base_branch, impacted_package, fix_version)
        self.create_branch_and_checkout(branch)
        return branch

    def checkout(self, branch: str) -> None:
        logger.debug("Checking out %s", branch)
        self._run(["checkout", branch])

    def current_branch(self) -> str:
        return self._run(["rev-parse", "--abbrev-ref", "HEAD"]).strip()

    def generate_https_clone_url(self) -> str:
        params = self.git_params
        endpoint = params.api_endpoint.rstrip("/")
        provider = params.git_provider
        if provider in (VcsProvider.GITHUB, VcsProvider.GITLAB):
            return f"{endpoint}/{params.repo_owner}/{params.repo_name}.git"
        if provider == VcsProvider.BITBUCKET_SERVER:
            return f"{endpoint}/scm/{params.repo_owner}/{params.repo_name}.git"
        if provider == VcsProvider.AZURE_REPOS:
            # https://<owner>@<host>/<owner>/<project>/_git/<repo> 형식이다.
            host_path = endpoint.split("://", 1)[-1]
            return f"https://{params.repo_owner}@{host_path}/{params.project}/_git/{params.repo_name}"
        raise AdapterError(f"unsupported version control provider: {provider.display_name}")

    def _run(self, args: List[str]) -> str:
        if not shutil.which("git"):
            raise AdapterError("git binary not found")
        command = ["git", "-C", str(self.repo_path), *args]
        try:
            result = subprocess.run(
                command,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
                env={**os.environ, "GIT_TERMINAL_PROMPT": "0"},
            )
        except subprocess.TimeoutExpired as exc:
            raise AdapterError(f"git {args[0]} timed out") from exc
        if result.returncode != 0:
            raise AdapterError(f"git {args[0]} failed: {result.stderr.strip()[:500]}")
        return result.stdout
