"""이 파일은 .py 스캔 결정 모듈로 PR 코멘트 이력을 보고 재스캔 여부를 판단합니다."""

from __future__ import annotations

from datetime import datetime, timezone
import logging
from typing import Iterable

from frogbot.adapters.base import VcsClient
from frogbot.core.config import RESCAN_REQUEST_COMMENT
from frogbot.core.errors import CommentRetrievalError
from frogbot.core.types import PullRequestComment

from .reporting import ImageSource, get_simplified_title

logger = logging.getLogger(__name__)


def is_rescan_comment(content: str) -> bool:
    return content.strip().lower() == RESCAN_REQUEST_COMMENT


def is_result_comment(content: str) -> bool:
    # 접두사 비교이며 대소문자를 구분한다.
    return content.startswith(get_simplified_title(ImageSource.NO_VULNERABILITY_BANNER)) or content.startswith(
        get_simplified_title(ImageSource.VULNERABILITIES_BANNER)
    )


def _created_at(comment: PullRequestComment) -> datetime:
    # 시간대가 없는 시각은 UTC로 간주해 aware 시각과 비교할 수 있게 한다.
    created = comment.created
    return created.replace(tzinfo=timezone.utc) if created.tzinfo is None else created


def should_scan_pull_request(comments: Iterable[PullRequestComment]) -> bool:
    """가장 최근에 나타난 봇 관련 코멘트가 결정합니다.

    재스캔 요청이 먼저 나오면 스캔, 결과 코멘트가 먼저 나오면 건너뛴다.
    둘 다 없으면(새 PR) 스캔한다.
    """
    for comment in sorted(comments or (), key=_created_at, reverse=True):
        if is_rescan_comment(comment.content):
            return True
        if is_result_comment(comment.content):
            return False
    return True


def should_scan(client: VcsClient, owner: str, repository: str, pull_request_id: int) -> bool:
    try:
        comments = client.list_pull_request_comments(owner, repository, pull_request_id)
    except Exception as exc:
        # 이력을 모르면 결정할 수 없으므로 기본값으로 넘어가지 않는다.
        raise CommentRetrievalError(
            f"Failed to list comments of pull request #{pull_request_id} in {owner}/{repository}: {exc}"
        ) from exc
    decision = should_scan_pull_request(comments)
    logger.debug("Pull request #%s in %s/%s: scan=%s", pull_request_id, owner, repository, decision)
    return decision
