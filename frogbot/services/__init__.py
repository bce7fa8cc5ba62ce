"""이 파일은 .py 서비스 패키지 초기화 모듈로 핵심 서비스를 노출합니다."""

from .decider import should_scan, should_scan_pull_request
from .diff import create_all_issues_rows, create_new_issues_rows
from .naming import NamingTemplateEngine, validate_branch_name
from .orchestrator import Orchestrator
from .scan_pull_request import PullRequestScanner

__all__ = [
    "NamingTemplateEngine",
    "Orchestrator",
    "PullRequestScanner",
    "create_all_issues_rows",
    "create_new_issues_rows",
    "should_scan",
    "should_scan_pull_request",
    "validate_branch_name",
]
