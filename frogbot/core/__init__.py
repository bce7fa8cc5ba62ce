"""이 파일은 .py 코어 패키지 초기화 모듈로 주요 심볼을 재노출합니다."""

from .config import DEFAULT_CONFIG_PATH, FROGBOT_VERSION
from .errors import (
    AdapterError,
    CommentRetrievalError,
    ConfigError,
    InvalidBranchNameError,
    ScanExecutionError,
    SecurityIssueFoundError,
)
from .logging import setup_logging
from .repo_config import FrogbotConfigAggregator, FrogbotRepoConfig, load_config
from .storage import temp_workspace
from .types import (
    Component,
    PullRequestComment,
    PullRequestInfo,
    ReportRow,
    ScanParams,
    ScanResult,
    Severity,
    Violation,
    Vulnerability,
)

__all__ = [
    "AdapterError",
    "CommentRetrievalError",
    "Component",
    "ConfigError",
    "DEFAULT_CONFIG_PATH",
    "FROGBOT_VERSION",
    "FrogbotConfigAggregator",
    "FrogbotRepoConfig",
    "InvalidBranchNameError",
    "PullRequestComment",
    "PullRequestInfo",
    "ReportRow",
    "ScanExecutionError",
    "ScanParams",
    "ScanResult",
    "SecurityIssueFoundError",
    "Severity",
    "Violation",
    "Vulnerability",
    "load_config",
    "setup_logging",
    "temp_workspace",
]
