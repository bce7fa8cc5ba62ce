"""이 파일은 .py 공통 예외 모듈로 오류 유형을 표준화합니다."""

SECURITY_ISSUE_FOUND_MESSAGE = (
    "issues were detected by Frogbot\n You can avoid marking the Frogbot scan as failed by setting "
    "failOnSecurityIssues to false in the frogbot-config.yml file"
)


class ConfigError(ValueError):
    """설정 파일 또는 환경 변수 검증 실패 시 사용합니다."""


class AdapterError(RuntimeError):
    """외부 어댑터(VCS, git, 스캐너 프로세스) 실행 오류에 사용합니다."""


class ScanExecutionError(RuntimeError):
    """스캔 실행 중 발생한 오류를 감싸는 예외입니다."""


class CommentRetrievalError(AdapterError):
    """PR 코멘트 이력을 읽지 못해 스캔 여부를 결정할 수 없을 때 사용합니다."""


class InvalidBranchNameError(ValueError):
    """생성된 브랜치 이름이 git ref 규칙에 맞지 않을 때 사용합니다."""


class SecurityIssueFoundError(RuntimeError):
    """새 보안 이슈가 발견되고 실패 정책이 켜져 있을 때 빌드를 실패시키는 예외입니다."""

    def __init__(self, message: str = SECURITY_ISSUE_FOUND_MESSAGE) -> None:
        super().__init__(message)
