"""이 파일은 .py 타입 정의 모듈로 스캔 결과, PR 정보, 리포트 행 모델을 제공합니다."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Mapping, Optional, Tuple, Union


class Severity(str, Enum):
    # 선언 순서가 곧 우선순위이다(Critical이 가장 높다).
    CRITICAL = "Critical"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"
    # 심각도가 비어 있는 결과는 별도 등급으로 취급한다.
    UNKNOWN = "Unknown"

    @classmethod
    def from_value(cls, value: Union["Severity", str, None]) -> "Severity":
        if isinstance(value, Severity):
            return value
        if not value:
            return cls.UNKNOWN
        normalized = str(value).strip().lower()
        for member in cls:
            if member.value.lower() == normalized:
                return member
        return cls.UNKNOWN

    @property
    def rank(self) -> int:
        # 정렬용 순위. 값이 작을수록 심각하다.
        return list(Severity).index(self)


class VcsProvider(str, Enum):
    GITHUB = "github"
    GITLAB = "gitlab"
    BITBUCKET_SERVER = "bitbucketserver"
    BITBUCKET_CLOUD = "bitbucketcloud"
    AZURE_REPOS = "azurerepos"

    @property
    def display_name(self) -> str:
        return _PROVIDER_NAMES[self]


_PROVIDER_NAMES = {
    VcsProvider.GITHUB: "GitHub",
    VcsProvider.GITLAB: "GitLab",
    VcsProvider.BITBUCKET_SERVER: "Bitbucket Server",
    VcsProvider.BITBUCKET_CLOUD: "Bitbucket Cloud",
    VcsProvider.AZURE_REPOS: "Azure Repos",
}


class Technology(str, Enum):
    # 묶음(aggregated) 수정 브랜치의 키로 사용되는 패키지 매니저 목록이다.
    MAVEN = "maven"
    GRADLE = "gradle"
    NPM = "npm"
    YARN = "yarn"
    GO = "go"
    PIP = "pip"
    PIPENV = "pipenv"
    POETRY = "poetry"
    NUGET = "nuget"
    DOTNET = "dotnet"

    @property
    def formal_name(self) -> str:
        return _TECHNOLOGY_NAMES.get(self, self.value.capitalize())


_TECHNOLOGY_NAMES = {
    Technology.NPM: "npm",
    Technology.NUGET: "NuGet",
    Technology.DOTNET: ".NET",
}


@dataclass(frozen=True)
class Component:
    # 컴포넌트 ID에서 이름/버전을 유추할 수 있으므로 모두 선택 값이다.
    name: str = ""
    version: str = ""
    fixed_versions: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Vulnerability:
    issue_id: str
    severity: Severity = Severity.UNKNOWN
    summary: str = ""
    # 컴포넌트 ID -> Component. 입력 순서가 리포트 순서가 된다.
    components: Mapping[str, Component] = field(default_factory=dict)
    cves: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "severity", Severity.from_value(self.severity))
        object.__setattr__(self, "components", dict(self.components or {}))
        object.__setattr__(self, "cves", tuple(self.cves or ()))


@dataclass(frozen=True)
class Violation(Vulnerability):
    # 워치/프로젝트 정책에 걸린 결과이며 violation_type으로 구분한다.
    violation_type: str = "security"


@dataclass(frozen=True)
class Secret:
    file: str
    line_column: str
    text: str


@dataclass(frozen=True)
class ScanResult:
    # 한 브랜치(작업 디렉토리)에 대한 1회 스캔 스냅샷이다.
    violations: Tuple[Violation, ...] = ()
    vulnerabilities: Tuple[Vulnerability, ...] = ()
    secrets: Tuple[Secret, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "violations", tuple(self.violations or ()))
        object.__setattr__(self, "vulnerabilities", tuple(self.vulnerabilities or ()))
        object.__setattr__(self, "secrets", tuple(self.secrets or ()))


@dataclass(frozen=True)
class IssueIdentity:
    # diff 키. 이슈 ID와 컴포넌트 ID가 모두 같아야 같은 결과로 본다.
    issue_id: str
    component_id: str


@dataclass(frozen=True)
class ReportRow:
    issue_id: str
    component_id: str
    severity: Severity
    impacted_package_name: str
    impacted_package_version: str = ""
    summary: str = ""
    fixed_versions: Tuple[str, ...] = ()
    cves: Tuple[str, ...] = ()
    # "violation" 또는 "vulnerability"
    kind: str = "vulnerability"

    @property
    def identity(self) -> IssueIdentity:
        return IssueIdentity(self.issue_id, self.component_id)


@dataclass(frozen=True)
class PullRequestComment:
    content: str
    created: datetime


@dataclass(frozen=True)
class BranchInfo:
    name: str
    repository: str


@dataclass(frozen=True)
class PullRequestInfo:
    id: int
    source: BranchInfo
    target: BranchInfo


@dataclass(frozen=True)
class CommitInfo:
    author_email: str
    hash: str = ""
    message: str = ""


@dataclass(frozen=True)
class ScanParams:
    watches: Tuple[str, ...] = ()
    project_key: str = ""
    include_vulnerabilities: bool = True
    include_licenses: bool = False


@dataclass(frozen=True)
class TemplateContext:
    # 수정 브랜치/커밋/PR 제목 생성에 쓰이는 값. 해시는 생성 시 한 번 계산된다.
    impacted_package: str
    fix_version: str
    branch_name_hash: str


@dataclass
class SweepReport:
    # 전체 PR 스캔 결과 요약. errors에는 (저장소, PR ID, 예외)를 순서대로 쌓는다.
    scanned: List[Tuple[str, int]] = field(default_factory=list)
    skipped: List[Tuple[str, int]] = field(default_factory=list)
    errors: List[Tuple[str, Optional[int], Exception]] = field(default_factory=list)

    @property
    def last_error(self) -> Optional[Exception]:
        if not self.errors:
            return None
        return self.errors[-1][2]

    def as_summary(self) -> Dict[str, int]:
        return {
            "scanned": len(self.scanned),
            "skipped": len(self.skipped),
            "errors": len(self.errors),
        }
