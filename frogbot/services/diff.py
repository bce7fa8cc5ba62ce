"""이 파일은 .py 취약점 diff 모듈로 기준 브랜치 대비 새로 추가된 이슈 행을 계산합니다."""

from __future__ import annotations

from typing import Iterable, Iterator, List, Optional, Sequence, Set, Tuple

from frogbot.core.types import Component, IssueIdentity, ReportRow, ScanResult, Violation, Vulnerability

ScanResults = Optional[Sequence[Optional[ScanResult]]]


def split_component_id(component_id: str) -> Tuple[str, str]:
    # "<type>://<name>:<version>" 형식이며, Maven 좌표처럼 이름에 ':'가 있어도 마지막 ':'로 자른다.
    if "://" not in component_id:
        return component_id, ""
    _, _, coordinates = component_id.partition("://")
    name, separator, version = coordinates.rpartition(":")
    if not separator:
        return coordinates, ""
    return name, version


def create_new_issues_rows(previous: ScanResults, current: ScanResults) -> List[ReportRow]:
    """current에만 있는 (이슈, 컴포넌트) 쌍을 current 순서대로 반환합니다.

    previous 전체(모든 결과, 위반과 취약점, 모든 컴포넌트)에서 식별자 집합을 만든 뒤
    current를 순회하며 집합에 없는 쌍만 행으로 만든다. None은 빈 입력으로 본다.
    """
    seen: Set[IssueIdentity] = {
        IssueIdentity(issue.issue_id, component_id)
        for issue, component_id, _ in _iter_issue_components(previous)
    }
    return [
        _to_row(issue, component_id, component)
        for issue, component_id, component in _iter_issue_components(current)
        if IssueIdentity(issue.issue_id, component_id) not in seen
    ]


def create_all_issues_rows(current: ScanResults) -> List[ReportRow]:
    # 비교 기준이 없을 때 사용한다.
    return [
        _to_row(issue, component_id, component)
        for issue, component_id, component in _iter_issue_components(current)
    ]


def _iter_issue_components(results: ScanResults) -> Iterator[Tuple[Vulnerability, str, Component]]:
    # 결과 순서 > 위반 먼저, 취약점 다음 > 이슈 순서 > 컴포넌트 순서로 평탄화한다.
    for result in results or ():
        if result is None:
            continue
        for issues in (result.violations, result.vulnerabilities):
            for issue in _non_empty(issues):
                # 컴포넌트가 없는 이슈는 패키지에 귀속할 수 없으므로 행이 생기지 않는다.
                for component_id, component in (issue.components or {}).items():
                    yield issue, component_id, component


def _non_empty(issues: Optional[Iterable[Vulnerability]]) -> Iterable[Vulnerability]:
    return [issue for issue in issues or () if issue is not None]


def _to_row(issue: Vulnerability, component_id: str, component: Component) -> ReportRow:
    derived_name, derived_version = split_component_id(component_id)
    return ReportRow(
        issue_id=issue.issue_id,
        component_id=component_id,
        severity=issue.severity,
        impacted_package_name=component.name or derived_name,
        impacted_package_version=component.version or derived_version,
        summary=issue.summary,
        fixed_versions=tuple(component.fixed_versions),
        cves=tuple(issue.cves),
        kind="violation" if isinstance(issue, Violation) else "vulnerability",
    )
