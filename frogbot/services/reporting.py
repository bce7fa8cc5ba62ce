"""이 파일은 .py 리포팅 모듈로 diff 결과를 PR 코멘트 마크다운으로 변환합니다."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import List, Sequence

from frogbot.core.config import FROGBOT_README_URL, RESOURCES_BASE_URL
from frogbot.core.types import ReportRow, Severity

TABLE_HEADER = "| SEVERITY | IMPACTED PACKAGE | VERSION | FIXED VERSIONS | CVES |"
TABLE_DIVIDER = "| :---: | :---: | :---: | :---: | :---: |"


class ImageSource(str, Enum):
    NO_VULNERABILITY_BANNER = "noVulnerabilityBanner.png"
    VULNERABILITIES_BANNER = "vulnerabilitiesBanner.png"


# 간소화 출력 제목. 스캔 결정 로직이 이 문자열의 접두사로 봇 코멘트를 인식한다.
_SIMPLIFIED_TITLES = {
    ImageSource.NO_VULNERABILITY_BANNER: (
        "**👍 Frogbot scanned this pull request and found that it did not add vulnerable dependencies.**"
    ),
    ImageSource.VULNERABILITIES_BANNER: "**🚨 Frogbot scanned this pull request and found the below:**",
}


def get_banner(source: ImageSource) -> str:
    return f"[![]({RESOURCES_BASE_URL}/{source.value})]({FROGBOT_README_URL})"


def get_simplified_title(source: ImageSource) -> str:
    return _SIMPLIFIED_TITLES[source]


def get_severity_tag(severity: Severity) -> str:
    # Unknown 등급은 이미지 없이 텍스트 태그만 붙인다.
    if severity == Severity.UNKNOWN:
        return severity.value
    return f"![]({RESOURCES_BASE_URL}/{severity.value.lower()}Severity.png)<br>{severity.value}"


class OutputWriter(ABC):
    @abstractmethod
    def title(self, source: ImageSource) -> str:
        raise NotImplementedError

    @abstractmethod
    def severity_tag(self, severity: Severity) -> str:
        raise NotImplementedError


class StandardOutputWriter(OutputWriter):
    def title(self, source: ImageSource) -> str:
        return get_banner(source)

    def severity_tag(self, severity: Severity) -> str:
        return get_severity_tag(severity)


class SimplifiedOutputWriter(OutputWriter):
    # 이미지를 렌더링하지 못하는 공급자와 전체 PR 스캔에서 사용한다.
    def title(self, source: ImageSource) -> str:
        return get_simplified_title(source)

    def severity_tag(self, severity: Severity) -> str:
        return severity.value


def create_pull_request_message(rows: Sequence[ReportRow], writer: OutputWriter) -> str:
    """행 목록을 코멘트 본문으로 만듭니다. 같은 입력이면 항상 같은 문자열을 반환합니다."""
    if not rows:
        return writer.title(ImageSource.NO_VULNERABILITY_BANNER)

    lines: List[str] = [writer.title(ImageSource.VULNERABILITIES_BANNER), "", TABLE_HEADER, TABLE_DIVIDER]
    for row in rows:
        lines.append(
            "| {} | {} | {} | {} | {} |".format(
                writer.severity_tag(row.severity),
                row.impacted_package_name,
                row.impacted_package_version,
                _escape(", ".join(row.fixed_versions)),
                ", ".join(row.cves),
            )
        )
    return "\n".join(lines) + "\n"


def _escape(value: str) -> str:
    return value.replace("|", "\\|")
