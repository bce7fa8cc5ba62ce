"""이 파일은 .py SCA 어댑터로 외부 스캐너 명령 실행과 결과 변환을 래핑합니다."""

from __future__ import annotations

from dataclasses import dataclass
import json
import logging
from pathlib import Path
import shlex
import subprocess
from typing import Any, Dict, List, Optional, Sequence

from frogbot.core.errors import AdapterError, ScanExecutionError
from frogbot.core.types import Component, ScanParams, ScanResult, Secret, Violation, Vulnerability

from .base import Scanner

logger = logging.getLogger(__name__)

DEFAULT_SCAN_COMMAND = "jf audit --format=json"


@dataclass
class ToolResult:
    exit_code: int
    stdout: str
    stderr: str


class ScaRunner:
    def __init__(self, timeout: Optional[int] = 1800) -> None:
        self.timeout = timeout

    def run(self, command: List[str], cwd: Optional[Path] = None) -> ToolResult:
        try:
            result = subprocess.run(
                command,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
                cwd=str(cwd) if cwd is not None else None,
            )
        except subprocess.TimeoutExpired as exc:
            raise AdapterError(f"SCA command timeout: {command[0]}") from exc
        except OSError as exc:
            raise AdapterError(f"SCA execution failed: {exc}") from exc

        return ToolResult(result.returncode, result.stdout, result.stderr)


class CommandScanner(Scanner):
    """작업 디렉토리마다 스캐너 명령을 실행하고 JSON 출력을 ScanResult로 바꿉니다."""

    def __init__(self, command: str = DEFAULT_SCAN_COMMAND, runner: Optional[ScaRunner] = None) -> None:
        self.command = command or DEFAULT_SCAN_COMMAND
        self.runner = runner or ScaRunner()

    def build_command(self, params: ScanParams) -> List[str]:
        # 워치/프로젝트가 있으면 정책 위반을, 없으면 취약점 목록을 요청한다.
        command = shlex.split(self.command)
        if params.watches:
            command.append(f"--watches={','.join(params.watches)}")
        if params.project_key:
            command.append(f"--project={params.project_key}")
        if params.include_vulnerabilities:
            command.append("--vuln")
        if params.include_licenses:
            command.append("--licenses")
        return command

    def scan(self, working_dirs: Sequence[Path], params: ScanParams) -> List[ScanResult]:
        command = self.build_command(params)
        results: List[ScanResult] = []
        for working_dir in working_dirs:
            logger.info("Scanning %s", working_dir)
            # 프로세스 작업 디렉토리를 바꾸지 않고 cwd 인자로만 전달한다.
            outcome = self.runner.run(command, cwd=Path(working_dir))
            if outcome.exit_code != 0:
                raise ScanExecutionError(
                    f"Scan of {working_dir} failed with exit code {outcome.exit_code}: {outcome.stderr.strip()[:500]}"
                )
            results.extend(parse_scan_output(outcome.stdout))
        return results


def parse_scan_output(output: str) -> List[ScanResult]:
    # 스캐너 출력은 단일 응답 객체 또는 응답 객체 목록이다.
    if not output.strip():
        return []
    try:
        data = json.loads(output)
    except json.JSONDecodeError as exc:
        raise ScanExecutionError(f"Scanner output is not valid JSON: {exc}") from exc
    items = data if isinstance(data, list) else [data]
    results: List[ScanResult] = []
    for item in items:
        if not isinstance(item, dict):
            raise ScanExecutionError("Scanner output entries must be JSON objects")
        results.append(parse_scan_response(item))
    return results


def parse_scan_response(data: Dict[str, Any]) -> ScanResult:
    violations = [
        Violation(
            issue_id=str(item.get("issue_id", "")),
            severity=item.get("severity"),
            summary=item.get("summary", ""),
            components=_parse_components(item.get("components")),
            cves=_parse_cves(item.get("cves")),
            violation_type=item.get("type", "security"),
        )
        for item in data.get("violations") or []
    ]
    vulnerabilities = [
        Vulnerability(
            issue_id=str(item.get("issue_id", "")),
            severity=item.get("severity"),
            summary=item.get("summary", ""),
            components=_parse_components(item.get("components")),
            cves=_parse_cves(item.get("cves")),
        )
        for item in data.get("vulnerabilities") or []
    ]
    secrets = [
        Secret(
            file=item.get("file", ""),
            line_column=str(item.get("line_column", "")),
            text=item.get("text", ""),
        )
        for item in data.get("secrets") or []
    ]
    return ScanResult(violations=violations, vulnerabilities=vulnerabilities, secrets=secrets)


def _parse_components(raw: Optional[Dict[str, Any]]) -> Dict[str, Component]:
    components: Dict[str, Component] = {}
    for component_id, details in (raw or {}).items():
        details = details or {}
        components[component_id] = Component(
            name=details.get("name", ""),
            version=details.get("version", ""),
            fixed_versions=tuple(details.get("fixed_versions") or ()),
        )
    return components


def _parse_cves(raw: Optional[List[Any]]) -> List[str]:
    # Xray 형식({"cve": "..."})과 단순 문자열 목록을 모두 허용한다.
    cves: List[str] = []
    for item in raw or []:
        if isinstance(item, dict):
            cve = item.get("cve") or item.get("id")
            if cve:
                cves.append(cve)
        elif item:
            cves.append(str(item))
    return cves
