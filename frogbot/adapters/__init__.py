"""이 파일은 .py 어댑터 패키지 초기화 모듈로 공통 어댑터를 노출합니다."""

from .base import Scanner, VcsClient
from .registry import AdapterRegistry, build_default_registry
from .sca import CommandScanner, ScaRunner, ToolResult

__all__ = [
    "AdapterRegistry",
    "CommandScanner",
    "ScaRunner",
    "Scanner",
    "ToolResult",
    "VcsClient",
    "build_default_registry",
]
