"""이 파일은 .py 어댑터 레지스트리 모듈로 VCS 클라이언트/스캐너 팩토리를 관리하고 동적으로 로드합니다."""

import importlib
from typing import Any, Callable, Dict

from frogbot.core.repo_config import FrogbotRepoConfig

from .sca import CommandScanner

AdapterFactory = Callable[[FrogbotRepoConfig], Any]


class AdapterRegistry:
    def __init__(self) -> None:
        self._factories: Dict[str, AdapterFactory] = {}

    def register(self, name: str, factory: AdapterFactory) -> None:
        if name in self._factories:
            raise KeyError(f"Adapter already registered: {name}")
        self._factories[name] = factory

    def get(self, name: str) -> AdapterFactory:
        if name not in self._factories:
            raise KeyError(f"Adapter not registered: {name}")
        return self._factories[name]

    def resolve(self, reference: str) -> AdapterFactory:
        # 등록된 이름을 먼저 찾고, "module:attribute" 형식이면 동적으로 import한다.
        if reference in self._factories:
            return self._factories[reference]
        if ":" in reference:
            return load_factory(reference)
        raise KeyError(f"Adapter not registered: {reference}")

    def create(self, reference: str, repo_config: FrogbotRepoConfig) -> Any:
        return self.resolve(reference)(repo_config)


def load_factory(reference: str) -> AdapterFactory:
    module_name, _, attribute = reference.partition(":")
    if not module_name or not attribute:
        raise ImportError(f"Adapter reference must look like 'module:attribute', got {reference!r}")
    module = importlib.import_module(module_name)
    factory = getattr(module, attribute, None)
    if factory is None:
        raise ImportError(f"{attribute} not found in {module_name}")
    if not callable(factory):
        raise TypeError(f"{reference} is not callable")
    return factory


def build_default_registry() -> AdapterRegistry:
    registry = AdapterRegistry()
    registry.register("command", lambda repo_config: CommandScanner(repo_config.scan.command))
    return registry
