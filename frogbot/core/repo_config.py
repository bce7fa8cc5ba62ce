"""이 파일은 .py 저장소 설정 모듈로 frogbot-config.yml과 환경 변수를 설정 모델로 변환합니다."""

from __future__ import annotations

import logging
import os
import shlex
from pathlib import Path
from typing import Dict, List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from . import config
from .errors import ConfigError
from .types import VcsProvider

logger = logging.getLogger(__name__)


class _ConfigModel(BaseModel):
    # YAML은 camelCase 키를 사용하고 코드에서는 snake_case로 접근한다.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class JFrogPlatform(_ConfigModel):
    url: str = ""
    access_token: str = ""
    user: str = ""
    password: str = ""
    watches: List[str] = Field(default_factory=list)
    jfrog_project_key: str = ""


class Project(_ConfigModel):
    # 작업 디렉토리는 저장소 루트 기준 상대 경로이며 "."은 루트 자체이다.
    working_dirs: List[str] = Field(default_factory=lambda: ["."])
    install_command: str = ""

    @property
    def install_command_name(self) -> str:
        parts = shlex.split(self.install_command)
        return parts[0] if parts else ""

    @property
    def install_command_args(self) -> List[str]:
        return shlex.split(self.install_command)[1:]


class EmailDetails(_ConfigModel):
    smtp_server: str = ""
    smtp_port: str = config.DEFAULT_SMTP_PORT
    smtp_user: str = ""
    smtp_password: str = ""
    email_receivers: List[str] = Field(default_factory=list)

    @property
    def enabled(self) -> bool:
        return bool(self.smtp_server)


class Scan(_ConfigModel):
    include_all_vulnerabilities: bool = False
    fail_on_security_issues: bool = True
    fail_on_installation_errors: bool = True
    projects: List[Project] = Field(default_factory=lambda: [Project()])
    # 명령행 스캐너 어댑터가 각 작업 디렉토리에서 실행할 명령이다.
    command: str = ""
    email: EmailDetails = Field(default_factory=EmailDetails)

    @field_validator("projects")
    @classmethod
    def _ensure_projects(cls, value: List[Project]) -> List[Project]:
        return value or [Project()]


class GitParams(_ConfigModel):
    git_provider: VcsProvider = VcsProvider.GITHUB
    token: str = ""
    api_endpoint: str = ""
    repo_owner: str = ""
    repo_name: str = ""
    # Azure Repos 전용 프로젝트 이름
    project: str = ""
    branches: List[str] = Field(default_factory=list)
    base_branch: str = ""
    pull_request_id: int = 0
    branch_name_template: str = ""
    commit_message_template: str = ""
    pull_request_title_template: str = ""

    @field_validator("git_provider", mode="before")
    @classmethod
    def _normalize_provider(cls, value):
        if isinstance(value, str):
            return value.strip().lower().replace(" ", "").replace("_", "")
        return value


class FrogbotRepoConfig(_ConfigModel):
    git: GitParams = Field(default_factory=GitParams)
    scan: Scan = Field(default_factory=Scan)
    jfrog_platform: JFrogPlatform = Field(default_factory=JFrogPlatform)
    simplified_output: bool = False

    def for_branch(self, repo_name: str, branch: str, pull_request_id: Optional[int] = None) -> "FrogbotRepoConfig":
        # 원본을 건드리지 않고 저장소/브랜치만 바꾼 복사본을 만든다.
        git_update: Dict[str, object] = {"repo_name": repo_name, "base_branch": branch}
        if pull_request_id is not None:
            git_update["pull_request_id"] = pull_request_id
        return self.model_copy(update={"git": self.git.model_copy(update=git_update)})


FrogbotConfigAggregator = List[FrogbotRepoConfig]


def load_config(path: Optional[Path] = None, env: Optional[Dict[str, str]] = None) -> FrogbotConfigAggregator:
    """설정 파일과 환경 변수를 병합해 저장소별 설정 목록을 반환합니다.

    파일이 없으면 환경 변수만으로 단일 저장소 설정을 만든다. 파일 값이
    우선이며 환경 변수는 비어 있는 항목만 채운다.
    """
    env = dict(os.environ if env is None else env)
    config_path = Path(path) if path is not None else config.DEFAULT_CONFIG_PATH
    env_params = _params_from_env(env)

    if not config_path.exists():
        if path is not None:
            raise ConfigError(f"Config file not found: {config_path}")
        logger.info("Config file %s not found, using environment variables", config_path)
        return [_build_repo_config(env_params)]

    try:
        data = yaml.safe_load(config_path.read_text(encoding="utf-8")) or []
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {config_path}: {exc}") from exc
    if not isinstance(data, list):
        raise ConfigError(f"{config_path} must contain a list of repository entries")

    aggregator: FrogbotConfigAggregator = []
    for index, entry in enumerate(data):
        if not isinstance(entry, dict) or not isinstance(entry.get("params"), dict):
            raise ConfigError(f"Entry {index} in {config_path} is missing 'params'")
        merged = _merge_missing(entry["params"], env_params)
        aggregator.append(_build_repo_config(merged))
    logger.debug("Loaded %d repository configurations from %s", len(aggregator), config_path)
    return aggregator


def _build_repo_config(params: Dict) -> FrogbotRepoConfig:
    try:
        repo_config = FrogbotRepoConfig.model_validate(params)
    except ValidationError as exc:
        raise ConfigError(f"Invalid Frogbot configuration: {exc}") from exc
    if not repo_config.git.repo_owner:
        raise ConfigError(f"{config.GIT_OWNER_ENV} is required")
    if not repo_config.git.base_branch and repo_config.git.branches:
        # 기준 브랜치가 없으면 설정된 첫 브랜치를 사용한다.
        repo_config.git.base_branch = repo_config.git.branches[0]
    return repo_config


def _merge_missing(base: Dict, defaults: Dict) -> Dict:
    # base에 없거나 빈 값인 항목만 defaults로 채운다.
    result = dict(base)
    for key, value in defaults.items():
        current = result.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            result[key] = _merge_missing(current, value)
        elif current in (None, "", [], {}):
            result[key] = value
    return result


def _params_from_env(env: Dict[str, str]) -> Dict:
    # 환경 변수에서 읽은 값만 담아 설정 딕셔너리를 구성한다.
    git: Dict[str, object] = {}
    _set_if(git, "gitProvider", env.get(config.GIT_PROVIDER_ENV))
    _set_if(git, "repoOwner", env.get(config.GIT_OWNER_ENV))
    _set_if(git, "repoName", env.get(config.GIT_REPO_ENV))
    _set_if(git, "token", env.get(config.GIT_TOKEN_ENV))
    _set_if(git, "apiEndpoint", env.get(config.GIT_API_ENDPOINT_ENV))
    _set_if(git, "project", env.get(config.GIT_PROJECT_ENV))
    _set_if(git, "baseBranch", env.get(config.GIT_BASE_BRANCH_ENV))
    _set_if(git, "branchNameTemplate", env.get(config.BRANCH_NAME_TEMPLATE_ENV))
    _set_if(git, "commitMessageTemplate", env.get(config.COMMIT_MESSAGE_TEMPLATE_ENV))
    _set_if(git, "pullRequestTitleTemplate", env.get(config.PULL_REQUEST_TITLE_TEMPLATE_ENV))
    if env.get(config.GIT_BASE_BRANCH_ENV):
        git["branches"] = [env[config.GIT_BASE_BRANCH_ENV]]
    pull_request_id = env.get(config.GIT_PULL_REQUEST_ID_ENV)
    if pull_request_id:
        try:
            git["pullRequestId"] = int(pull_request_id)
        except ValueError as exc:
            raise ConfigError(f"{config.GIT_PULL_REQUEST_ID_ENV} must be a number") from exc

    platform: Dict[str, object] = {}
    _set_if(platform, "url", env.get(config.JFROG_URL_ENV))
    _set_if(platform, "accessToken", env.get(config.JFROG_TOKEN_ENV))
    _set_if(platform, "user", env.get(config.JFROG_USER_ENV))
    _set_if(platform, "password", env.get(config.JFROG_PASSWORD_ENV))
    _set_if(platform, "jfrogProjectKey", env.get(config.JFROG_PROJECT_ENV))
    if env.get(config.JFROG_WATCHES_ENV):
        platform["watches"] = _split_list(env[config.JFROG_WATCHES_ENV])

    email: Dict[str, object] = {}
    server = env.get(config.SMTP_SERVER_ENV, "")
    if server:
        # "host:port" 형식을 허용한다.
        host, _, port = server.partition(":")
        email["smtpServer"] = host
        email["smtpPort"] = port or config.DEFAULT_SMTP_PORT
    _set_if(email, "smtpUser", env.get(config.SMTP_USER_ENV))
    _set_if(email, "smtpPassword", env.get(config.SMTP_PASSWORD_ENV))
    if env.get(config.EMAIL_RECEIVERS_ENV):
        email["emailReceivers"] = _split_list(env[config.EMAIL_RECEIVERS_ENV])

    scan: Dict[str, object] = {}
    for key, name in (
        ("failOnSecurityIssues", config.FAIL_ON_SECURITY_ISSUES_ENV),
        ("includeAllVulnerabilities", config.INCLUDE_ALL_VULNERABILITIES_ENV),
        ("failOnInstallationErrors", config.FAIL_ON_INSTALLATION_ERRORS_ENV),
    ):
        if env.get(name):
            scan[key] = _parse_bool(name, env[name])
    _set_if(scan, "command", env.get(config.SCAN_COMMAND_ENV))
    if env.get(config.WORKING_DIR_ENV) or env.get(config.INSTALL_COMMAND_ENV):
        scan["projects"] = [
            {
                "workingDirs": _split_list(env.get(config.WORKING_DIR_ENV, ".")) or ["."],
                "installCommand": env.get(config.INSTALL_COMMAND_ENV, ""),
            }
        ]
    if email:
        scan["email"] = email

    return {"git": git, "scan": scan, "jfrogPlatform": platform}


def _set_if(target: Dict[str, object], key: str, value: Optional[str]) -> None:
    if value:
        target[key] = value


def _split_list(raw: str) -> List[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


def _parse_bool(name: str, raw: str) -> bool:
    normalized = raw.strip().lower()
    if normalized in ("1", "true", "yes"):
        return True
    if normalized in ("0", "false", "no"):
        return False
    raise ConfigError(f"{name} must be a boolean, got {raw!r}")
