"""이 파일은 .py 설정 모듈로 기본 경로, 환경 변수 이름, 코멘트 상수를 정의합니다."""

import os
from pathlib import Path

FROGBOT_VERSION = "0.1.0"

# 저장소 루트 기준 기본 설정 파일 위치이다.
DEFAULT_CONFIG_PATH = Path(".frogbot") / "frogbot-config.yml"
TEMP_DIR_PREFIX = "frogbot-"
LOG_LEVEL = os.getenv("FROGBOT_LOG_LEVEL", "INFO")

# JFrog 플랫폼 접속 정보
JFROG_URL_ENV = "JF_URL"
JFROG_USER_ENV = "JF_USER"
JFROG_PASSWORD_ENV = "JF_PASSWORD"
JFROG_TOKEN_ENV = "JF_ACCESS_TOKEN"
JFROG_WATCHES_ENV = "JF_WATCHES"
JFROG_PROJECT_ENV = "JF_PROJECT"

# Git 공급자 정보
GIT_PROVIDER_ENV = "JF_GIT_PROVIDER"
GIT_OWNER_ENV = "JF_GIT_OWNER"
GIT_REPO_ENV = "JF_GIT_REPO"
GIT_TOKEN_ENV = "JF_GIT_TOKEN"
GIT_API_ENDPOINT_ENV = "JF_GIT_API_ENDPOINT"
GIT_PROJECT_ENV = "JF_GIT_PROJECT"
GIT_BASE_BRANCH_ENV = "JF_GIT_BASE_BRANCH"
GIT_PULL_REQUEST_ID_ENV = "JF_GIT_PULL_REQUEST_ID"
BRANCH_NAME_TEMPLATE_ENV = "JF_BRANCH_NAME_TEMPLATE"
COMMIT_MESSAGE_TEMPLATE_ENV = "JF_COMMIT_MESSAGE_TEMPLATE"
PULL_REQUEST_TITLE_TEMPLATE_ENV = "JF_PULL_REQUEST_TITLE_TEMPLATE"

# 스캔 동작 정보
FAIL_ON_SECURITY_ISSUES_ENV = "JF_FAIL"
INCLUDE_ALL_VULNERABILITIES_ENV = "JF_INCLUDE_ALL_VULNERABILITIES"
FAIL_ON_INSTALLATION_ERRORS_ENV = "JF_FAIL_ON_INSTALLATION_ERRORS"
WORKING_DIR_ENV = "JF_WORKING_DIR"
INSTALL_COMMAND_ENV = "JF_INSTALL_DEPS_CMD"
SCAN_COMMAND_ENV = "JF_SCAN_COMMAND"

# 시크릿 노출 알림 메일
SMTP_SERVER_ENV = "JF_SMTP_SERVER"
SMTP_USER_ENV = "JF_SMTP_USER"
SMTP_PASSWORD_ENV = "JF_SMTP_PASSWORD"
EMAIL_RECEIVERS_ENV = "JF_EMAIL_RECEIVERS"
DEFAULT_SMTP_PORT = "587"

# PR 코멘트 시그니처. 판별 로직과 렌더러가 동일한 값을 공유해야 한다.
FROGBOT_TITLE_PREFIX = "[🐸 Frogbot]"
RESCAN_REQUEST_COMMENT = "rescan"
FROGBOT_README_URL = "https://github.com/jfrog/frogbot#readme"
RESOURCES_BASE_URL = "https://raw.githubusercontent.com/jfrog/frogbot/master/resources"
