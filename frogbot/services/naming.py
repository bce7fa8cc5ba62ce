"""이 파일은 .py 이름 템플릿 모듈로 수정 브랜치 이름, 커밋 메시지, PR 제목을 생성합니다."""

from __future__ import annotations

from dataclasses import dataclass
import hashlib
import re

from frogbot.core.config import FROGBOT_TITLE_PREFIX
from frogbot.core.errors import InvalidBranchNameError
from frogbot.core.repo_config import GitParams
from frogbot.core.types import TemplateContext, Technology

PACKAGE_PLACEHOLDER = "${IMPACTED_PACKAGE}"
FIX_VERSION_PLACEHOLDER = "${FIX_VERSION}"
BRANCH_HASH_PLACEHOLDER = "${BRANCH_NAME_HASH}"

BRANCH_NAME_TEMPLATE = f"frogbot-{PACKAGE_PLACEHOLDER}-{BRANCH_HASH_PLACEHOLDER}"
COMMIT_MESSAGE_TEMPLATE = f"Upgrade {PACKAGE_PLACEHOLDER} to {FIX_VERSION_PLACEHOLDER}"
PULL_REQUEST_TITLE_TEMPLATE = (
    f"{FROGBOT_TITLE_PREFIX} Update version of {PACKAGE_PLACEHOLDER} to {FIX_VERSION_PLACEHOLDER}"
)
AGGREGATED_BRANCH_NAME_TEMPLATE = f"frogbot-update-{BRANCH_HASH_PLACEHOLDER}-dependencies"
AGGREGATED_PULL_REQUEST_TITLE_TEMPLATE = FROGBOT_TITLE_PREFIX + " Update {} dependencies"

HASH_SEED_PREFIX = "frogbot"

# git check-ref-format 규칙 중 이름 한 줄로 판별 가능한 것들이다.
_FORBIDDEN_REF_CHARS = re.compile(r"[\x00-\x20\x7f~^:?*\[\\]")
_WHITESPACE = re.compile(r"\s")


def branch_name_hash(base_branch: str, impacted_package: str) -> str:
    # 같은 (기준 브랜치, 패키지)는 실행과 관계없이 항상 같은 해시를 만든다.
    digest = hashlib.md5()
    for part in (HASH_SEED_PREFIX, base_branch, impacted_package):
        digest.update(part.encode("utf-8"))
    return digest.hexdigest()


def create_template_context(base_branch: str, impacted_package: str, fix_version: str) -> TemplateContext:
    return TemplateContext(
        impacted_package=impacted_package,
        fix_version=fix_version,
        branch_name_hash=branch_name_hash(base_branch, impacted_package),
    )


def render_template(template: str, context: TemplateContext) -> str:
    # 단순 치환이며, 알 수 없는 플레이스홀더는 그대로 남는다.
    return (
        template.replace(PACKAGE_PLACEHOLDER, context.impacted_package)
        .replace(FIX_VERSION_PLACEHOLDER, context.fix_version)
        .replace(BRANCH_HASH_PLACEHOLDER, context.branch_name_hash)
    )


def get_aggregated_pull_request_title(technology: Technology) -> str:
    return AGGREGATED_PULL_REQUEST_TITLE_TEMPLATE.format(technology.formal_name)


def validate_branch_name(name: str) -> str:
    """git ref 이름으로 사용할 수 있는지 검사하고, 아니면 InvalidBranchNameError를 던집니다."""
    problems = []
    if not name:
        problems.append("name is empty")
    else:
        if name.startswith("-"):
            problems.append("starts with '-'")
        if _FORBIDDEN_REF_CHARS.search(name):
            problems.append("contains whitespace, control or one of ~^:?*[\\ characters")
        if ".." in name or "@{" in name or "//" in name:
            problems.append("contains '..', '@{' or '//'")
        if name == "@" or name.endswith((".", "/", ".lock")) or name.startswith("/"):
            problems.append("has an illegal prefix or suffix")
        if any(part.startswith(".") for part in name.split("/")):
            problems.append("has a path component starting with '.'")
    if problems:
        raise InvalidBranchNameError(f"Invalid branch name {name!r}: {', '.join(problems)}")
    return name


def _ref_safe(value: str) -> str:
    # Maven 좌표의 ':'와 공백은 브랜치 이름에 쓸 수 없으므로 '_'로 바꾼다.
    return _WHITESPACE.sub("_", value.replace(":", "_"))


@dataclass(frozen=True)
class CustomTemplates:
    branch_name_template: str = ""
    commit_message_template: str = ""
    pull_request_title_template: str = ""

    @classmethod
    def from_git_params(cls, git: GitParams) -> "CustomTemplates":
        return cls(
            branch_name_template=git.branch_name_template,
            commit_message_template=git.commit_message_template,
            pull_request_title_template=git.pull_request_title_template,
        )


class NamingTemplateEngine:
    def __init__(self, templates: CustomTemplates = CustomTemplates()) -> None:
        self.templates = templates

    @classmethod
    def from_git_params(cls, git: GitParams) -> "NamingTemplateEngine":
        # frogbot-config.yml 또는 JF_*_TEMPLATE 환경 변수로 설정한 템플릿을 사용한다.
        return cls(CustomTemplates.from_git_params(git))

    def generate_fix_branch_name(self, base_branch: str, impacted_package: str, fix_version: str) -> str:
        context = create_template_context(base_branch, impacted_package, fix_version)
        safe_context = TemplateContext(
            impacted_package=_ref_safe(context.impacted_package),
            fix_version=_ref_safe(context.fix_version),
            branch_name_hash=context.branch_name_hash,
        )
        return render_template(self.templates.branch_name_template or BRANCH_NAME_TEMPLATE, safe_context)

    def generate_commit_message(self, impacted_package: str, fix_version: str) -> str:
        context = TemplateContext(impacted_package, fix_version, branch_name_hash="")
        return render_template(self.templates.commit_message_template or COMMIT_MESSAGE_TEMPLATE, context)

    def generate_pull_request_title(self, impacted_package: str, fix_version: str) -> str:
        context = TemplateContext(impacted_package, fix_version, branch_name_hash="")
        return render_template(self.templates.pull_request_title_template or PULL_REQUEST_TITLE_TEMPLATE, context)

    def generate_aggregated_fix_branch_name(self, technology: Technology) -> str:
        # 묶음 수정에서는 해시 자리에 패키지 매니저 이름이 들어간다.
        context = TemplateContext(impacted_package="", fix_version="", branch_name_hash=technology.value)
        return render_template(self.templates.branch_name_template or AGGREGATED_BRANCH_NAME_TEMPLATE, context)

    def generate_aggregated_commit_message(self, technology: Technology) -> str:
        return self.templates.commit_message_template or get_aggregated_pull_request_title(technology)

    def generate_aggregated_pull_request_title(self, technology: Technology) -> str:
        return self.templates.pull_request_title_template or get_aggregated_pull_request_title(technology)
