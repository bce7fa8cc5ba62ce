"""이 파일은 .py 시크릿 노출 알림 모듈로 커밋 작성자와 설정된 수신자에게 이메일을 보냅니다."""

from __future__ import annotations

from email.message import EmailMessage
from html import escape
import logging
import smtplib
from typing import Callable, Iterable, List, Optional, Sequence

from frogbot.adapters.base import VcsClient
from frogbot.core.config import FROGBOT_TITLE_PREFIX
from frogbot.core.errors import AdapterError
from frogbot.core.repo_config import EmailDetails
from frogbot.core.types import CommitInfo, Secret, VcsProvider

logger = logging.getLogger(__name__)

EXCLUDED_EMAIL_ADDRESSES = ["no-reply", "no_reply", "noreply", "no.reply", "frogbot"]
SECRETS_EMAIL_SUBJECT = FROGBOT_TITLE_PREFIX + "  Frogbot detected potential secrets"

SECRETS_EMAIL_CSS = """
    body { font-family: Arial, sans-serif; }
    table { border-collapse: collapse; }
    th, td { border: 1px solid #ddd; padding: 8px; text-align: left; }
    th { background-color: #f2f2f2; }
"""

SECRETS_EMAIL_HTML_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
    <title>Frogbot Secret Detection</title>
    <style>{css}</style>
</head>
<body>
    <div>
        The following potential exposed secrets in your <a href="{link}">{request_kind}</a> have been detected by <a href="https://github.com/jfrog/frogbot#readme">Frogbot</a>
        <br/>
        <table>
            <thead>
                <tr>
                    <th>FILE</th>
                    <th>LINE:COLUMN</th>
                    <th>SECRET</th>
                </tr>
            </thead>
            <tbody>
                {rows}
            </tbody>
        </table>
    </div>
</body>
</html>
"""

SECRETS_EMAIL_TABLE_ROW = """
                <tr>
                    <td>{file}</td>
                    <td>{line_column}</td>
                    <td>{text}</td>
                </tr>"""

SmtpFactory = Callable[[str, int], smtplib.SMTP]


def should_exclude_email_address(address: str, excludes: Iterable[str]) -> bool:
    return any(exclude and exclude in address for exclude in excludes)


def get_email_receivers_from_commits(commits: Sequence[CommitInfo], preconfigured: Sequence[str]) -> List[str]:
    # 봇/no-reply 주소와 이미 설정된 수신자는 제외하고 처음 나온 순서를 유지한다.
    receivers: List[str] = []
    for commit in commits:
        address = commit.author_email
        if not address or address in receivers:
            continue
        if should_exclude_email_address(address, EXCLUDED_EMAIL_ADDRESSES):
            continue
        if should_exclude_email_address(address, preconfigured):
            continue
        receivers.append(address)
    return receivers


def get_relevant_email_receivers(
    client: VcsClient,
    owner: str,
    repository: str,
    branch: str,
    preconfigured: Sequence[str],
) -> List[str]:
    try:
        commits = client.get_commits(owner, repository, branch)
    except Exception as exc:
        raise AdapterError(f"Failed to list commits of {owner}/{repository}@{branch}: {exc}") from exc
    return get_email_receivers_from_commits(commits, preconfigured)


def get_secrets_email_content(secrets: Sequence[Secret], provider: VcsProvider, pull_request_link: str) -> str:
    rows = "".join(
        SECRETS_EMAIL_TABLE_ROW.format(
            file=escape(secret.file),
            line_column=escape(secret.line_column),
            text=escape(secret.text),
        )
        for secret in secrets
    )
    request_kind = "merge request" if provider == VcsProvider.GITLAB else "pull request"
    return SECRETS_EMAIL_HTML_TEMPLATE.format(
        css=SECRETS_EMAIL_CSS,
        link=escape(pull_request_link, quote=True),
        request_kind=request_kind,
        rows=rows,
    )


def alert_secrets_exposed(
    client: VcsClient,
    provider: VcsProvider,
    owner: str,
    repository: str,
    branch: str,
    pull_request_link: str,
    secrets: Sequence[Secret],
    email: EmailDetails,
    smtp_factory: Optional[SmtpFactory] = None,
) -> List[str]:
    """탐지된 시크릿이 있으면 알림 메일을 보내고 실제 수신자 목록을 반환합니다."""
    if not secrets:
        return []
    receivers = list(email.email_receivers)
    receivers.extend(get_relevant_email_receivers(client, owner, repository, branch, email.email_receivers))
    if not receivers:
        logger.warning("Secrets were detected but there are no e-mail receivers")
        return []

    message = EmailMessage()
    message["From"] = f"JFrog Frogbot <{email.smtp_user}>"
    message["To"] = ", ".join(receivers)
    message["Subject"] = SECRETS_EMAIL_SUBJECT
    message.set_content("Frogbot detected potential secrets. Open this message in an HTML capable client.")
    message.add_alternative(get_secrets_email_content(secrets, provider, pull_request_link), subtype="html")

    send_email(message, email, smtp_factory)
    logger.info("Sent secrets alert to %d receivers", len(receivers))
    return receivers


def send_email(message: EmailMessage, email: EmailDetails, smtp_factory: Optional[SmtpFactory] = None) -> None:
    factory = smtp_factory or smtplib.SMTP
    try:
        port = int(email.smtp_port)
    except ValueError as exc:
        raise AdapterError(f"Invalid SMTP port: {email.smtp_port!r}") from exc
    try:
        with factory(email.smtp_server, port) as smtp:
            smtp.starttls()
            if email.smtp_user:
                smtp.login(email.smtp_user, email.smtp_password)
            smtp.send_message(message)
    except (smtplib.SMTPException, OSError) as exc:
        raise AdapterError(f"Failed to send e-mail through {email.smtp_server}: {exc}") from exc
