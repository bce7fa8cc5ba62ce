"""이 파일은 .py 테스트 모듈로 시크릿 노출 알림 메일 수신자와 본문 생성을 검증합니다."""

import smtplib

import pytest

from frogbot.core.errors import AdapterError
from frogbot.core.repo_config import EmailDetails
from frogbot.core.types import CommitInfo, Secret, VcsProvider
from frogbot.services.email_alerts import (
    alert_secrets_exposed,
    get_email_receivers_from_commits,
    get_secrets_email_content,
)

SECRETS = [
    Secret(file="/config.yml", line_column="12:30", text="pass*****"),
    Secret(file="/server/settings.py", line_column="1:4", text="<token>"),
]


def test_receivers_from_commits_exclude_bots_and_preconfigured() -> None:
    commits = [
        CommitInfo(author_email="test1@jfrog.com"),
        CommitInfo(author_email="test2@jfrog.com"),
        CommitInfo(author_email="test1@jfrog.com"),
        CommitInfo(author_email="frogbot@jfrog.com"),
        CommitInfo(author_email="notifications@no-reply.github.com"),
        CommitInfo(author_email="123+user@users.noreply.github.com"),
        CommitInfo(author_email="team@example.com"),
        CommitInfo(author_email=""),
    ]

    receivers = get_email_receivers_from_commits(commits, ["team@example.com"])

    assert receivers == ["test1@jfrog.com", "test2@jfrog.com"]


@pytest.mark.parametrize(
    "provider, request_kind",
    [(VcsProvider.GITHUB, "pull request"), (VcsProvider.GITLAB, "merge request"), (VcsProvider.AZURE_REPOS, "pull request")],
)
def test_secrets_email_content(provider: VcsProvider, request_kind: str) -> None:
    content = get_secrets_email_content(SECRETS, provider, "https://git.example.com/pr/1")

    assert f'<a href="https://git.example.com/pr/1">{request_kind}</a>' in content
    assert "<td>/config.yml</td>" in content
    assert "<td>12:30</td>" in content
    assert "<td>&lt;token&gt;</td>" in content


def test_alert_without_secrets_sends_nothing(vcs_client) -> None:
    def factory(host, port):
        raise AssertionError("no e-mail expected")

    assert alert_secrets_exposed(
        vcs_client, VcsProvider.GITHUB, "jfrog", "repo", "dev", "", [], EmailDetails(smtp_server="smtp"), smtp_factory=factory
    ) == []


def test_alert_reports_smtp_failures(vcs_client) -> None:
    class BrokenSmtp:
        def __init__(self, host, port):
            raise smtplib.SMTPConnectError(421, "unavailable")

    email = EmailDetails(smtp_server="smtp.example.com", email_receivers=["sec@example.com"])

    with pytest.raises(AdapterError):
        alert_secrets_exposed(
            vcs_client, VcsProvider.GITHUB, "jfrog", "repo", "dev", "", SECRETS, email, smtp_factory=BrokenSmtp
        )


def test_alert_adds_commit_authors(vcs_client) -> None:
    sent = []

    class FakeSmtp:
        def __init__(self, host, port):
            pass

        def __enter__(self):
            return self

        def __exit__(self, *exc):
            return False

        def starttls(self):
            pass

        def login(self, user, password):
            sent.append(("login", user))

        def send_message(self, message):
            sent.append(("send", message))

    vcs_client.commits = [CommitInfo(author_email="dev@example.com"), CommitInfo(author_email="sec@example.com")]
    email = EmailDetails(smtp_server="smtp.example.com", smtp_user="bot@example.com", email_receivers=["sec@example.com"])

    receivers = alert_secrets_exposed(
        vcs_client, VcsProvider.GITLAB, "jfrog", "repo", "dev", "", SECRETS, email, smtp_factory=FakeSmtp
    )

    assert receivers == ["sec@example.com", "dev@example.com"]
    assert sent[0] == ("login", "bot@example.com")
    message = sent[1][1]
    assert message["Subject"] == "[🐸 Frogbot]  Frogbot detected potential secrets"
    assert message["From"] == "JFrog Frogbot <bot@example.com>"
