"""이 파일은 .py 명령행 모듈로 단일 PR 스캔과 전체 PR 스캔 명령을 제공합니다."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Tuple

import click

from frogbot import __version__
from frogbot.adapters.base import Scanner, VcsClient
from frogbot.adapters.registry import AdapterRegistry, build_default_registry
from frogbot.core.config import LOG_LEVEL
from frogbot.core.errors import ConfigError, SecurityIssueFoundError
from frogbot.core.logging import setup_logging
from frogbot.core.repo_config import FrogbotConfigAggregator, load_config
from frogbot.services.orchestrator import Orchestrator
from frogbot.services.scan_pull_request import PullRequestScanner

logger = logging.getLogger(__name__)

config_option = click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to frogbot-config.yml (default: .frogbot/frogbot-config.yml)",
)
vcs_client_option = click.option(
    "--vcs-client",
    required=True,
    help="VCS client factory: registered name or 'module:attribute'",
)
scanner_option = click.option(
    "--scanner",
    default="command",
    show_default=True,
    help="Scanner factory: registered name or 'module:attribute'",
)


@click.group()
@click.version_option(version=__version__, prog_name="frogbot")
@click.option("--log-level", default=LOG_LEVEL, show_default=True, help="Logging level")
@click.pass_context
def cli(ctx: click.Context, log_level: str) -> None:
    """Frogbot scans pull requests for newly added vulnerable dependencies."""
    setup_logging(log_level)
    ctx.ensure_object(dict)
    ctx.obj.setdefault("registry", build_default_registry())


@click.command("scan-pull-request")
@config_option
@vcs_client_option
@scanner_option
@click.option(
    "--source-dir",
    type=click.Path(file_okay=False, exists=True, path_type=Path),
    default=None,
    help="Checked out source branch (default: current directory)",
)
@click.pass_context
def scan_pull_request(
    ctx: click.Context,
    config_path: Optional[Path],
    vcs_client: str,
    scanner: str,
    source_dir: Optional[Path],
) -> None:
    """Scan a single pull request and comment the new issues on it."""
    aggregator = _load(config_path)
    client, scanner_adapter = _create_adapters(ctx.obj["registry"], aggregator, vcs_client, scanner)
    try:
        rows = PullRequestScanner(client, scanner_adapter).run(aggregator, source_dir)
    except SecurityIssueFoundError as exc:
        raise click.ClickException(str(exc)) from exc
    except Exception as exc:
        logger.error("Scan failed: %s", exc)
        raise click.ClickException(str(exc)) from exc
    click.echo(f"Reported {len(rows)} new issues")


@click.command("scan-all-pull-requests")
@config_option
@vcs_client_option
@scanner_option
@click.pass_context
def scan_all_pull_requests(ctx: click.Context, config_path: Optional[Path], vcs_client: str, scanner: str) -> None:
    """Scan every open pull request that has no up-to-date Frogbot comment."""
    aggregator = _load(config_path)
    client, scanner_adapter = _create_adapters(ctx.obj["registry"], aggregator, vcs_client, scanner)
    try:
        report = Orchestrator(client, scanner_adapter).run(aggregator)
    except Exception as exc:
        raise click.ClickException(str(exc)) from exc
    summary = report.as_summary()
    click.echo(f"Scanned {summary['scanned']} pull requests, skipped {summary['skipped']}")


cli.add_command(scan_pull_request)
cli.add_command(scan_pull_request, name="spr")
cli.add_command(scan_all_pull_requests)
cli.add_command(scan_all_pull_requests, name="sapr")


def _load(config_path: Optional[Path]) -> FrogbotConfigAggregator:
    try:
        aggregator = load_config(config_path)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc
    if not aggregator:
        raise click.ClickException("No repository configuration found")
    return aggregator


def _create_adapters(
    registry: AdapterRegistry,
    aggregator: FrogbotConfigAggregator,
    vcs_client: str,
    scanner: str,
) -> Tuple[VcsClient, Scanner]:
    # 저장소 간 공통 값(공급자, 토큰, 엔드포인트)은 첫 설정에서 가져온다.
    repo_config = aggregator[0]
    try:
        return registry.create(vcs_client, repo_config), registry.create(scanner, repo_config)
    except (KeyError, ImportError, TypeError) as exc:
        raise click.ClickException(f"Failed to create adapter: {exc}") from exc


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
