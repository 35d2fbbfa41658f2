"""
cli/app.py - 메인 CLI 진입점

Click 기반 인벤토리 수집기 CLI입니다.

명령어:
    aic collect                 # 중지될 때까지 주기 실행 (standalone 모드)
    aic collect --once          # 1회 실행 후 종료
    aic accounts                # 계정/리전 목록과 접근 검증 결과
    aic entity-types            # 등록된 엔티티 타입과 배치 한도
    aic --version

Usage:
    $ aic collect -c collector.yaml --entity-type vms --limit 500
    $ python -m cli.app collect --once
"""

from __future__ import annotations

import logging
import signal
import sys
import threading

import click

from cli.ui.console import console, render_accounts, render_entity_types
from core.config import CollectorConfig, LogConfig, get_version, setup_logging
from core.exceptions import ConfigError

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def load_config(config_path: str | None, **overrides) -> CollectorConfig:
    """CollectorConfig from a file (or the environment) plus CLI overrides"""
    config = CollectorConfig.from_file(config_path) if config_path else CollectorConfig.from_env()
    return config.with_overrides(**overrides)


def install_signal_handlers(stop_event: threading.Event) -> None:
    """SIGINT/SIGTERM request a stop at the next cycle boundary"""

    def _handler(signum, _frame):
        logger.warning("Received %s, stopping after the current cycle", signal.Signals(signum).name)
        stop_event.set()

    signal.signal(signal.SIGINT, _handler)
    signal.signal(signal.SIGTERM, _handler)


@click.group()
@click.version_option(get_version(), prog_name="aic")
def cli() -> None:
    """AWS inventory collector"""


@cli.command("collect")
@click.option("-c", "--config", "config_path", type=click.Path(exists=True, dir_okay=False), help="YAML config file")
@click.option("--once/--standalone", "once", default=None, help="Single cycle or poll until stopped")
@click.option("--poll-time", type=int, default=None, help="Seconds between cycles")
@click.option("--limit", "default_limit", type=int, default=None, help="Default batch limit")
@click.option("-e", "--entity-type", "entity_types", multiple=True, help="Entity type to collect (repeatable)")
@click.option("-r", "--region", "regions", multiple=True, help="Region or region pattern (repeatable)")
@click.option("--log-level", type=click.Choice(LOG_LEVELS, case_sensitive=False), default=None)
@click.option("--metrics-port", type=int, default=None, help="Serve prometheus metrics on this port")
def collect_command(
    config_path: str | None,
    once: bool | None,
    poll_time: int | None,
    default_limit: int | None,
    entity_types: tuple[str, ...],
    regions: tuple[str, ...],
    log_level: str | None,
    metrics_port: int | None,
) -> None:
    """Collect the inventory and publish it to the ingress API"""
    from inventory.collector import InventoryCollector
    from inventory.ingress import IngressApiClient
    from inventory.scheduler import CycleStatus

    log_config = LogConfig.from_env()
    if log_level:
        log_config.level = log_level.upper()
    setup_logging(log_config)

    try:
        config = load_config(
            config_path,
            standalone_mode=None if once is None else not once,
            poll_time=poll_time,
            default_limit=default_limit,
            entity_types=entity_types or None,
            regions=regions or None,
            metrics_port=metrics_port,
        )
        uploader = IngressApiClient(
            config.ingress_url,
            source=config.source,
            path=config.ingress_path,
            timeout=config.ingress_timeout,
            max_bytes=config.ingress_max_bytes,
        )
        collector = InventoryCollector(config, uploader)
    except ConfigError as e:
        logger.critical("%s", e)
        sys.exit(1)

    if config.metrics_port:
        collector.metrics.start_server(config.metrics_port)

    stop_event = threading.Event()
    install_signal_handlers(stop_event)

    logger.info(
        "Starting collector (%s mode) for %s",
        "standalone" if config.standalone_mode else "single-shot",
        ", ".join(config.entity_types),
    )
    outcome = collector.scheduler(stop_event).run()

    if outcome is not None and outcome.status is CycleStatus.FATAL:
        sys.exit(1)


@cli.command("accounts")
@click.option("-c", "--config", "config_path", type=click.Path(exists=True, dir_okay=False), help="YAML config file")
@click.option("-r", "--region", "regions", multiple=True, help="Region or region pattern (repeatable)")
def accounts_command(config_path: str | None, regions: tuple[str, ...]) -> None:
    """Show accounts and regions and which accounts pass the access probe"""
    from botocore.exceptions import BotoCoreError, ClientError

    from core.aws.accounts import list_accounts
    from core.aws.session import SessionFactory
    from core.region.availability import filter_regions, get_available_regions
    from inventory.validator import AccountValidator

    setup_logging(LogConfig(level="WARNING"))

    try:
        config = load_config(config_path, regions=regions or None)
    except ConfigError as e:
        click.echo(str(e), err=True)
        sys.exit(1)

    factory = SessionFactory(config.access_key_id, config.secret_access_key)
    try:
        region_names = filter_regions(
            get_available_regions(factory.base_session(config.default_region), config.default_region),
            config.regions,
        )
        accounts = list_accounts(factory, config.default_region)
    except (ClientError, BotoCoreError) as e:
        click.echo(f"Failed to list accounts: {e}", err=True)
        sys.exit(1)

    validator = AccountValidator(factory, config.sub_account_role)
    valid = {a.account_id for a in validator.filter_accounts(config.default_region, accounts)}
    render_accounts(accounts, valid, config.sub_account_role)
    console.print(f"Regions ({len(region_names)}): {', '.join(region_names)}")


@cli.command("entity-types")
@click.option("-c", "--config", "config_path", type=click.Path(exists=True, dir_okay=False), help="YAML config file")
def entity_types_command(config_path: str | None) -> None:
    """List registered entity types, their batch limits and related types"""
    from inventory.registry import default_registry

    try:
        config = load_config(config_path)
    except ConfigError as e:
        click.echo(str(e), err=True)
        sys.exit(1)

    render_entity_types(default_registry(), config)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
