"""
cli/ui/console.py - Rich 콘솔 유틸리티

공유 콘솔 인스턴스와 CLI 명령어가 출력하는 테이블입니다.
"""

from __future__ import annotations

import platform
from collections.abc import Iterable

from rich.console import Console
from rich.table import Table

from core.aws.accounts import AccountInfo
from core.config import CollectorConfig
from inventory.registry import EntityRegistry
from inventory.scope import sub_account_role_arn


def get_console() -> Console:
    """Create the Rich Console instance"""
    is_windows = platform.system().lower() == "windows"

    return Console(
        color_system="auto",
        highlight=False,
        soft_wrap=True,
        markup=True,
        emoji=not is_windows,
    )


# global console instance
console = get_console()

SYMBOL_SUCCESS = "✓"
SYMBOL_ERROR = "✗"


def render_accounts(accounts: Iterable[AccountInfo], valid_ids: set[str], sub_account_role: str) -> None:
    """Accounts with the role used for them and their probe result"""
    table = Table(title="Accounts", show_lines=False)
    table.add_column("Account", style="cyan")
    table.add_column("Name")
    table.add_column("Master", justify="center")
    table.add_column("Role")
    table.add_column("Access", justify="center")

    for account in accounts:
        role = "-" if account.master else sub_account_role_arn(account.account_id, sub_account_role)
        ok = account.account_id in valid_ids
        table.add_row(
            account.account_id,
            account.name,
            "yes" if account.master else "",
            role,
            f"[green]{SYMBOL_SUCCESS}[/green]" if ok else f"[red]{SYMBOL_ERROR}[/red]",
        )

    console.print(table)


def render_entity_types(registry: EntityRegistry, config: CollectorConfig) -> None:
    """Registered entity types, batch limits and related types"""
    table = Table(title="Entity types")
    table.add_column("Entity type", style="cyan")
    table.add_column("Limit", justify="right")
    table.add_column("Related")
    table.add_column("Collected", justify="center")

    for entity_type in registry.types():
        table.add_row(
            entity_type,
            str(config.limit_for(entity_type)),
            ", ".join(registry.related(entity_type)),
            "yes" if entity_type in config.entity_types else "",
        )

    console.print(table)
