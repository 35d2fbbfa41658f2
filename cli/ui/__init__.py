# cli/ui - 콘솔 출력 (rich)
from .console import console, get_console, render_accounts, render_entity_types

__all__ = ["console", "get_console", "render_accounts", "render_entity_types"]
