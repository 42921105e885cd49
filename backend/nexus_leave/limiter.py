from __future__ import annotations

from typing import TYPE_CHECKING

from slowapi import Limiter
from slowapi.util import get_remote_address

from nexus_leave.config import get_settings

if TYPE_CHECKING:
    from nexus_leave.config import Settings


def build_limiter(settings: Settings) -> Limiter:
    """Per-client limiter applying ``rate_limit_max_requests`` per window to every route not exempted."""
    return Limiter(
        key_func=get_remote_address,
        default_limits=[f"{settings.rate_limit_max_requests}/{settings.rate_limit_window_seconds} seconds"],
        enabled=settings.rate_limit_enabled,
    )


limiter = build_limiter(get_settings())
