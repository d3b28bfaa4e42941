"""Pool-key resolution for the chart data source."""
from __future__ import annotations

from .models import TokenIdentity


def resolve_pool_key(identity: TokenIdentity) -> str | None:
    """Return the bonding-curve key used as the provider pool address, if any."""
    key = identity.bonding_curve_key
    if not key or not key.strip():
        return None
    return key.strip()
