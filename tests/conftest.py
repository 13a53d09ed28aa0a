from typing import Any, Dict, List, Optional

import pytest

from coin_ranker.storage import MemoryStore


def make_coin(
    coin_id: str,
    price: Any = 100.0,
    pct24h: Any = 0.0,
    sparkline: Optional[List[Any]] = None,
    **overrides: Any,
) -> Dict[str, Any]:
    coin = {
        "id": coin_id,
        "name": coin_id.capitalize(),
        "symbol": coin_id[:3],
        "current_price": price,
        "market_cap": 1_000_000.0,
        "total_volume": 50_000.0,
        "price_change_percentage_24h": pct24h,
        "sparkline_in_7d": {"price": sparkline if sparkline is not None else []},
    }
    coin.update(overrides)
    return coin


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()
