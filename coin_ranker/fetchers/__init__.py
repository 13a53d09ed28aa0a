from .coingecko import (
    fetch_coingecko_snapshot,
    fetch_coingecko_snapshot_async,
    make_snapshot,
)

__all__ = [
    "fetch_coingecko_snapshot",
    "fetch_coingecko_snapshot_async",
    "make_snapshot",
]
