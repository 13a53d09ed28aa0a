from datetime import datetime, timezone
from typing import Any, Dict, Optional

import httpx
import requests

from coin_ranker.config import (
    COINGECKO_API_KEY,
    COINGECKO_BASE_URL,
    PER_PAGE,
    REQUEST_TIMEOUT,
    VS_CURRENCY,
)
from coin_ranker.errors import MalformedSnapshot, SourceUnavailable
from coin_ranker.rate_limiter import coingecko_public_limiter

MARKETS_PATH = "/coins/markets"


def build_markets_params(vs_currency: str = VS_CURRENCY, per_page: int = PER_PAGE) -> Dict[str, Any]:
    """按市值降序取前 per_page 个币种，附带 7 日 sparkline 和 24h 涨跌幅。"""
    return {
        "vs_currency": vs_currency,
        "order": "market_cap_desc",
        "per_page": per_page,
        "page": 1,
        "sparkline": "true",
        "price_change_percentage": "24h",
    }


def build_headers(api_key: Optional[str] = COINGECKO_API_KEY) -> Dict[str, str]:
    headers = {"Accept": "application/json"}
    if api_key:
        headers["X-CoinGecko-Api-Key"] = api_key
    return headers


def make_snapshot(coins: Any, timestamp: Optional[str] = None) -> Dict[str, Any]:
    """把接口返回的币种列表包装为 {timestamp, coins} 快照。"""
    if not isinstance(coins, (list, dict)):
        raise MalformedSnapshot(f"API 返回格式错误：期望列表，得到 {type(coins).__name__}")
    return {
        "timestamp": timestamp or datetime.now(timezone.utc).isoformat(),
        "coins": coins,
    }


def fetch_coingecko_snapshot(
    vs_currency: str = VS_CURRENCY,
    per_page: int = PER_PAGE,
    api_key: Optional[str] = COINGECKO_API_KEY,
) -> Dict[str, Any]:
    """同步获取一次行情快照。"""
    try:
        response = requests.get(
            f"{COINGECKO_BASE_URL}{MARKETS_PATH}",
            params=build_markets_params(vs_currency, per_page),
            headers=build_headers(api_key),
            timeout=REQUEST_TIMEOUT,
        )
        response.raise_for_status()
        coins = response.json()
    except (requests.RequestException, ValueError) as exc:
        raise SourceUnavailable(f"CoinGecko 请求失败：{exc}") from exc
    return make_snapshot(coins)


async def fetch_coingecko_snapshot_async(
    client: httpx.AsyncClient,
    vs_currency: str = VS_CURRENCY,
    per_page: int = PER_PAGE,
    api_key: Optional[str] = COINGECKO_API_KEY,
) -> Dict[str, Any]:
    try:
        async with coingecko_public_limiter:
            response = await client.get(
                f"{COINGECKO_BASE_URL}{MARKETS_PATH}",
                params=build_markets_params(vs_currency, per_page),
                headers=build_headers(api_key),
                timeout=REQUEST_TIMEOUT,
            )
        response.raise_for_status()
        coins = response.json()
    except (httpx.HTTPError, ValueError) as exc:
        raise SourceUnavailable(f"CoinGecko 请求失败：{exc}") from exc
    return make_snapshot(coins)
