"""
把 CoinGecko 原始币种记录转换为可排序的标准结构。

缺失或类型错误的字段一律取默认值（数值为 0.0，文本为空字符串），
并记录错误日志；单条坏记录不会中断整批处理。
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .errors import MalformedRecord, MalformedSnapshot
from .signals import Signal, classify_series

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NormalizedAsset:
    id: str
    name: str
    symbol: str
    price: float
    market_cap: float
    volume: float
    pct24h: float
    trend_pct: float
    signal: Signal
    first_7d: Optional[float] = None
    sparkline: Tuple[float, ...] = ()


def _is_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and _finite(value)
    )


def _finite(value: float) -> bool:
    # 超出 float 范围的 JSON 大整数同样视为无效
    try:
        return math.isfinite(value)
    except OverflowError:
        return False


def _number(record: Mapping[str, Any], key: str, problems: List[str]) -> float:
    value = record.get(key)
    if _is_number(value):
        return float(value)
    # price_change_percentage_24h 允许为 null
    if value is not None:
        problems.append(f"{key}={value!r}")
    return 0.0


def _text(record: Mapping[str, Any], key: str, problems: List[str]) -> str:
    value = record.get(key)
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    problems.append(f"{key}={value!r}")
    return ""


def _sparkline(record: Mapping[str, Any], problems: List[str]) -> List[float]:
    container = record.get("sparkline_in_7d")
    if container is None:
        return []
    prices = container.get("price") if isinstance(container, Mapping) else None
    if not isinstance(prices, list):
        problems.append("sparkline_in_7d")
        return []
    series = [float(p) for p in prices if _is_number(p)]
    if len(series) != len(prices):
        problems.append(f"sparkline_in_7d: {len(prices) - len(series)} 个无效价格点")
    return series


def trend_percent(price: float, series: List[float]) -> float:
    """7 日序列首个价格到当前价格的涨跌幅（%），不足 2 个点或首值为 0 时为 0。"""
    if len(series) < 2 or series[0] == 0:
        return 0.0
    trend = (price - series[0]) / series[0] * 100
    return trend if math.isfinite(trend) else 0.0


def normalize_asset(record: Any) -> NormalizedAsset:
    if not isinstance(record, Mapping):
        raise MalformedRecord(f"币种记录格式错误：期望字典，得到 {type(record).__name__}")

    problems: List[str] = []
    coin_id = _text(record, "id", problems)
    price = _number(record, "current_price", problems)
    pct24h = _number(record, "price_change_percentage_24h", problems)
    series = _sparkline(record, problems)
    trend_pct = trend_percent(price, series)
    try:
        signal = classify_series(price, pct24h, trend_pct, series)
    except OverflowError:
        problems.append("sparkline_in_7d: 布林带计算溢出")
        signal = Signal.NEUTRAL

    asset = NormalizedAsset(
        id=coin_id,
        name=_text(record, "name", problems),
        symbol=_text(record, "symbol", problems).upper(),
        price=price,
        market_cap=_number(record, "market_cap", problems),
        volume=_number(record, "total_volume", problems),
        pct24h=pct24h,
        trend_pct=trend_pct,
        signal=signal,
        first_7d=series[0] if len(series) >= 2 else None,
        sparkline=tuple(series),
    )

    if problems:
        logger.error("币种 %r 存在无效字段，已使用默认值：%s", coin_id, ", ".join(problems))
    return asset


def extract_coins(snapshot: Any) -> List[Any]:
    """取出快照中的币种集合，支持列表或以 id 为键的字典两种形式。"""
    if not isinstance(snapshot, Mapping):
        raise MalformedSnapshot(f"快照格式错误：期望字典，得到 {type(snapshot).__name__}")
    coins = snapshot.get("coins")
    if isinstance(coins, list):
        return list(coins)
    if isinstance(coins, Mapping):
        return list(coins.values())
    raise MalformedSnapshot(f"快照中 coins 字段格式错误：{type(coins).__name__}")


def normalize_snapshot(snapshot: Dict[str, Any]) -> Tuple[Optional[str], List[NormalizedAsset]]:
    """返回 (timestamp, 规范化后的币种列表)；无法识别的单条记录被跳过并记录错误。"""
    coins = extract_coins(snapshot)
    assets: List[NormalizedAsset] = []
    for index, record in enumerate(coins):
        try:
            assets.append(normalize_asset(record))
        except MalformedRecord as exc:
            logger.error("跳过第 %d 条记录：%s", index, exc)
    timestamp = snapshot.get("timestamp")
    return (timestamp if isinstance(timestamp, str) else None), assets
