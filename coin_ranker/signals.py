"""
综合交易信号：根据 24h 涨跌幅、7 日趋势和布林带把每个币种归入五类之一。

判断顺序即优先级，先命中者生效：强买先于买入、强卖先于卖出，
这样强势行情不会被较粗的分类覆盖。
"""

from enum import Enum
from typing import Optional, Sequence

from .indicators import BollingerBands, bollinger

BUY_PCT_24H = 5.0
STRONG_SELL_PCT_24H = -2.0
SELL_PCT_24H = -1.0
TREND_UP_PCT = 1.0
TREND_DOWN_PCT = -1.0


class Signal(str, Enum):
    STRONG_BUY = "strong_buy"
    BUY = "buy"
    STRONG_SELL = "strong_sell"
    SELL = "sell"
    NEUTRAL = "neutral"


def signal_bands(series: Sequence[float], mult: float = 2) -> Optional[BollingerBands]:
    """
    对整条 7 日序列计算布林带（周期取序列实际长度，而非常规的 20）。
    少于 2 个点时没有意义，返回 None。
    """
    if len(series) < 2:
        return None
    return bollinger(series, period=len(series), mult=mult)


def classify(
    price: float,
    pct24h: float,
    trend_pct: float,
    bands: Optional[BollingerBands],
) -> Signal:
    if (
        bands is not None
        and pct24h >= BUY_PCT_24H
        and trend_pct >= TREND_UP_PCT
        and price > bands.upper
    ):
        return Signal.STRONG_BUY
    if pct24h >= BUY_PCT_24H:
        return Signal.BUY
    if (
        bands is not None
        and pct24h <= STRONG_SELL_PCT_24H
        and trend_pct <= TREND_DOWN_PCT
        and price < bands.lower
    ):
        return Signal.STRONG_SELL
    if pct24h <= SELL_PCT_24H:
        return Signal.SELL
    return Signal.NEUTRAL


def classify_series(
    price: float, pct24h: float, trend_pct: float, series: Sequence[float]
) -> Signal:
    return classify(price, pct24h, trend_pct, signal_bands(series))
