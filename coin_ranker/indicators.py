"""
技术指标库：均值、标准差、SMA、EMA、RSI、MACD、布林带。

所有函数都是纯函数，输入为按时间正序（最旧在前）的价格序列。
数据不足时统一返回 None，而不是 0 或 NaN，调用方必须显式判断。
"""

import math
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional, Sequence


@dataclass(frozen=True)
class MACD:
    macd_line: float
    signal_line: float
    histogram: float


@dataclass(frozen=True)
class BollingerBands:
    upper: float
    mid: float
    lower: float
    sd: float


def _check_period(period: int) -> None:
    if period < 1:
        raise ValueError(f"period must be >= 1, got {period}")


def mean(series: Sequence[float]) -> float:
    """空序列返回 0.0。"""
    if not series:
        return 0.0
    return sum(series) / len(series)


def stddev(series: Sequence[float]) -> float:
    """总体标准差。"""
    m = mean(series)
    return math.sqrt(mean([(x - m) ** 2 for x in series]))


def sma(series: Sequence[float], period: int) -> Optional[float]:
    _check_period(period)
    if len(series) < period:
        return None
    return mean(series[-period:])


def ema(series: Sequence[float], period: int) -> Optional[float]:
    """以前 period 个点的均值为种子，依次递推 ema = price*k + ema*(1-k)。"""
    _check_period(period)
    if len(series) < period:
        return None
    k = 2 / (period + 1)
    value = mean(series[:period])
    for price in series[period:]:
        value = price * k + value * (1 - k)
    return value


def rsi(series: Sequence[float], period: int = 14) -> Optional[float]:
    # period=0 时没有可比较的涨跌，视为数据不足
    if period == 0:
        return None
    _check_period(period)
    if len(series) < period + 1:
        return None

    gains = 0.0
    losses = 0.0
    for i in range(len(series) - period, len(series)):
        change = series[i] - series[i - 1]
        if change >= 0:
            gains += change
        else:
            losses += -change

    avg_gain = gains / period
    avg_loss = losses / period
    if avg_loss == 0:
        return 100.0
    rs = avg_gain / avg_loss
    return 100 - 100 / (1 + rs)


def macd(
    series: Sequence[float],
    fast: int = 12,
    slow: int = 26,
    signal: int = 9,
) -> Optional[MACD]:
    """
    计算 MACD 线、信号线和柱状图。

    信号线需要一段 MACD 子序列：对 slow 之后的每个前缀重新计算快慢 EMA。
    这是 O(n^2) 的做法，7 天的 sparkline 长度下可以接受；
    更长的序列应改用增量 EMA 累加器。
    """
    _check_period(fast)
    _check_period(slow)
    _check_period(signal)
    if len(series) < slow + signal:
        return None

    fast_ema = ema(series, fast)
    slow_ema = ema(series, slow)
    if fast_ema is None or slow_ema is None:
        return None
    macd_line = fast_ema - slow_ema

    macd_series: List[float] = []
    for i in range(slow, len(series)):
        prefix = series[: i + 1]
        f = ema(prefix, fast)
        s = ema(prefix, slow)
        if f is not None and s is not None:
            macd_series.append(f - s)

    if len(macd_series) < signal:
        return None
    signal_line = ema(macd_series, signal)
    if signal_line is None:
        return None

    return MACD(
        macd_line=macd_line,
        signal_line=signal_line,
        histogram=macd_line - signal_line,
    )


def bollinger(
    series: Sequence[float], period: int = 20, mult: float = 2
) -> Optional[BollingerBands]:
    _check_period(period)
    if len(series) < period:
        return None
    window = series[-period:]
    mid = mean(window)
    sd = stddev(window)
    return BollingerBands(upper=mid + mult * sd, mid=mid, lower=mid - mult * sd, sd=sd)


def calculate_indicators(series: Sequence[float]) -> Dict[str, Any]:
    """
    为一条价格序列汇总全部技术指标，缺失的指标值为 None。
    供单币种详情输出使用。
    """
    macd_result = macd(series)
    bands = bollinger(series)
    return {
        "points": len(series),
        "sma20": sma(series, 20),
        "ema12": ema(series, 12),
        "ema26": ema(series, 26),
        "rsi14": rsi(series),
        "macd": asdict(macd_result) if macd_result else None,
        "bollinger": asdict(bands) if bands else None,
    }
