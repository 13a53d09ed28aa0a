from typing import Any, Dict, List

from .engine import RankedView
from .normalizer import NormalizedAsset
from .ranking import COLUMNS
from .signals import Signal

SIGNAL_LABELS = {
    Signal.STRONG_BUY: "⬆⬆ Strong Buy",
    Signal.BUY: "⬆ Buy",
    Signal.STRONG_SELL: "⬇⬇ Strong Sell",
    Signal.SELL: "⬇ Sell",
    Signal.NEUTRAL: "–",
}

HEADERS = {
    "watch": "👁",
    "name": "Name",
    "id": "ID",
    "symbol": "Symbol",
    "price": "Price",
    "market_cap": "Market Cap",
    "volume": "Volume",
    "pct24h": "24h %",
    "signal": "Signal",
    "trend_pct": "7d Trend",
}


def format_number(num: float) -> str:
    """K / M / B / T 缩写，保留两位小数。"""
    if num >= 1e12:
        return f"{num / 1e12:.2f}T"
    if num >= 1e9:
        return f"{num / 1e9:.2f}B"
    if num >= 1e6:
        return f"{num / 1e6:.2f}M"
    if num >= 1e3:
        return f"{num / 1e3:.2f}K"
    return f"{num:.2f}"


def format_trend(asset: NormalizedAsset) -> str:
    if asset.first_7d is None:
        return "-"
    if abs(asset.trend_pct) < 1:
        arrow = "→"
    else:
        arrow = "↗" if asset.price > asset.first_7d else "↘"
    return f"{asset.first_7d:.2f} → {asset.price:.2f} {arrow}"


def row_cells(asset: NormalizedAsset, is_watched: bool) -> List[str]:
    return [
        "★" if is_watched else "",
        asset.name,
        asset.id,
        asset.symbol,
        f"${format_number(asset.price)}",
        f"${format_number(asset.market_cap)}",
        format_number(asset.volume),
        f"{asset.pct24h:.2f}%",
        SIGNAL_LABELS[asset.signal],
        format_trend(asset),
    ]


def render_table(view: RankedView) -> str:
    headers = []
    for column in COLUMNS:
        title = HEADERS[column]
        if column == view.sort_state.key:
            title += " ▲" if view.sort_state.ascending else " ▼"
        headers.append(title)

    body = [row_cells(row.asset, row.is_watched) for row in view.rows]
    widths = [len(h) for h in headers]
    for cells in body:
        widths = [max(w, len(c)) for w, c in zip(widths, cells)]

    def line(cells: List[str]) -> str:
        return "  ".join(c.ljust(w) for c, w in zip(cells, widths)).rstrip()

    lines = []
    if view.timestamp:
        lines.append(f"Last update: {view.timestamp}")
    lines.append(line(headers))
    lines.append("  ".join("-" * w for w in widths))
    lines.extend(line(cells) for cells in body)
    return "\n".join(lines)


def format_detail(asset: NormalizedAsset, indicators: Dict[str, Any]) -> str:
    """单币种技术指标详情。"""
    lines = [
        "=" * 60,
        f"{asset.name} ({asset.symbol}) - {asset.id}",
        "=" * 60,
        "\n[PRICE]",
        f"Current: {asset.price}",
        f"24h Change: {asset.pct24h:.2f}%",
        f"7d Trend: {asset.trend_pct:.2f}%",
        f"Signal: {SIGNAL_LABELS[asset.signal]}",
        "\n[TECHNICAL INDICATORS]",
        f"Points: {indicators['points']}",
        f"SMA(20): {indicators['sma20']}",
        f"EMA(12): {indicators['ema12']}",
        f"EMA(26): {indicators['ema26']}",
        f"RSI(14): {indicators['rsi14']}",
    ]
    macd = indicators.get("macd")
    if macd:
        lines.append(
            f"MACD: line={macd['macd_line']:.6f} signal={macd['signal_line']:.6f} "
            f"hist={macd['histogram']:.6f}"
        )
    else:
        lines.append("MACD: None")
    bands = indicators.get("bollinger")
    if bands:
        lines.append(
            f"Bollinger(20): upper={bands['upper']:.6f} mid={bands['mid']:.6f} "
            f"lower={bands['lower']:.6f}"
        )
    else:
        lines.append("Bollinger(20): None")
    return "\n".join(lines)
