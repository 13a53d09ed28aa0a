from coin_ranker.engine import RankingEngine
from coin_ranker.formatting import format_detail, format_number, format_trend, render_table
from coin_ranker.indicators import calculate_indicators
from coin_ranker.normalizer import normalize_asset
from tests.conftest import make_coin


def test_format_number_suffixes():
    assert format_number(1.5e12) == "1.50T"
    assert format_number(2_340_000_000) == "2.34B"
    assert format_number(5_000_000) == "5.00M"
    assert format_number(1234) == "1.23K"
    assert format_number(0.5) == "0.50"


def test_format_trend():
    assert format_trend(normalize_asset(make_coin("a", price=10.0))) == "-"
    assert format_trend(normalize_asset(make_coin("a", price=12.0, sparkline=[10.0, 11.0]))) == "10.00 → 12.00 ↗"
    assert format_trend(normalize_asset(make_coin("a", price=8.0, sparkline=[10.0, 11.0]))) == "10.00 → 8.00 ↘"
    assert format_trend(normalize_asset(make_coin("a", price=10.05, sparkline=[10.0, 11.0]))) == "10.00 → 10.05 →"


def test_render_table_marks_sort_and_watch(store):
    engine = RankingEngine(store)
    engine.refresh({"timestamp": "t", "coins": [make_coin("bitcoin", pct24h=6.0), make_coin("tether")]})
    view = engine.toggle_watch("tether")
    text = render_table(view)
    lines = text.splitlines()
    assert lines[0] == "Last update: t"
    assert "24h % ▼" in lines[1]
    assert lines[3].split()[0] == "Bitcoin"
    assert lines[4].startswith("★")
    assert "⬆ Buy" in lines[3]


def test_format_detail_lists_indicators():
    asset = normalize_asset(make_coin("bitcoin", sparkline=[float(i) for i in range(40)]))
    text = format_detail(asset, calculate_indicators(asset.sparkline))
    assert "Bitcoin (BIT) - bitcoin" in text
    assert "RSI(14): 100.0" in text
    assert "MACD: line=" in text

    short = normalize_asset(make_coin("x"))
    assert "MACD: None" in format_detail(short, calculate_indicators(short.sparkline))
