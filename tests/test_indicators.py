import pytest

from coin_ranker.indicators import (
    BollingerBands,
    bollinger,
    calculate_indicators,
    ema,
    macd,
    mean,
    rsi,
    sma,
    stddev,
)


def test_mean_of_empty_series_is_zero():
    assert mean([]) == 0.0
    assert mean([1, 2, 3, 4]) == 2.5


def test_stddev_is_population():
    assert stddev([2, 4, 4, 4, 5, 5, 7, 9]) == pytest.approx(2.0)
    assert stddev([]) == 0.0


@pytest.mark.parametrize("period", [1, 2, 5, 14])
def test_short_series_returns_none(period):
    series = [float(i) for i in range(period - 1)]
    assert sma(series, period) is None
    assert ema(series, period) is None
    assert rsi(series, period - 1) is None


def test_sma_uses_trailing_window():
    assert sma([1, 2, 3, 4, 5], 3) == pytest.approx(4.0)


def test_ema_seed_then_recurrence():
    # seed = mean(1,2,3) = 2, k = 0.5: 4*0.5 + 2*0.5 = 3, 5*0.5 + 3*0.5 = 4
    assert ema([1, 2, 3, 4, 5], 3) == pytest.approx(4.0)
    assert ema([1, 2, 3], 3) == pytest.approx(2.0)


def test_non_positive_period_is_rejected():
    with pytest.raises(ValueError):
        sma([1, 2, 3], 0)


def test_rsi_all_gains_is_100():
    assert rsi([float(i) for i in range(20)]) == 100.0
    assert rsi([5.0] * 15) == 100.0


def test_rsi_mixed_changes():
    # 涨 2、跌 1 交替：gains=2+2=4, losses=1 -> rs = 4
    series = [10, 12, 11, 13]
    assert rsi(series, 3) == pytest.approx(100 - 100 / (1 + 4))


def test_rsi_stays_in_range():
    series = [100, 90, 80, 85, 70, 60, 65, 50, 40, 45, 30, 20, 25, 10, 5, 4]
    value = rsi(series)
    assert value is not None
    assert 0 <= value <= 100


def test_macd_requires_slow_plus_signal_points():
    assert macd([float(i) for i in range(34)]) is None


def test_macd_on_linear_series():
    series = [float(i) for i in range(60)]
    result = macd(series)
    assert result is not None
    assert result.macd_line == pytest.approx(ema(series, 12) - ema(series, 26))
    assert result.histogram == pytest.approx(result.macd_line - result.signal_line)
    # 线性上涨时快线在慢线之上
    assert result.macd_line > 0


def test_bollinger_bands_are_symmetric():
    series = [3.0, 7.0, 1.0, 9.0, 4.0, 6.0]
    bands = bollinger(series, period=6, mult=2.5)
    assert isinstance(bands, BollingerBands)
    assert bands.upper - bands.mid == pytest.approx(bands.mid - bands.lower)
    assert bands.mid == pytest.approx(5.0)
    assert bands.upper == pytest.approx(5.0 + 2.5 * stddev(series))


def test_bollinger_short_series_is_none():
    assert bollinger([1.0] * 19) is None


def test_calculate_indicators_marks_missing_values():
    summary = calculate_indicators([1.0, 2.0, 3.0])
    assert summary["points"] == 3
    assert summary["sma20"] is None
    assert summary["macd"] is None
    assert summary["bollinger"] is None

    summary = calculate_indicators([float(i) for i in range(40)])
    assert summary["sma20"] == pytest.approx(29.5)
    assert summary["rsi14"] == 100.0
    assert set(summary["macd"]) == {"macd_line", "signal_line", "histogram"}
    assert set(summary["bollinger"]) == {"upper", "mid", "lower", "sd"}


def test_rsi_zero_period_is_none():
    assert rsi([], 0) is None
    assert rsi([1.0, 2.0], 0) is None
    with pytest.raises(ValueError):
        rsi([1.0, 2.0], -1)
