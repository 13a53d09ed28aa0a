from coin_ranker.indicators import BollingerBands
from coin_ranker.signals import Signal, classify, classify_series, signal_bands

BANDS = BollingerBands(upper=110.0, mid=100.0, lower=90.0, sd=5.0)


def test_strong_buy_needs_band_breakout():
    assert classify(115.0, 6.0, 2.0, BANDS) is Signal.STRONG_BUY
    assert classify(105.0, 6.0, 2.0, BANDS) is Signal.BUY


def test_buy_without_bands():
    assert classify(115.0, 6.0, 2.0, None) is Signal.BUY


def test_strong_buy_requires_uptrend():
    assert classify(115.0, 6.0, 0.5, BANDS) is Signal.BUY


def test_strong_sell_and_sell():
    assert classify(85.0, -3.0, -2.0, BANDS) is Signal.STRONG_SELL
    assert classify(95.0, -3.0, -2.0, BANDS) is Signal.SELL
    assert classify(85.0, -1.5, -2.0, BANDS) is Signal.SELL


def test_neutral():
    assert classify(100.0, 0.5, 0.0, BANDS) is Signal.NEUTRAL
    assert classify(100.0, 4.99, 5.0, BANDS) is Signal.NEUTRAL


def test_thresholds_are_inclusive():
    assert classify(100.0, 5.0, 0.0, None) is Signal.BUY
    assert classify(100.0, -1.0, 0.0, None) is Signal.SELL


def test_signal_bands_use_full_series_length():
    series = [float(i) for i in range(7)]
    bands = signal_bands(series)
    assert bands is not None
    assert bands.mid == 3.0
    assert signal_bands([1.0]) is None
    assert signal_bands([]) is None


def test_classify_series_breakout_above_upper_band():
    series = [100.0, 100.0, 101.0, 100.0, 101.0, 100.0, 101.0]
    assert classify_series(120.0, 6.0, 20.0, series) is Signal.STRONG_BUY
    assert classify_series(100.5, 6.0, 0.5, series) is Signal.BUY
