import os
from pathlib import Path

# 统一项目输出目录
OUTPUT_DIR = Path("data")
SNAPSHOT_LOG_DIR = OUTPUT_DIR / "coingecko"
PREFERENCES_PATH = OUTPUT_DIR / "preferences.json"

# CoinGecko 行情接口
COINGECKO_BASE_URL = "https://api.coingecko.com/api/v3"
COINGECKO_API_KEY = os.getenv("COINGECKO_API_KEY")
VS_CURRENCY = "usd"
PER_PAGE = 20

COINGECKO_MAX_CONCURRENT_REQUESTS = 2
COINGECKO_MIN_REQUEST_INTERVAL = 1.0
REQUEST_TIMEOUT = 30

# 刷新与日志保留
REFRESH_INTERVAL_SECONDS = 20
LOG_RETENTION_DAYS = 7
LOG_LEVEL = os.getenv("COIN_RANKER_LOG_LEVEL", "INFO")

# 偏好存储键
SORT_STATE_KEY = "cryptoSort"
WATCHLIST_KEY = "watchedCoins"
