"""
行情快照采集脚本。

功能：
- 定时从 CoinGecko 获取市值前 N 的币种行情（含 7 日 sparkline）
- 以 {timestamp, coins} 追加写入 data/coingecko/coingecko-YYYY-MM-DD.json
- 只保留最近若干天的日志文件

单次请求失败只记录警告，下一轮继续。
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

import httpx

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from coin_ranker.config import (
    LOG_LEVEL,
    LOG_RETENTION_DAYS,
    PER_PAGE,
    REFRESH_INTERVAL_SECONDS,
    SNAPSHOT_LOG_DIR,
    VS_CURRENCY,
)
from coin_ranker.errors import SourceUnavailable
from coin_ranker.fetchers.coingecko import fetch_coingecko_snapshot_async
from coin_ranker.log import setup_logging
from coin_ranker.storage import SnapshotLog

logger = logging.getLogger("coin_collector")


def parse_args(argv: Optional[list] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="定时获取 CoinGecko 行情快照并追加到每日日志")
    parser.add_argument("--interval", type=float, default=REFRESH_INTERVAL_SECONDS, help="采集间隔（秒），默认 20")
    parser.add_argument("--per-page", type=int, default=PER_PAGE, help="获取币种数量，默认 20")
    parser.add_argument("--vs-currency", default=VS_CURRENCY, help="计价货币，默认 usd")
    parser.add_argument("--log-dir", type=Path, default=SNAPSHOT_LOG_DIR, help="快照日志目录")
    parser.add_argument("--keep-days", type=int, default=LOG_RETENTION_DAYS, help="保留的每日日志文件数")
    parser.add_argument("--once", action="store_true", help="只采集一次后退出")
    parser.add_argument("--log-level", default=LOG_LEVEL, help="日志级别，默认 INFO")
    return parser.parse_args(argv)


async def collect_once(
    client: httpx.AsyncClient,
    snapshot_log: SnapshotLog,
    vs_currency: str,
    per_page: int,
    keep_days: int,
) -> bool:
    try:
        snapshot = await fetch_coingecko_snapshot_async(client, vs_currency=vs_currency, per_page=per_page)
    except SourceUnavailable as exc:
        logger.warning("本轮采集失败：%s", exc)
        return False

    path = snapshot_log.append(snapshot)
    snapshot_log.cleanup(keep_days)
    logger.info("已写入 %s，币种 %d 个。", path, len(snapshot["coins"]))
    return True


async def _async_main(args: argparse.Namespace) -> None:
    snapshot_log = SnapshotLog(args.log_dir)
    async with httpx.AsyncClient() as client:
        while True:
            await collect_once(client, snapshot_log, args.vs_currency, args.per_page, args.keep_days)
            if args.once:
                return
            await asyncio.sleep(args.interval)


def main() -> None:
    args = parse_args()
    setup_logging(args.log_level)
    try:
        asyncio.run(_async_main(args))
    except KeyboardInterrupt:
        print("\n采集已停止。")


if __name__ == "__main__":
    main()
