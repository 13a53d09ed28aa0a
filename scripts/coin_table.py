"""
币种排名表脚本。

用途：
- 读取最新的行情快照（默认读每日日志，--live 则直接请求 CoinGecko）
- 套用上次保存的排序状态，输出带信号和关注标记的排名表
- --sort 激活某一列（同列再次激活切换升降序），--watch 切换关注
- --detail 输出单个币种的完整技术指标
"""

import argparse
import json
import locale
import sys
import time
from dataclasses import asdict
from pathlib import Path
from typing import Any, Callable, Dict, Optional

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from coin_ranker.config import LOG_LEVEL, PREFERENCES_PATH, SNAPSHOT_LOG_DIR
from coin_ranker.engine import RankedView, RankingEngine
from coin_ranker.fetchers.coingecko import fetch_coingecko_snapshot
from coin_ranker.formatting import format_detail, render_table
from coin_ranker.indicators import calculate_indicators
from coin_ranker.log import setup_logging
from coin_ranker.ranking import COLUMNS
from coin_ranker.storage import JsonFileStore, SnapshotLog


def parse_args(argv: Optional[list] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="输出可排序的加密货币排名表")
    parser.add_argument("--sort", choices=COLUMNS, help="激活排序列；与当前列相同则切换升降序")
    parser.add_argument("--watch", action="append", default=[], help="切换某个币种 id 的关注状态，可重复")
    parser.add_argument("--detail", help="输出指定币种 id 的技术指标详情")
    parser.add_argument("--live", action="store_true", help="直接请求 CoinGecko，而不是读取快照日志")
    parser.add_argument("--loop", type=float, help="每隔 N 秒刷新一次表格")
    parser.add_argument("--json", action="store_true", help="以 JSON 输出排名结果")
    parser.add_argument("--prefs", type=Path, default=PREFERENCES_PATH, help="偏好文件路径")
    parser.add_argument("--log-dir", type=Path, default=SNAPSHOT_LOG_DIR, help="快照日志目录")
    parser.add_argument("--log-level", default=LOG_LEVEL, help="日志级别，默认 INFO")
    return parser.parse_args(argv)


def view_to_dict(view: RankedView) -> Dict[str, Any]:
    rows = []
    for row in view.rows:
        item = asdict(row.asset)
        item["signal"] = row.asset.signal.value
        item["sparkline"] = len(row.asset.sparkline)
        item["is_watched"] = row.is_watched
        rows.append(item)
    return {
        "timestamp": view.timestamp,
        "sort": {"key": view.sort_state.key, "ascending": view.sort_state.ascending},
        "rows": rows,
    }


def render(view: RankedView, args: argparse.Namespace) -> str:
    if args.json:
        return json.dumps(view_to_dict(view), ensure_ascii=False, indent=2)
    if args.detail:
        for row in view.rows:
            if row.asset.id == args.detail:
                return format_detail(row.asset, calculate_indicators(row.asset.sparkline))
        return f"未找到币种：{args.detail}"
    return render_table(view)


def main() -> None:
    args = parse_args()
    setup_logging(args.log_level)
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error:
        # 系统未配置该 locale 时沿用 C 排序规则
        pass

    engine = RankingEngine(JsonFileStore(args.prefs))
    source: Callable[[], Dict[str, Any]]
    if args.live:
        source = fetch_coingecko_snapshot
    else:
        source = SnapshotLog(args.log_dir).latest

    view = engine.refresh_from(source)
    if args.sort:
        view = engine.column_activated(args.sort)
    for coin_id in args.watch:
        view = engine.toggle_watch(coin_id)

    if not view.rows:
        print("暂无可显示的数据，请先运行 scripts/coin_collector.py。", file=sys.stderr)
        if not args.loop:
            sys.exit(1)

    print(render(view, args))

    if not args.loop:
        return
    try:
        while True:
            time.sleep(args.loop)
            view = engine.refresh_from(source)
            print()
            print(render(view, args))
    except KeyboardInterrupt:
        print("\n已停止刷新。")


if __name__ == "__main__":
    main()
