"""
排名引擎：给定一个快照，产出已分类、已排序、带关注标记的币种序列。

每次刷新都完整计算出新的 RankedView 后再整体替换；
获取或解析快照失败时记录警告，继续保留上一次的结果。
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Optional, Tuple

from .errors import SourceUnavailable
from .normalizer import NormalizedAsset, normalize_snapshot
from .ranking import RankingPipeline, SortState
from .watchlist import Watchlist

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RankedRow:
    asset: NormalizedAsset
    is_watched: bool


@dataclass(frozen=True)
class RankedView:
    timestamp: Optional[str]
    rows: Tuple[RankedRow, ...]
    sort_state: SortState

    @property
    def ids(self) -> Tuple[str, ...]:
        return tuple(row.asset.id for row in self.rows)


class RankingEngine:
    def __init__(self, store: Any) -> None:
        self.pipeline = RankingPipeline(store)
        self.pipeline.load()
        self.watchlist = Watchlist(store)
        self._timestamp: Optional[str] = None
        self._assets: Tuple[NormalizedAsset, ...] = ()
        self.view = self._build(None, ())

    @property
    def sort_state(self) -> SortState:
        return self.pipeline.state

    def _build(self, timestamp: Optional[str], assets: Iterable[NormalizedAsset]) -> RankedView:
        ranked = self.pipeline.rank(assets)
        rows = tuple(RankedRow(asset, self.watchlist.is_watched(asset.id)) for asset in ranked)
        return RankedView(timestamp=timestamp, rows=rows, sort_state=self.pipeline.state)

    def _swap(self, timestamp: Optional[str], assets: Tuple[NormalizedAsset, ...]) -> RankedView:
        view = self._build(timestamp, assets)
        self._timestamp, self._assets, self.view = timestamp, assets, view
        return view

    def refresh(self, snapshot: Dict[str, Any]) -> RankedView:
        """用新快照刷新；快照无法识别时保留上一次的结果。"""
        try:
            timestamp, assets = normalize_snapshot(snapshot)
        except SourceUnavailable as exc:
            logger.warning("快照无效，继续显示上一次结果：%s", exc)
            return self.view
        # 重新套用已保存的排序状态，不切换方向
        self.pipeline.apply(self.pipeline.state)
        view = self._swap(timestamp, tuple(assets))
        logger.info(
            "已刷新 %d 个币种，排序 %s %s",
            len(view.rows),
            view.sort_state.key,
            "升序" if view.sort_state.ascending else "降序",
        )
        return view

    def refresh_from(self, source: Callable[[], Dict[str, Any]]) -> RankedView:
        try:
            snapshot = source()
        except SourceUnavailable as exc:
            logger.warning("获取快照失败，继续显示上一次结果：%s", exc)
            return self.view
        return self.refresh(snapshot)

    def column_activated(self, key: str, preserve_direction: bool = False) -> RankedView:
        try:
            self.pipeline.activate(key, preserve_direction)
        except ValueError as exc:
            logger.warning("忽略列激活：%s", exc)
            return self.view
        return self._swap(self._timestamp, self._assets)

    def toggle_watch(self, coin_id: str) -> RankedView:
        self.watchlist.toggle(coin_id)
        return self._swap(self._timestamp, self._assets)
