"""
排序管线：维护当前排序状态（SortState），并按任意字段对币种列表稳定排序。

排序状态通过注入的键值存储持久化，每次状态变化后立即写回，
刷新数据时用 preserve_direction 重新套用已保存的状态而不切换方向。
"""

import json
import locale
import logging
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional

from .config import SORT_STATE_KEY
from .errors import PersistenceCorrupt
from .normalizer import NormalizedAsset

logger = logging.getLogger(__name__)

STRING_KEYS = ("name", "id", "symbol")
NUMERIC_KEYS = ("price", "market_cap", "volume", "pct24h", "trend_pct")
SORT_KEYS = STRING_KEYS + NUMERIC_KEYS
NON_SORTABLE_KEYS = ("watch", "signal")

# 表格列顺序，旧版存储中的 {"index": n} 按此映射
COLUMNS = (
    "watch",
    "name",
    "id",
    "symbol",
    "price",
    "market_cap",
    "volume",
    "pct24h",
    "signal",
    "trend_pct",
)


@dataclass(frozen=True)
class SortState:
    key: str = "pct24h"
    ascending: bool = False

    def __post_init__(self) -> None:
        if self.key not in SORT_KEYS:
            raise ValueError(f"不可排序的字段：{self.key}")

    def to_json(self) -> str:
        return json.dumps({"key": self.key, "ascending": self.ascending}, separators=(",", ":"))

    @classmethod
    def from_json(cls, text: str) -> "SortState":
        try:
            data = json.loads(text)
        except ValueError as exc:
            raise PersistenceCorrupt(f"排序状态不是合法 JSON：{text!r}") from exc
        if not isinstance(data, dict) or not isinstance(data.get("ascending"), bool):
            raise PersistenceCorrupt(f"排序状态格式错误：{text!r}")

        key = data.get("key")
        index = data.get("index")
        if key is None and isinstance(index, int) and not isinstance(index, bool):
            key = COLUMNS[index] if 0 <= index < len(COLUMNS) else None
        if key not in SORT_KEYS:
            raise PersistenceCorrupt(f"排序字段无效：{text!r}")
        return cls(key=key, ascending=data["ascending"])


DEFAULT_SORT_STATE = SortState()


def next_sort_state(state: SortState, key: str, preserve_direction: bool = False) -> SortState:
    """
    列激活事件的状态转移：
    - watch / signal 列：不变
    - 同一列：切换升降序
    - 新的列：采用新列并默认降序
    - preserve_direction：采用新列并保留当前方向
    """
    if key in NON_SORTABLE_KEYS:
        return state
    if key not in SORT_KEYS:
        raise ValueError(f"未知的排序字段：{key}")
    if preserve_direction:
        return SortState(key=key, ascending=state.ascending)
    if key == state.key:
        return SortState(key=key, ascending=not state.ascending)
    return SortState(key=key, ascending=False)


def _sort_value(asset: NormalizedAsset, key: str) -> Any:
    value = getattr(asset, key)
    if key in STRING_KEYS:
        return locale.strxfrm(value.lower())
    return value


def sort_assets(assets: Iterable[NormalizedAsset], state: SortState) -> List[NormalizedAsset]:
    """返回排好序的新列表；值相同的币种保持快照中的原始顺序。"""
    return sorted(
        assets,
        key=lambda asset: _sort_value(asset, state.key),
        reverse=not state.ascending,
    )


class RankingPipeline:
    def __init__(self, store: Any, state: Optional[SortState] = None) -> None:
        self.store = store
        self.state = state or DEFAULT_SORT_STATE

    def load(self) -> SortState:
        """从存储读取排序状态；不存在或损坏时使用默认值。"""
        raw = self.store.get(SORT_STATE_KEY)
        if raw is None:
            self.state = DEFAULT_SORT_STATE
            return self.state
        try:
            self.state = SortState.from_json(raw)
        except PersistenceCorrupt as exc:
            logger.warning("%s，使用默认排序", exc)
            self.state = DEFAULT_SORT_STATE
        return self.state

    def save(self) -> None:
        self.store.set(SORT_STATE_KEY, self.state.to_json())

    def activate(self, key: str, preserve_direction: bool = False) -> SortState:
        if key in NON_SORTABLE_KEYS:
            return self.state
        self.state = next_sort_state(self.state, key, preserve_direction)
        self.save()
        return self.state

    def apply(self, state: SortState) -> SortState:
        """原样采用给定的排序状态（不切换方向），并持久化。"""
        self.state = state
        self.save()
        return self.state

    def rank(self, assets: Iterable[NormalizedAsset]) -> List[NormalizedAsset]:
        return sort_assets(assets, self.state)
