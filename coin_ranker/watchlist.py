import json
import logging
from typing import Any, List, Tuple

from .config import WATCHLIST_KEY

logger = logging.getLogger(__name__)


class Watchlist:
    """关注列表：一组币种 id，独立持久化，不影响排序。"""

    def __init__(self, store: Any) -> None:
        self.store = store
        self._ids: List[str] = self._load()

    def _load(self) -> List[str]:
        raw = self.store.get(WATCHLIST_KEY)
        if raw is None:
            return []
        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning("关注列表不是合法 JSON，已重置为空：%r", raw)
            return []
        if not isinstance(data, list) or not all(isinstance(i, str) for i in data):
            logger.warning("关注列表格式错误，已重置为空：%r", raw)
            return []
        return list(dict.fromkeys(data))

    @property
    def ids(self) -> Tuple[str, ...]:
        return tuple(self._ids)

    def is_watched(self, coin_id: str) -> bool:
        return coin_id in self._ids

    def toggle(self, coin_id: str) -> bool:
        """切换关注状态并持久化，返回切换后的状态。"""
        if coin_id in self._ids:
            self._ids.remove(coin_id)
            watched = False
        else:
            self._ids.append(coin_id)
            watched = True
        self.store.set(WATCHLIST_KEY, json.dumps(self._ids, separators=(",", ":")))
        return watched
