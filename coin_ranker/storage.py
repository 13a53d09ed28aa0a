import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config import LOG_RETENTION_DAYS, PREFERENCES_PATH, SNAPSHOT_LOG_DIR
from .errors import SourceUnavailable

logger = logging.getLogger(__name__)

LOG_PREFIX = "coingecko-"


def save_json(data: Any, output_path: Path, indent: Optional[int] = 2) -> None:
    """先写临时文件再替换，避免读到写了一半的 JSON。"""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = output_path.with_name(output_path.name + ".tmp")
    tmp_path.write_text(json.dumps(data, indent=indent, ensure_ascii=False), encoding="utf-8")
    os.replace(tmp_path, output_path)


def load_json(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as fp:
        return json.load(fp)


class MemoryStore:
    """内存版键值存储，进程退出即丢失。"""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileStore:
    """
    以单个 JSON 文件保存的键值字符串存储，跨进程重启保留。

    文件损坏时视为空存储并记录警告，下一次 set 会覆盖它。
    """

    def __init__(self, path: Path = PREFERENCES_PATH) -> None:
        self.path = Path(path)

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = load_json(self.path)
        except (OSError, ValueError) as exc:
            logger.warning("偏好文件 %s 无法读取，按空处理：%s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("偏好文件 %s 格式错误，按空处理", self.path)
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def get(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        save_json(data, self.path)


class SnapshotLog:
    """
    追加式的每日快照日志：{log_dir}/coingecko-YYYY-MM-DD.json，
    文件内容为 [{"timestamp": ..., "coins": [...]}, ...]。
    """

    def __init__(self, log_dir: Path = SNAPSHOT_LOG_DIR) -> None:
        self.log_dir = Path(log_dir)

    def path_for(self, day: Optional[datetime] = None) -> Path:
        day = day or datetime.now(timezone.utc)
        return self.log_dir / f"{LOG_PREFIX}{day.strftime('%Y-%m-%d')}.json"

    def _entries(self, path: Path) -> List[Dict[str, Any]]:
        if not path.exists():
            return []
        data = load_json(path)
        if not isinstance(data, list):
            raise ValueError(f"快照日志格式错误：{path} 应为列表")
        return data

    def append(self, entry: Dict[str, Any], day: Optional[datetime] = None) -> Path:
        path = self.path_for(day)
        try:
            entries = self._entries(path)
        except ValueError as exc:
            backup = path.with_name(f"{path.name}.corrupt-{datetime.now().strftime('%Y%m%d_%H%M%S')}")
            os.replace(path, backup)
            logger.error("快照日志 %s 已损坏，原文件移至 %s 后重新开始：%s", path, backup, exc)
            entries = []
        entries.append(entry)
        save_json(entries, path)
        return path

    def latest(self) -> Dict[str, Any]:
        """返回最近一个日志文件的最后一条快照。"""
        files = self.log_files()
        if not files:
            raise SourceUnavailable(f"{self.log_dir} 中没有快照日志")
        path = files[-1]
        try:
            entries = self._entries(path)
        except (OSError, ValueError) as exc:
            raise SourceUnavailable(f"读取快照日志 {path} 失败：{exc}") from exc
        if not entries:
            raise SourceUnavailable(f"快照日志 {path} 中没有数据")
        return entries[-1]

    def log_files(self) -> List[Path]:
        if not self.log_dir.exists():
            return []
        return sorted(self.log_dir.glob(f"{LOG_PREFIX}*.json"))

    def cleanup(self, keep: int = LOG_RETENTION_DAYS) -> List[Path]:
        """只保留最新的 keep 个每日日志文件，返回被删除的文件。"""
        files = self.log_files()
        if len(files) <= keep:
            return []
        removed: List[Path] = []
        for old_file in files[: len(files) - keep]:
            try:
                old_file.unlink()
                removed.append(old_file)
            except OSError as exc:  # pragma: no cover - best effort cleanup
                logger.warning("删除旧日志 %s 失败：%s", old_file, exc)
        return removed
