"""
错误分类：

- SourceUnavailable：快照获取失败或返回非成功状态
- MalformedSnapshot：快照中找不到可识别的币种集合，按 SourceUnavailable 处理
- MalformedRecord：单条币种记录无法规范化
- PersistenceCorrupt：已保存的排序状态 / 关注列表无法解析

核心逻辑中没有任何错误是致命的，一律退回到"继续显示上一次的排名结果"。
"""


class CoinRankerError(Exception):
    pass


class SourceUnavailable(CoinRankerError):
    pass


class MalformedSnapshot(SourceUnavailable):
    pass


class MalformedRecord(ValueError, CoinRankerError):
    pass


class PersistenceCorrupt(ValueError, CoinRankerError):
    pass
