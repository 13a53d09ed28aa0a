"""
coin_ranker
~~~~~~~~~~~

核心业务包：
- CoinGecko 行情快照抓取与每日日志
- 技术指标计算与综合信号分类
- 币种规范化、排序状态与关注列表的持久化

入口脚本仍然位于仓库根目录：
- scripts/coin_collector.py
- scripts/coin_table.py
"""
