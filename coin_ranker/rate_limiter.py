import asyncio

from coin_ranker.config import (
    COINGECKO_MAX_CONCURRENT_REQUESTS,
    COINGECKO_MIN_REQUEST_INTERVAL,
)


class AsyncConcurrencyLimiter:
    def __init__(self, max_concurrent: int, min_interval: float = 0.0) -> None:
        if max_concurrent < 1:
            raise ValueError("max_concurrent must be >= 1")
        if min_interval < 0:
            raise ValueError("min_interval must be >= 0")
        self._max_concurrent = max_concurrent
        self._min_interval = min_interval
        self._sem = None
        self._lock = None
        self._loop = None
        self._last_acquire = 0.0

    def _ensure_primitives(self) -> None:
        # asyncio 原语绑定事件循环，换了循环就重新创建
        loop = asyncio.get_running_loop()
        if self._loop is not loop:
            self._sem = asyncio.Semaphore(self._max_concurrent)
            self._lock = asyncio.Lock()
            self._loop = loop
            self._last_acquire = 0.0

    async def __aenter__(self):
        self._ensure_primitives()
        await self._sem.acquire()
        if self._min_interval <= 0:
            return self

        async with self._lock:
            loop = asyncio.get_running_loop()
            now = loop.time()
            elapsed = now - self._last_acquire
            wait_for = self._min_interval - elapsed
            if wait_for > 0:
                await asyncio.sleep(wait_for)
                now = loop.time()
            self._last_acquire = now

        return self

    async def __aexit__(self, exc_type, exc, tb):
        self._sem.release()
        return False


coingecko_public_limiter = AsyncConcurrencyLimiter(
    COINGECKO_MAX_CONCURRENT_REQUESTS,
    COINGECKO_MIN_REQUEST_INTERVAL,
)
