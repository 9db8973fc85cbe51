"""RateLimiter -- 按客户端的滑动窗口限流

只约束强制生成（force_new）请求。每个客户端持有一条时间戳队列，
由该客户端自己的 asyncio.Lock 保护；admit 路径上没有全局锁。
后台清扫任务由 start()/stop() 管理，定期移除窗口内已无记录的客户端。
进程内状态，不跨进程共享。
"""

import asyncio
import contextlib
import time
from collections import deque
from collections.abc import Callable

import structlog

log = structlog.get_logger()


class RateLimiter:
    """滑动窗口限流器"""

    def __init__(
        self,
        window_s: float = 3600,
        max_requests: int = 10,
        sweep_interval_s: float = 600,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Args:
            window_s: 窗口长度（秒）
            max_requests: 窗口内允许的请求数
            sweep_interval_s: 后台清扫周期（秒）
            clock: 单调时钟，测试可注入
        """
        self.window_s = window_s
        self.max_requests = max_requests
        self.sweep_interval_s = sweep_interval_s
        self._clock = clock
        self._windows: dict[str, deque[float]] = {}
        self._locks: dict[str, asyncio.Lock] = {}
        self._sweep_task: asyncio.Task | None = None

    @property
    def retry_after_s(self) -> int:
        """被拒绝时建议的重试间隔，固定为窗口长度"""
        return int(self.window_s)

    def _get_lock(self, client_id: str) -> asyncio.Lock:
        # 创建与插入之间没有 await，单事件循环内不会重复创建
        lock = self._locks.get(client_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[client_id] = lock
        return lock

    def _prune(self, timestamps: deque[float], now: float) -> None:
        cutoff = now - self.window_s
        while timestamps and timestamps[0] <= cutoff:
            timestamps.popleft()

    async def admit(self, client_id: str, now: float | None = None) -> bool:
        """判断客户端能否再发起一次强制生成

        通过时记录本次时间戳；拒绝时不修改状态。从不抛出异常。
        """
        async with self._get_lock(client_id):
            current = self._clock() if now is None else now
            timestamps = self._windows.setdefault(client_id, deque())
            self._prune(timestamps, current)

            if len(timestamps) >= self.max_requests:
                log.info(
                    "rate_limit_rejected",
                    client_id=client_id,
                    count=len(timestamps),
                    max_requests=self.max_requests,
                )
                return False

            timestamps.append(current)
            return True

    def sweep(self, now: float | None = None) -> int:
        """移除窗口内已无记录的客户端，返回移除数量

        正在被 admit 持有锁的客户端本轮跳过。
        """
        current = self._clock() if now is None else now
        removed = 0
        for client_id in list(self._windows):
            lock = self._locks.get(client_id)
            if lock is not None and lock.locked():
                continue
            timestamps = self._windows[client_id]
            self._prune(timestamps, current)
            if not timestamps:
                del self._windows[client_id]
                self._locks.pop(client_id, None)
                removed += 1
        if removed:
            log.debug("rate_limit_swept", removed=removed, tracked=len(self._windows))
        return removed

    @property
    def tracked_clients(self) -> int:
        return len(self._windows)

    async def _sweep_loop(self) -> None:
        while True:
            await asyncio.sleep(self.sweep_interval_s)
            self.sweep()

    def start(self) -> None:
        """启动后台清扫任务（重复调用无副作用）"""
        if self._sweep_task is None or self._sweep_task.done():
            self._sweep_task = asyncio.create_task(self._sweep_loop())
            log.info(
                "rate_limiter_started",
                window_s=self.window_s,
                max_requests=self.max_requests,
                sweep_interval_s=self.sweep_interval_s,
            )

    async def stop(self) -> None:
        """停止后台清扫任务"""
        if self._sweep_task is None:
            return
        self._sweep_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._sweep_task
        self._sweep_task = None
        log.info("rate_limiter_stopped")

    @property
    def running(self) -> bool:
        return self._sweep_task is not None and not self._sweep_task.done()
