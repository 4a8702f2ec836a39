import asyncio
import logging
from collections.abc import Awaitable
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any
from typing import Self

from userservice.domain.exceptions import ExecutorShutdownError
from userservice.domain.exceptions import TaskRejectedError
from userservice.domain.ports.executor import TaskExecutorPort

logger = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class Job:
    fn: Callable[..., Awaitable[Any]]
    args: tuple[Any, ...]
    kwargs: dict[str, Any]
    future: asyncio.Future[Any]


class AsyncWorkerPool(TaskExecutorPort):
    """A bounded pool of asyncio workers, implementing the `TaskExecutorPort`.

    A submitted job is handled as follows:
      1. while there are fewer than `core_workers` workers, a new worker is
         started to run it;
      2. otherwise it waits in a queue of `queue_capacity` slots;
      3. if the queue is full, an extra worker is started to run it, as long as
         there are fewer than `max_workers` workers;
      4. otherwise it is rejected with `TaskRejectedError`.

    Extra workers stop after `keep_alive` seconds without any job, core workers
    live until the shutdown.
    """

    def __init__(
        self,
        core_workers: int = 20,
        max_workers: int = 1000,
        queue_capacity: int = 500,
        worker_name_prefix: str = "UserService-Async-",
        keep_alive: float = 60.0,
    ) -> None:
        if core_workers < 1:
            raise ValueError("core_workers must be at least 1")
        if max_workers < core_workers:
            raise ValueError("max_workers cannot be lower than core_workers")
        if queue_capacity < 1:
            raise ValueError("queue_capacity must be at least 1")

        self.core_workers = core_workers
        self.max_workers = max_workers
        self.queue_capacity = queue_capacity
        self.worker_name_prefix = worker_name_prefix
        self.keep_alive = keep_alive

        self._queue: asyncio.Queue[Job | None] = asyncio.Queue(maxsize=queue_capacity)
        self._workers: set[asyncio.Task[None]] = set()
        self._started = 0
        self._shutdown = False

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.shutdown(wait=True)

    @property
    def pool_size(self) -> int:
        return len(self._workers)

    @property
    def queue_size(self) -> int:
        return self._queue.qsize()

    @property
    def worker_names(self) -> list[str]:
        return sorted(worker.get_name() for worker in self._workers)

    def submit[T](self, fn: Callable[..., Awaitable[T]], /, *args: Any, **kwargs: Any) -> asyncio.Future[T]:
        if self._shutdown:
            raise ExecutorShutdownError("The worker pool is shut down")

        job = Job(fn=fn, args=args, kwargs=kwargs, future=asyncio.get_running_loop().create_future())

        if len(self._workers) < self.core_workers:
            self._start_worker(job)
            return job.future

        try:
            self._queue.put_nowait(job)
        except asyncio.QueueFull:
            if len(self._workers) >= self.max_workers:
                logger.warning(
                    f"Job {getattr(fn, '__qualname__', fn)} rejected: "
                    f"{len(self._workers)} workers busy and {self.queue_capacity} jobs queued"
                )
                raise TaskRejectedError(
                    f"Worker pool saturated ({self.max_workers} workers, {self.queue_capacity} queued jobs)"
                ) from None

            self._start_worker(job)

        return job.future

    async def shutdown(self, wait: bool = True) -> None:
        if self._shutdown:
            return
        self._shutdown = True

        workers = list(self._workers)

        if wait:
            # Queued jobs go first, then one stop signal per worker.
            for _ in workers:
                await self._queue.put(None)
        else:
            while not self._queue.empty():
                job = self._queue.get_nowait()
                if job is not None:
                    job.future.cancel()
            for worker in workers:
                worker.cancel()

        await asyncio.gather(*workers, return_exceptions=True)
        logger.debug(f"Worker pool shut down ({len(workers)} workers stopped)")

    def _start_worker(self, job: Job) -> None:
        self._started += 1
        name = f"{self.worker_name_prefix}{self._started}"

        worker = asyncio.create_task(self._work(job), name=name)
        self._workers.add(worker)
        worker.add_done_callback(self._workers.discard)

        logger.debug(f"Worker {name} started ({len(self._workers)}/{self.max_workers})")

    async def _work(self, job: Job | None) -> None:
        while job is not None:
            await self._run(job)
            job = await self._next_job()

    async def _next_job(self) -> Job | None:
        while True:
            if len(self._workers) <= self.core_workers:
                return await self._queue.get()

            try:
                async with asyncio.timeout(self.keep_alive):
                    return await self._queue.get()
            except TimeoutError:
                if len(self._workers) > self.core_workers:
                    self._workers.discard(asyncio.current_task())  # type: ignore[arg-type]
                    return None

    async def _run(self, job: Job) -> None:
        if job.future.cancelled():
            return

        try:
            result = await job.fn(*job.args, **job.kwargs)
        except asyncio.CancelledError:
            job.future.cancel()
            # Only the shutdown stops the worker, not a job cancelling itself.
            if asyncio.current_task().cancelling():  # type: ignore[union-attr]
                raise
        except Exception as e:
            if not job.future.cancelled():
                job.future.set_exception(e)
        else:
            if not job.future.cancelled():
                job.future.set_result(result)
