import asyncio
import logging

from .errors import AttemptError, FetchError
from .fetcher import fetch_url
from .models import FetchFunc, JobSpec, ProbeConfig, Result, ResultCallback
from .utils import printable

logger = logging.getLogger(__name__)

# Closes the result queue once every worker has been joined.
_CLOSED = object()


class ProbeRunner:
    def __init__(
        self,
        config: ProbeConfig,
        fetch: FetchFunc = fetch_url,
        on_result: ResultCallback | None = None,
    ) -> None:
        self.config = config
        self.fetch = fetch
        self.on_result = on_result
        self.handled = 0

        logger.info(
            f"Initialized runner with {len(config.jobs)} jobs, wait={config.wait}s"
        )

    # ────────────────────────────────
    # Worker
    # ────────────────────────────────

    async def _worker(
        self, worker_id: int, job: JobSpec, results: asyncio.Queue
    ) -> None:
        logger.info(f"[W{worker_id}] {job.count} - {job.url}")

        n = 0
        while n <= job.count:
            try:
                status_line = await self.fetch(job.url, job.method, job.host)
            except FetchError as e:
                # Failures are not paced: the next attempt starts right away.
                await results.put(
                    Result(worker_id, n, error=AttemptError(n, e))
                )
                n += 1
                continue

            await results.put(Result(worker_id, n, message=f"{n} - {status_line}"))
            await asyncio.sleep(self.config.wait)
            n += 1

        logger.debug(f"[W{worker_id}] finished after {n} attempts")

    # ────────────────────────────────
    # Aggregator
    # ────────────────────────────────

    async def _aggregate(self, results: asyncio.Queue) -> None:
        while True:
            res = await results.get()
            if res is _CLOSED:
                return
            logger.info(printable(str(res)))
            self.handled += 1
            if self.on_result:
                self.on_result(res)

    # ────────────────────────────────
    # Main Runner
    # ────────────────────────────────

    async def run(self) -> int:
        if not self.config.jobs:
            logger.warning("No jobs configured.")
            return 0

        results: asyncio.Queue = asyncio.Queue()
        aggregator = asyncio.create_task(self._aggregate(results))

        workers = [
            asyncio.create_task(self._worker(i, job, results))
            for i, job in enumerate(self.config.jobs)
        ]
        try:
            await asyncio.gather(*workers)
        finally:
            # Unfinished workers here mean another one died on an unexpected error.
            for w in workers:
                if not w.done():
                    w.cancel()
            await asyncio.gather(*workers, return_exceptions=True)
            await results.put(_CLOSED)
            await aggregator

        logger.info(f"Run completed: {self.handled} results from {len(workers)} jobs")
        return self.handled
