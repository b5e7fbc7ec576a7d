"""
Quick sanity run: probe a couple of endpoints without a config file.
Run: uv run examples/probe_endpoints.py
"""
import asyncio
import os

from urlprobe import JobSpec, ProbeConfig, ProbeRunner
from urlprobe.logging_config import setup_logging

JOBS = (
    JobSpec("https://example.com/", count=3),
    JobSpec("https://httpbin.org/status/404", count=2),
    JobSpec("https://self-signed.badssl.com/", count=1, method="HEAD"),
)


async def main():
    setup_logging(level=os.getenv("LOG_LEVEL", "INFO"))
    config = ProbeConfig(jobs=JOBS, wait=float(os.getenv("PROBE_WAIT_S", "0.5")))
    handled = await ProbeRunner(config).run()
    print(f"\nResults: {handled}")


if __name__ == "__main__":
    asyncio.run(main())
