import asyncio
import logging
from collections import defaultdict
from time import perf_counter as now

import pytest

from urlprobe.core import ProbeRunner
from urlprobe.errors import AttemptError, FetchError
from urlprobe.fetcher import fetch_url
from urlprobe.models import JobSpec, ProbeConfig, Result


def collect(config, fetch):
    results = []
    return ProbeRunner(config, fetch=fetch, on_result=results.append), results


async def always_ok(url, method, host):
    return "200 - fine"


async def always_down(url, method, host):
    raise FetchError("connection refused")


@pytest.mark.asyncio
async def test_count_plus_one_results_per_job():
    config = ProbeConfig(jobs=(JobSpec("http://a/", 0), JobSpec("http://b/", 2)))
    runner, results = collect(config, always_ok)

    assert await runner.run() == 4
    per_job = defaultdict(list)
    for r in results:
        per_job[r.job_index].append(r.attempt)
    assert per_job == {0: [0], 1: [0, 1, 2]}


@pytest.mark.asyncio
async def test_failures_still_count_and_are_wrapped():
    config = ProbeConfig(jobs=(JobSpec("http://down/", 3),), wait=0)
    runner, results = collect(config, always_down)

    await runner.run()
    assert len(results) == 4
    assert all(not r.ok for r in results)
    assert all(isinstance(r.error, AttemptError) for r in results)
    assert [str(r) for r in results] == [
        f"{n} - connection refused - error fetching url" for n in range(4)
    ]


@pytest.mark.asyncio
async def test_success_message_format():
    runner, results = collect(ProbeConfig(jobs=(JobSpec("http://a/", 1),)), always_ok)
    await runner.run()
    assert [r.message for r in results] == ["0 - 200 - fine", "1 - 200 - fine"]


@pytest.mark.asyncio
async def test_job_fields_are_passed_to_fetch():
    calls = []

    async def fetch(url, method, host):
        calls.append((url, method, host))
        return "200 - "

    job = JobSpec("http://a/", 1, method="HEAD", host="vhost")
    await ProbeRunner(ProbeConfig(jobs=(job,)), fetch=fetch).run()
    assert calls == [("http://a/", "HEAD", "vhost")] * 2


@pytest.mark.asyncio
async def test_successes_wait_between_attempts():
    started = []

    async def fetch(url, method, host):
        started.append(now())
        return "200 - "

    wait = 0.05
    await ProbeRunner(ProbeConfig(jobs=(JobSpec("http://a/", 2),), wait=wait), fetch=fetch).run()

    gaps = [b - a for a, b in zip(started, started[1:])]
    assert len(gaps) == 2
    assert all(g >= wait * 0.9 for g in gaps)


@pytest.mark.asyncio
async def test_failures_skip_the_wait():
    # Errors retry immediately even with a long configured wait.
    config = ProbeConfig(jobs=(JobSpec("http://down/", 3),), wait=5.0)
    runner, results = collect(config, always_down)

    start = now()
    await runner.run()
    assert now() - start < 1.0
    assert len(results) == 4


@pytest.mark.asyncio
async def test_mixed_outcomes_keep_attempt_order():
    outcomes = iter([True, False, True, False])

    async def fetch(url, method, host):
        if next(outcomes):
            return "200 - up"
        raise FetchError("flaky")

    runner, results = collect(ProbeConfig(jobs=(JobSpec("http://a/", 3),)), fetch)
    await runner.run()
    assert [r.attempt for r in results] == [0, 1, 2, 3]
    assert [r.ok for r in results] == [True, False, True, False]


@pytest.mark.asyncio
async def test_jobs_run_concurrently():
    async def slow(url, method, host):
        await asyncio.sleep(0.2)
        return "200 - "

    jobs = tuple(JobSpec(f"http://h{i}/", 0) for i in range(5))
    start = now()
    assert await ProbeRunner(ProbeConfig(jobs=jobs), fetch=slow).run() == 5
    assert now() - start < 0.8


@pytest.mark.asyncio
async def test_unparseable_url_errors_every_attempt():
    results = []
    config = ProbeConfig(jobs=(JobSpec("::not a url::", 2),), wait=5.0)
    await ProbeRunner(config, on_result=results.append).run()
    assert len(results) == 3
    assert all(isinstance(r.error.__cause__, FetchError) for r in results)


@pytest.mark.asyncio
async def test_against_live_server(server):
    jobs = (
        JobSpec(str(server.make_url("/ok")), 1),
        JobSpec(str(server.make_url("/missing")), 0),
    )
    results = []
    await ProbeRunner(ProbeConfig(jobs=jobs), on_result=results.append).run()

    by_job = defaultdict(list)
    for r in results:
        by_job[r.job_index].append(r.message)
    assert by_job[0] == ["0 - 200 - hello world", "1 - 200 - hello world"]
    assert by_job[1] == ["0 - 404 - "]


@pytest.mark.asyncio
async def test_bad_host_override_is_a_result(server):
    config = ProbeConfig(jobs=(JobSpec(str(server.make_url("/ok")), 0, host="bad\r\nhost"),))
    results = []

    assert await ProbeRunner(config, fetch=fetch_url, on_result=results.append).run() == 1
    assert not results[0].ok
    assert "invalid Host header" in str(results[0])


@pytest.mark.asyncio
async def test_undecodable_body_is_logged_escaped(server, caplog):
    results = []
    config = ProbeConfig(jobs=(JobSpec(str(server.make_url("/binary")), 0),))
    with caplog.at_level(logging.INFO, logger="urlprobe.core"):
        await ProbeRunner(config, on_result=results.append).run()

    assert results[0].message.encode("utf-8", errors="surrogateescape") == b"0 - 200 - \xff\xfeab"
    assert "0 - 200 - \\xff\\xfeab" in caplog.text


@pytest.mark.asyncio
async def test_unexpected_error_stops_remaining_workers():
    cancelled = []

    async def fetch(url, method, host):
        if url == "http://broken/":
            raise RuntimeError("bug")
        try:
            await asyncio.sleep(10)
        except asyncio.CancelledError:
            cancelled.append(url)
            raise
        return "200 - "

    jobs = (JobSpec("http://slow/", 0), JobSpec("http://broken/", 0))
    with pytest.raises(RuntimeError, match="bug"):
        await ProbeRunner(ProbeConfig(jobs=jobs), fetch=fetch).run()
    assert cancelled == ["http://slow/"]
    pending = [t for t in asyncio.all_tasks() if t is not asyncio.current_task()]
    assert pending == []


@pytest.mark.asyncio
async def test_no_jobs():
    assert await ProbeRunner(ProbeConfig()).run() == 0


def test_result_needs_exactly_one_outcome():
    with pytest.raises(ValueError):
        Result(0, 0)
    with pytest.raises(ValueError):
        Result(0, 0, message="x", error=FetchError("y"))
    assert str(Result(0, 0, message="0 - 200 - ")) == "0 - 200 - "
