from dataclasses import dataclass, field
from typing import Optional
from collections.abc import Awaitable, Callable


@dataclass(frozen=True)
class JobSpec:
    url: str
    count: int
    method: str = "GET"
    host: str = ""


@dataclass(frozen=True)
class ProbeConfig:
    jobs: tuple[JobSpec, ...] = field(default_factory=tuple)
    wait: float = 0.0  # seconds, shared by every job


@dataclass
class Result:
    job_index: int
    attempt: int
    message: Optional[str] = None
    error: Optional[Exception] = None

    def __post_init__(self):
        if (self.message is None) == (self.error is None):
            raise ValueError("Result needs exactly one of message or error")

    @property
    def ok(self) -> bool:
        return self.error is None

    def __str__(self) -> str:
        return self.message if self.error is None else str(self.error)


# fetch(url, method, host) -> "<status> - <body>"
FetchFunc = Callable[[str, str, str], Awaitable[str]]

# Result callback: called once per result by the aggregator
ResultCallback = Callable[[Result], None]
