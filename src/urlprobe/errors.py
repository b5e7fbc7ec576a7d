class UrlProbeError(Exception):
    """Base class for every error raised by urlprobe."""


class ConfigError(UrlProbeError):
    """The configuration document is missing or cannot be used."""


class FetchError(UrlProbeError):
    """A single fetch failed, either while parsing the URL or in transport."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason

    def __str__(self) -> str:
        return f"{self.reason} - error fetching url"


class AttemptError(UrlProbeError):
    """A FetchError tagged with the attempt index that produced it."""

    def __init__(self, attempt: int, cause: Exception):
        super().__init__(attempt, cause)
        self.attempt = attempt
        self.__cause__ = cause

    def __str__(self) -> str:
        return f"{self.attempt} - {self.__cause__}"
