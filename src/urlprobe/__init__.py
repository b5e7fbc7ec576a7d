__all__ = [
    "ProbeRunner",
    "fetch_url",
    "load_config",
    "JobSpec",
    "ProbeConfig",
    "Result",
    "ConfigError",
    "FetchError",
    "AttemptError",
]


from .core import ProbeRunner
from .fetcher import fetch_url
from .config import load_config
from .models import JobSpec, ProbeConfig, Result
from .errors import ConfigError, FetchError, AttemptError
