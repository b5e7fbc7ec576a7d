"""
Load the probe configuration from urls.yaml (or urls.yml) and the environment.

    wait: 1s
    job:
      - url: https://example.com/health
        count: 5
        method: GET
        host: internal.example.com
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigError
from .models import JobSpec, ProbeConfig
from .utils import parse_duration

logger = logging.getLogger(__name__)

CONFIG_NAMES = ("urls.yaml", "urls.yml")

ENV_CONFIG = "URLPROBE_CONFIG"
ENV_WAIT = "URLPROBE_WAIT"


def find_config_file(directory: str | Path = ".") -> Path:
    for name in CONFIG_NAMES:
        candidate = Path(directory) / name
        if candidate.is_file():
            return candidate
    raise ConfigError(
        f"No config file found in {Path(directory).resolve()} "
        f"(looked for {', '.join(CONFIG_NAMES)})"
    )


def _parse_wait(value: Any) -> float:
    if value is None:
        return 0.0
    if isinstance(value, bool):
        raise ConfigError(f"Invalid wait value: {value!r}")
    if isinstance(value, (int, float)):
        wait = float(value)
    elif isinstance(value, str):
        try:
            wait = parse_duration(value)
        except ValueError as e:
            raise ConfigError(f"Invalid wait value: {e}") from e
    else:
        raise ConfigError(f"Invalid wait value: {value!r}")
    if wait < 0:
        raise ConfigError(f"wait must not be negative, got {value!r}")
    return wait


def _parse_job(index: int, raw: Any) -> JobSpec:
    if not isinstance(raw, dict):
        raise ConfigError(f"job[{index}] must be a mapping, got {type(raw).__name__}")

    url = raw.get("url")
    if not isinstance(url, str) or not url:
        raise ConfigError(f"job[{index}].url must be a non-empty string")

    count = raw.get("count")
    if isinstance(count, bool) or not isinstance(count, int) or count < 0:
        raise ConfigError(f"job[{index}].count must be a non-negative integer")

    method = raw.get("method") or "GET"
    host = raw.get("host") or ""
    if not isinstance(method, str) or not isinstance(host, str):
        raise ConfigError(f"job[{index}].method and job[{index}].host must be strings")

    return JobSpec(url=url, count=count, method=method, host=host)


def parse_config(data: Any) -> ProbeConfig:
    """Build a ProbeConfig from an already-decoded document."""
    if not isinstance(data, dict):
        raise ConfigError("Config document must be a mapping")

    # No jobs is a valid, empty run.
    jobs = data.get("job") or []
    if not isinstance(jobs, list):
        raise ConfigError("Config 'job' must be a list")

    return ProbeConfig(
        jobs=tuple(_parse_job(i, raw) for i, raw in enumerate(jobs)),
        wait=_parse_wait(data.get("wait")),
    )


def load_config(path: str | Path | None = None) -> ProbeConfig:
    """
    Read and validate the configuration.

    Lookup order for the file: explicit `path`, then $URLPROBE_CONFIG, then
    urls.yaml / urls.yml in the working directory. $URLPROBE_WAIT, when set,
    overrides the file's `wait`.
    """
    if path is None:
        path = os.getenv(ENV_CONFIG) or find_config_file()
    path = Path(path)

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"Configuration file not found: {path}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read configuration file {path}: {e}") from e
    except UnicodeDecodeError as e:
        raise ConfigError(f"Configuration file {path} is not valid UTF-8: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in configuration file {path}: {e}") from e

    env_wait = os.getenv(ENV_WAIT)
    if env_wait is not None and isinstance(data, dict):
        logger.debug(f"Overriding wait from ${ENV_WAIT}={env_wait}")
        data["wait"] = env_wait

    config = parse_config(data)
    logger.debug(f"Loaded {len(config.jobs)} jobs from {path}")
    return config
