"""Deployment environments and selection of the active one."""

from __future__ import annotations

import os
from dataclasses import dataclass

ENV_VARIABLE = "VC_ENV"


@dataclass(frozen=True)
class Environment:
    """A named deployment target with its API and web endpoints."""

    name: str
    values: tuple[str, ...]
    api: str
    web: str


ENVIRONMENTS: tuple[Environment, ...] = (
    Environment(
        name="production",
        values=("production", "prod"),
        api="https://api.vulncheck.com",
        web="https://vulncheck.com",
    ),
    Environment(
        name="development",
        values=("development", "dev", "local"),
        api="http://localhost:8000",
        web="http://localhost:3000",
    ),
)

_current: Environment = ENVIRONMENTS[0]


def init_environment() -> Environment:
    """Select the environment named by ``VC_ENV``.

    An unknown or missing value leaves the current selection unchanged.
    """
    global _current
    wanted = os.environ.get(ENV_VARIABLE, "")
    for env in ENVIRONMENTS:
        if wanted in env.values:
            _current = env
            break
    return _current


def current_environment() -> Environment:
    """Return the active environment."""
    return _current