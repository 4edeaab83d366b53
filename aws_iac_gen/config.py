"""Runtime configuration for the IaC generator CLI."""
from __future__ import annotations

import argparse
import os
import time
from dataclasses import dataclass
from typing import Mapping, Optional

from .errors import UsageError


DEFAULT_REGION = "ap-northeast-1"
REGION_ENV_VARS = ("AWS_REGION", "AWS_DEFAULT_REGION")

TEMPLATE_RESOURCE_LIMIT = 500  # CloudFormation IaC generator ceiling per template
DEFAULT_POLL_INTERVAL = 10.0
DEFAULT_RESOURCES_FILE = "resources.json"
DEFAULT_TEMPLATE_FILE = "template.json"
TEMPLATE_NAME_PREFIX = "iacgen"


def resolve_region(
    explicit: Optional[str] = None, environ: Optional[Mapping[str, str]] = None
) -> str:
    """Return the region from ``explicit``, the environment, or the default."""

    if explicit:
        return explicit
    environ = os.environ if environ is None else environ
    for name in REGION_ENV_VARS:
        value = environ.get(name)
        if value:
            return value
    return DEFAULT_REGION


def generate_template_name(now: Optional[float] = None) -> str:
    """Return a generated template name unique to the current millisecond."""

    timestamp = time.time() if now is None else now
    return f"{TEMPLATE_NAME_PREFIX}-{int(timestamp * 1000)}"


@dataclass(frozen=True)
class Settings:
    """Options shared by every sub-command."""

    region: str
    profile: Optional[str] = None
    poll_interval: float = DEFAULT_POLL_INTERVAL

    @classmethod
    def from_args(
        cls, args: argparse.Namespace, environ: Optional[Mapping[str, str]] = None
    ) -> "Settings":
        poll_interval = getattr(args, "poll_interval", DEFAULT_POLL_INTERVAL)
        if poll_interval <= 0:
            raise UsageError("--poll-interval must be a positive number of seconds")
        return cls(
            region=resolve_region(getattr(args, "region", None), environ),
            profile=getattr(args, "profile", None),
            poll_interval=poll_interval,
        )


__all__ = [
    "DEFAULT_POLL_INTERVAL",
    "DEFAULT_REGION",
    "DEFAULT_RESOURCES_FILE",
    "DEFAULT_TEMPLATE_FILE",
    "REGION_ENV_VARS",
    "Settings",
    "TEMPLATE_NAME_PREFIX",
    "TEMPLATE_RESOURCE_LIMIT",
    "generate_template_name",
    "resolve_region",
]
