"""
Sweep configuration and AWS session construction.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ProfileNotFound

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_KEEP = 2
DEFAULT_CONCURRENCY = 5
RETRY_MAX_ATTEMPTS = 8


class ErrorPolicy(Enum):
    """What the sweep does when listing versions or deleting fails."""
    FAIL_FAST = "fail-fast"          # abort the whole sweep
    SKIP_FUNCTION = "skip-function"  # give up on that function only


@dataclass(frozen=True)
class SweepConfig:
    """Immutable options for a single sweep invocation."""
    prefix: str
    group: Optional[str] = None     # CloudFormation stack name or ID
    keep: int = DEFAULT_KEEP
    concurrency: int = DEFAULT_CONCURRENCY
    dry_run: bool = False
    region: Optional[str] = None
    profile: Optional[str] = None   # named AWS profile
    policy: ErrorPolicy = ErrorPolicy.FAIL_FAST

    def validate(self) -> "SweepConfig":
        """
        Check option ranges.

        Returns:
            The same config, for chaining

        Raises:
            ConfigurationError: If keep is negative or concurrency below one
        """
        if self.keep < 0:
            raise ConfigurationError(f"keep must be >= 0, got {self.keep}")
        if self.concurrency < 1:
            raise ConfigurationError(f"concurrency must be >= 1, got {self.concurrency}")
        return self


def client_config() -> Config:
    """botocore client config shared by every client of a sweep."""
    return Config(retries={"max_attempts": RETRY_MAX_ATTEMPTS, "mode": "adaptive"})


def create_session(region: Optional[str] = None, profile: Optional[str] = None) -> boto3.session.Session:
    """
    Build a boto3 session from the default credential chain.

    Args:
        region: Region override; falls back to the local AWS configuration
        profile: Optional named profile

    Returns:
        A session with a resolved region and credentials

    Raises:
        ConfigurationError: If no region or no credentials can be resolved
    """
    try:
        session = boto3.session.Session(region_name=region or None, profile_name=profile)
        credentials = session.get_credentials()
    except (ProfileNotFound, BotoCoreError) as e:
        raise ConfigurationError(f"failed to load configuration: {e}") from e

    if not session.region_name:
        raise ConfigurationError("failed to load configuration: no AWS region configured")
    if credentials is None:
        raise ConfigurationError("failed to load configuration: no AWS credentials found")

    logger.debug(f"Using AWS region {session.region_name}")
    return session
