"""AWS client construction.

Creates boto3 sessions and caches one authenticated sweep client per region.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Optional

import boto3
from botocore.config import Config as BotoConfig

logger = logging.getLogger(__name__)

# Standard retry handling for every client; the orchestrator adds its own
# throttling backoff on top for deletions.
BOTO_CONFIG = BotoConfig(retries={"max_attempts": 10, "mode": "adaptive"})


def create_boto_session(profile_name: Optional[str] = None, region_name: Optional[str] = None) -> boto3.Session:
    """Create a boto3 session.

    Args:
        profile_name: AWS profile name (optional)
        region_name: Default region for the session (optional)

    Returns:
        boto3 Session
    """
    return boto3.Session(profile_name=profile_name, region_name=region_name)


class SweepClient:
    """Authenticated client context for one region.

    Attributes:
        region: AWS region
        account_id: AWS account ID the credentials belong to
        session: boto3 session used for every service client
    """

    def __init__(self, region: str, account_id: str, session: boto3.Session) -> None:
        self.region = region
        self.account_id = account_id
        self.session = session
        self._clients: dict[str, Any] = {}
        self._lock = threading.Lock()

    def client(self, service_name: str) -> Any:
        """Get (and cache) the boto3 client for a service in this region."""
        with self._lock:
            if service_name not in self._clients:
                self._clients[service_name] = self.session.client(
                    service_name,
                    region_name=self.region,
                    config=BOTO_CONFIG,
                )
            return self._clients[service_name]


class SharedClientProvider:
    """Per-region cache of SweepClient objects.

    The account ID is resolved once through STS unless supplied up front.
    Safe to share between threads.

    Attributes:
        profile_name: AWS profile name (optional)
    """

    def __init__(self, profile_name: Optional[str] = None, account_id: Optional[str] = None) -> None:
        self.profile_name = profile_name
        self._account_id = account_id
        self._clients: dict[str, SweepClient] = {}
        self._lock = threading.Lock()

    def get(self, region: str) -> SweepClient:
        """Get the shared client for a region.

        Args:
            region: AWS region

        Returns:
            SweepClient for the region

        Raises:
            botocore.exceptions.BotoCoreError, ClientError: If credentials cannot be resolved
        """
        with self._lock:
            if region not in self._clients:
                session = create_boto_session(profile_name=self.profile_name, region_name=region)
                account_id = self._resolve_account_id(session, region)
                self._clients[region] = SweepClient(region=region, account_id=account_id, session=session)
                logger.debug(f"Created sweep client for {region} (account {account_id})")
            return self._clients[region]

    def _resolve_account_id(self, session: boto3.Session, region: str) -> str:
        if self._account_id is None:
            sts = session.client("sts", region_name=region, config=BOTO_CONFIG)
            self._account_id = sts.get_caller_identity()["Account"]
        return self._account_id
