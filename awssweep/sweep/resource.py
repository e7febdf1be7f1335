"""Sweepable construction.

Binds a kind-specific delete call to one discovered resource. Building a
sweepable never touches the network; the delete call runs later, from the
orchestrator.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable

from botocore.exceptions import ClientError

from ..models.sweepable import Sweepable
from .errors import error_code

logger = logging.getLogger(__name__)

# Error codes meaning the resource is already gone
NOT_FOUND_ERROR_CODES = frozenset(
    [
        "NotFound",
        "NotFoundException",
        "NoSuchEntity",
        "ResourceNotFoundException",
    ]
)


def new_sweep_resource(
    kind: str,
    resource_id: str,
    region: str,
    delete_fn: Callable[[str], None],
    not_found_codes: Iterable[str] = (),
) -> Sweepable:
    """Create a sweepable for one discovered resource.

    The returned delete callable treats "not found" responses as success, so a
    resource removed by an earlier, partially completed run does not count
    as a failure.

    Args:
        kind: Resource kind name
        resource_id: Encoded resource identifier
        region: AWS region
        delete_fn: Kind-specific delete call, given the encoded identifier
        not_found_codes: Extra error codes meaning "already deleted"

    Returns:
        Sweepable bound to this resource

    Raises:
        ValueError: If kind or resource_id is empty
    """
    gone_codes = NOT_FOUND_ERROR_CODES | frozenset(not_found_codes)

    def delete() -> None:
        try:
            delete_fn(resource_id)
        except ClientError as e:
            if error_code(e) in gone_codes:
                logger.info(f"{kind} {resource_id} already deleted")
                return
            raise

        logger.info(f"Deleted {kind}: {resource_id}")

    sweepable = Sweepable(kind=kind, id=resource_id, region=region, delete=delete)
    sweepable.validate()
    return sweepable
