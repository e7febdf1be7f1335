"""Resource identifier encoding.

Joins a composite natural key (e.g. account ID + name) into a single opaque
identifier string and splits it back.
"""

from __future__ import annotations

from typing import Sequence

from botocore.utils import ArnParser, InvalidArnException

from .errors import ResourceIdentifierError

RESOURCE_ID_SEPARATOR = ":"

_arn_parser = ArnParser()


def create_resource_id(parts: Sequence[str], separator: str = RESOURCE_ID_SEPARATOR) -> str:
    """Encode natural key parts into one identifier.

    Args:
        parts: Key components, in order
        separator: Delimiter placed between components

    Returns:
        Encoded identifier string

    Raises:
        ResourceIdentifierError: If a part is empty or contains the separator
    """
    if not parts:
        raise ResourceIdentifierError("resource ID requires at least one part")

    for part in parts:
        if not part:
            raise ResourceIdentifierError(f"empty part in resource ID parts {list(parts)}")
        if separator in part:
            raise ResourceIdentifierError(f"resource ID part ({part}) contains separator '{separator}'")

    return separator.join(parts)


def parse_resource_id(
    resource_id: str,
    part_count: int,
    separator: str = RESOURCE_ID_SEPARATOR,
) -> tuple[str, ...]:
    """Decode an identifier back into its natural key parts.

    Args:
        resource_id: Encoded identifier
        part_count: Expected number of parts
        separator: Delimiter used when encoding

    Returns:
        Tuple of key parts

    Raises:
        ResourceIdentifierError: If the identifier does not have the expected shape
    """
    parts = resource_id.split(separator)

    if len(parts) != part_count or not all(parts):
        expected = separator.join(f"part{i + 1}" for i in range(part_count))
        raise ResourceIdentifierError(f"unexpected format for ID ({resource_id}), expected {expected}")

    return tuple(parts)


def parse_arn(arn: str) -> dict[str, str]:
    """Parse an ARN into its components.

    Args:
        arn: Amazon Resource Name

    Returns:
        Dict with partition, service, region, account and resource keys

    Raises:
        ResourceIdentifierError: If the ARN is malformed
    """
    try:
        return _arn_parser.parse_arn(arn)
    except InvalidArnException as e:
        raise ResourceIdentifierError(f"parsing ARN ({arn}): {e}") from e
