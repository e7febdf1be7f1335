"""S3 Control resource identifiers.

Every kind is keyed by account ID plus a name, joined with ":". Access points
on Outposts keep their full ARN as the identifier.
"""

from __future__ import annotations

from ...sweep.errors import ResourceIdentifierError
from ...sweep.ids import create_resource_id, parse_arn, parse_resource_id

ACCESS_POINT_RESOURCE_PREFIX = "accesspoint/"


def access_point_create_resource_id(access_point_arn: str) -> str:
    """Encode an access point ID from its ARN.

    Args:
        access_point_arn: Access point ARN

    Returns:
        "<account>:<name>" for S3 access points, the ARN itself on Outposts

    Raises:
        ResourceIdentifierError: If the ARN is malformed or not an access point
    """
    arn = parse_arn(access_point_arn)
    service = arn["service"]

    if service == "s3":
        resource = arn["resource"]
        if not resource.startswith(ACCESS_POINT_RESOURCE_PREFIX):
            raise ResourceIdentifierError(f"unexpected resource: {resource}")
        return create_resource_id([arn["account"], resource[len(ACCESS_POINT_RESOURCE_PREFIX) :]])

    if service == "s3-outposts":
        return access_point_arn

    raise ResourceIdentifierError(f"unexpected service: {service}")


def access_point_parse_resource_id(resource_id: str) -> tuple[str, str]:
    """Decode an access point ID.

    Args:
        resource_id: "<account>:<name>" or an Outposts access point ARN

    Returns:
        Tuple of (account_id, name); name is the ARN for Outposts access points

    Raises:
        ResourceIdentifierError: If the ID has neither form
    """
    if resource_id.startswith("arn:"):
        arn = parse_arn(resource_id)
        return arn["account"], resource_id

    account_id, name = parse_resource_id(resource_id, 2)
    return account_id, name


def multi_region_access_point_create_resource_id(account_id: str, name: str) -> str:
    return create_resource_id([account_id, name])


def multi_region_access_point_parse_resource_id(resource_id: str) -> tuple[str, str]:
    account_id, name = parse_resource_id(resource_id, 2)
    return account_id, name


def object_lambda_access_point_create_resource_id(account_id: str, name: str) -> str:
    return create_resource_id([account_id, name])


def object_lambda_access_point_parse_resource_id(resource_id: str) -> tuple[str, str]:
    account_id, name = parse_resource_id(resource_id, 2)
    return account_id, name


def storage_lens_configuration_create_resource_id(account_id: str, config_id: str) -> str:
    return create_resource_id([account_id, config_id])


def storage_lens_configuration_parse_resource_id(resource_id: str) -> tuple[str, str]:
    account_id, config_id = parse_resource_id(resource_id, 2)
    return account_id, config_id
