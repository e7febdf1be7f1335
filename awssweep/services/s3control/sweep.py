"""S3 Control sweepers.

Access points, multi-region access points, Object Lambda access points and
Storage Lens configurations left behind by acceptance tests.
"""

from __future__ import annotations

import uuid
from typing import Any, Optional

from ...aws.client import SweepClient
from ...models.sweepable import Sweepable
from ...sweep.discovery import KindSpec, make_sweeper
from ...sweep.paginator import PageCursor, boto_page_cursor
from ...sweep.region import (
    US_GOV_EAST_1_REGION_ID,
    US_GOV_WEST_1_REGION_ID,
    US_WEST_2_REGION_ID,
    always_eligible,
    excluded_regions,
    only_regions,
)
from ...sweep.registry import SweepRegistry
from ...sweep.resource import new_sweep_resource
from .ids import (
    access_point_create_resource_id,
    access_point_parse_resource_id,
    multi_region_access_point_create_resource_id,
    multi_region_access_point_parse_resource_id,
    object_lambda_access_point_create_resource_id,
    object_lambda_access_point_parse_resource_id,
    storage_lens_configuration_create_resource_id,
    storage_lens_configuration_parse_resource_id,
)

SERVICE_NAME = "s3control"

ACCESS_POINT = "aws_s3_access_point"
MULTI_REGION_ACCESS_POINT = "aws_s3control_multi_region_access_point"
OBJECT_LAMBDA_ACCESS_POINT = "aws_s3control_object_lambda_access_point"
STORAGE_LENS_CONFIGURATION = "aws_s3control_storage_lens_configuration"

# Created by AWS for every account, never by tests
DEFAULT_STORAGE_LENS_CONFIGURATION_ID = "default-account-dashboard"


# Access points


def _list_access_points(client: SweepClient) -> PageCursor:
    return boto_page_cursor(
        client.client(SERVICE_NAME),
        "list_access_points",
        "AccessPointList",
        AccountId=client.account_id,
    )


def _build_access_point(client: SweepClient, item: dict[str, Any]) -> Sweepable:
    resource_id = access_point_create_resource_id(item.get("AccessPointArn", ""))
    conn = client.client(SERVICE_NAME)

    def delete(resource_id: str) -> None:
        account_id, name = access_point_parse_resource_id(resource_id)
        conn.delete_access_point(AccountId=account_id, Name=name)

    return new_sweep_resource(ACCESS_POINT, resource_id, client.region, delete, not_found_codes=["NoSuchAccessPoint"])


# Multi-region access points


def _list_multi_region_access_points(client: SweepClient) -> PageCursor:
    return boto_page_cursor(
        client.client(SERVICE_NAME),
        "list_multi_region_access_points",
        "AccessPoints",
        AccountId=client.account_id,
    )


def _build_multi_region_access_point(client: SweepClient, item: dict[str, Any]) -> Sweepable:
    resource_id = multi_region_access_point_create_resource_id(client.account_id, item.get("Name", ""))
    conn = client.client(SERVICE_NAME)

    def delete(resource_id: str) -> None:
        account_id, name = multi_region_access_point_parse_resource_id(resource_id)
        # Deletion is asynchronous; the request token makes retries idempotent
        conn.delete_multi_region_access_point(
            AccountId=account_id,
            ClientToken=str(uuid.uuid4()),
            Details={"Name": name},
        )

    return new_sweep_resource(
        MULTI_REGION_ACCESS_POINT,
        resource_id,
        client.region,
        delete,
        not_found_codes=["NoSuchMultiRegionAccessPoint"],
    )


# Object Lambda access points


def _list_object_lambda_access_points(client: SweepClient) -> PageCursor:
    return boto_page_cursor(
        client.client(SERVICE_NAME),
        "list_access_points_for_object_lambda",
        "ObjectLambdaAccessPointList",
        AccountId=client.account_id,
    )


def _build_object_lambda_access_point(client: SweepClient, item: dict[str, Any]) -> Sweepable:
    resource_id = object_lambda_access_point_create_resource_id(client.account_id, item.get("Name", ""))
    conn = client.client(SERVICE_NAME)

    def delete(resource_id: str) -> None:
        account_id, name = object_lambda_access_point_parse_resource_id(resource_id)
        conn.delete_access_point_for_object_lambda(AccountId=account_id, Name=name)

    return new_sweep_resource(
        OBJECT_LAMBDA_ACCESS_POINT,
        resource_id,
        client.region,
        delete,
        not_found_codes=["NoSuchAccessPoint"],
    )


# Storage Lens configurations


def _list_storage_lens_configurations(client: SweepClient) -> PageCursor:
    return boto_page_cursor(
        client.client(SERVICE_NAME),
        "list_storage_lens_configurations",
        "StorageLensConfigurationList",
        AccountId=client.account_id,
    )


def _build_storage_lens_configuration(client: SweepClient, item: dict[str, Any]) -> Optional[Sweepable]:
    config_id = item.get("Id", "")

    if config_id == DEFAULT_STORAGE_LENS_CONFIGURATION_ID:
        return None

    resource_id = storage_lens_configuration_create_resource_id(client.account_id, config_id)
    conn = client.client(SERVICE_NAME)

    def delete(resource_id: str) -> None:
        account_id, config_id = storage_lens_configuration_parse_resource_id(resource_id)
        conn.delete_storage_lens_configuration(ConfigId=config_id, AccountId=account_id)

    return new_sweep_resource(
        STORAGE_LENS_CONFIGURATION,
        resource_id,
        client.region,
        delete,
        not_found_codes=["NoSuchConfiguration"],
    )


KIND_SPECS = [
    KindSpec(
        name=ACCESS_POINT,
        display_name="S3 Access Points",
        cursor_factory=_list_access_points,
        builder=_build_access_point,
        region_policy=always_eligible(),
        dependencies=(OBJECT_LAMBDA_ACCESS_POINT,),
    ),
    KindSpec(
        name=MULTI_REGION_ACCESS_POINT,
        display_name="S3 Multi-Region Access Points",
        cursor_factory=_list_multi_region_access_points,
        builder=_build_multi_region_access_point,
        region_policy=only_regions(US_WEST_2_REGION_ID),
    ),
    KindSpec(
        name=OBJECT_LAMBDA_ACCESS_POINT,
        display_name="S3 Object Lambda Access Points",
        cursor_factory=_list_object_lambda_access_points,
        builder=_build_object_lambda_access_point,
        region_policy=always_eligible(),
    ),
    KindSpec(
        name=STORAGE_LENS_CONFIGURATION,
        display_name="S3 Storage Lens Configurations",
        cursor_factory=_list_storage_lens_configurations,
        builder=_build_storage_lens_configuration,
        region_policy=excluded_regions(US_GOV_EAST_1_REGION_ID, US_GOV_WEST_1_REGION_ID),
    ),
]


def register_sweepers(registry: SweepRegistry) -> None:
    """Register every S3 Control sweeper."""
    for spec in KIND_SPECS:
        registry.add(spec.name, make_sweeper(spec), dependencies=spec.dependencies)
