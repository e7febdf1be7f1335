"""Tests for per-kind discovery and sweep."""

from __future__ import annotations

from typing import Any, Optional
from unittest.mock import Mock

from botocore.exceptions import EndpointConnectionError

from awssweep.models.sweep_result import SweepResult
from awssweep.models.sweepable import Sweepable
from awssweep.sweep.discovery import KindSpec, make_sweeper, sweep_kind
from awssweep.sweep.errors import ResourceIdentifierError, SweepClientError, SweepListError
from awssweep.sweep.orchestrator import SweepOrchestrator
from awssweep.sweep.paginator import PageCursor
from awssweep.sweep.region import only_regions
from tests.fixtures.sweep import make_client_error, make_context, make_pages, make_provider


def build_thing(client: Any, item: dict) -> Optional[Sweepable]:
    """Builder used by the tests: items without a Name are malformed."""
    if "Name" not in item:
        raise ResourceIdentifierError(f"missing Name in {item}")
    if item.get("Keep"):
        return None
    return Sweepable(kind="aws_test_thing", id=item["Name"], region=client.region, delete=lambda: None)


def make_spec(fetch_page, **kwargs) -> KindSpec:
    return KindSpec(
        name="aws_test_thing",
        display_name="Test Things",
        cursor_factory=lambda client: PageCursor(fetch_page),
        builder=build_thing,
        **kwargs,
    )


def recording_orchestrator() -> Mock:
    orchestrator = Mock(spec=SweepOrchestrator)
    orchestrator.dry_run = False
    orchestrator.run.side_effect = lambda sweepables: SweepResult(
        discovered=len(sweepables), deleted=len(sweepables)
    )
    return orchestrator


class TestSweepKindRegionGating:
    """Test suite for region eligibility."""

    def test_ineligible_region_makes_no_backend_calls(self) -> None:
        """Test an ineligible region is a no-op success."""
        provider = make_provider()
        fetch_page = Mock()
        orchestrator = recording_orchestrator()
        spec = make_spec(fetch_page, region_policy=only_regions("us-west-2"))

        result = sweep_kind(spec, "us-east-1", make_context(provider=provider, orchestrator=orchestrator))

        assert not result
        provider.get.assert_not_called()
        fetch_page.assert_not_called()
        orchestrator.run.assert_not_called()

    def test_eligible_region_is_swept(self) -> None:
        orchestrator = recording_orchestrator()
        spec = make_spec(make_pages([{"Name": "a"}]), region_policy=only_regions("us-west-2"))

        result = sweep_kind(spec, "us-west-2", make_context(orchestrator=orchestrator))

        assert not result
        assert result.deleted == 1


class TestSweepKindListing:
    """Test suite for paginated listing and building."""

    def test_two_pages_with_one_build_error(self) -> None:
        """Test page 1 has 3 items with one malformed, page 2 has 2."""
        orchestrator = recording_orchestrator()
        fetch_page = make_pages(
            [{"Name": "a"}, {"Bad": "x"}, {"Name": "b"}],
            [{"Name": "c"}, {"Name": "d"}],
        )

        result = sweep_kind(make_spec(fetch_page), "us-west-2", make_context(orchestrator=orchestrator))

        swept = orchestrator.run.call_args.args[0]
        assert [s.id for s in swept] == ["a", "b", "c", "d"]
        assert len(result) == 1
        assert isinstance(result.errors[0], ResourceIdentifierError)
        assert result.deleted == 4

    def test_unexpected_builder_error_keeps_earlier_items(self) -> None:
        """Test a builder raising KeyError on page 2 does not drop page 1."""
        orchestrator = recording_orchestrator()
        fetch_page = make_pages(
            [{"Name": "a"}, {"Name": "b"}],
            [{"Arn": "no-name"}, {"Name": "c"}],
        )
        spec = KindSpec(
            name="aws_test_thing",
            display_name="Test Things",
            cursor_factory=lambda client: PageCursor(fetch_page),
            builder=lambda client, item: Sweepable(
                kind="aws_test_thing", id=item["Name"], region=client.region, delete=lambda: None
            ),
        )

        result = sweep_kind(spec, "us-west-2", make_context(orchestrator=orchestrator))

        assert [s.id for s in orchestrator.run.call_args.args[0]] == ["a", "b", "c"]
        assert len(result) == 1
        assert isinstance(result.errors[0], KeyError)
        assert result.deleted == 3

    def test_cursor_factory_error_is_reported(self) -> None:
        """Test a failure building the cursor is a listing error, not an exception."""
        orchestrator = recording_orchestrator()
        spec = KindSpec(
            name="aws_test_thing",
            display_name="Test Things",
            cursor_factory=Mock(side_effect=RuntimeError("unknown service")),
            builder=build_thing,
        )

        result = sweep_kind(spec, "us-west-2", make_context(orchestrator=orchestrator))

        assert len(result) == 1
        err = result.errors[0]
        assert isinstance(err, SweepListError)
        assert str(err) == "listing aws_test_thing (us-west-2): unknown service"
        orchestrator.run.assert_called_once_with([])

    def test_builder_can_leave_items_alone(self) -> None:
        """Test items the builder returns None for are not swept."""
        orchestrator = recording_orchestrator()
        fetch_page = make_pages([{"Name": "a"}, {"Name": "default", "Keep": True}])

        result = sweep_kind(make_spec(fetch_page), "us-west-2", make_context(orchestrator=orchestrator))

        swept = orchestrator.run.call_args.args[0]
        assert [s.id for s in swept] == ["a"]
        assert not result

    def test_empty_listing_calls_orchestrator_with_nothing(self) -> None:
        orchestrator = recording_orchestrator()

        result = sweep_kind(make_spec(make_pages([])), "us-west-2", make_context(orchestrator=orchestrator))

        orchestrator.run.assert_called_once_with([])
        assert not result

    def test_skip_error_is_empty_success(self) -> None:
        """Test an unsupported-operation error yields no failure."""
        orchestrator = recording_orchestrator()
        fetch_page = Mock(side_effect=make_client_error("UnsupportedOperation", "not here"))

        result = sweep_kind(make_spec(fetch_page), "us-west-2", make_context(orchestrator=orchestrator))

        assert not result
        orchestrator.run.assert_called_once_with([])

    def test_skip_error_after_first_page_still_sweeps_queued(self) -> None:
        """Test sweepables queued before a skip error are still swept."""
        orchestrator = recording_orchestrator()
        fetch_page = Mock(
            side_effect=[
                ([{"Name": "a"}, {"Name": "b"}], "page-1"),
                make_client_error("AccessDeniedException", "Account is not authorized to use this service"),
            ]
        )

        result = sweep_kind(make_spec(fetch_page), "us-west-2", make_context(orchestrator=orchestrator))

        assert not result
        assert [s.id for s in orchestrator.run.call_args.args[0]] == ["a", "b"]

    def test_fatal_error_after_first_page_still_sweeps_page_one(self) -> None:
        """Test a fatal listing error is reported and earlier pages are swept."""
        orchestrator = recording_orchestrator()
        fetch_page = Mock(
            side_effect=[
                ([{"Name": "a"}, {"Name": "b"}], "page-1"),
                make_client_error("InternalError", "We encountered an internal error"),
            ]
        )

        result = sweep_kind(make_spec(fetch_page), "us-east-1", make_context(orchestrator=orchestrator))

        assert len(result) == 1
        err = result.errors[0]
        assert isinstance(err, SweepListError)
        assert err.kind == "aws_test_thing"
        assert err.region == "us-east-1"
        assert [s.id for s in orchestrator.run.call_args.args[0]] == ["a", "b"]
        assert fetch_page.call_count == 2
        assert result.deleted == 2

    def test_connection_error_after_first_page_is_fatal(self) -> None:
        """Test a network failure on page 2 is reported and page 1 is swept."""
        orchestrator = recording_orchestrator()
        fetch_page = Mock(
            side_effect=[
                ([{"Name": "a"}, {"Name": "b"}], "page-1"),
                EndpointConnectionError(endpoint_url="https://123456789012.s3-control.us-west-2.amazonaws.com"),
            ]
        )

        result = sweep_kind(make_spec(fetch_page), "us-west-2", make_context(orchestrator=orchestrator))

        assert len(result) == 1
        err = result.errors[0]
        assert isinstance(err, SweepListError)
        assert isinstance(err.cause, EndpointConnectionError)
        assert [s.id for s in orchestrator.run.call_args.args[0]] == ["a", "b"]
        assert result.deleted == 2

    def test_deletion_failures_are_merged(self) -> None:
        """Test orchestrator failures end up in the kind's result."""
        failure = RuntimeError("delete failed")
        orchestrator = Mock(spec=SweepOrchestrator)
        orchestrator.run.return_value = SweepResult(errors=[failure], discovered=1)

        spec = make_spec(make_pages([{"Name": "a"}]))

        result = sweep_kind(spec, "us-west-2", make_context(orchestrator=orchestrator))

        assert result.errors == [failure]
        assert result.discovered == 1

    def test_client_error_is_reported(self) -> None:
        """Test a failure to get a client is recorded and nothing is listed."""
        provider = Mock()
        provider.get.side_effect = RuntimeError("no credentials")
        fetch_page = Mock()

        result = sweep_kind(make_spec(fetch_page), "us-west-2", make_context(provider=provider))

        assert len(result) == 1
        assert isinstance(result.errors[0], SweepClientError)
        assert str(result.errors[0]) == "getting client (us-west-2): no credentials"
        fetch_page.assert_not_called()


class TestMakeSweeper:
    """Test suite for make_sweeper."""

    def test_sweeper_runs_kind(self) -> None:
        orchestrator = recording_orchestrator()
        sweeper = make_sweeper(make_spec(make_pages([{"Name": "a"}, {"Name": "b"}])))

        result = sweeper("us-west-2", make_context(orchestrator=orchestrator))

        assert result.deleted == 2
        assert sweeper.__name__ == "sweep_aws_test_thing"
