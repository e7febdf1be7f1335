"""Tests for SweepOrchestrator."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from awssweep.models.sweep_result import DeletionFailure
from awssweep.models.sweepable import Sweepable
from awssweep.sweep.orchestrator import SweepOrchestrator
from tests.fixtures.sweep import make_client_error, make_sweepable


class TestSweepOrchestratorInit:
    """Test suite for orchestrator construction."""

    def test_defaults(self) -> None:
        orchestrator = SweepOrchestrator()

        assert orchestrator.max_workers == 10
        assert orchestrator.max_retries == 5
        assert orchestrator.dry_run is False

    @pytest.mark.parametrize("kwargs", [{"max_workers": 0}, {"max_retries": 0}])
    def test_rejects_non_positive_limits(self, kwargs: dict) -> None:
        with pytest.raises(ValueError, match="at least 1"):
            SweepOrchestrator(**kwargs)


class TestSweepOrchestratorRun:
    """Test suite for SweepOrchestrator.run."""

    def test_empty_input_is_success(self) -> None:
        """Test an empty batch yields no error."""
        result = SweepOrchestrator().run([])

        assert not result
        assert result.error_or_none() is None
        assert result.discovered == 0

    def test_all_deletions_succeed(self) -> None:
        """Test a clean batch yields no error and counts every deletion."""
        calls: list = []
        sweepables = [make_sweepable(f"thing-{i}", calls=calls) for i in range(5)]

        result = SweepOrchestrator(max_workers=3).run(sweepables)

        assert not result
        assert result.deleted == 5
        assert result.discovered == 5
        assert sorted(calls) == [f"thing-{i}" for i in range(5)]

    @pytest.mark.parametrize("max_workers", [1, 4])
    def test_no_early_abort(self, max_workers: int) -> None:
        """Test every sweepable is attempted and exactly k failures are reported."""
        calls: list = []
        failing = {1, 4, 7}
        sweepables = [
            make_sweepable(
                f"thing-{i}",
                calls=calls,
                error=make_client_error("AccessDenied", f"no {i}", "DeleteThing") if i in failing else None,
            )
            for i in range(10)
        ]

        result = SweepOrchestrator(max_workers=max_workers).run(sweepables)

        assert len(calls) == 10
        assert len(result) == 3
        assert result.deleted == 7
        assert all(isinstance(err, DeletionFailure) for err in result.errors)
        assert [err.resource_id for err in result.errors] == ["thing-1", "thing-4", "thing-7"]

    def test_failure_keeps_context(self) -> None:
        """Test failures name the kind and identifier."""
        sweepable = make_sweepable("123:ap", kind="aws_s3_access_point", error=RuntimeError("boom"))

        result = SweepOrchestrator().run([sweepable])

        failure = result.errors[0]
        assert failure.kind == "aws_s3_access_point"
        assert str(failure) == "deleting aws_s3_access_point (123:ap): boom"
        assert "1 error occurred" in str(result.error_or_none())

    def test_duplicates_deleted_once(self) -> None:
        """Test no two deletions target the same identifier."""
        calls: list = []
        sweepables = [
            make_sweepable("a", calls=calls),
            make_sweepable("a", calls=calls),
            make_sweepable("b", calls=calls),
        ]

        result = SweepOrchestrator().run(sweepables)

        assert sorted(calls) == ["a", "b"]
        assert result.discovered == 2
        assert result.deleted == 2

    def test_same_id_different_kind_not_deduplicated(self) -> None:
        calls: list = []
        sweepables = [
            make_sweepable("a", kind="aws_one", calls=calls),
            make_sweepable("a", kind="aws_two", calls=calls),
        ]

        SweepOrchestrator().run(sweepables)

        assert calls == ["a", "a"]

    def test_dry_run_deletes_nothing(self) -> None:
        """Test dry-run mode only counts sweepables."""
        calls: list = []
        sweepables = [make_sweepable(f"thing-{i}", calls=calls) for i in range(3)]

        result = SweepOrchestrator(dry_run=True).run(sweepables)

        assert calls == []
        assert not result
        assert result.skipped == 3
        assert result.deleted == 0


class TestSweepOrchestratorRetry:
    """Test suite for throttling retries."""

    @patch("awssweep.sweep.orchestrator.time.sleep")
    def test_throttled_delete_is_retried(self, mock_sleep) -> None:
        """Test throttling errors are retried with exponential backoff."""
        attempts = {"count": 0}

        def delete() -> None:
            attempts["count"] += 1
            if attempts["count"] < 3:
                raise make_client_error("Throttling", "Rate exceeded", "DeleteThing")

        sweepable = Sweepable(kind="aws_test_thing", id="thing", region="us-west-2", delete=delete)

        result = SweepOrchestrator(base_delay=1.0).run([sweepable])

        assert not result
        assert attempts["count"] == 3
        assert [call.args[0] for call in mock_sleep.call_args_list] == [1.0, 2.0]

    @patch("awssweep.sweep.orchestrator.time.sleep")
    def test_throttling_exhaustion_is_a_failure(self, mock_sleep) -> None:
        """Test a sweepable still throttled after max_retries fails."""
        calls: list = []
        sweepable = make_sweepable(
            "thing",
            calls=calls,
            error=make_client_error("ThrottlingException", "slow down", "DeleteThing"),
        )

        result = SweepOrchestrator(max_retries=3).run([sweepable])

        assert len(calls) == 3
        assert mock_sleep.call_count == 2
        assert len(result) == 1

    @patch("awssweep.sweep.orchestrator.time.sleep")
    def test_other_errors_not_retried(self, mock_sleep) -> None:
        """Test non-throttling errors fail immediately."""
        calls: list = []
        sweepable = make_sweepable("thing", calls=calls, error=make_client_error("InvalidRequest", "", "DeleteThing"))

        result = SweepOrchestrator().run([sweepable])

        assert calls == ["thing"]
        mock_sleep.assert_not_called()
        assert len(result) == 1
