"""Tests for snapshot orchestration."""

import pytest

from app.core.snapshot import NO_WORKLOAD_MESSAGE, VRAMSnapshotService
from app.core.units import GB_TO_GIB
from fakes import FakeCluster, FakeExecStream, ps_table

PS_OUTPUT = ps_table([("llama3:8b", "a1b2c3", "4.7GB", "100% GPU", "5 minutes from now")])


def make_service(cluster, **kwargs):
    kwargs.setdefault("namespace", "ollama")
    kwargs.setdefault("label_selector", "app=ollama-serve")
    kwargs.setdefault("total_vram_gib", 24.0)
    kwargs.setdefault("timeout_seconds", 10)
    return VRAMSnapshotService(cluster, **kwargs)


class TestHandleSnapshotRequest:
    def test_successful_snapshot(self):
        # Given: one matching pod running one model
        cluster = FakeCluster(pods=["ollama-serve-abc"], stream=FakeExecStream(stdout=PS_OUTPUT))
        service = make_service(cluster)

        # When
        result = service.handle_snapshot_request()

        # Then
        assert result.error_message is None
        assert result.pod_name == "ollama-serve-abc"
        assert result.namespace == "ollama"
        assert [m.size for m in result.models] == ["4.7GB"]
        assert result.budget.used_gib == pytest.approx(4.7 * GB_TO_GIB)
        assert result.budget.remaining_gib == pytest.approx(24.0 - 4.7 * GB_TO_GIB)
        assert result.budget.used_percentage == pytest.approx(4.7 * GB_TO_GIB / 24.0 * 100)
        assert cluster.list_calls == [("ollama", "app=ollama-serve", 10)]
        assert cluster.exec_calls == [("ollama-serve-abc", "ollama", ["ollama", "ps"])]

    def test_first_listed_pod_is_selected(self):
        cluster = FakeCluster(pods=["ollama-serve-2", "ollama-serve-1"],
                              stream=FakeExecStream(stdout=PS_OUTPUT))

        result = make_service(cluster).handle_snapshot_request()

        assert result.pod_name == "ollama-serve-2"
        assert len(cluster.exec_calls) == 1
        assert cluster.exec_calls[0][0] == "ollama-serve-2"

    def test_no_pods(self):
        cluster = FakeCluster(pods=[])

        result = make_service(cluster).handle_snapshot_request()

        assert result.error_message == NO_WORKLOAD_MESSAGE
        assert result.models == []
        assert result.pod_name is None
        budget = result.budget
        assert (budget.total_gib, budget.used_gib, budget.remaining_gib, budget.used_percentage) == (
            0.0, 0.0, 0.0, 0.0
        )
        assert budget.remaining_gib == budget.total_gib - budget.used_gib
        assert cluster.exec_calls == []

    def test_list_failure(self):
        cluster = FakeCluster(list_error=RuntimeError("Unauthorized"))

        result = make_service(cluster).handle_snapshot_request()

        assert result.error_message == "Failed to list pods: Unauthorized"
        assert result.models == []

    def test_exec_setup_failure(self):
        cluster = FakeCluster(pods=["ollama-serve-abc"], open_error=RuntimeError("pod not running"))

        result = make_service(cluster).handle_snapshot_request()

        assert result.error_message.startswith("Failed to execute 'ollama ps': failed to create executor")
        assert "pod not running" in result.error_message
        assert result.pod_name == "ollama-serve-abc"
        assert result.models == []

    def test_exec_stream_failure(self):
        stream = FakeExecStream(stderr="boom", run_error=OSError("socket closed"))
        cluster = FakeCluster(pods=["ollama-serve-abc"], stream=stream)

        result = make_service(cluster).handle_snapshot_request()

        assert "socket closed" in result.error_message
        assert "stderr: boom" in result.error_message
        assert result.budget.used_gib == 0.0

    def test_unparsable_output_is_empty_not_error(self):
        stream = FakeExecStream(stdout="Error: something odd\nmore text\n")
        cluster = FakeCluster(pods=["ollama-serve-abc"], stream=stream)

        result = make_service(cluster).handle_snapshot_request()

        assert result.error_message is None
        assert result.models == []
        assert result.budget.used_percentage == 0.0
        assert result.budget.remaining_gib == 24.0

    def test_zero_total_capacity(self):
        cluster = FakeCluster(pods=["p"], stream=FakeExecStream(stdout=PS_OUTPUT))

        result = make_service(cluster, total_vram_gib=0.0).handle_snapshot_request()

        assert result.budget.used_percentage == 0.0

    def test_custom_parser_is_used(self):
        calls = []

        def parser(output, diagnostics=None):
            calls.append(output)
            return [], 6.0

        cluster = FakeCluster(pods=["p"], stream=FakeExecStream(stdout="raw"))

        result = make_service(cluster, parser=parser).handle_snapshot_request()

        assert calls == ["raw"]
        assert result.budget.used_percentage == 25.0
        assert result.budget.remaining_gib == 18.0

    def test_failing_parser_becomes_error_message(self):
        def parser(output, diagnostics=None):
            raise ValueError("unexpected layout")

        cluster = FakeCluster(pods=["p"], stream=FakeExecStream(stdout="raw"))

        result = make_service(cluster, parser=parser).handle_snapshot_request()

        assert result.error_message == "Failed to parse 'ollama ps' output: unexpected layout"
        assert result.pod_name == "p"
        assert result.models == []
        assert result.budget.used_gib == 0.0
