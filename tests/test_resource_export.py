"""Tests for connect_export.services.resource_export -- summary and detail stages."""

import pytest

from connect_export.models.exceptions import ExportAbortedError, SetupError, TransportError
from connect_export.models.export_result import ItemStatus
from connect_export.models.resources import (
    CONTACT_FLOW_MODULES,
    CONTACT_FLOWS,
    PROMPTS,
    QUEUES,
    ROUTING_PROFILES,
)
from connect_export.services.connect_client import ConnectClient
from connect_export.services.error_handler import ErrorHandler
from connect_export.services.paths import PathMapper
from connect_export.services.resource_export import ResourceExportService

from conftest import INSTANCE_ARN, client_error, read_json


@pytest.fixture
def make_service(tmp_path, make_config):
    """Build a ResourceExportService writing into tmp_path/out."""
    def factory(client, resolve_instance=True, **config_kwargs) -> ResourceExportService:
        config = make_config(**config_kwargs)
        directory = tmp_path / "out"
        directory.mkdir(exist_ok=True)
        service = ResourceExportService(
            config,
            ConnectClient(client),
            PathMapper(directory),
            ErrorHandler(skip_on_error=config.skip_on_error),
        )
        if resolve_instance:
            service.export_instance()
        return service
    return factory


# ── export_instance ─────────────────────────────────────


class TestExportInstance:
    def test_writes_instance_files(self, make_service, fake_connect, tmp_path):
        service = make_service(fake_connect, resolve_instance=False)
        instance = service.export_instance()

        assert instance.id == "inst-1"
        assert instance.region == "us-east-1"
        instance_json = read_json(tmp_path / "out" / "instance.json")
        assert instance_json["Arn"] == INSTANCE_ARN
        assert instance_json["CreatedTime"] == "2024-01-01 12:00:00"
        assert (tmp_path / "out" / "instance.var").read_text().splitlines() == [
            "instance_alias=demo",
            "instance_id=inst-1",
            f"instance_arn={INSTANCE_ARN}",
            "instance_region=us-east-1",
            "instance_account=123456789012",
        ]

    def test_unknown_alias_is_setup_error(self, make_service, make_connect):
        client = make_connect(instances=[{"Id": "x", "Arn": "arn:x", "InstanceAlias": "other"}])
        with pytest.raises(SetupError, match="'demo' not found"):
            make_service(client)

    def test_ambiguous_alias_is_setup_error(self, make_service, make_connect):
        client = make_connect(instances=[
            {"Id": "a", "Arn": "arn:a", "InstanceAlias": "demo"},
            {"Id": "b", "Arn": "arn:b", "InstanceAlias": "demo"},
        ])
        with pytest.raises(SetupError, match="matches 2 instances"):
            make_service(client)

    def test_stages_require_resolved_instance(self, make_service, fake_connect):
        service = make_service(fake_connect, resolve_instance=False)
        with pytest.raises(SetupError):
            service.export_summaries(PROMPTS)


# ── export_summaries ────────────────────────────────────


class TestExportSummaries:
    def test_prompts_sorted_and_never_filtered(self, make_service, fake_connect, tmp_path):
        service = make_service(fake_connect, ignore_prefix="Alarm")
        manifest = service.export_summaries(PROMPTS)

        assert [p["Name"] for p in manifest] == ["Alarm.wav", "Beep.wav"]
        assert read_json(tmp_path / "out" / "prompts.json") == manifest

    def test_agent_queues_never_exported(self, make_service, fake_connect):
        manifest = make_service(fake_connect).export_summaries(QUEUES)
        assert [q["Name"] for q in manifest] == ["BasicQueue", "Sales"]
        assert all(q["QueueType"] != "AGENT" for q in manifest)

    def test_result_records_count_and_filters(self, make_service, fake_connect):
        from connect_export.models.export_result import ExportResult

        result = ExportResult(resource_type="flows")
        make_service(fake_connect, flow_prefix="Sales").export_summaries(CONTACT_FLOWS, result)
        assert result.items_listed == 2
        assert result.filters_applied == ["include 'Sales' (or 'Default ')"]

    def test_manifest_overwritten_on_rerun(self, make_service, fake_connect, tmp_path):
        service = make_service(fake_connect)
        service.export_summaries(QUEUES)
        fake_connect.resources["queues"] = [{"Id": "q9", "Name": "Only", "QueueType": "STANDARD"}]
        service.export_summaries(QUEUES)
        assert [q["Name"] for q in read_json(tmp_path / "out" / "queues.json")] == ["Only"]

    def test_list_failure_propagates(self, make_service, make_connect):
        client = make_connect(failures={
            ("list_queues", None): client_error("InternalServiceException", "boom", "ListQueues")
        })
        service = make_service(client)
        with pytest.raises(TransportError, match="boom"):
            service.export_summaries(QUEUES)


# ── export_details ──────────────────────────────────────


class TestExportDetails:
    def test_routing_profiles_write_two_files(self, make_service, fake_connect, tmp_path):
        service = make_service(fake_connect)
        result = service.export_kind(ROUTING_PROFILES)

        out = tmp_path / "out"
        assert read_json(out / "routing_Basic Routing Profile.json")["Id"] == "r1"
        assert read_json(out / "routingQs_Basic Routing Profile.json")[0]["QueueName"] == "Sales"
        assert result.items_exported == 1

    def test_flow_content_persisted_verbatim(self, make_service, fake_connect, tmp_path):
        from conftest import FLOW_CONTENT

        make_service(fake_connect).export_kind(CONTACT_FLOWS)
        flow = read_json(tmp_path / "out" / "flow_Sales inbound.json")
        assert flow["Content"] == FLOW_CONTENT
        assert flow["Status"] == "PUBLISHED"

    def test_nothing_written_when_a_later_call_fails(self, make_service, make_connect, tmp_path):
        client = make_connect(failures={
            ("list_routing_profile_queues", "r1"): client_error("InvalidRequestException", "bad", "X")
        })
        service = make_service(client)
        with pytest.raises(ExportAbortedError):
            service.export_kind(ROUTING_PROFILES)
        assert not (tmp_path / "out" / "routing_Basic Routing Profile.json").exists()

    def test_skip_removes_entry_and_continues(self, make_service, make_connect, tmp_path):
        client = make_connect(unpublished={"m1"})
        service = make_service(client, skip_on_error=True)
        result = service.export_kind(CONTACT_FLOW_MODULES)

        out = tmp_path / "out"
        assert [m["Name"] for m in read_json(out / "modules.json")] == ["Shared Module"]
        assert not (out / "module_Lookup Module.json").exists()
        assert (out / "module_Shared Module.json").exists()
        assert result.items_skipped == 1
        assert result.skipped_names == ["Lookup Module"]

    def test_items_described_in_manifest_order(self, make_service, fake_connect):
        make_service(fake_connect).export_kind(CONTACT_FLOWS)
        described = [params["ContactFlowId"] for op, params in fake_connect.calls if op == "describe_contact_flow"]
        assert described == ["f1", "f2"]

    def test_export_item_outcome(self, make_service, fake_connect, tmp_path):
        service = make_service(fake_connect)
        outcome = service.export_item(QUEUES, {"Id": "q1", "Name": "Sales"})
        assert outcome.status == ItemStatus.EXPORTED
        assert outcome.paths == [str(tmp_path / "out" / "queue_Sales.json")]


class TestRemoveFromManifest:
    def test_rewrites_without_matching_name(self, make_service, fake_connect, tmp_path):
        service = make_service(fake_connect)
        service.export_summaries(CONTACT_FLOWS)
        manifest_path = tmp_path / "out" / "flows.json"

        assert service.remove_from_manifest(manifest_path, "Sales inbound") == 1
        assert [f["Name"] for f in read_json(manifest_path)] == ["Default agent hold"]
        assert service.remove_from_manifest(manifest_path, "missing") == 0
