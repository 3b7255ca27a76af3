"""Shared fixtures and helpers for connect_export tests."""

import copy
import json
import logging
from datetime import datetime
from pathlib import Path

import pytest
from botocore.exceptions import ClientError

from connect_export.models.config import ExportConfig
from connect_export.orchestrator import ConnectExportOrchestrator

# ── Fake Amazon Connect client ────────────────────────────

INSTANCE_ID = "inst-1"
INSTANCE_ARN = f"arn:aws:connect:us-east-1:123456789012:instance/{INSTANCE_ID}"

LIST_OPERATIONS = {
    "list_prompts": ("prompts", "PromptSummaryList"),
    "list_hours_of_operations": ("hours", "HoursOfOperationSummaryList"),
    "list_queues": ("queues", "QueueSummaryList"),
    "list_routing_profiles": ("routings", "RoutingProfileSummaryList"),
    "list_contact_flow_modules": ("modules", "ContactFlowModulesSummaryList"),
    "list_contact_flows": ("flows", "ContactFlowSummaryList"),
}

DETAIL_OPERATIONS = {
    "describe_hours_of_operation": ("hours", "HoursOfOperationId", "HoursOfOperation"),
    "describe_queue": ("queues", "QueueId", "Queue"),
    "describe_routing_profile": ("routings", "RoutingProfileId", "RoutingProfile"),
    "list_routing_profile_queues": ("routings", "RoutingProfileId", "RoutingProfileQueueConfigSummaryList"),
    "describe_contact_flow_module": ("modules", "ContactFlowModuleId", "ContactFlowModule"),
    "describe_contact_flow": ("flows", "ContactFlowId", "ContactFlow"),
}

FLOW_CONTENT = json.dumps({"Version": "2019-10-30", "StartAction": "a1", "Actions": []})


def client_error(code, message, operation):
    """Build the ClientError botocore raises for a failed call."""
    return ClientError({"Error": {"Code": code, "Message": message}}, operation)


def default_resources():
    return {
        "prompts": [
            {"Id": "p2", "Arn": "arn:p2", "Name": "Beep.wav"},
            {"Id": "p1", "Arn": "arn:p1", "Name": "Alarm.wav"},
        ],
        "hours": [
            {"Id": "h2", "Arn": "arn:h2", "Name": "Weekend"},
            {"Id": "h1", "Arn": "arn:h1", "Name": "Basic Hours"},
        ],
        "queues": [
            {"Id": "q1", "Arn": "arn:q1", "Name": "Sales", "QueueType": "STANDARD"},
            {"Id": "q2", "Arn": "arn:q2", "Name": "Agent-Q", "QueueType": "AGENT"},
            {"Id": "q3", "Arn": "arn:q3", "Name": "BasicQueue", "QueueType": "STANDARD"},
        ],
        "routings": [
            {"Id": "r1", "Arn": "arn:r1", "Name": "Basic Routing Profile"},
        ],
        "modules": [
            {"Id": "m2", "Arn": "arn:m2", "Name": "Shared Module", "State": "ACTIVE"},
            {"Id": "m1", "Arn": "arn:m1", "Name": "Lookup Module", "State": "ACTIVE"},
        ],
        "flows": [
            {"Id": "f2", "Arn": "arn:f2", "Name": "Sales inbound", "ContactFlowType": "CONTACT_FLOW"},
            {"Id": "f1", "Arn": "arn:f1", "Name": "Default agent hold", "ContactFlowType": "AGENT_HOLD"},
        ],
    }


class FakeConnectClient:
    """In-memory stand-in for the boto3 ``connect`` client."""

    def __init__(self, resources=None, instances=None, unpublished=(), failures=None, truncated=()):
        self.resources = resources if resources is not None else default_resources()
        self.instances = instances if instances is not None else [
            {"Id": INSTANCE_ID, "Arn": INSTANCE_ARN, "InstanceAlias": "demo"}
        ]
        self.unpublished = set(unpublished)
        # (operation, resource id or None) -> exception
        self.failures = dict(failures or {})
        self.truncated = set(truncated)
        self.calls = []

    def list_instances(self, **params):
        self._record("list_instances", params)
        return {"InstanceSummaryList": copy.deepcopy(self.instances)}

    def describe_instance(self, **params):
        self._record("describe_instance", params)
        for instance in self.instances:
            if instance["Id"] == params["InstanceId"]:
                return {"Instance": {
                    **instance,
                    "IdentityManagementType": "CONNECT_MANAGED",
                    "InstanceStatus": "ACTIVE",
                    "CreatedTime": datetime(2024, 1, 1, 12, 0, 0),
                }}
        raise client_error("ResourceNotFoundException", "Instance not found", "DescribeInstance")

    def __getattr__(self, operation):
        if operation in LIST_OPERATIONS:
            return lambda **params: self._list(operation, params)
        if operation in DETAIL_OPERATIONS:
            return lambda **params: self._describe(operation, params)
        raise AttributeError(operation)

    def operations(self):
        return [operation for operation, _ in self.calls]

    def _record(self, operation, params):
        self.calls.append((operation, params))
        failure = self.failures.get((operation, None))
        if failure is not None:
            raise failure

    def _list(self, operation, params):
        self._record(operation, params)
        kind, key = LIST_OPERATIONS[operation]
        response = {key: copy.deepcopy(self.resources.get(kind, []))}
        if operation in self.truncated:
            response["NextToken"] = "next-page"
        return response

    def _describe(self, operation, params):
        kind, id_param, key = DETAIL_OPERATIONS[operation]
        resource_id = params[id_param]
        self._record(operation, params)
        failure = self.failures.get((operation, resource_id))
        if failure is not None:
            raise failure

        summary = next(s for s in self.resources[kind] if s["Id"] == resource_id)
        if operation == "list_routing_profile_queues":
            return {key: [{
                "QueueId": "q1",
                "QueueName": "Sales",
                "Priority": 1,
                "Delay": 0,
                "Channel": "VOICE",
            }]}

        payload = {**summary, "Description": f"{summary['Name']} description"}
        if kind in ("modules", "flows"):
            payload["Content"] = FLOW_CONTENT
            payload["Status"] = "SAVED" if resource_id in self.unpublished else "PUBLISHED"
            payload["LastModifiedTime"] = datetime(2024, 2, 1, 8, 30, 0)
        return {key: payload}


# ── Fixtures ──────────────────────────────────────────────


@pytest.fixture
def fake_connect() -> FakeConnectClient:
    return FakeConnectClient()


@pytest.fixture
def make_connect():
    """Factory building a FakeConnectClient with custom data or failures."""
    return FakeConnectClient


@pytest.fixture
def output_dir(tmp_path) -> Path:
    return tmp_path / "demo"


@pytest.fixture
def make_config(output_dir):
    """Factory building an ExportConfig for instance 'demo' under tmp_path."""
    def factory(**kwargs) -> ExportConfig:
        return ExportConfig(instance_alias="demo", output_dir=str(output_dir), **kwargs)
    return factory


@pytest.fixture
def run_export(make_config):
    """Run a full export against a fake client and return the orchestrator."""
    def runner(client, **config_kwargs) -> ConnectExportOrchestrator:
        orchestrator = ConnectExportOrchestrator(make_config(**config_kwargs), connect_client=client)
        try:
            orchestrator.initialize()
            orchestrator.execute_export()
        finally:
            orchestrator.close()
        return orchestrator
    return runner


@pytest.fixture
def restore_root_logging():
    """Undo the console configuration made by cli.setup_logging."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)


# ── Helpers ───────────────────────────────────────────────


def read_json(path):
    return json.loads(Path(path).read_text(encoding="utf-8"))


@pytest.fixture
def load_json():
    return read_json
