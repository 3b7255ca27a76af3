"""
Data models describing the Amazon Connect resources that get exported.
"""

from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional, Tuple


# Marker for per-agent queues, which are not user-managed resources.
AGENT_QUEUE_TYPE = "AGENT"

# Largest MaxResults accepted by the Connect list APIs used here.
DEFAULT_PAGE_SIZE = 1000
INSTANCE_PAGE_SIZE = 10
ROUTING_PROFILE_QUEUES_PAGE_SIZE = 100


@dataclass
class InstanceRef:
    """Identifies the Amazon Connect instance being exported."""

    alias: str
    id: str
    arn: str = ""
    profile: Optional[str] = None

    @classmethod
    def from_summary(cls, summary: Dict[str, Any], profile: Optional[str] = None) -> 'InstanceRef':
        """
        Create InstanceRef from a ListInstances summary entry.

        Args:
            summary: One entry of InstanceSummaryList
            profile: AWS credential profile used for the run

        Returns:
            InstanceRef: Reference to the instance
        """
        return cls(
            alias=summary.get('InstanceAlias', ''),
            id=summary.get('Id', ''),
            arn=summary.get('Arn', ''),
            profile=profile
        )

    @property
    def region(self) -> str:
        """Region parsed from the instance ARN."""
        parts = self.arn.split(':')
        return parts[3] if len(parts) > 5 else ''

    @property
    def account_id(self) -> str:
        """Account id parsed from the instance ARN."""
        parts = self.arn.split(':')
        return parts[4] if len(parts) > 5 else ''

    def to_variables(self) -> Dict[str, str]:
        """Derived fields written to instance.var."""
        return {
            'instance_alias': self.alias,
            'instance_id': self.id,
            'instance_arn': self.arn,
            'instance_region': self.region,
            'instance_account': self.account_id
        }


@dataclass(frozen=True)
class DetailCall:
    """One description call made for every item of a resource kind."""

    operation: str
    id_param: str
    result_key: str
    file_prefix: str
    max_results: Optional[int] = None


@dataclass(frozen=True)
class ResourceKind:
    """Static description of how one resource kind is listed and described."""

    name: str
    label: str
    manifest_name: str
    list_operation: str
    list_key: str
    detail_calls: Tuple[DetailCall, ...] = ()
    uses_include_filter: bool = False
    uses_exclude_filter: bool = False
    tolerant: bool = False
    publication_gated: bool = False
    type_field: Optional[str] = None
    excluded_types: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def has_details(self) -> bool:
        return bool(self.detail_calls)


PROMPTS = ResourceKind(
    name="prompts",
    label="prompt",
    manifest_name="prompts.json",
    list_operation="list_prompts",
    list_key="PromptSummaryList"
)

HOURS_OF_OPERATION = ResourceKind(
    name="hours",
    label="hours of operation",
    manifest_name="hours.json",
    list_operation="list_hours_of_operations",
    list_key="HoursOfOperationSummaryList",
    detail_calls=(
        DetailCall("describe_hours_of_operation", "HoursOfOperationId", "HoursOfOperation", "hour"),
    ),
    uses_exclude_filter=True
)

QUEUES = ResourceKind(
    name="queues",
    label="queue",
    manifest_name="queues.json",
    list_operation="list_queues",
    list_key="QueueSummaryList",
    detail_calls=(
        DetailCall("describe_queue", "QueueId", "Queue", "queue"),
    ),
    uses_exclude_filter=True,
    type_field="QueueType",
    excluded_types=(AGENT_QUEUE_TYPE,)
)

ROUTING_PROFILES = ResourceKind(
    name="routings",
    label="routing profile",
    manifest_name="routings.json",
    list_operation="list_routing_profiles",
    list_key="RoutingProfileSummaryList",
    detail_calls=(
        DetailCall("describe_routing_profile", "RoutingProfileId", "RoutingProfile", "routing"),
        DetailCall("list_routing_profile_queues", "RoutingProfileId",
                   "RoutingProfileQueueConfigSummaryList", "routingQs",
                   max_results=ROUTING_PROFILE_QUEUES_PAGE_SIZE),
    ),
    uses_exclude_filter=True
)

CONTACT_FLOW_MODULES = ResourceKind(
    name="modules",
    label="contact flow module",
    manifest_name="modules.json",
    list_operation="list_contact_flow_modules",
    list_key="ContactFlowModulesSummaryList",
    detail_calls=(
        DetailCall("describe_contact_flow_module", "ContactFlowModuleId", "ContactFlowModule", "module"),
    ),
    uses_include_filter=True,
    uses_exclude_filter=True,
    tolerant=True,
    publication_gated=True
)

CONTACT_FLOWS = ResourceKind(
    name="flows",
    label="contact flow",
    manifest_name="flows.json",
    list_operation="list_contact_flows",
    list_key="ContactFlowSummaryList",
    detail_calls=(
        DetailCall("describe_contact_flow", "ContactFlowId", "ContactFlow", "flow"),
    ),
    uses_include_filter=True,
    uses_exclude_filter=True,
    tolerant=True,
    publication_gated=True
)

# Routing profiles reference queues; flows reference modules, prompts and hours.
EXPORT_ORDER: List[ResourceKind] = [
    PROMPTS,
    HOURS_OF_OPERATION,
    QUEUES,
    ROUTING_PROFILES,
    CONTACT_FLOW_MODULES,
    CONTACT_FLOWS
]
