"""Registry of platform tools exposed to the copilot.

The registry is rebuilt for every agent invocation and bound to that
invocation's AEPClient. Building it performs no network activity.
"""

import logging

from aep import AEPClient
from client.types import LLMToolDeclaration

from .base import ToolDef
from .schemas import (
    BatchIdInput,
    CreateSegmentInput,
    DatasetIdInput,
    ExecuteQueryInput,
    FlowIdInput,
    IdentityGraphInput,
    ListBatchesInput,
    ListDatasetsInput,
    ListFlowsInput,
    ListQueriesInput,
    ListSchemasInput,
    ListSegmentJobsInput,
    ListSegmentsInput,
    NoInput,
    ProfileLookupInput,
    SchemaIdInput,
    SearchSchemasInput,
    SegmentIdInput,
)

logger = logging.getLogger(__name__)


def build_registry(client: AEPClient) -> dict[str, ToolDef]:
    """Create every tool, keyed by name, bound to `client`."""
    tools = [
        # Datasets
        ToolDef(
            "list_datasets",
            "List AEP datasets with optional limit",
            ListDatasetsInput,
            lambda a: client.get_datasets(a.limit or 20),
        ),
        ToolDef(
            "get_dataset",
            "Get details of a specific dataset by ID",
            DatasetIdInput,
            lambda a: client.get_dataset(a.dataset_id),
        ),
        # Batches
        ToolDef(
            "list_batches",
            "List batches, optionally filtered by dataset",
            ListBatchesInput,
            lambda a: client.get_batches(a.dataset_id or None, a.limit or 50),
        ),
        ToolDef(
            "get_batch",
            "Get details of a specific batch",
            BatchIdInput,
            lambda a: client.get_batch(a.batch_id),
        ),
        # Segments
        ToolDef(
            "list_segments",
            "List segment definitions",
            ListSegmentsInput,
            lambda a: client.get_segment_definitions(a.limit or 20),
        ),
        ToolDef(
            "get_segment",
            "Get details of a specific segment",
            SegmentIdInput,
            lambda a: client.get_segment_definition(a.segment_id),
        ),
        ToolDef(
            "list_segment_jobs",
            "List segment evaluation jobs",
            ListSegmentJobsInput,
            lambda a: client.get_segment_jobs(a.limit or 20),
        ),
        ToolDef(
            "create_segment",
            "Create a new segment definition with PQL expression",
            CreateSegmentInput,
            lambda a: client.create_segment(a.name, a.description, a.pql),
            requires_approval=True,
        ),
        # Schemas
        ToolDef(
            "list_schemas",
            "List XDM schemas from the schema registry",
            ListSchemasInput,
            lambda a: client.get_schemas(a.limit or 20),
        ),
        ToolDef(
            "get_schema",
            "Get full details of a specific schema",
            SchemaIdInput,
            lambda a: client.get_schema(a.schema_id),
        ),
        ToolDef(
            "search_schemas",
            "Search schemas by title",
            SearchSchemasInput,
            lambda a: client.search_schemas(a.query),
        ),
        ToolDef(
            "list_field_groups",
            "List XDM field groups",
            NoInput,
            lambda a: client.get_field_groups(),
        ),
        # Identity
        ToolDef(
            "list_identity_namespaces",
            "List all identity namespaces",
            NoInput,
            lambda a: client.get_identity_namespaces(),
        ),
        ToolDef(
            "get_identity_graph",
            "Get identity graph for a given identity",
            IdentityGraphInput,
            lambda a: client.get_identity_graph(a.namespace, a.identity),
        ),
        # Profiles
        ToolDef(
            "lookup_profile",
            "Look up a profile by identity namespace and value",
            ProfileLookupInput,
            lambda a: client.get_profile(a.namespace, a.identity),
        ),
        ToolDef(
            "list_merge_policies",
            "List profile merge policies",
            NoInput,
            lambda a: client.get_merge_policies(),
        ),
        # Flows
        ToolDef(
            "list_flows",
            "List data flows",
            ListFlowsInput,
            lambda a: client.get_all_flows(a.limit or 20),
        ),
        ToolDef(
            "get_flow",
            "Get details of a specific flow",
            FlowIdInput,
            lambda a: client.get_flow(a.flow_id),
        ),
        ToolDef(
            "get_flow_runs",
            "Get runs for a specific flow",
            FlowIdInput,
            lambda a: client.get_flow_runs(a.flow_id),
        ),
        # Sources and destinations
        ToolDef(
            "list_source_connections",
            "List source connections",
            NoInput,
            lambda a: client.get_source_connections(),
        ),
        ToolDef(
            "list_destination_connections",
            "List destination connections",
            NoInput,
            lambda a: client.get_destination_connections(),
        ),
        # Query service
        ToolDef(
            "execute_query",
            "Execute a SQL query against AEP Query Service",
            ExecuteQueryInput,
            lambda a: client.execute_query(a.sql),
            requires_approval=True,
        ),
        ToolDef(
            "list_queries",
            "List recent queries",
            ListQueriesInput,
            lambda a: client.get_queries(a.limit or 10),
        ),
        # Platform health
        ToolDef(
            "health_check",
            "Check AEP platform connectivity status",
            NoInput,
            lambda a: client.health_check(),
        ),
        ToolDef(
            "system_health_summary",
            "Get a comprehensive health summary of the AEP instance",
            NoInput,
            lambda a: client.get_system_health_summary(),
        ),
        # Exports and sandboxes
        ToolDef(
            "list_export_jobs",
            "List profile export jobs",
            NoInput,
            lambda a: client.get_profile_export_jobs(),
        ),
        ToolDef(
            "list_sandboxes",
            "List available AEP sandboxes",
            NoInput,
            lambda a: client.get_sandboxes(),
        ),
    ]

    registry = {tool.name: tool for tool in tools}
    logger.debug(f"Built tool registry with {len(registry)} tools")
    return registry


def get_tool_declarations(registry: dict[str, ToolDef]) -> list[LLMToolDeclaration]:
    """Declarations advertised to the model, in registry order."""
    return [tool.get_declaration() for tool in registry.values()]


def requires_approval(registry: dict[str, ToolDef], tool_name: str) -> bool:
    tool = registry.get(tool_name)
    return tool.requires_approval if tool else False

