"""Pydantic input schemas for the platform tools.

Field names are advertised to the model in camelCase (`datasetId`), which is
how the platform itself names these identifiers.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ToolInput(BaseModel):
    """Base for tool inputs; accepts camelCase or snake_case argument names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class NoInput(ToolInput):
    """Tools that take no arguments."""


# Datasets and batches
class ListDatasetsInput(ToolInput):
    limit: int = Field(20, description="Max datasets to return (default 20)")


class DatasetIdInput(ToolInput):
    dataset_id: str = Field(..., description="Dataset ID")


class ListBatchesInput(ToolInput):
    dataset_id: str = Field("", description="Optional dataset ID filter")
    limit: int = Field(50, description="Max batches (default 50)")


class BatchIdInput(ToolInput):
    batch_id: str = Field(..., description="Batch ID")


# Segments
class ListSegmentsInput(ToolInput):
    limit: int = Field(20, description="Max segments (default 20)")


class SegmentIdInput(ToolInput):
    segment_id: str = Field(..., description="Segment ID")


class ListSegmentJobsInput(ToolInput):
    limit: int = Field(20, description="Max jobs (default 20)")


class CreateSegmentInput(ToolInput):
    name: str = Field(..., description="Segment name")
    description: str = Field(..., description="Segment description")
    pql: str = Field(..., description="PQL expression")


# Schemas
class ListSchemasInput(ToolInput):
    limit: int = Field(20, description="Max schemas (default 20)")


class SchemaIdInput(ToolInput):
    schema_id: str = Field(..., description="Schema $id")


class SearchSchemasInput(ToolInput):
    query: str = Field(..., description="Search query")


# Identity and profiles
class IdentityGraphInput(ToolInput):
    namespace: str = Field(..., description="Namespace code (e.g., email, ecid)")
    identity: str = Field(..., description="Identity value")


class ProfileLookupInput(ToolInput):
    namespace: str = Field(..., description="Identity namespace (e.g., email)")
    identity: str = Field(..., description="Identity value")


# Flows
class ListFlowsInput(ToolInput):
    limit: int = Field(20, description="Max flows (default 20)")


class FlowIdInput(ToolInput):
    flow_id: str = Field(..., description="Flow ID")


# Query service
class ExecuteQueryInput(ToolInput):
    sql: str = Field(..., description="SQL query to execute")


class ListQueriesInput(ToolInput):
    limit: int = Field(10, description="Max queries (default 10)")
