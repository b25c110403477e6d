"""Async client for the Adobe Experience Platform REST APIs.

Authentication uses the IMS OAuth2 client-credentials grant, or a
pre-generated bearer token when one is configured. Every endpoint wrapper is
a thin call through `request()` returning the decoded JSON body.
"""

import asyncio
import logging
import time
from typing import Any, Optional
from urllib.parse import quote

import httpx

from config import AEP_CONFIG, HTTP_TIMEOUT_SECONDS

from .errors import AEPAPIError, AEPAuthError, AEPConfigError
from .models import AEPConfig

logger = logging.getLogger(__name__)

SOURCE_SPEC_ID = AEP_CONFIG["source_connection_spec_id"]

XED_ID_ACCEPT = "application/vnd.adobe.xed-id+json"
XED_FULL_ACCEPT = "application/vnd.adobe.xed-full+json"


def _q(value: str) -> str:
    return quote(str(value), safe="")


class AEPClient:
    """Platform API client bound to one organization and sandbox."""

    def __init__(
        self,
        config: AEPConfig,
        http_client: Optional[httpx.AsyncClient] = None,
        base_url: Optional[str] = None,
    ):
        if not config.org_id:
            raise AEPConfigError("Organization ID is required")

        self.config = config
        self.base_url = (base_url or AEP_CONFIG["base_url"]).rstrip("/")
        self._client = http_client
        self._owns_client = http_client is None

        self._access_token: Optional[str] = None
        self._token_expires_at = 0.0

    async def __aenter__(self) -> "AEPClient":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def close(self) -> None:
        if self._client and self._owns_client:
            await self._client.aclose()
            self._client = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=HTTP_TIMEOUT_SECONDS)
        return self._client

    # ---- auth ----

    async def get_access_token(self) -> str:
        """Return a bearer token, exchanging client credentials when needed."""
        if self.config.auth_token:
            return self.config.auth_token
        if self._access_token and time.monotonic() < self._token_expires_at:
            return self._access_token

        try:
            response = await self._get_client().post(
                AEP_CONFIG["ims_token_url"],
                data={
                    "grant_type": "client_credentials",
                    "client_id": self.config.client_id,
                    "client_secret": self.config.client_secret,
                    "scope": AEP_CONFIG["scope"],
                },
            )
        except httpx.HTTPError as e:
            logger.error(f"Failed to get access token: {e}")
            raise AEPAuthError(f"Token request failed: {e}") from e

        if response.is_error:
            logger.error(f"Failed to get access token: {response.status_code}")
            raise AEPAuthError(
                f"Token request failed: {response.status_code}", status_code=response.status_code
            )

        try:
            token = response.json()["access_token"]
        except (ValueError, KeyError, TypeError) as e:
            raise AEPAuthError("Token response did not contain an access token") from e

        self._access_token = token
        self._token_expires_at = time.monotonic() + AEP_CONFIG["token_ttl_seconds"]
        logger.debug("Obtained new AEP access token")
        return token

    def _build_headers(self, token: str, extra: Optional[dict[str, str]] = None) -> dict[str, str]:
        headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
            "x-api-key": self.config.client_id,
            "x-gw-ims-org-id": self.config.org_id,
            "x-sandbox-name": self.config.sandbox,
        }
        if extra:
            headers.update(extra)
        if not self.config.auth_token and self.config.sandbox_id and self.config.sandbox != "prod":
            headers["x-sandbox-id"] = self.config.sandbox_id
        return headers

    async def request(
        self,
        endpoint: str,
        method: str = "GET",
        json: Optional[Any] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> Any:
        """Call a platform endpoint (path relative to the base URL).

        Raises:
            AEPAuthError: If no access token could be obtained
            AEPAPIError: If the platform answers with a non-2xx status
        """
        token = await self.get_access_token()
        url = f"{self.base_url}{endpoint}"

        logger.debug(f"AEP {method} {endpoint}")
        response = await self._get_client().request(
            method, url, json=json, headers=self._build_headers(token, headers)
        )

        if response.is_error:
            raise AEPAPIError(response.status_code, response.reason_phrase, response.text)
        return response.json()

    # ---- health ----

    async def health_check(self) -> dict[str, str]:
        try:
            await self.request("/data/foundation/catalog/datasets?limit=1")
            return {"status": "healthy"}
        except Exception as e:
            logger.warning(f"AEP health check failed: {e}")
            return {"status": "unhealthy"}

    async def get_system_health_summary(self) -> dict[str, Any]:
        """Fetch a small page of each core resource concurrently.

        A resource that fails to load is reported as None.
        """
        parts = {
            "datasets": self.get_datasets(5),
            "batches": self.get_batches(limit=5),
            "segments": self.get_segment_definitions(5),
            "flows": self.get_all_flows(5),
        }
        results = await asyncio.gather(*parts.values(), return_exceptions=True)

        summary: dict[str, Any] = {}
        for key, result in zip(parts, results):
            if isinstance(result, BaseException):
                logger.warning(f"Health summary could not load {key}: {result}")
                summary[key] = None
            else:
                summary[key] = result
        return summary

    # ---- profiles ----

    async def get_profile(self, namespace: str, identity: str) -> Any:
        return await self.request(
            "/data/core/ups/access/entities?schema.name=_xdm.context.profile"
            f"&entityId={_q(identity)}&entityIdNS={_q(namespace)}"
        )

    async def get_merge_policies(self, limit: int = 20) -> Any:
        return await self.request(f"/data/core/ups/config/mergePolicies?limit={limit}")

    # ---- segments ----

    async def get_segment_jobs(self, limit: int = 20) -> Any:
        return await self.request(f"/data/core/ups/segment/jobs?limit={limit}")

    async def get_segment_definitions(self, limit: int = 20) -> Any:
        return await self.request(f"/data/core/ups/segment/definitions?limit={limit}")

    async def get_segment_definition(self, segment_id: str) -> Any:
        return await self.request(f"/data/core/ups/segment/definitions/{segment_id}")

    async def create_segment(self, name: str, description: str, pql: str) -> Any:
        return await self.request(
            "/data/core/ups/segment/definitions",
            method="POST",
            json={
                "name": name,
                "description": description,
                "expression": {"type": "PQL", "format": "pql/text", "value": pql},
                "schema": {"name": "_xdm.context.profile"},
            },
        )

    # ---- datasets / batches ----

    async def get_datasets(self, limit: int = 20) -> Any:
        return await self.request(
            f"/data/foundation/catalog/datasets?limit={limit}&orderBy=desc:created"
        )

    async def get_dataset(self, dataset_id: str) -> Any:
        return await self.request(f"/data/foundation/catalog/datasets/{dataset_id}")

    async def get_batches(self, dataset_id: Optional[str] = None, limit: int = 50) -> Any:
        endpoint = "/data/foundation/catalog/batches?"
        if dataset_id:
            endpoint += f"property=relatedObjects.id=={_q(dataset_id)}&"
        return await self.request(f"{endpoint}limit={limit}&orderBy=desc:created")

    async def get_batch(self, batch_id: str) -> Any:
        return await self.request(f"/data/foundation/catalog/batches/{batch_id}")

    # ---- schemas ----

    async def get_schemas(self, limit: int = 20) -> Any:
        return await self.request(
            f"/data/foundation/schemaregistry/tenant/schemas?limit={limit}",
            headers={"Accept": XED_ID_ACCEPT},
        )

    async def get_schema(self, schema_id: str, container: str = "tenant") -> Any:
        return await self.request(
            f"/data/foundation/schemaregistry/{container}/schemas/{_q(schema_id)}",
            headers={"Accept": XED_FULL_ACCEPT},
        )

    async def get_field_groups(self, container: str = "tenant", limit: int = 20) -> Any:
        return await self.request(
            f"/data/foundation/schemaregistry/{container}/fieldgroups?limit={limit}",
            headers={"Accept": XED_ID_ACCEPT},
        )

    async def search_schemas(self, query: str, container: str = "tenant") -> Any:
        return await self.request(
            f"/data/foundation/schemaregistry/{container}/schemas?property=title~{_q(query)}",
            headers={"Accept": XED_ID_ACCEPT},
        )

    # ---- identity ----

    async def get_identity_namespaces(self) -> Any:
        return await self.request("/data/core/idnamespace/identities")

    async def get_identity_graph(self, namespace: str, identity: str) -> Any:
        return await self.request(
            f"/data/core/identity/cluster/members?xid.id={_q(identity)}"
            f"&xid.namespace.code={_q(namespace)}&graph-type=coop"
        )

    # ---- sources / flows ----

    async def get_source_connections(self) -> Any:
        return await self.request(
            f"/data/foundation/flowservice/connections?property=connectionSpec.id=={SOURCE_SPEC_ID}"
        )

    async def get_all_flows(self, limit: int = 20) -> Any:
        return await self.request(f"/data/foundation/flowservice/flows?limit={limit}")

    async def get_flow(self, flow_id: str) -> Any:
        return await self.request(f"/data/foundation/flowservice/flows/{flow_id}")

    async def get_flow_runs(self, flow_id: str, limit: int = 5) -> Any:
        return await self.request(
            f"/data/foundation/flowservice/runs?flowId={flow_id}&limit={limit}"
        )

    # ---- destinations ----

    async def get_destination_connections(self) -> Any:
        return await self.request(
            f"/data/foundation/flowservice/connections?property=connectionSpec.id!={SOURCE_SPEC_ID}"
        )

    # ---- query service ----

    async def get_queries(self, limit: int = 10) -> Any:
        return await self.request(f"/data/foundation/query/queries?limit={limit}&orderBy=-created")

    async def execute_query(self, sql: str, name: Optional[str] = None) -> Any:
        return await self.request(
            "/data/foundation/query/queries",
            method="POST",
            json={
                "dbName": f"{self.config.org_id}:{self.config.sandbox}",
                "sql": sql,
                "name": name or f"query_{int(time.time() * 1000)}",
            },
        )

    # ---- sandboxes / exports ----

    async def get_sandboxes(self) -> Any:
        return await self.request("/data/foundation/sandbox-management/sandboxes")

    async def get_profile_export_jobs(self, limit: int = 20) -> Any:
        return await self.request(
            f"/data/core/ups/export/jobs/?showSegmentMetrics=true&limit={limit}&sort=creationTime:desc"
        )
