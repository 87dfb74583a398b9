"""
Competence Gateway - Resource DAO
=================================

What:  CRUD operations for one resource of the downstream API.
How:   Builds the request path from the resource name, sends it through the
       shared DownstreamClient and hands the response to a translator.

Request Shapes (resource "skill"):
    create(item)         → POST   <API_URL>skill
    get_by_id("12")      → GET    <API_URL>skill/12
    get_many({"a": "b"}) → GET    <API_URL>skill?a=b
    update("12", item)   → PUT    <API_URL>skill/12
    delete("12")         → DELETE <API_URL>skill/12
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union
from urllib.parse import quote

from competence_gateway.dao import client as client_module
from competence_gateway.dao.client import DownstreamClient
from competence_gateway.dao.responses import (
    parse_delete,
    parse_get,
    parse_get_many,
    parse_post,
    parse_put,
)

logger = logging.getLogger(__name__)

QueryParams = Union[Mapping[str, Any], Sequence[Tuple[str, Any]], None]


class ResourceDAO:
    """
    Data access object for a single downstream resource.

    Args:
        resource: Downstream resource name, appended to API_URL (e.g. "skillGroup")
        client:   Optional fixed client; defaults to the process-wide instance
    """

    def __init__(self, resource: str, client: Optional[DownstreamClient] = None):
        self.resource = resource
        self._client = client

    @property
    def client(self) -> DownstreamClient:
        return self._client or client_module.get_downstream_client()

    def _item_path(self, item_id: str) -> str:
        return f"{self.resource}/{quote(str(item_id), safe='')}"

    async def create(self, item: Dict[str, Any]) -> Any:
        response = await self.client.request("POST", self.resource, json=item)
        return parse_post(response)

    async def get_by_id(self, item_id: str) -> Any:
        response = await self.client.request("GET", self._item_path(item_id))
        return parse_get(response, resource=self.resource, resource_id=item_id)

    async def get_many(self, query: QueryParams = None) -> List[Any]:
        """Fetch all items matching the query; an empty query fetches everything."""
        params = _clean_query(query)
        response = await self.client.request("GET", self.resource, params=params)
        return parse_get_many(response, resource=self.resource)

    async def update(self, item_id: str, item: Dict[str, Any]) -> Any:
        response = await self.client.request("PUT", self._item_path(item_id), json=item)
        return parse_put(response, resource=self.resource, resource_id=item_id)

    async def delete(self, item_id: str) -> None:
        response = await self.client.request("DELETE", self._item_path(item_id))
        parse_delete(response, resource=self.resource, resource_id=item_id)
        logger.info("Deleted %s %s", self.resource, item_id)

    def __repr__(self) -> str:
        return f"<ResourceDAO(resource='{self.resource}')>"


def _clean_query(query: QueryParams) -> List[Tuple[str, str]]:
    """Normalize a mapping or pair list into query pairs, dropping None values."""
    if not query:
        return []
    pairs = query.items() if isinstance(query, Mapping) else query
    return [(str(key), str(value)) for key, value in pairs if value is not None]
