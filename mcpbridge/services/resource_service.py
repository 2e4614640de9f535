"""Static resource catalog backed by inline content, local files or URLs."""

import asyncio
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Optional

import httpx

from mcpbridge.infra.error_handler import ProtocolError
from mcpbridge.models.jsonrpc import INTERNAL_ERROR, invalid_params
from mcpbridge.models.server_config import ResourceConfig

logger = logging.getLogger(__name__)


class ResourceReadError(Exception):
    """A configured resource source could not be read."""


def _read_file(file_path: str) -> str:
    path = Path(file_path)
    if not path.is_absolute():
        path = Path.cwd() / path
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ResourceReadError(f"failed to read file {path}: {e}")


class ResourceCatalog:
    """Read-only resource lookup for resources/list and resources/read."""

    def __init__(self, resources: Iterable[ResourceConfig], client: Optional[httpx.AsyncClient] = None):
        self._resources = MappingProxyType({resource.uri: resource for resource in resources})
        self._client = client

    def list_resources(self) -> List[Dict[str, Any]]:
        return [
            {
                "uri": resource.uri,
                "name": resource.name,
                "description": resource.description,
                "mimeType": resource.mime_type,
            }
            for resource in self._resources.values()
        ]

    async def _fetch_url(self, url: str) -> str:
        if self._client is None:
            raise ResourceReadError(f"no HTTP client available to fetch {url}")
        try:
            response = await self._client.get(url)
        except httpx.RequestError as e:
            raise ResourceReadError(f"failed to fetch URL {url}: {e}")
        if response.status_code != 200:
            raise ResourceReadError(f"HTTP error {response.status_code} when fetching {url}")
        return response.text

    async def load_content(self, resource: ResourceConfig) -> str:
        """
        Resolve the content of a resource: inline text, then file, then URL.

        Raises:
            ResourceReadError: If the source cannot be read
        """
        if resource.content:
            return resource.content
        if resource.file_path:
            return await asyncio.to_thread(_read_file, resource.file_path)
        if resource.url:
            return await self._fetch_url(resource.url)
        raise ResourceReadError(f"no content source specified for resource {resource.uri}")

    async def read_resource(self, uri: Optional[str]) -> Dict[str, Any]:
        """
        Read a resource by URI.

        Raises:
            ProtocolError: INVALID_PARAMS for an unknown URI, INTERNAL_ERROR when
                the source cannot be read
        """
        resource = self._resources.get(uri) if isinstance(uri, str) else None
        if resource is None:
            raise invalid_params(f"resource '{uri}' not found")

        logger.info("Reading resource", extra={"uri": uri})
        try:
            text = await self.load_content(resource)
        except ResourceReadError as e:
            logger.error("Failed to read resource", extra={"uri": uri, "error": str(e)})
            raise ProtocolError(INTERNAL_ERROR, "Internal error", str(e))

        return {
            "contents": [
                {"uri": resource.uri, "mimeType": resource.mime_type, "text": text}
            ]
        }
