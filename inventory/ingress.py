"""
inventory/ingress.py - 인벤토리 저장소 ingress 클라이언트

인벤토리 저장소 ingress API의 HTTP 클라이언트입니다. part는 JSON으로 전송되며,
직렬화된 payload가 max_bytes를 넘으면 여러 payload로 분할하여 각각 고유한
refresh_state_part_uuid를 부여하고, 전송한 payload 수를 refresh run에 반환합니다.

Usage:
    client = IngressApiClient("http://ingress:8080", source="2a4f...")
    parts = client.save_inventory(collections, "Amazon", "Default", run_uuid, part_uuid)
    client.sweep_inventory("Amazon", "Default", run_uuid, parts, ["vms"])
"""

from __future__ import annotations

import json
import logging
from datetime import date, datetime
from typing import Any

import requests

from core.config import settings
from core.exceptions import IngressError

from .batcher import Collection
from .refresh import new_uuid

logger = logging.getLogger(__name__)


def _json_default(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    if hasattr(value, "to_dict"):
        return value.to_dict()
    raise TypeError(f"{type(value).__name__} is not JSON serializable")


def dumps(payload: Any) -> str:
    return json.dumps(payload, default=_json_default, separators=(",", ":"))


class IngressApiClient:
    """ingress API로 part와 sweep을 전송하는 업로더

    Attributes:
        base_url: ingress base URL
        source: uid of the source the inventory belongs to
        path: inventory endpoint path
        timeout: per-request timeout in seconds
        max_bytes: payload size above which a part is split
    """

    def __init__(
        self,
        base_url: str,
        source: str = "",
        path: str = settings.INGRESS_PATH,
        timeout: int = settings.INGRESS_TIMEOUT,
        max_bytes: int = settings.INGRESS_MAX_BYTES,
        session: requests.Session | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.source = source
        self.path = path
        self.timeout = timeout
        self.max_bytes = max_bytes
        self.session = session or requests.Session()
        self.session.headers.setdefault("Content-Type", "application/json")

    @property
    def url(self) -> str:
        return f"{self.base_url}/{self.path.strip('/')}"

    @property
    def sweep_url(self) -> str:
        return f"{self.url}/sweep"

    def save_inventory(
        self,
        collections: list[Collection],
        inventory_name: str,
        schema_name: str,
        refresh_state_uuid: str,
        refresh_state_part_uuid: str,
    ) -> int:
        """Post the collections of one part

        Returns:
            number of payloads posted (0 for no collections)

        Raises:
            IngressError: transport error or non-2xx response
        """
        if not collections:
            return 0

        base = {
            "name": inventory_name,
            "schema": {"name": schema_name},
            "source": self.source,
            "refresh_state_uuid": refresh_state_uuid,
        }
        serialized = [c.to_dict() for c in collections]

        payload = {**base, "refresh_state_part_uuid": refresh_state_part_uuid, "collections": serialized}
        body = dumps(payload)
        if len(body.encode("utf-8")) <= self.max_bytes:
            self._post("save_inventory", self.url, body)
            return 1

        base_size = len(dumps({**base, "refresh_state_part_uuid": refresh_state_part_uuid, "collections": []}))
        chunks = self._split(serialized, base_size)
        for index, chunk in enumerate(chunks):
            # first chunk keeps the part uuid handed in by the run
            part_uuid = refresh_state_part_uuid if index == 0 else new_uuid()
            self._post(
                "save_inventory",
                self.url,
                dumps({**base, "refresh_state_part_uuid": part_uuid, "collections": chunk}),
            )

        logger.debug("Part %s split into %d payloads", refresh_state_part_uuid, len(chunks))
        return len(chunks)

    def sweep_inventory(
        self,
        inventory_name: str,
        schema_name: str,
        refresh_state_uuid: str,
        total_parts: int,
        sweep_scope: list[str],
    ) -> None:
        """Post the sweep of a finished run

        Raises:
            IngressError: transport error or non-2xx response
        """
        payload = {
            "name": inventory_name,
            "schema": {"name": schema_name},
            "source": self.source,
            "refresh_state_uuid": refresh_state_uuid,
            "total_parts": total_parts,
            "sweep_scope": sorted(sweep_scope),
        }
        self._post("sweep_inventory", self.sweep_url, dumps(payload))

    def _split(self, collections: list[dict[str, Any]], base_size: int) -> list[list[dict[str, Any]]]:
        """Greedy split of serialized collections into payload-sized chunks

        Items are never split; an item larger than max_bytes gets a chunk of
        its own.
        """
        chunks: list[list[dict[str, Any]]] = []
        current: dict[str, list[Any]] = {}
        current_size = base_size

        for collection in collections:
            name = collection["name"]
            overhead = len(dumps({"name": name, "data": []})) + 1
            for item in collection["data"]:
                item_size = len(dumps(item).encode("utf-8")) + 1
                extra = item_size if name in current else item_size + overhead
                if current and current_size + extra > self.max_bytes:
                    chunks.append([{"name": n, "data": d} for n, d in current.items()])
                    current = {}
                    current_size = base_size
                    extra = item_size + overhead
                current.setdefault(name, []).append(item)
                current_size += extra

        if current:
            chunks.append([{"name": n, "data": d} for n, d in current.items()])
        return chunks

    def _post(self, operation: str, url: str, body: str) -> None:
        try:
            response = self.session.post(url, data=body, timeout=self.timeout)
        except requests.RequestException as e:
            raise IngressError(operation, f"POST {url}", cause=e) from e

        if not 200 <= response.status_code < 300:
            raise IngressError(operation, response.text[:500], status_code=response.status_code)
