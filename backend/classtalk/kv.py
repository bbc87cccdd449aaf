from __future__ import annotations
import logging
from abc import ABC, abstractmethod
from typing import Any, AsyncIterator, Optional

import httpx
from sqlalchemy.orm import sessionmaker

from .db import SessionLocal
from .errors import ConfigurationError, UpstreamError
from .models import KVEntry
from .settings import settings

logger = logging.getLogger("classtalk.kv")


class KeyValueStore(ABC):
	"""Minimal string key-value store holding serialized sessions."""

	@abstractmethod
	async def get(self, key: str) -> Optional[str]:
		...

	@abstractmethod
	async def set(self, key: str, value: str) -> None:
		...

	async def aclose(self) -> None:
		return None


class UpstashStore(KeyValueStore):
	"""Upstash Redis REST API: each command is POSTed as a JSON array."""

	def __init__(
		self,
		url: Optional[str] = None,
		token: Optional[str] = None,
		*,
		transport: Optional[httpx.AsyncBaseTransport] = None,
	) -> None:
		self.url = url or settings.upstash_url
		self.token = token or settings.upstash_token
		if not self.url or not self.token:
			raise ConfigurationError("Missing UPSTASH_REDIS_REST_URL or UPSTASH_REDIS_REST_TOKEN")
		self._headers = {
			"Authorization": f"Bearer {self.token}",
			"Content-Type": "application/json",
		}
		self._client = httpx.AsyncClient(timeout=settings.http_timeout_seconds, transport=transport)

	async def command(self, *args: Any) -> Any:
		try:
			r = await self._client.post(self.url, headers=self._headers, json=list(args))
		except httpx.RequestError as net_err:
			logger.warning("Upstash %s failed: %s", args[0], net_err)
			raise UpstreamError(f"Key-value store unreachable: {net_err}") from net_err
		try:
			data = r.json()
		except ValueError:
			raise UpstreamError(
				f"Key-value store error ({r.status_code})",
				raw=r.text,
				provider_status=r.status_code,
			)
		if isinstance(data, dict) and data.get("error"):
			raise UpstreamError(str(data["error"]), provider_status=r.status_code)
		if r.is_error:
			raise UpstreamError(f"Key-value store error ({r.status_code})", raw=r.text, provider_status=r.status_code)
		return data.get("result") if isinstance(data, dict) else None

	async def get(self, key: str) -> Optional[str]:
		result = await self.command("GET", key)
		return None if result is None else str(result)

	async def set(self, key: str, value: str) -> None:
		await self.command("SET", key, value)

	async def aclose(self) -> None:
		await self._client.aclose()


class SqlStore(KeyValueStore):
	"""Key-value rows in a SQLAlchemy table, for local runs without Upstash."""

	def __init__(self, session_factory: Optional[sessionmaker] = None) -> None:
		self._session_factory = session_factory or SessionLocal

	async def get(self, key: str) -> Optional[str]:
		with self._session_factory() as db:
			row = db.get(KVEntry, key)
			return row.value if row is not None else None

	async def set(self, key: str, value: str) -> None:
		with self._session_factory() as db:
			row = db.get(KVEntry, key)
			if row is None:
				db.add(KVEntry(key=key, value=value))
			else:
				row.value = value
			db.commit()


def build_store() -> KeyValueStore:
	backend = (settings.kv_backend or "upstash").strip().lower()
	if backend == "upstash":
		return UpstashStore()
	if backend == "sql":
		return SqlStore()
	raise ConfigurationError(f"Unknown KV_BACKEND: {settings.kv_backend}")


async def get_store() -> AsyncIterator[KeyValueStore]:
	store = build_store()
	try:
		yield store
	finally:
		await store.aclose()
