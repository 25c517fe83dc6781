"""httpx adapter for the remote POS API."""
from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError as PydanticValidationError

from pos_sync.application.exceptions import AuthError, NetworkError, ValidationError
from pos_sync.domain.entities.catalog import Customer, OrderRecord, Product
from pos_sync.domain.value_objects.scope import SyncScope
from pos_sync.infrastructure.gateway.schemas import CustomerIn, OrderIn, ProductIn, category_names
from pos_sync.infrastructure.gateway.tokens import BearerToken

logger = logging.getLogger(__name__)

IDEMPOTENCY_HEADER = "Idempotency-Key"
_TRANSIENT_STATUSES = frozenset({408, 425, 429})


def build_client(
    base_url: str,
    timeout: float,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        base_url=base_url.rstrip("/"),
        timeout=httpx.Timeout(timeout),
        headers={"Accept": "application/json"},
        transport=transport,
    )


class HttpRemoteGateway:
    """Implements application.ports.gateway.RemoteGateway."""

    def __init__(self, client: httpx.AsyncClient, token: BearerToken, scope: SyncScope) -> None:
        self._client = client
        self._token = token
        self._scope = scope

    async def create_order(self, payload: dict[str, Any], idempotency_key: str) -> OrderRecord:
        body = await self._request(
            "POST",
            "/api/orders",
            scope=self._scope,
            json={**payload, "idempotencyKey": idempotency_key},
            headers={IDEMPOTENCY_HEADER: idempotency_key},
        )
        data = body.get("data")
        raw = (data.get("order") or data.get("sale")) if isinstance(data, dict) else None
        if not isinstance(raw, dict):
            # the server accepted the order; its echo is just malformed
            logger.warning("Order response missing order data (key=%s)", idempotency_key)
            return OrderRecord(id="", invoice_number=None, total_amount=None, raw=body)
        try:
            return OrderIn.model_validate(raw).to_entity(raw)
        except PydanticValidationError:
            logger.warning("Unparseable order echo (key=%s)", idempotency_key)
            return OrderRecord(id=str(raw.get("id", "")), invoice_number=None, total_amount=None, raw=raw)

    async def list_products(self, scope: SyncScope) -> list[Product]:
        body = await self._request("GET", "/api/products", scope=scope)
        items = self._extract_list(body, "products")
        return [self._parse(ProductIn, item).to_entity() for item in items]

    async def list_categories(self, scope: SyncScope) -> list[str]:
        body = await self._request("GET", "/api/products/categories", scope=scope)
        return category_names(self._extract_list(body, "categories"))

    async def list_customers(self, scope: SyncScope) -> list[Customer]:
        body = await self._request("GET", "/api/customers", scope=scope)
        items = self._extract_list(body, "customers")
        return [self._parse(CustomerIn, item).to_entity() for item in items]

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        scope: SyncScope | None = None,
        json: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        request_headers = {**self._token.auth_headers(), **(headers or {})}
        if scope is not None:
            request_headers["X-Tenant-Id"] = scope.tenant_id
            if scope.store_id:
                request_headers["X-Store-Id"] = scope.store_id

        try:
            resp = await self._client.request(method, path, json=json, headers=request_headers)
        except httpx.TimeoutException as exc:
            raise NetworkError(f"{method} {path} timed out") from exc
        except httpx.TransportError as exc:
            raise NetworkError(f"{method} {path} failed: {exc.__class__.__name__}") from exc

        body = _decode(resp)
        if resp.is_success:
            return body

        message = _error_message(body, resp.status_code)
        if resp.status_code in (401, 403):
            raise AuthError(message)
        if resp.status_code >= 500 or resp.status_code in _TRANSIENT_STATUSES:
            raise NetworkError(message)
        raise ValidationError(message)

    @staticmethod
    def _extract_list(body: dict[str, Any], name: str) -> list[Any]:
        data = body.get("data")
        items = data.get(name) if isinstance(data, dict) else None
        if not isinstance(items, list):
            raise ValidationError(f"response missing data.{name}")
        return items

    @staticmethod
    def _parse(schema, item: Any):
        try:
            return schema.model_validate(item)
        except PydanticValidationError as exc:
            raise ValidationError(f"malformed {schema.__name__}: {exc.error_count()} error(s)") from exc


def _decode(resp: httpx.Response) -> dict[str, Any]:
    if not resp.content:
        return {}
    try:
        data = resp.json()
    except ValueError:
        return {"raw": resp.text}
    return data if isinstance(data, dict) else {"data": data}


def _error_message(body: dict[str, Any], status_code: int) -> str:
    message = body.get("message")
    errors = body.get("errors")
    details = ", ".join(str(e) for e in errors) if isinstance(errors, list) else None
    if message and details:
        return f"{message}: {details}"
    return message or details or f"Request failed ({status_code})"
