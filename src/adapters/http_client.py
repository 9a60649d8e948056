"""Wrapper de httpx.

- `build_async_client` estandariza timeouts y headers.
- `ApiClient` envía un `RequestDescriptor` y normaliza el resultado a
  `ResponseEnvelope | None`, sin propagar errores de transporte ni de
  servidor: el código de test puede hacer `assert response.status == 400`
  directamente.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping

import httpx

from core.config import AppSettings
from core.domain.models import HttpMethod, RequestDescriptor, ResponseEnvelope

logger = logging.getLogger(__name__)


def build_async_client(
    settings: AppSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` con defaults seguros.

    `transport` permite inyectar `httpx.MockTransport` en tests.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json, application/xml;q=0.9, */*;q=0.8",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )


def _parse_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return response.text


def _body_kwargs(body: Any) -> dict[str, Any]:
    if body is None:
        return {}
    if isinstance(body, (bytes, str)):
        return {"content": body}
    return {"json": body}


def to_envelope(response: httpx.Response) -> ResponseEnvelope:
    elapsed_ms: float | None
    try:
        elapsed_ms = response.elapsed.total_seconds() * 1000.0
    except RuntimeError:
        # `.elapsed` solo existe cuando la respuesta se cerró.
        elapsed_ms = None
    return ResponseEnvelope(
        status=response.status_code,
        headers={k.lower(): v for k, v in response.headers.items()},
        data=_parse_body(response),
        url=str(response.request.url) if response.request else None,
        elapsed_ms=elapsed_ms,
    )


class ApiClient:
    """Cliente HTTP genérico (GET/POST/PUT/DELETE).

    Si no se inyecta `client`, cada dispatch abre su propio
    `httpx.AsyncClient`; las llamadas no comparten conexiones ni estado.
    """

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        log: logging.Logger | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._client = client
        self._log = log or logger

    async def _send(self, client: httpx.AsyncClient, request: RequestDescriptor) -> httpx.Response:
        return await client.request(
            request.method,
            request.url,
            headers=request.headers or None,
            **_body_kwargs(request.body),
        )

    async def dispatch(self, request: RequestDescriptor) -> ResponseEnvelope | None:
        extra = {"method": request.method, "url": request.url}
        try:
            if self._client is not None:
                response = await self._send(self._client, request)
            else:
                async with build_async_client(self._settings) as client:
                    response = await self._send(client, request)
        except (httpx.TimeoutException, httpx.NetworkError, httpx.RemoteProtocolError) as exc:
            # Petición enviada pero sin respuesta.
            self._log.error("No response received: %s", exc, extra=extra)
            return None
        except (httpx.InvalidURL, httpx.UnsupportedProtocol, httpx.LocalProtocolError) as exc:
            # La petición no se pudo construir/enviar.
            self._log.error("Request could not be sent: %s", exc, extra=extra)
            return None
        except httpx.HTTPError as exc:
            self._log.error("Request failed: %s", exc, extra=extra)
            return None
        except Exception as exc:
            # Headers/body que httpx no puede codificar, entre otros.
            self._log.error("Request could not be built: %s", exc, extra=extra, exc_info=True)
            return None

        if not response.status_code:
            self._log.error("Undefined response", extra=extra)
            return None

        try:
            envelope = to_envelope(response)
        except ValueError as exc:
            self._log.error("Response could not be normalized: %s", exc, extra=extra, exc_info=True)
            return None

        if envelope.status >= 400:
            self._log.warning(
                "Server responded with error status %s",
                envelope.status,
                extra={**extra, "status": envelope.status},
            )
        else:
            self._log.debug("Response %s", envelope.status, extra={**extra, "status": envelope.status})
        return envelope

    async def get(self, url: str, *, headers: Mapping[str, str] | None = None) -> ResponseEnvelope | None:
        return await self.dispatch(
            RequestDescriptor(method=HttpMethod.GET.value, url=url, headers=dict(headers or {}))
        )

    async def post(
        self, url: str, body: Any, *, headers: Mapping[str, str] | None = None
    ) -> ResponseEnvelope | None:
        return await self.dispatch(
            RequestDescriptor(method=HttpMethod.POST.value, url=url, headers=dict(headers or {}), body=body)
        )

    async def put(
        self, url: str, body: Any, *, headers: Mapping[str, str] | None = None
    ) -> ResponseEnvelope | None:
        return await self.dispatch(
            RequestDescriptor(method=HttpMethod.PUT.value, url=url, headers=dict(headers or {}), body=body)
        )

    async def delete(self, url: str, *, headers: Mapping[str, str] | None = None) -> ResponseEnvelope | None:
        return await self.dispatch(
            RequestDescriptor(method=HttpMethod.DELETE.value, url=url, headers=dict(headers or {}))
        )
