"""Builder fluido de peticiones HTTP.

Cada setter devuelve un builder *nuevo*; el receptor nunca cambia. Así un
builder base (p.ej. con base URL y headers) se puede compartir entre tareas
concurrentes y especializar por llamada.

Uso:

    request = (
        RequestBuilder()
        .set_base_url("https://www.bankofcanada.ca")
        .set_endpoint("/valet/observations/FXUSDCAD/json")
        .add_param("recent_weeks", 10)
        .build()
    )
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Mapping
from urllib.parse import urlencode, urljoin, urlsplit, urlunsplit

from core.domain.models import HttpMethod, RequestDescriptor


class RequestBuildError(ValueError):
    """La combinación base URL + endpoint no produce una URL absoluta."""


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _upsert(pairs: tuple[tuple[str, str], ...], key: str, value: str) -> tuple[tuple[str, str], ...]:
    # Sobrescribe manteniendo la posición original de la key.
    if any(k == key for k, _ in pairs):
        return tuple((k, value if k == key else v) for k, v in pairs)
    return pairs + ((key, value),)


@dataclass(frozen=True)
class RequestBuilder:
    method: str = HttpMethod.GET.value
    base_url: str = ""
    endpoint: str = ""
    params: tuple[tuple[str, str], ...] = ()
    headers: tuple[tuple[str, str], ...] = ()
    body: Any | None = None

    def set_base_url(self, base_url: str) -> RequestBuilder:
        return replace(self, base_url=base_url)

    def set_method(self, method: str | HttpMethod) -> RequestBuilder:
        value = method.value if isinstance(method, HttpMethod) else method
        return replace(self, method=value)

    def set_endpoint(self, endpoint: str) -> RequestBuilder:
        return replace(self, endpoint=endpoint)

    def add_param(self, key: str, value: Any) -> RequestBuilder:
        return replace(self, params=_upsert(self.params, key, _stringify(value)))

    def set_header(self, key: str, value: Any) -> RequestBuilder:
        return replace(self, headers=_upsert(self.headers, key, _stringify(value)))

    def set_headers(self, headers: Mapping[str, Any] | None) -> RequestBuilder:
        builder = self
        for key, value in (headers or {}).items():
            builder = builder.set_header(key, value)
        return builder

    def set_body(self, body: Any | None) -> RequestBuilder:
        return replace(self, body=body)

    def build_url(self) -> str:
        """Resuelve endpoint contra base URL y serializa los params.

        Si no se añadió ningún param, se conserva la query embebida en el
        endpoint; si se añadió alguno, la query se reemplaza.
        """

        resolved = urljoin(self.base_url, self.endpoint)
        parts = urlsplit(resolved)
        if not parts.scheme or not parts.netloc:
            raise RequestBuildError(
                f"Invalid URL: endpoint {self.endpoint!r} against base {self.base_url!r}"
            )
        if self.params:
            parts = parts._replace(query=urlencode(list(self.params)))
        return urlunsplit(parts)

    def build(self) -> RequestDescriptor:
        return RequestDescriptor(
            method=self.method,
            url=self.build_url(),
            headers=dict(self.headers),
            body=self.body,
        )
