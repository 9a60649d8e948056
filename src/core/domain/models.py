"""Modelos del dominio (Pydantic v2).

Estos modelos describen *qué* viaja por el harness (peticiones, respuestas,
observaciones), no *cómo* se obtiene.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, model_validator
from pydantic.config import ConfigDict


class HttpMethod(str, Enum):
    """Métodos HTTP soportados por los wrappers del cliente."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"


class RequestDescriptor(BaseModel):
    """Petición lista para enviar, producida por `RequestBuilder.build()`.

    Inmutable: una vez construida no cambia; se descarta tras el dispatch.
    """

    model_config = ConfigDict(frozen=True)

    method: str = Field(
        default=HttpMethod.GET.value,
        min_length=1,
        description="Método HTTP (no se valida contra HttpMethod).",
    )
    url: str = Field(
        ...,
        min_length=1,
        description="URL absoluta, incluyendo query string.",
    )
    headers: dict[str, str] = Field(
        default_factory=dict,
        description="Headers a enviar.",
    )
    body: Any | None = Field(
        default=None,
        description="Payload opaco (dict/list -> JSON, str/bytes -> crudo).",
    )


class ResponseEnvelope(BaseModel):
    """Respuesta normalizada devuelta por `ApiClient.dispatch`."""

    model_config = ConfigDict(frozen=True)

    status: int = Field(
        ...,
        ge=0,
        description="Código HTTP devuelto por el servidor (sin restringir a 1xx-5xx).",
    )
    headers: dict[str, str] = Field(
        default_factory=dict,
        description="Headers de la respuesta (nombres en minúsculas).",
    )
    data: Any | None = Field(
        default=None,
        description="JSON parseado si el cuerpo es JSON; si no, el texto crudo.",
    )
    url: str | None = Field(
        default=None,
        description="URL final de la petición.",
    )
    elapsed_ms: float | None = Field(
        default=None,
        ge=0,
        description="Duración del round trip en milisegundos (si se conoce).",
    )

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def message(self) -> str | None:
        """Campo `message` del cuerpo de error de Valet, si existe."""

        if isinstance(self.data, dict):
            value = self.data.get("message")
            if isinstance(value, str):
                return value
        return None


class SeriesObservation(BaseModel):
    """Una observación fechada de Valet.

    Ejemplo crudo: `{"d": "2024-01-02", "FXUSDCAD": {"v": "1.3316"}}`.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    date: str = Field(
        ...,
        alias="d",
        min_length=1,
        description="Fecha de la observación (YYYY-MM-DD).",
    )
    values: dict[str, dict[str, str]] = Field(
        default_factory=dict,
        description="Serie -> {'v': valor codificado como string}.",
    )

    @model_validator(mode="before")
    @classmethod
    def _collect_series(cls, data: Any) -> Any:
        # Valet pone cada serie como key de primer nivel junto a "d".
        if isinstance(data, dict) and "values" not in data:
            series = {k: v for k, v in data.items() if k not in ("d", "date")}
            out = {k: v for k, v in data.items() if k in ("d", "date")}
            out["values"] = series
            return out
        return data

    def value(self, series: str) -> str | None:
        entry = self.values.get(series)
        if entry is None:
            return None
        return entry.get("v")
