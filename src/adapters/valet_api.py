"""Endpoints del servicio Valet (Banco de Canadá).

Endpoint cubierto:

    /valet/observations/{seriesNames}/{format}

- seriesNames: una o más series separadas por coma, p.ej. `FXUSDCAD,FXEURCAD`.
- format: `json`, `xml` o `csv`.

Parámetros opcionales: ver `OBSERVATION_PARAMS`. Valet responde 400 con un
`message` cuando un parámetro no cumple su restricción, y 404 para series
inexistentes.
"""

from __future__ import annotations

from typing import Any, Sequence

from adapters.request_builder import RequestBuilder
from core.config import AppSettings
from core.domain.models import HttpMethod, SeriesObservation

OBSERVATIONS_PATH = "/valet/observations/{series}/{fmt}"

OBSERVATION_PARAMS: tuple[str, ...] = (
    "start_date",
    "end_date",
    "recent",
    "recent_weeks",
    "recent_months",
    "recent_years",
    "order_dir",
)

DEFAULT_SERIES = "FXUSDCAD"


def series_name(currency_from: str, currency_to: str) -> str:
    """`FX<FROM><TO>` en mayúsculas (p.ej. USD, cad -> FXUSDCAD)."""

    return f"FX{currency_from.upper()}{currency_to.upper()}"


def base_builder(settings: AppSettings | None = None) -> RequestBuilder:
    settings = settings or AppSettings()
    return RequestBuilder().set_base_url(settings.base_url).set_method(HttpMethod.GET)


def observations_request(
    series_names: str | Sequence[str],
    fmt: str = "json",
    *,
    settings: AppSettings | None = None,
    **params: Any,
) -> RequestBuilder:
    """Builder para `/valet/observations/...`.

    Los params con valor None se omiten; nombres desconocidos -> ValueError.
    """

    unknown = sorted(set(params) - set(OBSERVATION_PARAMS))
    if unknown:
        raise ValueError(f"Unknown observations parameter(s): {', '.join(unknown)}")

    series = series_names if isinstance(series_names, str) else ",".join(series_names)
    builder = base_builder(settings).set_endpoint(OBSERVATIONS_PATH.format(series=series, fmt=fmt))
    for key, value in params.items():
        if value is not None:
            builder = builder.add_param(key, value)
    return builder


def parse_observations(payload: dict[str, Any]) -> list[SeriesObservation]:
    """Convierte `payload["observations"]` a modelos.

    Lanza KeyError/TypeError/ValidationError si el payload no tiene la forma
    esperada.
    """

    raw = payload["observations"]
    if not isinstance(raw, list):
        raise TypeError("'observations' must be a list")
    return [SeriesObservation.model_validate(item) for item in raw]


def extract_values(payload: dict[str, Any], series: str) -> list[str]:
    """Valores `v` de la serie, en el orden del payload.

    Una observación sin la serie o sin `v` se considera payload inválido.
    """

    values: list[str] = []
    for obs in payload["observations"]:
        values.append(obs[series]["v"])
    return values
