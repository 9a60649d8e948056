"""Métricas derivadas sobre series de Valet.

`MetricCalculator.compute` devuelve un resultado tipado (`AverageOk`,
`InvalidInput`, `UpstreamError`). `average` conserva el contrato histórico:
devuelve 0 para cualquier caso que no sea `AverageOk` y deja el motivo en
el log. Ninguno de los dos lanza por condiciones esperadas.
"""

from __future__ import annotations

import logging
import math
from numbers import Integral, Real
from typing import Any

from adapters.http_client import ApiClient
from adapters.valet_api import extract_values, observations_request, series_name
from core.config import AppSettings
from core.domain.results import (
    AverageOk,
    AverageRateResult,
    InvalidInput,
    UpstreamError,
    value_or_zero,
)
from core.interfaces.dispatcher import RequestDispatcher

logger = logging.getLogger(__name__)


def validate_average_inputs(weeks: Any, currency_from: Any, currency_to: Any) -> str | None:
    """Devuelve el motivo de rechazo, o None si los inputs son válidos."""

    if isinstance(weeks, bool) or not isinstance(weeks, Real):
        return "weeks must be a positive number"
    if isinstance(weeks, Integral):
        # Sin math.isfinite: desborda con enteros mayores que un float.
        if weeks <= 0:
            return "weeks must be a positive number"
    elif not math.isfinite(weeks) or weeks <= 0:
        return "weeks must be a positive number"
    elif int(weeks) != weeks:
        return "weeks must be a whole number"
    if not isinstance(currency_from, str) or not isinstance(currency_to, str):
        return "currencyFrom and currencyTo must be strings"
    if currency_from.upper() == currency_to.upper():
        return "currencyFrom and currencyTo must be distinct"
    if len(currency_from) != 3 or len(currency_to) != 3:
        return "currencyFrom and currencyTo must be 3 characters long"
    return None


class MetricCalculator:
    def __init__(
        self,
        client: RequestDispatcher | None = None,
        *,
        settings: AppSettings | None = None,
        log: logging.Logger | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._client = client or ApiClient(self._settings)
        self._log = log or logger

    async def compute(self, weeks: Any, currency_from: Any, currency_to: Any) -> AverageRateResult:
        """Promedio de la tasa `FROM->TO` en las últimas `weeks` semanas."""

        reason = validate_average_inputs(weeks, currency_from, currency_to)
        if reason is not None:
            self._log.error(reason)
            return InvalidInput(reason)

        series = series_name(currency_from, currency_to)
        try:
            request = observations_request(series, settings=self._settings, recent_weeks=int(weeks)).build()
        except ValueError as exc:
            # p.ej. enteros demasiado largos para pasarlos a texto.
            reason = "weeks is out of range"
            self._log.error("%s: %s", reason, exc)
            return InvalidInput(reason)
        response = await self._client.dispatch(request)

        if response is None:
            message = "API call failed, no response"
            self._log.error(message, extra={"series": series})
            return UpstreamError(status=None, message=message)
        if response.status != 200:
            message = response.message() or f"API call failed, status code: {response.status}"
            self._log.error(
                "API call failed, status code: %s", response.status,
                extra={"series": series, "status": response.status},
            )
            return UpstreamError(status=response.status, message=message)

        try:
            values = [float(v) for v in extract_values(response.data, series)]
        except (KeyError, TypeError, ValueError) as exc:
            message = f"Malformed observations payload: {exc!r}"
            self._log.error(message, extra={"series": series})
            return UpstreamError(status=response.status, message=message)

        if not values:
            message = "No conversion rate data present"
            self._log.error(message, extra={"series": series})
            return UpstreamError(status=response.status, message=message)

        avg = sum(values) / len(values)
        if not math.isfinite(avg):
            message = "Conversion rate data is not finite"
            self._log.error(message, extra={"series": series})
            return UpstreamError(status=response.status, message=message)

        return AverageOk(value=avg, count=len(values), series=series)

    async def average(self, weeks: Any, currency_from: Any, currency_to: Any) -> float:
        return value_or_zero(await self.compute(weeks, currency_from, currency_to))


async def calculate_average_conversion_rate(
    weeks: Any,
    currency_from: Any,
    currency_to: Any,
    *,
    client: RequestDispatcher | None = None,
    settings: AppSettings | None = None,
) -> float:
    calculator = MetricCalculator(client, settings=settings)
    return await calculator.average(weeks, currency_from, currency_to)
