"""Functional tests for the Valet observations endpoint.

    https://www.bankofcanada.ca/valet/observations/{seriesNames}/{format}

Mandatory path parameters:
- seriesNames: comma-separated series in the form FX<CUR1><CUR2>, e.g. FXUSDCAD,FXEURUSD.
- format: json, xml or csv.

Optional query parameters: start_date, end_date, recent, recent_weeks,
recent_months, recent_years, order_dir (asc/desc).
"""

from __future__ import annotations

import asyncio
import math

import pytest

from adapters.http_client import ApiClient
from adapters.valet_api import DEFAULT_SERIES, base_builder, observations_request
from core.domain.results import AverageOk, UpstreamError
from core.services.metrics import MetricCalculator
from core.services.schema_validator import observations_validator

pytestmark = pytest.mark.live


def _get(settings, request):
    return asyncio.run(ApiClient(settings).dispatch(request))


def test_successful_get_request(live_settings) -> None:
    request = observations_request(DEFAULT_SERIES, settings=live_settings).build()
    response = _get(live_settings, request)

    assert response is not None
    assert response.status == 200
    assert isinstance(response.data, dict)


def test_incorrect_format_is_bad_request(live_settings) -> None:
    request = base_builder(live_settings).set_endpoint(f"/valet/observations/{DEFAULT_SERIES}/jsonxx").build()
    response = _get(live_settings, request)

    assert response is not None
    assert response.status == 400


def test_unknown_series_is_not_found(live_settings) -> None:
    request = observations_request("FXUSDCADXX", settings=live_settings).build()
    response = _get(live_settings, request)

    assert response is not None
    assert response.status == 404


@pytest.mark.parametrize("value", ["abc", -1, 0])
def test_incorrect_recent_param(live_settings, value) -> None:
    request = observations_request(DEFAULT_SERIES, settings=live_settings, recent=value).build()
    response = _get(live_settings, request)

    assert response is not None
    assert response.status == 400
    assert "Bad recent observations request parameters" in (response.message() or "")


@pytest.mark.parametrize(
    "currency_from,currency_to,missing_status",
    [("CAD", "AUD", 404), ("USD", "CAD", None), ("USD", "EUR", 404)],
)
def test_average_conversion_rate(live_settings, currency_from, currency_to, missing_status) -> None:
    # Valet only publishes some directions (e.g. FXUSDCAD); the others come
    # back as UpstreamError(404) and average() falls back to 0.
    weeks = 10
    calculator = MetricCalculator(settings=live_settings)
    result = asyncio.run(calculator.compute(weeks, currency_from, currency_to))
    average = asyncio.run(calculator.average(weeks, currency_from, currency_to))

    assert math.isfinite(average) and average >= 0
    if missing_status is None:
        assert isinstance(result, AverageOk), result
        assert result.count > 0
        assert average == pytest.approx(result.value)
    else:
        assert isinstance(result, UpstreamError), result
        assert result.status == missing_status
        assert average == 0


def test_usd_cad_average_is_positive(live_settings) -> None:
    result = asyncio.run(MetricCalculator(settings=live_settings).compute(10, "USD", "CAD"))
    assert isinstance(result, AverageOk), result
    assert result.value > 0


def test_response_matches_schema(live_settings) -> None:
    request = observations_request(DEFAULT_SERIES, settings=live_settings, recent=10).build()
    response = _get(live_settings, request)

    assert response is not None
    assert response.status == 200
    validator = observations_validator(settings=live_settings)
    assert validator.validate(response.data), validator.errors(response.data)
