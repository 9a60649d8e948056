"""Resultados tipados de las métricas derivadas.

`AverageRateResult` separa "promedio calculado" de "input inválido" y de
"fallo del servicio", para que un 0 nunca sea ambiguo.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class AverageOk:
    value: float
    count: int
    series: str


@dataclass(frozen=True)
class InvalidInput:
    reason: str


@dataclass(frozen=True)
class UpstreamError:
    """El servicio no devolvió datos utilizables.

    `status` es None cuando no hubo respuesta HTTP.
    """

    status: int | None
    message: str


AverageRateResult = Union[AverageOk, InvalidInput, UpstreamError]


def value_or_zero(result: AverageRateResult) -> float:
    if isinstance(result, AverageOk):
        return result.value
    return 0.0
