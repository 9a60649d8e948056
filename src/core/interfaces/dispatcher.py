"""Contrato del cliente HTTP.

`RequestDispatcher` es estructural (Protocol): la calculadora de métricas y
la CLI dependen de él, no de `httpx`, y los tests pueden pasar un doble.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import RequestDescriptor, ResponseEnvelope


@runtime_checkable
class RequestDispatcher(Protocol):
    """Contrato mínimo para enviar una petición.

    Reglas:
    - `dispatch` es asíncrono porque hace I/O (HTTP).
    - Nunca lanza por errores de transporte o de servidor: devuelve el
      envelope si hubo respuesta, o None si no la hubo.
    """

    async def dispatch(self, request: RequestDescriptor) -> ResponseEnvelope | None:
        """Envía `request` y devuelve la respuesta normalizada."""

        ...
