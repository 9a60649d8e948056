"""Validación de payloads contra un JSON Schema (jsonschema).

El schema se comprueba una sola vez al construir el validador
(`jsonschema.SchemaError` si es inválido); `validate` devuelve un booleano.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

from jsonschema import Draft7Validator
from jsonschema.validators import validator_for

from core.config import AppSettings
from core.resources_loader import load_observations_schema


class SchemaValidator:
    def __init__(self, schema: Mapping[str, Any]) -> None:
        cls = validator_for(schema, default=Draft7Validator)
        cls.check_schema(schema)
        self._validator = cls(schema)

    def validate(self, payload: Any) -> bool:
        return self._validator.is_valid(payload)

    def errors(self, payload: Any) -> list[str]:
        """Violaciones legibles (`path: mensaje`), ordenadas por ruta."""

        out: list[str] = []
        for err in sorted(self._validator.iter_errors(payload), key=lambda e: list(map(str, e.absolute_path))):
            where = "/".join(str(p) for p in err.absolute_path) or "<root>"
            out.append(f"{where}: {err.message}")
        return out


def observations_validator(
    path: Path | None = None,
    *,
    settings: AppSettings | None = None,
) -> SchemaValidator:
    return SchemaValidator(load_observations_schema(path, settings=settings))
