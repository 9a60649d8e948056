"""Cargador de recursos (JSON Schema de observations).

El schema es configuración, no código: se distribuye junto al paquete en
`core/resources/` y se puede sustituir con `VALET_SCHEMA_PATH`.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from core.config import AppSettings

OBSERVATIONS_SCHEMA_FILENAME = "observations_schema.json"


def _resources_dir() -> Path:
    return Path(__file__).resolve().parent / "resources"


def get_default_schema_path() -> Path:
    return _resources_dir() / OBSERVATIONS_SCHEMA_FILENAME


def load_observations_schema(
    path: Path | None = None,
    *,
    settings: AppSettings | None = None,
) -> dict[str, Any]:
    """Carga el schema de observations.

    Orden:
    1) `path` explícito
    2) `settings.schema_path` (VALET_SCHEMA_PATH)
    3) schema por defecto del paquete
    """

    if path is None:
        settings = settings or AppSettings()
        path = settings.schema_path or get_default_schema_path()
    return json.loads(Path(path).read_text(encoding="utf-8"))
