"""Configuración del Core.

Centraliza variables de entorno (pydantic-settings) para que el cliente HTTP,
la calculadora de métricas y la CLI lean la misma configuración.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "valet-harness"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "valet-harness"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "valet-harness"
    return Path.home() / ".config" / "valet-harness"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


class AppSettings(BaseSettings):
    """Configuración central de la aplicación.

    Todas las variables usan el prefijo `VALET_` (p.ej. `VALET_BASE_URL`).
    """

    model_config = SettingsConfigDict(
        env_prefix="VALET_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    base_url: str = Field(
        default="https://www.bankofcanada.ca",
        min_length=8,
        description="Base URL del servicio Valet.",
    )
    http_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Timeout por request (segundos).",
    )
    user_agent: str = Field(
        default="valet-harness/0.1 (+https://local)",
        min_length=1,
        description="User-Agent para las peticiones.",
    )

    log_level: str = Field(
        default="INFO",
        description="Nivel de logging (DEBUG, INFO, WARNING, ERROR).",
    )
    log_json: bool = Field(
        default=True,
        description="Emitir logs como JSON (una línea por registro).",
    )

    schema_path: Path | None = Field(
        default=None,
        description="Ruta local a un JSON Schema alternativo para observations.",
    )
