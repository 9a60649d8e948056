"""Modelos y entidades del dominio.

Aquí viven las estructuras de datos puras (Pydantic v2 / dataclasses).
El dominio no conoce HTTP ni CLI: solo peticiones, respuestas y series.
"""
