"""Evacuation waiting and shutdown cleanup for container cells."""

__version__ = "0.1.0"
__all__ = ["cleanup", "clock", "context", "evacuator", "models"]