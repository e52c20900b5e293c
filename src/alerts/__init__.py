"""
Alert Storage Module

User-created disaster alerts behind a swappable repository interface.
"""

from .alert_repository import AlertRepository, InMemoryAlertRepository, JsonFileAlertRepository, alert_summary

__all__ = ["AlertRepository", "InMemoryAlertRepository", "JsonFileAlertRepository", "alert_summary"]
