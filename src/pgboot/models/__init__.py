"""pgboot data models."""

from .connection import ConnectionConfig, SettingObservation

__all__ = ['ConnectionConfig', 'SettingObservation']
