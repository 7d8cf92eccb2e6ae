"""Configuration domain exports."""

from .loader import SettingsError, resolve_hostport, resolve_pipeline_settings, resolve_secret_key
from .pipeline_settings import CLOUD_HOST, LOCAL_HOST, STAGING_HOST, PipelineSettings

__all__ = [
    "CLOUD_HOST",
    "LOCAL_HOST",
    "PipelineSettings",
    "STAGING_HOST",
    "SettingsError",
    "resolve_hostport",
    "resolve_pipeline_settings",
    "resolve_secret_key",
]
