from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class FieldWireConfig(BaseSettings):
    """Mutable configuration shared by the manager, the ambient context and injected objects.

    Values are read from ``FIELDWIRE_*`` environment variables when the object
    is created and may be changed afterwards; assignments are validated.

    Examples:
        .. code-block:: python

            config = FieldWireConfig(debug=False)
            config.cache_update_period = 60

    """

    model_config = SettingsConfigDict(
        env_prefix="FIELDWIRE_",
        validate_assignment=True,
        extra="ignore",
    )

    cache_update_period: int = Field(default=0, ge=0)
    """Seconds between cache refreshes; ``0`` disables periodic refresh."""

    model_update_period: int = Field(default=0, ge=0)
    """Seconds between model reloads; ``0`` disables periodic reload."""

    resource_watcher_update_period: int = Field(default=0, ge=0)
    """Seconds between resource change checks; ``0`` disables the watcher."""

    connection_timeout: int = Field(default=2000, ge=0)
    """Timeout in milliseconds for locating remote resources."""

    gzip_enabled: bool = True
    debug: bool = True
    minimize_enabled: bool = True
    ignore_missing_resources: bool = True
    ignore_empty_group: bool = True
    ignore_failing_processor: bool = False
    parallel_preprocessing: bool = False
    cache_gzipped_content: bool = True
    encoding: str = "UTF-8"
    header: str | None = None


__all__ = ["FieldWireConfig"]
