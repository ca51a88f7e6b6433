"""GroupCartSettings — the resolved configuration of one CLI invocation.

Sources, strongest first:

1. keyword arguments (the root command's flags; ``None`` means "not given")
2. ``GROUPCART_*`` environment variables, ``__`` for nested sections
   (``GROUPCART_DATABASE__URL``)
3. ``groupcart.toml``
4. defaults from :mod:`groupcart.config.models`
"""

from __future__ import annotations

from contextvars import ContextVar
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from groupcart.config.discovery import find_config, read_toml
from groupcart.config.models import DatabaseConfig

DATA_DIRNAME = ".groupcart"
DB_FILENAME = "groupcart.db"

# Parsed TOML handed to the source while a settings object is being built.
_toml_data: ContextVar[dict[str, Any] | None] = ContextVar("groupcart_toml_data", default=None)


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Settings source over an already parsed ``groupcart.toml``."""

    def __init__(self, settings_cls: type[BaseSettings], data: dict[str, Any]) -> None:
        super().__init__(settings_cls)
        self._data = data

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._data.get(field_name), field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return {k: v for k, v in self._data.items() if k in self.settings_cls.model_fields}


class GroupCartSettings(BaseSettings):
    """Settings shared by the CLI and the store.

    Attributes:
        data_root: Directory that holds ``.groupcart/``. The config file's
            directory when one was found, else the working directory.
        config_path: The ``groupcart.toml`` that was read, if any.
        db_url: ``--db`` / ``GROUPCART_DB_URL``; wins over ``[database] url``.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "GROUPCART_",
        "env_nested_delimiter": "__",
    }

    data_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None
    db_url: str | None = None

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        toml = TomlSettingsSource(settings_cls, _toml_data.get() or {})
        return init_settings, env_settings, toml

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        data_root: Path | None = None,
        **cli_flags: Any,
    ) -> GroupCartSettings:
        """Build settings for a command invocation.

        An explicit *config_path* that does not exist is ignored rather than
        searched around. Flags passed as ``None`` are left to the weaker
        sources.
        """
        if config_path:
            explicit = Path(config_path)
            toml_path = explicit if explicit.is_file() else None
        else:
            toml_path = find_config(data_root)

        if data_root is None:
            data_root = toml_path.parent if toml_path is not None else Path.cwd()

        overrides = {name: value for name, value in cli_flags.items() if value is not None}
        token = _toml_data.set(read_toml(toml_path) if toml_path is not None else {})
        try:
            return cls(data_root=data_root, config_path=toml_path, **overrides)
        finally:
            _toml_data.reset(token)

    @property
    def data_dir(self) -> Path:
        """``<data_root>/.groupcart``, home of the default SQLite file."""
        return self.data_root / DATA_DIRNAME

    def database_url(self) -> str:
        """``db_url``, else ``[database] url``, else the SQLite file in :attr:`data_dir`."""
        return self.db_url or self.database.url or f"sqlite:///{self.data_dir / DB_FILENAME}"
