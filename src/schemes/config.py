import logging
from functools import lru_cache
from typing import Any, Literal, Optional, Tuple, Type

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict


class ConfigError(RuntimeError):
    """Configuration-related error."""
    pass


# ─────────────────────────────────────────────────────────────
# Section configs
# ─────────────────────────────────────────────────────────────


class LoggingSettings(BaseModel):
    level: Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"] = "INFO"
    format: str = (
        "%(asctime)-20s %(name)-40s "
        "%(levelname)-8s: %(message)s"
    )


class XmlSettings(BaseModel):
    """
    Layout of written scheme documents and buffering of the reader.

    The defaults produce the canonical document format (two spaces per
    level, CRLF line endings). Only change them if the consumer of the
    documents does not care about byte-level compatibility.
    """
    encoding: str = Field(
        "UTF-8", description="Encoding declared in the prolog and used for files."
    )
    indent: str = Field(
        "  ", description="Indentation added per nesting level."
    )
    line_ending: str = Field(
        "\r\n", description="Line terminator written after every element."
    )
    read_chunk_size: int = Field(
        64 * 1024, description="Number of characters fed to the parser at once."
    )

    @field_validator("read_chunk_size")
    @classmethod
    def _positive_chunk_size(cls, value: int) -> int:
        if value <= 0:
            raise ValueError(f"read_chunk_size must be positive, got {value}")
        return value


class DotSettings(BaseModel):
    graph_name: str = Field("G", description="Name of the emitted digraph.")
    indent: str = Field("  ", description="Indentation of node lines.")
    line_ending: str = Field("\r\n", description="Line terminator.")


# ─────────────────────────────────────────────────────────────
# Top-level settings
# ─────────────────────────────────────────────────────────────


class AppSettings(BaseSettings):
    """
    Canonical configuration of the schemes library.

    Values come from init kwargs (tests/overrides) or the defaults in this
    class. Environment variables and .env files are not consulted: the
    document layout must not depend on the process environment.
    """

    model_config = SettingsConfigDict(
        extra="ignore",
        validate_default=True,
    )

    app_name: str = "schemes"
    debug: bool = False

    logging: LoggingSettings = LoggingSettings()
    xml: XmlSettings = XmlSettings()  # type: ignore[call-arg]
    dot: DotSettings = DotSettings()  # type: ignore[call-arg]

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        return (init_settings,)

    def validate_encoding(self) -> None:
        """Ensure the configured XML encoding is known to this interpreter."""
        import codecs

        try:
            codecs.lookup(self.xml.encoding)
        except LookupError as exc:
            raise ConfigError(f"Unknown XML encoding {self.xml.encoding!r}") from exc


@lru_cache(maxsize=1)
def get_settings(**overrides: Any) -> AppSettings:
    """
    Cached accessor for process-wide settings.

    `overrides` are init kwargs → highest precedence (handy in tests).
    """
    settings = AppSettings(**overrides)
    settings.validate_encoding()
    return settings


def configure_logging(settings: Optional[LoggingSettings] = None) -> None:
    """Apply the logging section to the root logger."""
    if settings is None:
        settings = get_settings().logging
    logging.basicConfig(level=settings.level, format=settings.format, force=True)
    logging.getLogger(__name__).debug("Logging configured at level %s", settings.level)
