import json
from pathlib import Path
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict, PydanticBaseSettingsSource, YamlConfigSettingsSource

from binstream.core.serializer.endian import Endian


class ZipSettings(BaseModel):
    header_endian: Annotated[
        Literal["little", "big", "native"],
        Field(
            description=(
                "Byte order used to decode local file header fields.\n"
                "ZIP mandates little-endian; 'native' decodes in host order\n"
                "and is only correct on little-endian hosts."
            ),
            default="little"
        )
    ]

    @property
    def endian(self) -> Endian:
        if self.header_endian == "native":
            return Endian.NATIVE
        return Endian(self.header_endian)


class OutputSettings(BaseModel):
    directory: Annotated[
        Path,
        Field(
            description="Directory where extracted entries are written.",
            default=Path(".")
        )
    ]

    overwrite: Annotated[
        bool,
        Field(
            description="Replace an existing file with the same name as the entry.",
            default=True
        )
    ]


class RenderSettings(BaseModel):
    format: Annotated[
        Literal["yaml", "json", "none"],
        Field(
            description="Output format of the entry description printed on stdout.",
            default="yaml"
        )
    ]


class BinstreamConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="BINSTREAM_",
        env_nested_delimiter="__",
        extra="ignore"
    )

    log_level: Annotated[
        Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        Field(description="Logging verbosity.", default="INFO")
    ]

    zip: Annotated[
        ZipSettings,
        Field(description="ZIP decoding options.", default_factory=ZipSettings)
    ]

    output: Annotated[
        OutputSettings,
        Field(description="Extraction target.", default_factory=OutputSettings)
    ]

    render: Annotated[
        RenderSettings,
        Field(description="Entry description rendering.", default_factory=RenderSettings)
    ]

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Priority: explicit arguments > environment > YAML file
        sources: list[PydanticBaseSettingsSource] = [init_settings, env_settings]
        if cls.model_config.get("yaml_file"):
            sources.append(YamlConfigSettingsSource(settings_cls))
        return tuple(sources)


def load_config(configfile: Path | None = None, **overrides: Any) -> BinstreamConfig:
    """
    Build the configuration from an optional YAML file, the BINSTREAM_*
    environment and explicit overrides. Validation errors end the process
    with a readable message.
    """
    settings_cls = BinstreamConfig
    if configfile is not None:
        class FileBinstreamConfig(BinstreamConfig):
            model_config = SettingsConfigDict(yaml_file=configfile)

        settings_cls = FileBinstreamConfig

    try:
        return settings_cls(**overrides)
    except ValidationError as ex:
        msg = ["Configuration validation failed:"]
        errs = json.loads(ex.json())
        for err in errs:
            msg.append(f"  {'.'.join(str(part) for part in err['loc'])}: {err['msg']}")
        raise SystemExit("\n".join(msg))
