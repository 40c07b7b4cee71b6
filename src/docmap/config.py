"""Codec configuration loaded from ``DOCMAP_``-prefixed environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CodecConfig(BaseSettings):
    """Behavior switches for the document codec.

    ``strict_required`` makes decoding fail when a required property is missing
    from a document instead of leaving the attribute as None.
    """

    strict_required: bool = Field(default=False)
    max_depth: int = Field(default=32, ge=1)
    check_value_types: bool = Field(default=True)

    model_config = SettingsConfigDict(env_prefix="DOCMAP_", frozen=True, extra="ignore")
