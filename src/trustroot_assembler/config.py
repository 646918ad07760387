"""
Configuration — typed, validated settings for one assembly run.

Uses pydantic-settings so every option can come from, in priority order:
  1. Command-line flags (passed in as init arguments by main.py)
  2. Environment variables prefixed TRUSTROOT_ (e.g. TRUSTROOT_URI)
  3. A .env file in the working directory
  4. The defaults below

Invalid settings raise pydantic.ValidationError at construction, before any
file is touched.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from trustroot_assembler.domain.models import AuthorityIdentity, Subject

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class AssemblerSettings(BaseSettings):
    """
    All inputs of the assembler.

    template_filepath and trusted_root_path are required in the sense that an
    empty value is rejected; both have usable defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="TRUSTROOT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    output_trustroot_filepath: Path = Field(
        default=Path("/tmp/trustroot.yaml"),
        description="The name of the output TrustRoot file",
    )
    template_filepath: Path = Field(
        default=Path("trustroot.template.yaml"),
        description="The path to the template file",
    )
    trusted_root_path: Path = Field(
        default=Path("~/.sigstore/root/targets/trusted_root.json"),
        description="The path to the trusted_root.json file",
        validate_default=True,
    )
    organization: str = Field(default="GitHub, Inc.", description="The organization name")
    common_name: str = Field(default="Internal Services Root", description="The common name")
    uri: str = Field(default="https://fulcio.githubapp.com", description="The URI")
    log_level: str = Field(default="INFO", description="Log level (DEBUG, INFO, WARNING, ERROR)")

    @field_validator("output_trustroot_filepath", "template_filepath", "trusted_root_path", mode="before")
    @classmethod
    def reject_empty_path(cls, value: object) -> object:
        """An empty string means the flag was not provided."""
        if isinstance(value, str) and not value.strip():
            raise ValueError("a non-empty path is required")
        return value

    @field_validator("trusted_root_path")
    @classmethod
    def expand_home(cls, value: Path) -> Path:
        return value.expanduser()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log level must be one of {', '.join(_LOG_LEVELS)}, got {value!r}")
        return level

    def identity(self) -> AuthorityIdentity:
        """Subject and URI written onto every authority entry."""
        return AuthorityIdentity(
            subject=Subject(organization=self.organization, common_name=self.common_name),
            uri=self.uri,
        )
