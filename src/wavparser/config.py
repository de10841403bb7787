"""Reader/writer configuration models."""

from __future__ import annotations

import os

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

PARSER_VERSION = "0.1.0"
DEFAULT_SOFTWARE_TAG = f"wavparser-{PARSER_VERSION}"


class WriterConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    software_tag: str = Field(default=DEFAULT_SOFTWARE_TAG, min_length=1)

    @field_validator("software_tag")
    @classmethod
    def _printable_ascii(cls, value: str) -> str:
        if not value.isascii() or not value.isprintable():
            raise ValueError("software_tag must be printable ASCII")
        return value

    @staticmethod
    def from_env() -> WriterConfig:
        tag = os.getenv("WAVPARSER_SOFTWARE_TAG", "").strip()
        if not tag:
            return WriterConfig()
        try:
            return WriterConfig(software_tag=tag)
        except ValidationError:
            return WriterConfig()


class ReaderConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    read_entire: bool = True
    target_sample_rate: int | None = Field(default=None, gt=0)

    @staticmethod
    def from_env() -> ReaderConfig:
        read_entire_raw = os.getenv("WAVPARSER_READ_ENTIRE", "1").strip().lower()
        read_entire = read_entire_raw not in {"0", "false", "no", "off"}

        rate_raw = os.getenv("WAVPARSER_TARGET_SAMPLE_RATE", "").strip()
        try:
            target_sample_rate: int | None = int(rate_raw) if rate_raw else None
        except ValueError:
            target_sample_rate = None
        if target_sample_rate is not None and target_sample_rate <= 0:
            target_sample_rate = None

        return ReaderConfig(read_entire=read_entire, target_sample_rate=target_sample_rate)
