"""
Application settings using Pydantic.

Print layout settings are a plain frozen model owned by this module;
application settings (USB ids, default print settings) are loaded from
environment variables with .env file support.
"""

import codecs
import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

Alignment = Literal["left", "center", "right"]


class _PrefsModel(BaseModel):
    """Accepts both snake_case and the camelCase keys the settings editor saves."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


class OrderInfoStyle(_PrefsModel):
    """Boldness of the voucher number / date / user lines."""

    label_bold: bool = False
    value_bold: bool = True


class SectionStyles(_PrefsModel):
    order_info: OrderInfoStyle = Field(default_factory=OrderInfoStyle)


class ColumnPlan(_PrefsModel):
    """Character widths of the item table columns."""

    sno_width: int = Field(default=3, ge=1)
    name_width: int = Field(default=20, ge=1)
    qty_rate_width: int = Field(default=10, ge=1)
    amount_width: int = Field(default=8, ge=1)

    @property
    def line_width(self) -> int:
        # One space between each of the four columns
        return self.sno_width + self.name_width + self.qty_rate_width + self.amount_width + 3


class PrintSettings(_PrefsModel):
    """Layout settings consumed by the printer encoder."""

    # Preview only, never encoded into the byte stream
    font_family: str = "monospace"
    font_size: int = 12
    line_height: float = 1.4
    zoom: float = Field(default=1.0, gt=0.0)

    header_alignment: Alignment = "center"
    logo_url: str = ""
    logo_width: int = Field(default=384, ge=8)
    line_separator: str = Field(default="-", min_length=1)
    section_styles: SectionStyles = Field(default_factory=SectionStyles)
    columns: ColumnPlan = Field(default_factory=ColumnPlan)

    trailing_feed: int = Field(default=5, ge=0)
    encoding: str = "utf-8"
    wrap_words: bool = False
    copy_count: int = Field(default=1, ge=1, le=9)

    @field_validator("encoding")
    @classmethod
    def check_encoding(cls, value: str) -> str:
        try:
            codecs.lookup(value)
        except LookupError as e:
            raise ValueError(f"unknown encoding: {value}") from e
        return value

    @field_validator("copy_count", mode="before")
    @classmethod
    def clamp_copy_count(cls, value):
        try:
            count = int(value)
        except (TypeError, ValueError):
            return 1
        return max(1, min(9, count))


DEFAULT_PRINT_SETTINGS = PrintSettings()


class UsbSettings(BaseSettings):
    """USB bulk transport settings."""

    vendor_id: Optional[int] = None
    product_id: Optional[int] = None
    interface: int = 0
    timeout_ms: int = 10000
    chunk_size: int = 4096


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="TALLYPRINT_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    debug: bool = False
    settings_file: Optional[Path] = None

    printing: PrintSettings = Field(default_factory=lambda: DEFAULT_PRINT_SETTINGS)
    usb: UsbSettings = Field(default_factory=UsbSettings)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def load_print_settings(path: Optional[Union[str, Path]] = None) -> PrintSettings:
    """Load saved print preferences from a JSON file.

    Falls back to the environment-configured settings when no file is given
    and to DEFAULT_PRINT_SETTINGS when the file cannot be read.
    """
    if path is None:
        path = get_settings().settings_file
        if path is None:
            return get_settings().printing

    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        return PrintSettings.model_validate(data)
    except (OSError, ValueError, ValidationError) as e:
        logger.error(f"Failed to load print settings from {path}: {e}")
        return DEFAULT_PRINT_SETTINGS
