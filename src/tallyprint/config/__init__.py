"""Configuration for tallyprint."""

from tallyprint.config.settings import (
    DEFAULT_PRINT_SETTINGS,
    ColumnPlan,
    OrderInfoStyle,
    PrintSettings,
    SectionStyles,
    Settings,
    UsbSettings,
    get_settings,
    load_print_settings,
)

__all__ = [
    "DEFAULT_PRINT_SETTINGS",
    "ColumnPlan",
    "OrderInfoStyle",
    "PrintSettings",
    "SectionStyles",
    "Settings",
    "UsbSettings",
    "get_settings",
    "load_print_settings",
]
