"""Edit Intel HEX files while keeping their record layout: the hexfile model and the cli command."""

__version__ = "2022.3.2"
__all__ = ["hexfile", "cli"]