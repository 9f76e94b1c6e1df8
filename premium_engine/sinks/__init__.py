"""Output sinks for exporting analytics."""

from premium_engine.sinks.console import ConsoleSink
from premium_engine.sinks.json_file import JsonFileSink

__all__ = ["ConsoleSink", "JsonFileSink"]
