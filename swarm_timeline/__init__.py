#!filepath: swarm_timeline/__init__.py

from .utils.logger import Logging, logs
from .utils.errors import (
    TimelineError,
    ConfigurationError,
    DecodeError,
    StreamClosedError,
)
from .config.app_config import AppConfig
from .config.stream_config import StreamConfig
from .engines import Parser, TimelineAggregator
from .reducers import BasicTimeline

__version__ = "0.1.0"

__all__ = [
    "logs", "Logging",
    "TimelineError", "ConfigurationError", "DecodeError", "StreamClosedError",
    "AppConfig", "StreamConfig",
    "Parser", "TimelineAggregator", "BasicTimeline",
]
