from .emitter import SnapshotEmitter
from .line_splitter import LineSplitter
from .record_decoder import RecordDecoder
from .parser import Parser
from .registry import ReducerRegistry
from .timeline_aggregator import TimelineAggregator

__all__ = [
    "SnapshotEmitter",
    "LineSplitter",
    "RecordDecoder",
    "Parser",
    "ReducerRegistry",
    "TimelineAggregator",
]
