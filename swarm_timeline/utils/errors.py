# swarm_timeline/utils/errors.py
from typing import Any, Optional


class TimelineError(RuntimeError):
    """
    swarm_timeline 所有错误的基类。
    """


class ConfigurationError(TimelineError):
    """
    Raised when the parser has no event handler, a reducer is not callable,
    or a config file cannot be turned into a valid AppConfig.
    """


class DecodeError(TimelineError):
    """
    一条 record 无法解析为 JSON（或不是合法 UTF-8）。

    对整个 stream 是致命错误：不跳过、不重试。
    """

    PREVIEW_LIMIT = 120

    def __init__(self, message: str, record: Optional[Any] = None):
        self.record = record
        preview = self._preview(record)
        if preview is not None:
            message = f"{message} | record={preview}"
        super().__init__(message)

    @classmethod
    def _preview(cls, record: Optional[Any]) -> Optional[str]:
        if record is None:
            return None
        text = record if isinstance(record, str) else repr(bytes(record))
        if len(text) > cls.PREVIEW_LIMIT:
            return text[: cls.PREVIEW_LIMIT] + "..."
        return text


class StreamClosedError(TimelineError):
    """
    Raised on write() after end() or destroy().
    """
