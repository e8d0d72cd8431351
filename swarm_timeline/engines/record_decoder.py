#!filepath: swarm_timeline/engines/record_decoder.py
from __future__ import annotations

import json
from typing import Any, Union

from swarm_timeline.utils.errors import DecodeError
from .base import Event

_SKIP = object()


class RecordDecoder:
    """
    record → event

    - str   : 直接 json.loads
    - bytes : 只对这一条 record 解码为文本，再 json.loads
    - 解析失败 → DecodeError（致命，不跳过）
    """

    SKIP = _SKIP

    def __init__(self, encoding: str = "utf-8", skip_blank_lines: bool = False) -> None:
        self.encoding = encoding
        self.skip_blank_lines = skip_blank_lines

    def to_text(self, record: Union[str, bytes, bytearray, memoryview]) -> str:
        if isinstance(record, str):
            return record
        try:
            return bytes(record).decode(self.encoding)
        except UnicodeDecodeError as e:
            raise DecodeError(f"record is not valid {self.encoding}: {e}", record) from e

    def decode(self, record: Union[str, bytes]) -> Any:
        """
        解析一条 record；skip_blank_lines=True 时空白行返回 RecordDecoder.SKIP。
        """
        text = self.to_text(record)
        if self.skip_blank_lines and not text.strip():
            return _SKIP
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise DecodeError(f"invalid JSON record: {e.msg} (pos {e.pos})", record) from e

    def decode_object(self, data: Any) -> Event:
        """
        object-stream 模式：已解码对象原样返回；文本 / 二进制整体解析为一个 JSON 值。
        空白 blob 同样遵守 skip_blank_lines（返回 RecordDecoder.SKIP）。
        """
        if isinstance(data, (str, bytes, bytearray, memoryview)):
            return self.decode(data)
        return data
