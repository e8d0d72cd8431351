#!filepath: swarm_timeline/engines/line_splitter.py
from __future__ import annotations

from typing import List, Optional, Union

from .base import RawChunk

Record = Union[str, bytes]


class LineSplitter:
    """
    把任意切分的 chunk 序列还原成完整的换行终止 record。

    规则：
    - 分隔符是 line feed（b"\\n" / "\\n"）
    - 未终止的尾部保存为 carry，拼到下一条完成的 record 前面
    - 没有换行的 chunk 整个追加到 carry 后面
    - 空 chunk 不产生 record，carry 不变
    - 文本保持 str，二进制统一为 bytes；只切片，不解码
    - stream 结束时 carry 不会自动 flush（见 take_carry）
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        self.encoding = encoding
        self._carry: Optional[Record] = None

    @property
    def carry(self) -> Optional[Record]:
        return self._carry

    def reset(self) -> None:
        self._carry = None

    def take_carry(self) -> Optional[Record]:
        """
        取出并清空 carry。
        """
        carry, self._carry = self._carry, None
        return carry

    def split(self, chunk: RawChunk) -> List[Record]:
        data = self._normalize(chunk)
        if not data:
            return []

        delim = "\n" if isinstance(data, str) else b"\n"
        records: List[Record] = []

        o = 0
        i = data.find(delim)
        while i != -1:
            record = data[o:i]
            if self._carry is not None:
                record = self._join(self._carry, record)
                self._carry = None
            records.append(record)
            o = i + 1
            i = data.find(delim, o)

        if o < len(data):
            tail = data[o:]
            self._carry = tail if self._carry is None else self._join(self._carry, tail)

        return records

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _normalize(chunk: RawChunk) -> Record:
        if isinstance(chunk, (str, bytes)):
            return chunk
        try:
            view = memoryview(chunk)
        except TypeError as e:
            raise TypeError(
                f"chunk must be str or a bytes-like object, got {type(chunk).__name__}"
            ) from e
        return view.tobytes()

    def _join(self, head: Record, tail: Record) -> Record:
        if type(head) is type(tail):
            return head + tail
        # 文本 / 二进制混写：统一为 bytes
        if isinstance(head, str):
            head = head.encode(self.encoding)
        if isinstance(tail, str):
            tail = tail.encode(self.encoding)
        return head + tail
