#!filepath: swarm_timeline/config/stream_config.py
from pydantic import BaseModel, Field


class StreamConfig(BaseModel):
    """
    Parser / TimelineAggregator 的构造配置。

    - object_stream       : 跳过换行扫描，每次 write 是一个已解码的 event
    - encoding            : 二进制 record 解码为文本时使用的编码
    - skip_blank_lines    : 空白行是否忽略（默认严格：空行 = DecodeError）
    - flush_tail_on_end   : end() 时是否把未终止的 carry 当作最后一条 record
    - emit_final_snapshot : end() 时是否为最后一个 tick 发出 snapshot
    - chunk_size          : read_file() 每次读取的字节数
    """

    object_stream: bool = False
    encoding: str = "utf-8"
    skip_blank_lines: bool = False
    flush_tail_on_end: bool = False
    emit_final_snapshot: bool = False
    chunk_size: int = Field(default=64 * 1024, gt=0)
