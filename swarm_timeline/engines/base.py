#!filepath: swarm_timeline/engines/base.py
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Union

# 一次 write 的输入：文本 / 字节 / 任何支持 buffer protocol 的字节数组
RawChunk = Union[str, bytes, bytearray, memoryview]

# 解码后的事件（schema-free，通常是 dict）
Event = Any

AggregateState = Dict[str, Any]


class BaseEngine(ABC):
    """
    Engine 抽象基类：

    - 不做任何 I/O（不读写文件 / socket）
    - 专注“输入事件 → 状态变化”的纯逻辑
    - 单线程、同步：process() 返回即处理完成
    """

    @abstractmethod
    def process(self, event: Event) -> None:
        """
        处理单个事件（最小粒度单位）。
        """
        raise NotImplementedError
