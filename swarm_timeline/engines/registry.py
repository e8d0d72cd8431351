#!filepath: swarm_timeline/engines/registry.py
from __future__ import annotations

from typing import Any, Callable, Dict, Iterator, List, Sequence, Tuple, Union

from swarm_timeline.utils.errors import ConfigurationError
from .base import Event

# reducer(prev_value, event, tick_cache, persistent_cache) -> next_value
#
# 约定：
#   - 纯函数、同步
#   - 第一次调用时 prev_value 为 None
#   - event 与自己无关时原样返回 prev_value（identity-on-mismatch）
Reducer = Callable[[Any, Event, Dict[Any, Any], Dict[Any, Any]], Any]
ReducerChain = Tuple[Reducer, ...]

RESERVED_PROPS = ("iteration",)


class ReducerRegistry:
    """
    property 名 → reducer chain。

    - 注册顺序即 fold 顺序（dict 保持插入顺序）
    - set()  替换 chain，位置不变
    - push() 追加到 chain 末尾（单个 reducer 自动提升为一元 chain）
    - 所有 chain 在注册时规范化为 tuple，fold 时不做类型判断
    """

    def __init__(self) -> None:
        self._chains: Dict[str, ReducerChain] = {}

    def set(self, prop: str, handler: Union[Reducer, Sequence[Reducer]]) -> None:
        self._check_prop(prop)
        self._chains[prop] = self._normalize(prop, handler)

    def push(self, prop: str, handler: Reducer) -> None:
        self._check_prop(prop)
        self._check_callable(prop, handler)
        self._chains[prop] = self._chains.get(prop, ()) + (handler,)

    def chain(self, prop: str) -> ReducerChain:
        return self._chains.get(prop, ())

    def names(self) -> List[str]:
        return list(self._chains)

    def items(self) -> Iterator[Tuple[str, ReducerChain]]:
        return iter(list(self._chains.items()))

    def __contains__(self, prop: object) -> bool:
        return prop in self._chains

    def __len__(self) -> int:
        return len(self._chains)

    @staticmethod
    def fold(
        chain: ReducerChain,
        value: Any,
        event: Event,
        cache: Dict[Any, Any],
        persistent_cache: Dict[Any, Any],
    ) -> Any:
        for reducer in chain:
            value = reducer(value, event, cache, persistent_cache)
        return value

    # ------------------------------------------------------------------
    # validation
    # ------------------------------------------------------------------
    @staticmethod
    def _check_prop(prop: str) -> None:
        if not isinstance(prop, str) or not prop:
            raise ConfigurationError(f"reducer property must be a non-empty str, got {prop!r}")
        if prop in RESERVED_PROPS:
            raise ConfigurationError(f"'{prop}' is reserved for the tick counter")

    @staticmethod
    def _check_callable(prop: str, handler: Any) -> None:
        if not callable(handler):
            raise ConfigurationError(f"reducer for '{prop}' is not callable: {handler!r}")

    @classmethod
    def _normalize(cls, prop: str, handler: Union[Reducer, Sequence[Reducer]]) -> ReducerChain:
        if callable(handler):
            return (handler,)
        if isinstance(handler, (list, tuple)):
            for h in handler:
                cls._check_callable(prop, h)
            return tuple(handler)
        raise ConfigurationError(
            f"reducer for '{prop}' must be a callable or a list of callables, got {type(handler).__name__}"
        )
