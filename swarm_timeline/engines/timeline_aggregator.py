#!filepath: swarm_timeline/engines/timeline_aggregator.py
from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from swarm_timeline import logs
from swarm_timeline.config.stream_config import StreamConfig
from swarm_timeline.utils.errors import StreamClosedError
from .base import AggregateState, Event
from .parser import Parser
from .registry import Reducer, ReducerChain, ReducerRegistry


def iteration_of(event: Event) -> Optional[Union[int, float]]:
    """
    event 的 tick 编号；缺失 / 非数值时返回 None（不触发 tick 推进）。
    """
    if not isinstance(event, Mapping):
        return None
    it = event.get("iteration")
    if isinstance(it, bool) or not isinstance(it, (int, float)):
        return None
    return it


class TimelineAggregator(Parser):
    """
    Tick 状态机 + reducer fold。

    状态：
      _last_tick        : 当前 tick
      _state            : {"iteration": tick, <prop>: value, ...}
      _cache            : prop → 本 tick 的 scratch dict（tick 推进时清空）
      _persistent_cache : prop → stream 生命周期内的 scratch dict（从不清空）

    process(event):
      1. event.iteration > 当前 tick：
           先同步 emit("snapshot", 旧 state, 旧 tick)，
           再换新 state、清空 tick cache、更新 tick
      2. 按注册顺序对每个 prop 做 left-fold：
           value = reducer(value, event, cache[prop], persistent_cache[prop])

    reducer 抛出的异常不做隔离，原样向上抛。
    最后一个 tick 不会自动 emit，需调用 flush() 或开启 emit_final_snapshot。
    """

    def __init__(
        self,
        process: Optional[Callable[[Event], Any]] = None,
        object_stream: Optional[bool] = None,
        config: Optional[StreamConfig] = None,
    ):
        super().__init__(process=process, object_stream=object_stream, config=config)
        self.registry = ReducerRegistry()
        self._last_tick: Union[int, float] = 0
        self._state: AggregateState = {"iteration": 0}
        self._cache: Dict[str, Dict[Any, Any]] = {}
        self._persistent_cache: Dict[str, Dict[Any, Any]] = {}

    # --------------------------------------------------
    # Registration
    # --------------------------------------------------
    def set_reducer(self, prop: str, handler: Union[Reducer, Sequence[Reducer]]) -> None:
        self.registry.set(prop, handler)

    def push_reducer(self, prop: str, handler: Reducer) -> None:
        self.registry.push(prop, handler)

    def reducers(self, prop: str) -> ReducerChain:
        return self.registry.chain(prop)

    @property
    def reducer_names(self) -> List[str]:
        return self.registry.names()

    # --------------------------------------------------
    # State（只读视图；不要在外部修改）
    # --------------------------------------------------
    @property
    def state(self) -> AggregateState:
        return self._state

    @property
    def iteration(self) -> Union[int, float]:
        return self._last_tick

    # --------------------------------------------------
    # Engine
    # --------------------------------------------------
    def process(self, event: Event) -> None:
        iteration = iteration_of(event)
        if iteration is not None and iteration > self._last_tick:
            self._advance(iteration)

        for prop, chain in self.registry.items():
            cache = self._cache.setdefault(prop, {})
            pcache = self._persistent_cache.setdefault(prop, {})
            try:
                value = ReducerRegistry.fold(chain, self._state.get(prop), event, cache, pcache)
            except Exception:
                logs.error(f"[Timeline] reducer chain '{prop}' failed at iteration {self._last_tick}")
                raise
            self._state[prop] = value

    def flush(self) -> AggregateState:
        """
        显式发出当前（进行中）tick 的 snapshot，返回发出的 state。

        - 发出的 dict 之后不再被修改：同一 tick 的后续 event 在它的副本上继续 fold
        - flush 之后同一 tick 还有 event 时，tick 推进时会再发出一次该 tick
          的完整 state（iteration 相同，内容包含 flush 之后的 event）
        - stream 因错误终止后不允许 flush：进行中的 tick 可能只 fold 了一半
        """
        if self.error is not None:
            raise StreamClosedError("stream failed; the in-progress tick is not emitted")
        emitted = self._state
        self._emit_snapshot(emitted, self._last_tick)
        self._state = dict(emitted)
        return emitted

    # --------------------------------------------------
    # internals
    # --------------------------------------------------
    def _advance(self, iteration: Union[int, float]) -> None:
        self._emit_snapshot(self._state, self._last_tick)

        self._state = {"iteration": iteration}
        self._cache = {}
        self._last_tick = iteration

    def _emit_snapshot(self, state: AggregateState, iteration: Union[int, float]) -> None:
        self.metrics.incr("snapshots")
        logs.debug(f"[Timeline] snapshot iteration={iteration}")
        self.emit("snapshot", state, iteration)

    def _on_end(self) -> None:
        if self.config.emit_final_snapshot:
            self.flush()
