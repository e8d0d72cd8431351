#!filepath: swarm_timeline/engines/emitter.py
from __future__ import annotations

from typing import Any, Callable, Dict, List

Handler = Callable[..., Any]


class SnapshotEmitter:
    """
    同步订阅通道。

    - on(name, handler) 返回 unsubscribe()
    - emit() 按订阅顺序同步调用 handler，handler 的异常直接向上抛
    - emit 期间对订阅列表的修改不影响本次 emit
    """

    def __init__(self) -> None:
        self._handlers: Dict[str, List[Handler]] = {}

    def on(self, name: str, handler: Handler) -> Callable[[], None]:
        if not callable(handler):
            raise TypeError(f"handler for '{name}' must be callable")
        self._handlers.setdefault(name, []).append(handler)

        def unsubscribe() -> None:
            self.off(name, handler)

        return unsubscribe

    def once(self, name: str, handler: Handler) -> Callable[[], None]:
        def _once(*args: Any) -> Any:
            self.off(name, _once)
            return handler(*args)

        return self.on(name, _once)

    def off(self, name: str, handler: Handler) -> None:
        handlers = self._handlers.get(name)
        if not handlers:
            return
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, name: str, *args: Any) -> bool:
        """
        返回是否有 handler 被调用。
        """
        handlers = self._handlers.get(name)
        if not handlers:
            return False
        for handler in list(handlers):
            handler(*args)
        return True

    def listener_count(self, name: str) -> int:
        return len(self._handlers.get(name, ()))

    def remove_all_listeners(self, name: str | None = None) -> None:
        if name is None:
            self._handlers.clear()
        else:
            self._handlers.pop(name, None)
