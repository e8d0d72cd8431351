#!filepath: swarm_timeline/reducers/filters.py
from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Dict, Iterable

# 每个 event 都带的簿记字段，不进入聚合结果
BOOKKEEPING_FIELDS = ("type", "event", "sessionId", "iteration", "time")

# 只去掉 tag，保留 iteration / time / sessionId
TAG_FIELDS = ("type", "event")


def ev_filter(ev: Any, type_: str, *names: str) -> bool:
    """
    (type, event) tag 匹配。非 dict 的 event 一律不匹配。
    """
    if not isinstance(ev, Mapping):
        return False
    return ev.get("type") == type_ and ev.get("event") in names


def omit_fields(ev: Mapping, fields: Iterable[str] = BOOKKEEPING_FIELDS) -> Dict[str, Any]:
    """
    deny-list 变换：返回不含 fields 的新 dict，原 event 不变。
    """
    deny = frozenset(fields)
    return {k: v for k, v in ev.items() if k not in deny}
