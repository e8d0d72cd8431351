#!filepath: swarm_timeline/reducers/swarm.py
"""
Swarm simulator reducers.

所有 reducer 签名一致：

    reducer(prev, ev, cache, pcache) -> next

- prev   : 上一个值，第一次调用时为 None
- cache  : 本 tick 的 scratch dict（按 id 建索引）
- pcache : 整个 stream 生命周期的 scratch dict
- event 不匹配自己的 (type, event) tag 时，原样返回 prev（或默认值）
- 不原地修改 prev，返回新对象
"""
from __future__ import annotations

import math
from typing import Any, Dict, List, Optional

from .filters import BOOKKEEPING_FIELDS, TAG_FIELDS, ev_filter, omit_fields

DEFAULT_STATS: Dict[str, Any] = {
    "delta": 0,
    "pending": 0,
    "connections": 0,
    "peers": 0,
    "capacity": 0,
    "rate": 0,
    "load": 0,
    "time": 0,
    "iteration": 0,
    "sessionId": 0,
    "interconnection": 0,
}

DEFAULT_CONF: Dict[str, Any] = {
    "swarm": None,
    "sessionId": 0,
    "speed": 0,
    "interval": 0,
}

STATE_UNKNOWN = -1


# ----------------------------------------------------------------------
# peers / links
# ----------------------------------------------------------------------
def _append_indexed(records: Optional[List[dict]], ev: dict, lut: dict) -> List[dict]:
    record = omit_fields(ev, BOOKKEEPING_FIELDS)
    if "id" in record:
        lut[record["id"]] = record
    return [*(records or []), record]


def reduce_peers(peers: Optional[List[dict]], ev: Any, lut: dict, pcache: Optional[dict] = None) -> List[dict]:
    if not ev_filter(ev, "peer", "tick"):
        return peers if peers is not None else []
    return _append_indexed(peers, ev, lut)


def reduce_connections(sockets: Optional[List[dict]], ev: Any, lut: dict, pcache: Optional[dict] = None) -> List[dict]:
    if not ev_filter(ev, "socket", "tick"):
        return sockets if sockets is not None else []
    return _append_indexed(sockets, ev, lut)


# ----------------------------------------------------------------------
# simulator stats
# ----------------------------------------------------------------------
def simulator_tick_reducer(stats: Optional[dict], ev: Any, cache: Optional[dict] = None, pcache: Optional[dict] = None) -> dict:
    if not ev_filter(ev, "simulator", "tick"):
        return stats if stats is not None else dict(DEFAULT_STATS)
    return omit_fields(ev, TAG_FIELDS)


def triangular_capacity(peers: int) -> int:
    """
    n 个 peer 之间最多的连接数：0 + 1 + ... + (n - 1)
    peers 缺失 / 非数值时按 0 处理
    """
    if isinstance(peers, bool) or not isinstance(peers, (int, float)):
        return 0
    if isinstance(peers, float) and not math.isfinite(peers):
        return 0
    n = int(peers)
    if n <= 1:
        return 0
    return n * (n - 1) // 2


def interconnectivity_counter(stats: Optional[dict], ev: Any, cache: Optional[dict] = None, pcache: Optional[dict] = None) -> dict:
    if not ev_filter(ev, "simulator", "tick"):
        return stats if stats is not None else {}
    stats = dict(stats or {})
    cap = triangular_capacity(ev.get("peers", 0))
    if cap:
        stats["interconnection"] = stats.get("connections", 0) / cap
    return stats


# ----------------------------------------------------------------------
# run state / configuration
# ----------------------------------------------------------------------
def state_reducer(state: Any, ev: Any, cache: Optional[dict] = None, pcache: Optional[dict] = None) -> Any:
    if not ev_filter(ev, "simulator", "tick"):
        return state if state is not None else STATE_UNKNOWN
    return ev.get("state")


def conf_reducer(value: Optional[dict], ev: Any, cache: dict, glob: dict) -> dict:
    """
    配置在 init / state-running 时出现一次，之后每个 tick 都复用：
    保存在 persistent cache 里，返回副本避免 snapshot 之间共享对象。
    """
    conf = glob.setdefault("conf", dict(DEFAULT_CONF))

    if ev_filter(ev, "simulator", "init"):
        conf.update(
            swarm=ev.get("swarm"),
            sessionId=ev.get("sessionId"),
            speed=-1,
            interval=-1,
        )
    elif ev_filter(ev, "simulator", "state-running"):
        conf.update(
            speed=ev.get("speed"),
            interval=ev.get("interval"),
        )

    return dict(conf)
