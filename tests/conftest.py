# tests/conftest.py
from __future__ import annotations

from typing import Any, Iterable, List

import pytest
from loguru import logger

from swarm_timeline.engines.parser import Parser


@pytest.fixture(autouse=True)
def disable_file_logger():
    logger.remove()
    logger.add(lambda msg: None)  # or sys.stderr
    yield


@pytest.fixture
def scenario_chunks() -> List[str]:
    """
    一条 record 被拆在多个 chunk 里；最后一个 chunk 没有结尾换行。
    """
    return [
        '{"iteration":0,"msg":"He',
        'llo"}\n{"iteration":1,"m',
        'sg":"world"}\n{"iteration":2,"msg":"twice"}',
        '\n{"iteration":3,"msg":"fold"}',
    ]


@pytest.fixture
def make_collector():
    """
    Factory fixture：返回 (events, parser)，parser.process = events.append

    Usage:
        events, parser = make_collector()
        events, parser = make_collector(["a\\n", "b\\n"], object_stream=True)
    """

    def _make(chunks: Iterable[Any] = (), **kwargs):
        events: List[Any] = []
        parser = Parser(process=events.append, **kwargs)
        for chunk in chunks:
            parser.write(chunk)
        return events, parser

    return _make


@pytest.fixture
def swarm_log_lines() -> List[dict]:
    """
    两个完整 tick + 第三个 tick 的开头（不会被自动 emit）。
    """
    return [
        {"type": "simulator", "event": "init", "iteration": 0, "time": 0, "sessionId": 7, "swarm": "bees"},
        {"type": "simulator", "event": "state-running", "iteration": 0, "time": 1, "sessionId": 7, "speed": 2, "interval": 50},
        {"type": "peer", "event": "tick", "iteration": 1, "time": 10, "sessionId": 7, "id": "p1", "x": 1},
        {"type": "peer", "event": "tick", "iteration": 1, "time": 10, "sessionId": 7, "id": "p2", "x": 2},
        {"type": "peer", "event": "tick", "iteration": 1, "time": 10, "sessionId": 7, "id": "p3", "x": 3},
        {"type": "socket", "event": "tick", "iteration": 1, "time": 10, "sessionId": 7, "id": "s1", "from": "p1", "to": "p2"},
        {"type": "simulator", "event": "tick", "iteration": 1, "time": 11, "sessionId": 7,
         "peers": 3, "connections": 2, "delta": 1, "pending": 0, "capacity": 10, "rate": 1, "load": 0.5, "state": "running"},
        {"type": "peer", "event": "tick", "iteration": 2, "time": 20, "sessionId": 7, "id": "p1", "x": 4},
        {"type": "simulator", "event": "tick", "iteration": 2, "time": 21, "sessionId": 7,
         "peers": 1, "connections": 0, "delta": 1, "pending": 0, "capacity": 10, "rate": 1, "load": 0.1, "state": "draining"},
        {"type": "peer", "event": "tick", "iteration": 3, "time": 30, "sessionId": 7, "id": "p9", "x": 9},
    ]
