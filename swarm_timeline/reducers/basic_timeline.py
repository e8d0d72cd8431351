#!filepath: swarm_timeline/reducers/basic_timeline.py
from __future__ import annotations

from typing import Any, Callable, Optional

from swarm_timeline.config.stream_config import StreamConfig
from swarm_timeline.engines.base import Event
from swarm_timeline.engines.timeline_aggregator import TimelineAggregator
from .swarm import (
    conf_reducer,
    interconnectivity_counter,
    reduce_connections,
    reduce_peers,
    simulator_tick_reducer,
    state_reducer,
)


class BasicTimeline(TimelineAggregator):
    """
    Swarm simulator 日志的默认 timeline：

      stats : simulator tick 统计 + interconnection 比例
      peers : 本 tick 的 peer 列表
      links : 本 tick 的 socket 列表
      state : simulator 运行状态
      conf  : init / state-running 时得到的配置（跨 tick 保留）
    """

    def __init__(
        self,
        process: Optional[Callable[[Event], Any]] = None,
        object_stream: Optional[bool] = None,
        config: Optional[StreamConfig] = None,
    ):
        super().__init__(process=process, object_stream=object_stream, config=config)
        self.set_reducer("stats", [simulator_tick_reducer, interconnectivity_counter])
        self.set_reducer("peers", reduce_peers)
        self.set_reducer("links", reduce_connections)
        self.set_reducer("state", state_reducer)
        self.set_reducer("conf", conf_reducer)
