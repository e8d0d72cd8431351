from .filters import BOOKKEEPING_FIELDS, ev_filter, omit_fields
from .swarm import (
    conf_reducer,
    interconnectivity_counter,
    reduce_connections,
    reduce_peers,
    simulator_tick_reducer,
    state_reducer,
    triangular_capacity,
)
from .basic_timeline import BasicTimeline

__all__ = [
    "BOOKKEEPING_FIELDS",
    "ev_filter",
    "omit_fields",
    "conf_reducer",
    "interconnectivity_counter",
    "reduce_connections",
    "reduce_peers",
    "simulator_tick_reducer",
    "state_reducer",
    "triangular_capacity",
    "BasicTimeline",
]
