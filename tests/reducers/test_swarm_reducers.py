#!filepath: tests/reducers/test_swarm_reducers.py
import pytest

from swarm_timeline.reducers import (
    BOOKKEEPING_FIELDS,
    conf_reducer,
    ev_filter,
    interconnectivity_counter,
    omit_fields,
    reduce_connections,
    reduce_peers,
    simulator_tick_reducer,
    state_reducer,
    triangular_capacity,
)


def sim_tick(**payload):
    ev = {"type": "simulator", "event": "tick", "iteration": 1, "time": 5, "sessionId": 9}
    ev.update(payload)
    return ev


# ============================================================================
# 1. filter / payload
# ============================================================================
def test_ev_filter():
    ev = {"type": "peer", "event": "tick"}

    assert ev_filter(ev, "peer", "tick")
    assert ev_filter(ev, "peer", "init", "tick")
    assert not ev_filter(ev, "socket", "tick")
    assert not ev_filter(ev, "peer", "init")
    assert not ev_filter(None, "peer", "tick")
    assert not ev_filter([1], "peer", "tick")


def test_omit_fields_returns_new_dict():
    ev = {"type": "peer", "event": "tick", "sessionId": 1, "iteration": 2, "time": 3, "id": "p1", "x": 1}

    out = omit_fields(ev, BOOKKEEPING_FIELDS)

    assert out == {"id": "p1", "x": 1}
    assert "type" in ev  # 原 event 不变


# ============================================================================
# 2. peers / links
# ============================================================================
def test_reduce_peers_identity_on_mismatch():
    peers = [{"id": "p1"}]

    assert reduce_peers(peers, {"type": "socket", "event": "tick"}, {}) is peers
    assert reduce_peers(None, {"type": "socket", "event": "tick"}, {}) == []


def test_reduce_peers_appends_and_indexes():
    lut = {}
    ev = {"type": "peer", "event": "tick", "iteration": 1, "time": 1, "sessionId": 1, "id": "p1", "x": 4}

    prev = [{"id": "p0"}]
    peers = reduce_peers(prev, ev, lut)

    assert peers == [{"id": "p0"}, {"id": "p1", "x": 4}]
    assert lut["p1"] is peers[-1]
    assert prev == [{"id": "p0"}]  # 不原地修改


def test_reduce_connections():
    lut = {}
    ev = {"type": "socket", "event": "tick", "iteration": 1, "id": "s1", "from": "a", "to": "b"}

    links = reduce_connections(None, ev, lut)

    assert links == [{"id": "s1", "from": "a", "to": "b"}]
    assert lut == {"s1": links[0]}
    assert reduce_connections(links, {"type": "peer", "event": "tick"}, lut) is links


# ============================================================================
# 3. stats / interconnectivity
# ============================================================================
def test_simulator_tick_default_and_match():
    default = simulator_tick_reducer(None, {"type": "peer", "event": "tick"})
    assert default["interconnection"] == 0
    assert default["peers"] == 0

    stats = simulator_tick_reducer(default, sim_tick(peers=3, connections=2))
    assert stats == {"iteration": 1, "time": 5, "sessionId": 9, "peers": 3, "connections": 2}


@pytest.mark.parametrize("peers,cap", [(0, 0), (1, 0), (2, 1), (3, 3), (4, 6), (10, 45)])
def test_triangular_capacity(peers, cap):
    assert triangular_capacity(peers) == cap
    assert cap == sum(range(peers))


@pytest.mark.parametrize("peers", ["abc", "3", None, [1], True, float("nan"), float("inf")])
def test_triangular_capacity_non_numeric_is_zero(peers):
    assert triangular_capacity(peers) == 0


def test_interconnection_skipped_when_peers_not_numeric():
    ev = sim_tick(peers="many", connections=2)

    out = interconnectivity_counter({"connections": 2}, ev)

    assert out == {"connections": 2}


@pytest.mark.parametrize("connections", [0, 1, 2, 3])
def test_interconnection_ratio_three_peers(connections):
    ev = sim_tick(peers=3, connections=connections)
    stats = simulator_tick_reducer(None, ev)

    out = interconnectivity_counter(stats, ev)

    assert out["interconnection"] == pytest.approx(connections / 3)
    assert "interconnection" not in stats


def test_interconnection_skipped_when_capacity_zero():
    ev = sim_tick(peers=1, connections=0)

    out = interconnectivity_counter(simulator_tick_reducer(None, ev), ev)

    assert "interconnection" not in out


def test_interconnection_identity_on_mismatch():
    stats = {"connections": 1}

    assert interconnectivity_counter(stats, {"type": "peer", "event": "tick"}) is stats
    assert interconnectivity_counter(None, {"type": "peer", "event": "tick"}) == {}


# ============================================================================
# 4. state / conf
# ============================================================================
def test_state_reducer():
    assert state_reducer(None, {"type": "peer", "event": "tick"}) == -1
    assert state_reducer(0, {"type": "peer", "event": "tick"}) == 0
    assert state_reducer(-1, sim_tick(state="running")) == "running"


def test_conf_reducer_uses_persistent_cache():
    glob = {}

    conf = conf_reducer(None, {"type": "peer", "event": "tick"}, {}, glob)
    assert conf == {"swarm": None, "sessionId": 0, "speed": 0, "interval": 0}

    conf = conf_reducer(conf, {"type": "simulator", "event": "init", "swarm": "bees", "sessionId": 7}, {}, glob)
    assert conf == {"swarm": "bees", "sessionId": 7, "speed": -1, "interval": -1}

    conf = conf_reducer(conf, {"type": "simulator", "event": "state-running", "speed": 2, "interval": 50}, {}, glob)
    assert conf == {"swarm": "bees", "sessionId": 7, "speed": 2, "interval": 50}

    # 新 tick 的 prev 为 None，仍能拿回配置
    again = conf_reducer(None, {"type": "peer", "event": "tick"}, {}, glob)
    assert again == conf
    assert again is not glob["conf"]
