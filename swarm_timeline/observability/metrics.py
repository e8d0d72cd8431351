#!filepath: swarm_timeline/observability/metrics.py
from dataclasses import dataclass, field, asdict
from typing import Dict, Any

from swarm_timeline import logs


@dataclass
class StreamMetrics:
    """
    Parser 运行期计数器（热路径只做加法，不打日志）。
    """

    enabled: bool = True
    writes: int = 0
    bytes_in: int = 0
    records: int = 0
    events: int = 0
    snapshots: int = 0
    extra: Dict[str, Any] = field(default_factory=dict)

    def incr(self, name: str, value: int = 1):
        if not self.enabled:
            return
        setattr(self, name, getattr(self, name) + value)

    def record(self, name: str, value: Any):
        if not self.enabled:
            return
        self.extra[name] = value

    def summary(self) -> Dict[str, Any]:
        data = asdict(self)
        data.pop("enabled")
        return data

    def report(self, tag: str = "Parser"):
        if not self.enabled:
            return
        logs.info(f"[Metric] [{tag}] {self.summary()}")
