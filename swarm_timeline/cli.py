#!filepath: swarm_timeline/cli.py
from pathlib import Path
from typing import Optional

import typer
from rich import print
from rich.console import Console
from rich.table import Table

from swarm_timeline import __version__, logs
from swarm_timeline.config.app_config import AppConfig
from swarm_timeline.reducers import BasicTimeline

app = typer.Typer(help="Swarm Timeline NDJSON replay CLI")


def _row(state: dict, iteration) -> list:
    stats = state.get("stats") or {}
    interconnection = stats.get("interconnection", 0) or 0
    return [
        str(iteration),
        str(len(state.get("peers") or [])),
        str(len(state.get("links") or [])),
        str(state.get("state")),
        f"{interconnection:.3f}",
    ]


@app.command()
def version():
    print(f"v{__version__}")


@app.command()
def replay(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True),
    chunk_size: Optional[int] = typer.Option(None, "--chunk-size", min=1, help="读取文件的字节数/次"),
    flush: bool = typer.Option(False, "--flush", help="stream 结束时发出最后一个 tick 的 snapshot"),
    config: Optional[Path] = typer.Option(None, "--config", help="YAML 配置文件"),
):
    """
    把 NDJSON 日志逐块写入 BasicTimeline，每个 snapshot 输出一行
    """
    cfg = AppConfig.load(str(config) if config else None)
    logs.reconfigure(
        log_dir=cfg.log.dir,
        rotation=cfg.log.rotation,
        retention=cfg.log.retention,
        log_level=cfg.log.level,
    )

    stream_cfg = cfg.stream
    if flush:
        stream_cfg = stream_cfg.model_copy(update={"emit_final_snapshot": True})

    table = Table(title=f"Timeline {path.name}")
    for col in ("iteration", "peers", "links", "state", "interconnection"):
        table.add_column(col, justify="right")

    timeline = BasicTimeline(config=stream_cfg)
    timeline.on("snapshot", lambda state, i: table.add_row(*_row(state, i)))

    logs.info(f"[Replay] start {path}")
    timeline.read_file(path, chunk_size=chunk_size)
    logs.info(f"[Replay] done snapshots={timeline.metrics.snapshots}")

    Console().print(table)


if __name__ == "__main__":
    app()

# python -m swarm_timeline.cli replay swarm-log.json --flush
