#!filepath: swarm_timeline/engines/parser.py
from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Iterable, Optional, Union

from swarm_timeline import logs
from swarm_timeline.config.stream_config import StreamConfig
from swarm_timeline.observability.metrics import StreamMetrics
from swarm_timeline.utils.errors import ConfigurationError, StreamClosedError
from .base import BaseEngine, Event, RawChunk
from .emitter import Handler, SnapshotEmitter
from .line_splitter import LineSplitter
from .record_decoder import RecordDecoder


class Parser(BaseEngine):
    """
    NDJSON stream parser（同步 writable）。

    两种模式（构造时决定）：
      - byte/text 模式（默认）：LineSplitter 切行 → RecordDecoder 逐条解析 → process(event)
      - object-stream 模式   ：不扫描换行，每次 write 就是一个 event
                              （str / bytes 会被整体解析为一个 JSON 值）

    生命周期：
      write()*  →  end()  →  "finish" → "close"
      任一 write 失败     →  "error" → "close"，异常原样抛出
      destroy()           →  ["error"] → "close"

    write() 返回即表示该 chunk 的所有 record 已切分、解析并处理完成，
    调用方据此决定何时写入下一个 chunk（backpressure）。

    end() 默认不 flush 未终止的 carry，也不发出最后一个 tick 的 snapshot；
    两者都需要通过 StreamConfig 显式开启。
    """

    def __init__(
        self,
        process: Optional[Callable[[Event], Any]] = None,
        object_stream: Optional[bool] = None,
        config: Optional[StreamConfig] = None,
    ):
        self.config = config if config is not None else StreamConfig()

        if process is not None:
            if not callable(process):
                raise ConfigurationError("process handler must be callable")
            # 实例属性覆盖类方法
            self.process = process

        self._object_stream = (
            self.config.object_stream if object_stream is None else bool(object_stream)
        )

        self.splitter = LineSplitter(encoding=self.config.encoding)
        self.decoder = RecordDecoder(
            encoding=self.config.encoding,
            skip_blank_lines=self.config.skip_blank_lines,
        )
        self.emitter = SnapshotEmitter()
        self.metrics = StreamMetrics()

        self._ended = False
        self._closed = False
        self._error: Optional[BaseException] = None

    # --------------------------------------------------
    # Contract
    # --------------------------------------------------
    def process(self, event: Event) -> None:
        raise ConfigurationError(
            "Parser.process() not implemented: provide the process(event) handler "
            "either by subclassing or as a constructor option"
        )

    # --------------------------------------------------
    # State
    # --------------------------------------------------
    @property
    def object_stream(self) -> bool:
        return self._object_stream

    @property
    def ended(self) -> bool:
        return self._ended

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def error(self) -> Optional[BaseException]:
        return self._error

    # --------------------------------------------------
    # Subscription
    # --------------------------------------------------
    def on(self, name: str, handler: Handler) -> Callable[[], None]:
        return self.emitter.on(name, handler)

    def once(self, name: str, handler: Handler) -> Callable[[], None]:
        return self.emitter.once(name, handler)

    def off(self, name: str, handler: Handler) -> None:
        self.emitter.off(name, handler)

    def emit(self, name: str, *args: Any) -> bool:
        return self.emitter.emit(name, *args)

    # --------------------------------------------------
    # Writable
    # --------------------------------------------------
    def write(
        self,
        chunk: Union[RawChunk, Event],
        callback: Optional[Callable[[None], Any]] = None,
    ) -> bool:
        if self._ended or self._closed:
            raise StreamClosedError("write after end")

        try:
            self._write(chunk)
        except Exception as e:
            self._fail(e)
            raise

        if callback is not None:
            callback(None)
        return True

    def end(self, chunk: Union[RawChunk, Event, None] = None) -> None:
        if self._closed and not self._ended:
            raise StreamClosedError("end after destroy")
        if self._ended:
            return

        if chunk is not None:
            self.write(chunk)

        try:
            self._flush_tail()
            self._on_end()
        except Exception as e:
            self._fail(e)
            raise

        self._ended = True
        self.metrics.report()
        self.emit("finish")
        self._close()

    def destroy(self, error: Optional[BaseException] = None) -> None:
        if self._closed:
            return
        if error is not None:
            self._error = error
            self.emit("error", error)
        self._close()

    def consume(self, chunks: Iterable[Union[RawChunk, Event]]) -> "Parser":
        """
        依次 write 每个 chunk，最后 end()。
        """
        for chunk in chunks:
            self.write(chunk)
        self.end()
        return self

    @logs.catch(msg="NDJSON file replay failed", log_time=False)
    def read_file(self, path: Union[str, Path], chunk_size: Optional[int] = None) -> "Parser":
        """
        以固定大小的二进制 chunk 读取文件并写入，读完后 end()。
        """
        size = chunk_size or self.config.chunk_size
        path = Path(path)
        logs.info(f"[Parser] reading {path} chunk_size={size}")

        with open(path, "rb") as f:
            while True:
                chunk = f.read(size)
                if not chunk:
                    break
                self.write(chunk)

        self.end()
        return self

    # --------------------------------------------------
    # internals
    # --------------------------------------------------
    def _write(self, chunk: Union[RawChunk, Event]) -> None:
        self.metrics.incr("writes")

        if self._object_stream:
            event = self.decoder.decode_object(chunk)
            if event is not RecordDecoder.SKIP:
                self._dispatch(event)
            return

        self.metrics.incr("bytes_in", self._size_of(chunk))
        for record in self.splitter.split(chunk):
            self._handle_record(record)

    def _handle_record(self, record) -> None:
        self.metrics.incr("records")
        event = self.decoder.decode(record)
        if event is RecordDecoder.SKIP:
            return
        self._dispatch(event)

    def _dispatch(self, event: Event) -> None:
        self.metrics.incr("events")
        self.process(event)

    def _flush_tail(self) -> None:
        if self._object_stream or self.splitter.carry is None:
            return

        if self.config.flush_tail_on_end:
            self._handle_record(self.splitter.take_carry())
            return

        tail = self.splitter.take_carry()
        logs.warning(
            f"[Parser] stream ended with an unterminated record "
            f"({len(tail)} units) -> dropped"
        )

    def _on_end(self) -> None:
        """
        end() 时的子类钩子（在 "finish" 之前调用）。
        """

    def _fail(self, error: BaseException) -> None:
        logs.error(f"[Parser] stream failed: {error!r}")
        self.destroy(error)

    def _close(self) -> None:
        self._closed = True
        self.emit("close")

    @staticmethod
    def _size_of(chunk: Any) -> int:
        if isinstance(chunk, (str, bytes, bytearray)):
            return len(chunk)
        try:
            return memoryview(chunk).nbytes
        except TypeError:
            return 0
