from .dispatcher import Dispatcher
from .sink import NullSink, ProgressSink, StreamSink
from .types import RunResult, TaskOutcome, TaskResult

__all__ = [
    "Dispatcher",
    "NullSink",
    "ProgressSink",
    "StreamSink",
    "RunResult",
    "TaskOutcome",
    "TaskResult",
]
