from .base import ExecutionReport, Executor
from .inprocess import InProcessExecutor
from .local import LocalExecutor

__all__ = [
    "ExecutionReport",
    "Executor",
    "InProcessExecutor",
    "LocalExecutor",
]
