from obdart.obdart_classifier import SplitResult, classify, has_entry_point
from obdart.obdart_config import DartConfig, Directives, ResultType
from obdart.obdart_errors import (
    ConfigurationError,
    ExecutionError,
    GuestDispatchError,
    ObDartError,
    SessionUnsupportedError,
)
from obdart.obdart_invoker import Invocation, invoke
from obdart.obdart_runtime import BlockResult, BlockRunner, execute, expand
from obdart.obdart_shaper import TableShaper, shape
from obdart.obdart_template import render

__all__ = [
    "BlockResult",
    "BlockRunner",
    "ConfigurationError",
    "DartConfig",
    "Directives",
    "ExecutionError",
    "GuestDispatchError",
    "Invocation",
    "ObDartError",
    "ResultType",
    "SessionUnsupportedError",
    "SplitResult",
    "TableShaper",
    "classify",
    "execute",
    "expand",
    "has_entry_point",
    "invoke",
    "render",
    "shape",
]
