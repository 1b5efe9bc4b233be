from __future__ import annotations

import os
import sys
import traceback
from typing import Optional, TextIO

from .types import Outcome

DEBUG_PY_TRACE_ENV = "MONKEY_DEBUG_PY_TRACE"

def debug_py_trace_enabled() -> bool:
    """True when MONKEY_DEBUG_PY_TRACE asks for Python tracebacks on host errors."""
    raw = os.environ.get(DEBUG_PY_TRACE_ENV, "")
    return raw.strip().lower() in ("1", "true", "yes", "on")

def set_debug_py_trace(enabled: bool) -> None:
    if enabled:
        os.environ[DEBUG_PY_TRACE_ENV] = "1"
    else:
        os.environ.pop(DEBUG_PY_TRACE_ENV, None)

def format_outcome(outcome: Outcome) -> str:
    """Display form of an evaluation result; no value renders as ''."""
    if outcome is None:
        return ""

    return repr(outcome)

def report_host_error(exc: BaseException, stream: Optional[TextIO]=None) -> None:
    out = stream if stream is not None else sys.stderr
    print(f"Error: {exc}", file=out)

    if debug_py_trace_enabled() and exc.__traceback__ is not None:
        print("\nPython traceback:", file=out)
        print("".join(traceback.format_tb(exc.__traceback__)), file=out, end="")
