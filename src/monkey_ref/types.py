from __future__ import annotations

import weakref
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple
from typing_extensions import TypeAlias, TypeGuard

from .ast_nodes import Block, quote_string, render

INT_MIN = -(2 ** 31)
INT_MAX = 2 ** 31 - 1

# ---------- Value Model ----------

@dataclass
class MkNull:
    def __repr__(self) -> str:
        return "null"

@dataclass
class MkBool:
    value: bool
    def __repr__(self) -> str:
        return "true" if self.value else "false"

@dataclass
class MkInt:
    value: int
    def __repr__(self) -> str:
        return str(self.value)

@dataclass
class MkString:
    value: str
    def __repr__(self) -> str:
        return quote_string(self.value)

@dataclass(eq=False)
class MkFn:
    params: List[str]
    body: Block
    env: 'Environment'  # closure scope, shared with every other holder
    stamp: Optional[int] = None  # Environment.now() when the literal ran
    name: Optional[str] = None  # set when a `let` binds the literal directly
    def __post_init__(self) -> None:
        Environment.track(self)
    def __repr__(self) -> str:
        return f"fn({', '.join(self.params)}) {render(self.body)}"

MkValue: TypeAlias = (
    MkNull
    | MkBool
    | MkInt
    | MkString
    | MkFn
)

# ---------- Control signals (never stored, never passed) ----------

@dataclass(frozen=True)
class ReturnSignal:
    """Unwinds the current block up to the nearest call or program boundary."""
    value: MkValue
    def __repr__(self) -> str:
        return repr(self.value)

@dataclass(frozen=True)
class ErrorSignal:
    """Runtime fault. Propagates like a return and ends the program."""
    message: str
    def __repr__(self) -> str:
        return f"ERROR: {self.message}"

Signal: TypeAlias = ReturnSignal | ErrorSignal

# None stands for "no value was produced".
Outcome: TypeAlias = Optional[MkValue | Signal]

_MK_VALUE_TYPES: Tuple[type, ...] = (
    MkNull,
    MkBool,
    MkInt,
    MkString,
    MkFn,
)

def is_mk_value(value: Outcome) -> TypeGuard[MkValue]:
    return isinstance(value, _MK_VALUE_TYPES)

def is_signal(value: Outcome) -> TypeGuard[Signal]:
    return isinstance(value, (ReturnSignal, ErrorSignal))

def is_error(value: Outcome) -> TypeGuard[ErrorSignal]:
    return isinstance(value, ErrorSignal)

def fits_int(value: int) -> bool:
    return INT_MIN <= value <= INT_MAX

# ---------- Scopes ----------

class Environment:
    """One scope: name -> binding history, plus the enclosing scope.

    Every `define` is stamped with a process-wide tick. A scope created for a
    call also records the tick at which the callee was defined (`cutoff`);
    lookups that leave the scope through `outer` only see bindings made at or
    before that tick. A name with no such binding anywhere in the chain is
    resolved against the live bindings instead, so a literal can refer to a
    function bound by a later `let`.

    Older bindings are kept only while a live function value or call scope
    holds a cutoff that still selects them.
    """

    _clock = 0

    # cutoff holders; weak so that pruning never keeps a function alive
    _live_fns: 'weakref.WeakSet[MkFn]' = weakref.WeakSet()
    _live_scopes: 'weakref.WeakSet[Environment]' = weakref.WeakSet()

    def __init__(self, outer: Optional['Environment']=None, cutoff: Optional[int]=None):
        self.outer = outer
        self.cutoff = cutoff
        self.vars: Dict[str, MkValue] = {}
        self._cells: Dict[str, List[Tuple[int, MkValue]]] = {}

        if cutoff is not None:
            Environment._live_scopes.add(self)

    @classmethod
    def enclosed(cls, outer: 'Environment', cutoff: Optional[int]=None) -> 'Environment':
        return cls(outer=outer, cutoff=cutoff)

    @classmethod
    def now(cls) -> int:
        """Tick of the most recent binding made in any scope."""
        return cls._clock

    @classmethod
    def track(cls, fn: MkFn) -> None:
        cls._live_fns.add(fn)

    @classmethod
    def live_cutoffs(cls) -> List[int]:
        cutoffs = [fn.stamp for fn in list(cls._live_fns) if fn.stamp is not None]
        cutoffs.extend(scope.cutoff for scope in list(cls._live_scopes) if scope.cutoff is not None)
        return cutoffs

    def define(self, name: str, val: MkValue) -> Optional[MkValue]:
        """Bind in this scope only; returns the binding it replaced, if any."""
        Environment._clock += 1
        previous = self.vars.get(name)
        self.vars[name] = val

        cells = self._cells.setdefault(name, [])
        cells.append((Environment._clock, val))
        if len(cells) > 1:
            self._cells[name] = _prune_cells(cells, Environment.live_cutoffs())

        return previous

    def history(self, name: str) -> List[MkValue]:
        """Bindings of `name` in this scope still reachable, oldest first."""
        return [val for _, val in self._cells.get(name, [])]

    def lookup(self, name: str) -> Optional[MkValue]:
        val = self._resolve(name, None)

        if val is not None:
            return val

        return self._resolve_live(name)

    def _resolve(self, name: str, cutoff: Optional[int]) -> Optional[MkValue]:
        cells = self._cells.get(name)

        if cells:
            if cutoff is None:
                return cells[-1][1]

            for tick, val in reversed(cells):
                if tick <= cutoff:
                    return val

        if self.outer is None:
            return None

        if self.cutoff is not None:
            cutoff = self.cutoff if cutoff is None else min(cutoff, self.cutoff)

        return self.outer._resolve(name, cutoff)

    def _resolve_live(self, name: str) -> Optional[MkValue]:
        scope: Optional[Environment] = self

        while scope is not None:
            if name in scope.vars:
                return scope.vars[name]
            scope = scope.outer

        return None

    def names(self) -> List[str]:
        return sorted(self.vars)

    def __repr__(self) -> str:
        depth = 0
        scope = self.outer

        while scope is not None:
            depth += 1
            scope = scope.outer

        return f"<Environment names={self.names()} depth={depth}>"

def _prune_cells(cells: List[Tuple[int, MkValue]], cutoffs: List[int]) -> List[Tuple[int, MkValue]]:
    """Drop every binding but the latest unless some cutoff falls in its lifetime."""
    kept = [
        cell
        for cell, (next_tick, _) in zip(cells, cells[1:])
        if any(cell[0] <= c < next_tick for c in cutoffs)
    ]
    kept.append(cells[-1])
    return kept

# ---------- Exceptions ----------

class MonkeyRuntimeError(Exception):
    """Host-level failure: the evaluator was handed something it cannot walk.

    Language-level faults are ErrorSignal values, not exceptions.
    """

    def __init__(self, message: str, node: Optional[object] = None):
        super().__init__(message)
        self.node = node
