from __future__ import annotations

from ..runtime import MkBool, MkNull, MkValue

def is_truthy(val: MkValue) -> bool:
    match val:
        case MkBool(value=b):
            return b
        case MkNull():
            return False
        case _:
            # 0 and "" are truthy; only null and false are not
            return True

def native_bool(flag: bool) -> MkBool:
    return MkBool(flag)
