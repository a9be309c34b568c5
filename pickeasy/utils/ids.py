# pickeasy/utils/ids.py
import itertools
import os
import re
import threading
import time

# 12-byte object id: 4-byte seconds timestamp, 5 random bytes fixed per process, 3-byte counter
OBJECT_ID_RE = re.compile(r"^[0-9a-fA-F]{24}$")

_process_random = os.urandom(5)
_counter = itertools.count(int.from_bytes(os.urandom(3), "big"))
_lock = threading.Lock()


def new_object_id() -> str:
    with _lock:
        count = next(_counter) & 0xFFFFFF
    raw = (
        int(time.time()).to_bytes(4, "big")
        + _process_random
        + count.to_bytes(3, "big")
    )
    return raw.hex()


def is_object_id(value) -> bool:
    return isinstance(value, str) and bool(OBJECT_ID_RE.match(value))
