import time


def now_ts() -> int:
    """Current time as integer Unix seconds"""
    return int(time.time())
