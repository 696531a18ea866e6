"""Engine-local computation errors.

Neither escapes a display pass: callers catch them and degrade
(wake time falls back to 00:00, a degenerate cycle counts as no cycle).
"""


class EngineError(Exception):
    pass


class InvalidTimeFormat(EngineError):
    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Expected HH:MM (24h), got {value!r}")


class DegenerateCycleError(EngineError):
    def __init__(self, on_days: int, off_days: int):
        self.on_days = on_days
        self.off_days = off_days
        super().__init__(f"Cycle length is zero (on_days={on_days}, off_days={off_days})")
