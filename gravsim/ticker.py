"""Accurate sleeping and fixed-rate tick pacing."""

import time

_COARSE_THRESHOLD = 0.002
_COARSE_STEP = 0.00095


def precise_sleep(seconds: float) -> None:
    """Sleep for ``seconds``, finishing with a busy wait for accuracy."""
    while seconds > _COARSE_THRESHOLD:
        start = time.perf_counter()
        time.sleep(_COARSE_STEP)
        seconds -= time.perf_counter() - start
    deadline = time.perf_counter() + max(seconds, 0.0)
    while time.perf_counter() < deadline:
        pass


class Ticker:
    """Paces a loop to a target number of ticks per second."""

    def __init__(self, tick_speed: float = 60.0) -> None:
        self._tick_speed = 60.0
        self.tick_speed = tick_speed
        now = time.perf_counter()
        self._tick_start = now
        self._tick_end = now

    @property
    def tick_speed(self) -> float:
        """Target ticks per second."""
        return self._tick_speed

    @tick_speed.setter
    def tick_speed(self, value: float) -> None:
        if value <= 0:
            raise ValueError(f"tick speed must be positive, got {value}")
        self._tick_speed = float(value)

    def tick_start(self) -> None:
        """Mark the beginning of a tick."""
        self._tick_start = time.perf_counter()

    def tick_end(self) -> float:
        """Mark the end of a tick and return its duration in seconds."""
        self._tick_end = time.perf_counter()
        return self._tick_end - self._tick_start

    def tick_end_and_sleep(self) -> None:
        """Mark the end of a tick and sleep out the rest of its time slot."""
        duration = self.tick_end()
        precise_sleep(1.0 / self._tick_speed - duration)