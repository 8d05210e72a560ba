from __future__ import annotations


class SimulationClock:
    """
    Tick counter plus elapsed simulated seconds.

    Named timed effects (e.g. the click glitch) are measured against
    `elapsed`, so they stop counting down while the clock is paused.
    """

    def __init__(self) -> None:
        self.ticks = 0
        self.elapsed = 0.0
        self.paused = False
        self._effects: dict[str, tuple[float, float]] = {}

    def reset(self) -> None:
        self.ticks = 0
        self.elapsed = 0.0
        self.paused = False
        self._effects.clear()

    def tick(self, dt: float) -> bool:
        if self.paused:
            return False
        self.ticks += 1
        self.elapsed += max(0.0, float(dt))
        expired = [name for name, (start, duration) in self._effects.items() if self.elapsed - start >= duration]
        for name in expired:
            del self._effects[name]
        return True

    def start_effect(self, name: str, duration: float) -> None:
        self._effects[name] = (self.elapsed, max(0.0, float(duration)))

    def effect_active(self, name: str) -> bool:
        span = self._effects.get(name)
        if span is None:
            return False
        start, duration = span
        return (self.elapsed - start) < duration

    def effect_progress(self, name: str) -> float:
        """0.0 at start, 1.0 once finished (or when the effect is not running)."""
        span = self._effects.get(name)
        if span is None:
            return 1.0
        start, duration = span
        if duration <= 0.0:
            return 1.0
        return min(1.0, max(0.0, (self.elapsed - start) / duration))
