"""Closed real intervals used for ray-parameter windows.

An interval is empty when ``min > max``; the canonical empty interval is
``(+inf, -inf)`` and contains nothing.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.glint.core.interval import Interval
    >>> @ti.kernel
    ... def check() -> ti.i32:
    ...     return Interval(min=0.001, max=10.0).surrounds(5.0)
"""

import taichi as ti
import taichi.math as tm


@ti.dataclass
class Interval:
    """A range of real values [min, max].

    Attributes:
        min: Lower bound.
        max: Upper bound.
    """

    min: ti.f32
    max: ti.f32

    @ti.func
    def size(self) -> ti.f32:
        return self.max - self.min

    @ti.func
    def contains(self, x: ti.f32) -> ti.i32:
        """Check min <= x <= max (both bounds inclusive)."""
        return self.min <= x and x <= self.max

    @ti.func
    def surrounds(self, x: ti.f32) -> ti.i32:
        """Check min < x < max (both bounds exclusive)."""
        return self.min < x and x < self.max

    @ti.func
    def clamp(self, x: ti.f32) -> ti.f32:
        result = x
        if x < self.min:
            result = self.min
        elif x > self.max:
            result = self.max
        return result


@ti.func
def empty_interval() -> Interval:
    return Interval(min=tm.inf, max=-tm.inf)


@ti.func
def universe_interval() -> Interval:
    return Interval(min=-tm.inf, max=tm.inf)
