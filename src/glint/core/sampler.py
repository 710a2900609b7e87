"""Per-pixel random number streams for reproducible Monte Carlo sampling.

Every sampling routine in the renderer takes an explicit ``stream`` index
instead of drawing from a process-wide generator. Each stream is a 32-bit
PCG state stored in a Taichi field, so pixels rendered in parallel never
touch each other's state and a render is a pure function of the scene,
the camera and the seed.

The renderer assigns stream ``j * width + i`` to pixel ``(i, j)``.

For tests the whole source can be replaced by a constant:

    >>> use_constant_random(0.5)   # every draw returns 0.5
    >>> use_random_streams()       # back to the PCG streams

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.glint.core.sampler import seed_streams, random_float
    >>> seed_streams(seed=7, count=64)
    >>> @ti.kernel
    ... def draw() -> ti.f32:
    ...     return random_float(3)
"""

import numpy as np
import numpy.typing as npt
import taichi as ti

# One stream per pixel of the largest supported image (see core.integrator)
MAX_STREAMS = 2048 * 2048

# PCG32 (RXS-M-XS variant) constants
PCG_MULTIPLIER = 747796405
PCG_INCREMENT = 2891336453
PCG_OUTPUT_MULTIPLIER = 277803737

# 2^-24: maps the top 24 bits of a draw onto [0, 1) exactly in f32
_FLOAT_SCALE = 1.0 / 16777216.0

_stream_state = ti.field(dtype=ti.u32, shape=MAX_STREAMS)
_constant_enabled = ti.field(dtype=ti.i32, shape=())
_constant_value = ti.field(dtype=ti.f32, shape=())


@ti.func
def pcg_hash(value: ti.u32) -> ti.u32:
    """Hash a 32-bit value with one PCG step and output permutation.

    Args:
        value: The input state.

    Returns:
        A well-mixed 32-bit value. The mapping is a bijection on u32.
    """
    state = value * ti.u32(PCG_MULTIPLIER) + ti.u32(PCG_INCREMENT)
    word = ((state >> ((state >> ti.u32(28)) + ti.u32(4))) ^ state) * ti.u32(
        PCG_OUTPUT_MULTIPLIER
    )
    return (word >> ti.u32(22)) ^ word


@ti.func
def random_u32(stream: ti.i32) -> ti.u32:
    """Draw the next 32-bit value from a stream and advance its state.

    Args:
        stream: Index of the stream to draw from.

    Returns:
        A uniformly distributed 32-bit value.
    """
    state = _stream_state[stream]
    _stream_state[stream] = state * ti.u32(PCG_MULTIPLIER) + ti.u32(PCG_INCREMENT)
    return pcg_hash(state)


@ti.func
def random_float(stream: ti.i32) -> ti.f32:
    """Draw a uniform float in [0, 1) from a stream.

    When the constant source is enabled the stream is left untouched and
    the configured constant is returned instead.

    Args:
        stream: Index of the stream to draw from.

    Returns:
        A float in [0, 1).
    """
    result = _constant_value[None]
    if _constant_enabled[None] == 0:
        result = ti.cast(random_u32(stream) >> ti.u32(8), ti.f32) * _FLOAT_SCALE
    return result


@ti.func
def random_range(stream: ti.i32, low: ti.f32, high: ti.f32) -> ti.f32:
    """Draw a uniform float in [low, high) from a stream."""
    return low + (high - low) * random_float(stream)


# =============================================================================
# Host-side control
# =============================================================================


@ti.kernel
def _seed_kernel(seed: ti.u32, count: ti.i32):
    base = pcg_hash(seed)
    for k in range(count):
        _stream_state[k] = pcg_hash(base ^ ti.cast(k, ti.u32))


@ti.kernel
def _draw_kernel(stream: ti.i32, out: ti.types.ndarray()):
    # Draws from a single stream must happen in order
    ti.loop_config(serialize=True)
    for k in range(out.shape[0]):
        out[k] = random_float(stream)


def seed_streams(seed: int, count: int = MAX_STREAMS) -> None:
    """Seed the first ``count`` streams from a single integer seed.

    Stream ``k`` starts from ``pcg_hash(pcg_hash(seed) ^ k)``, so every
    stream is distinct and the same seed always reproduces the same draws.

    Args:
        seed: Any integer; only the low 32 bits are used.
        count: Number of streams to initialize (1..MAX_STREAMS).

    Raises:
        ValueError: If count is outside [1, MAX_STREAMS].
    """
    if count < 1 or count > MAX_STREAMS:
        raise ValueError(f"Stream count {count} is outside [1, {MAX_STREAMS}]")
    _seed_kernel(seed & 0xFFFFFFFF, count)


def use_constant_random(value: float) -> None:
    """Replace every random draw with a fixed value.

    Intended for deterministic tests, e.g. ``use_constant_random(0.5)``
    removes the sub-pixel jitter of primary rays.

    Args:
        value: The value every draw returns. Must lie in [0, 1).

    Raises:
        ValueError: If value is outside [0, 1).
    """
    if not 0.0 <= value < 1.0:
        raise ValueError(f"Constant random value {value} is outside [0, 1)")
    _constant_value[None] = value
    _constant_enabled[None] = 1


def use_random_streams() -> None:
    """Switch back from the constant source to the seeded PCG streams."""
    _constant_enabled[None] = 0


def is_constant_random() -> bool:
    """Check whether the constant source is active."""
    return bool(_constant_enabled[None])


def draw_floats(stream: int, count: int) -> npt.NDArray[np.float32]:
    """Draw ``count`` consecutive floats from one stream on the host.

    Useful for inspecting a stream outside of a kernel. The stream state
    advances exactly as it would inside the renderer.

    Args:
        stream: Index of the stream to draw from.
        count: Number of draws.

    Returns:
        A float32 array of shape (count,).
    """
    if stream < 0 or stream >= MAX_STREAMS:
        raise ValueError(f"Stream index {stream} is outside [0, {MAX_STREAMS})")
    out = np.zeros(count, dtype=np.float32)
    if count > 0:
        _draw_kernel(stream, out)
    return out
