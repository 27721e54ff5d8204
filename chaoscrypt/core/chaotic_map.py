# chaoscrypt/core/chaotic_map.py
"""
One-dimensional chaotic maps used as the local dynamic of every network node.

A map is anything callable with one real (or a numpy array, element-wise)
returning the image under the map. Maps hold only their control parameter.

The sign threshold used to binarize the network state (0 by default) relies
on the attractor straddling zero. All maps here are symmetric around zero;
substituting a map without that property requires revisiting the threshold,
otherwise some symbols may be forbidden by the dynamics.
"""

from typing import Callable, Dict, Optional, Protocol, Union

import numpy as np

ArrayLike = Union[float, np.ndarray]


class ChaoticMap(Protocol):
    """Capability: evaluate one real input to one real output."""

    def __call__(self, x: ArrayLike) -> ArrayLike:
        ...


class LogarithmicMap:
    """
    Logarithmic map f(x) = b + ln|x|.

    With b = 0.5 the attractor covers both signs, which is what the sign
    threshold at 0 needs. f(0) is -inf; keeping away from 0 is the caller's
    concern.
    """

    name = "logarithmic"
    default_parameter = 0.5

    def __init__(self, b: float = 0.5):
        self.b = float(b)

    def __call__(self, x: ArrayLike) -> ArrayLike:
        return self.b + np.log(np.abs(x))

    def __repr__(self) -> str:
        return f"LogarithmicMap(b={self.b})"


class LogisticMap:
    """Symmetric logistic-family map f(x) = 1 - r*x^2 on [-1, 1]."""

    name = "logistic"
    default_parameter = 2.0

    def __init__(self, r: float = 2.0):
        self.r = float(r)

    def __call__(self, x: ArrayLike) -> ArrayLike:
        return 1.0 - self.r * np.square(x)

    def __repr__(self) -> str:
        return f"LogisticMap(r={self.r})"


class TentMap:
    """
    Symmetric tent map f(x) = 1 - mu*|x|.

    mu = 2 collapses to a fixed point in float64 after a few dozen steps,
    hence the default just below it.
    """

    name = "tent"
    default_parameter = 1.99

    def __init__(self, mu: float = 1.99):
        self.mu = float(mu)

    def __call__(self, x: ArrayLike) -> ArrayLike:
        return 1.0 - self.mu * np.abs(x)

    def __repr__(self) -> str:
        return f"TentMap(mu={self.mu})"


_MAPS: Dict[str, Callable[[float], ChaoticMap]] = {
    LogarithmicMap.name: LogarithmicMap,
    LogisticMap.name: LogisticMap,
    TentMap.name: TentMap,
}

AVAILABLE_MAPS = tuple(_MAPS)


def get_map(name: str, parameter: Optional[float] = None) -> ChaoticMap:
    """
    Build a local map by name.

    Args:
        name: One of AVAILABLE_MAPS
        parameter: Control parameter; the map's default when None

    Returns:
        A ChaoticMap instance

    Raises:
        ValueError: If the name is unknown
    """
    key = (name or "").strip().lower()
    if key not in _MAPS:
        raise ValueError(f"Unknown chaotic map: {name!r}. Available: {', '.join(AVAILABLE_MAPS)}")

    factory = _MAPS[key]
    if parameter is None:
        return factory()
    return factory(parameter)
