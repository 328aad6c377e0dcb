from __future__ import annotations

from typing import List, Sequence

import numpy as np


def centered_moving_average(values: Sequence[float], window: int) -> List[float]:
    """
    Centered moving average with a window that shrinks at the array edges.

    The effective window is min(window, len(values)); each output averages
    the values within window // 2 positions on either side that exist.
    """
    n = len(values)
    if n == 0:
        return []
    half = max(1, min(int(window), n)) // 2
    if half == 0:
        return [float(v) for v in values]
    v = np.asarray(values, dtype=np.float64)
    kernel = np.ones(2 * half + 1, dtype=np.float64)
    sums = np.convolve(v, kernel, mode="full")[half : half + n]
    counts = np.convolve(np.ones(n, dtype=np.float64), kernel, mode="full")[half : half + n]
    return [float(x) for x in sums / counts]
