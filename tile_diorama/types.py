"""Common type aliases and enumerations.

``Point`` and ``Color`` are the currency of the drawing layer; ``RGBAArray``
is the raw pixel buffer shape exchanged with a drawing surface
(``H x W x 4``, straight alpha, ``uint8``).
"""

from enum import StrEnum, auto
from typing import Tuple, Union

import numpy as np
import numpy.typing as npt


Point = Tuple[float, float]

# Anything Pillow understands as a color: "#RRGGBB" strings or RGB(A) tuples.
Color = Union[str, Tuple[int, int, int], Tuple[int, int, int, int]]

RGBAArray = npt.NDArray[np.uint8]
FloatArray = npt.NDArray[np.float64]
BoolArray = npt.NDArray[np.bool_]


class FilterName(StrEnum):
    """Names of the built-in color grading presets."""

    NONE = auto()
    WINTER = auto()
    AUTUMN = auto()
    SPRING = auto()
    SUMMER = auto()
    NIGHT = auto()
    SEPIA = auto()
    VINTAGE = auto()
