#!/usr/bin/env python3

import math
import warnings
from dataclasses import dataclass

import numpy as np

with warnings.catch_warnings():
    warnings.simplefilter('ignore')
    import colour

# XYZ -> linear sRGB, D65 white
XYZ_TO_SRGB = np.array([
    [ 3.2406, -1.5372, -0.4986],
    [-0.9689,  1.8758,  0.0415],
    [ 0.0557, -0.2040,  1.0570],
])


@dataclass(frozen=True)
class DisplayColor():
    r: int
    g: int
    b: int

    @property
    def hex(self) -> str:
        return f'#{self.r:02x}{self.g:02x}{self.b:02x}'

    @property
    def css(self) -> str:
        return f'rgb({self.r}, {self.g}, {self.b})'

    @property
    def normalized(self) -> tuple[float, float, float]:
        return (self.r / 255, self.g / 255, self.b / 255)


@dataclass(frozen=True)
class PlotBounds():
    """Visible chromaticity range of the diagram the marker is placed on."""

    x_min: float = 0.0
    x_max: float = 0.8
    y_min: float = 0.0
    y_max: float = 0.9

    def __post_init__(self):
        if self.x_max <= self.x_min or self.y_max <= self.y_min:
            raise ValueError(f'empty plot bounds: {self}')


DEFAULT_BOUNDS = PlotBounds()


@dataclass(frozen=True)
class PlotPosition():
    percent_x: float
    percent_y: float


def is_valid_chromaticity(x: float, y: float) -> bool:
    if not (math.isfinite(x) and math.isfinite(y)):
        return False

    # y == 0 has no XYZ equivalent
    return 0 <= x <= 1 and 0 < y <= 1


def to_display_color(x: float, y: float) -> DisplayColor | None:
    if not is_valid_chromaticity(x, y):
        return None

    with warnings.catch_warnings():
        warnings.simplefilter('ignore', category=colour.utilities.ColourRuntimeWarning)

        XYZ = colour.xy_to_XYZ(np.array([x, y]))
        linear = XYZ_TO_SRGB @ XYZ
        sRGB = np.clip(colour.cctf_encoding(linear, function='sRGB'), 0, 1)

    # round half up
    r, g, b = (int(math.floor(channel * 255 + 0.5)) for channel in sRGB)
    return DisplayColor(r, g, b)


def to_plot_position(x: float, y: float, bounds: PlotBounds = DEFAULT_BOUNDS) -> PlotPosition:
    percent_x = (x - bounds.x_min) / (bounds.x_max - bounds.x_min) * 100
    # diagram origin is top-left
    percent_y = (1 - (y - bounds.y_min) / (bounds.y_max - bounds.y_min)) * 100

    return PlotPosition(percent_x, percent_y)
