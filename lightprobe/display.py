#!/usr/bin/env python3

# Display sinks. Each one takes
#   log(message, kind)           raw serial log, kind in LOG_KINDS
#   show_reading(reading)        fields present in one telemetry line
#   show_color(color, position)  swatch color and diagram marker position
#   clear()                      session ended, reset fields and hide the marker

import functools
import json
import logging
import sys
import warnings
from collections import deque
from pathlib import Path
from typing import Protocol

import numpy as np
from matplotlib.figure import Figure
from matplotlib.patches import Rectangle

with warnings.catch_warnings():
    warnings.simplefilter('ignore')
    import colour

from lightprobe.color import DEFAULT_BOUNDS, DisplayColor, PlotBounds, PlotPosition
from lightprobe.errors import DisplayFailed
from lightprobe.telemetry import PATTERNS, PLACEHOLDER, Reading, format_reading

logger = logging.getLogger(__name__)

LOG_KINDS = ('data', 'status', 'error', 'command')

LABELS = {
    'cie_x': 'CIE x',
    'cie_y': 'CIE y',
    'lux': 'Lux',
    'color_temp_k': 'CCT (K)',
}


class Display(Protocol):
    def log(self, message: str, kind: str = 'data') -> None: ...

    def show_reading(self, reading: Reading) -> None: ...

    def show_color(self, color: DisplayColor, position: PlotPosition) -> None: ...

    def clear(self) -> None: ...


class ConsoleDisplay():
    """Prints the log and the latest value of every field.

    Fields keep their last value until a line carrying that label arrives,
    the same way a dashboard would.
    """

    def __init__(self, stream=None, show_log: bool = True):
        self.stream = stream if stream is not None else sys.stdout
        self.show_log = show_log
        self.fields = dict.fromkeys(PATTERNS, PLACEHOLDER)
        self.color = None

    def _print(self, text):
        print(text, file=self.stream, flush=True)

    def log(self, message, kind='data'):
        if not self.show_log:
            return

        if kind == 'data':
            self._print(message)
        elif kind == 'error':
            self._print(f'lightprobe: error: {message}')
        else:
            self._print(f'lightprobe: {message}')

    def show_reading(self, reading):
        for name, text in format_reading(reading).items():
            if getattr(reading, name) is not None:
                self.fields[name] = text

        self._print('  '.join(f'{LABELS[name]}: {text}' for name, text in self.fields.items()))

    def show_color(self, color, position):
        self.color = color
        self._print(f'  color {color.hex} at ({position.percent_x:.1f}%, {position.percent_y:.1f}%)')

    def clear(self):
        self.fields = dict.fromkeys(PATTERNS, PLACEHOLDER)
        self.color = None


class LogBook():
    """Keeps the most recent log entries in memory."""

    def __init__(self, maxlen: int = 1000):
        self.entries = deque(maxlen=maxlen)

    def log(self, message, kind='data'):
        if kind not in LOG_KINDS:
            raise ValueError(f'unknown log kind: {kind}')
        self.entries.append((kind, message))

    def show_reading(self, reading):
        pass

    def show_color(self, color, position):
        pass

    def clear(self):
        # a disconnect keeps the log, clear_log() empties it
        pass

    def clear_log(self):
        self.entries.clear()

    def messages(self, kind: str | None = None) -> list[str]:
        return [message for entry_kind, message in self.entries if kind is None or entry_kind == kind]

    def dump(self, path: Path):
        """Write the log as tab separated kind and message, one entry per line."""
        try:
            with Path(path).open('w') as fp:
                for kind, message in self.entries:
                    fp.write(f'{kind}\t{message}\n')
        except OSError as e:
            raise DisplayFailed(path, e) from e


@functools.cache
def spectral_locus() -> np.ndarray:
    """xy chromaticities of the CIE 1931 2 degree observer, 360 to 830 nm."""
    with warnings.catch_warnings():
        warnings.simplefilter('ignore', category=colour.utilities.ColourRuntimeWarning)

        cmfs = colour.MSDS_CMFS['CIE 1931 2 Degree Standard Observer']
        return colour.XYZ_to_xy(cmfs.values)


class DiagramDisplay():
    """Writes a chromaticity diagram PNG with the latest reading marked."""

    def __init__(self, path: Path, bounds: PlotBounds = DEFAULT_BOUNDS):
        self.path = Path(path)
        self.bounds = bounds
        self.marker = None

    def log(self, message, kind='data'):
        pass

    def show_reading(self, reading):
        pass

    def show_color(self, color, position):
        self.marker = (color, position)
        self.render()

    def clear(self):
        self.marker = None
        self.render()

    def render(self) -> Figure:
        figure = Figure(figsize=(5, 5.5))
        ax = figure.add_subplot()

        # close the locus with the line of purples
        locus = spectral_locus()
        outline = np.vstack([locus, locus[:1]])
        ax.plot(outline[:, 0], outline[:, 1], color='black', linewidth=1)

        ax.set_xlim(self.bounds.x_min, self.bounds.x_max)
        ax.set_ylim(self.bounds.y_min, self.bounds.y_max)
        ax.set_xlabel('CIE x')
        ax.set_ylabel('CIE y')
        ax.set_title('CIE 1931 chromaticity')
        ax.grid(True)

        if self.marker is not None:
            color, position = self.marker

            # axes span exactly the plot bounds, so percentages map onto axes coordinates
            ax.scatter(
                [position.percent_x / 100],
                [1 - position.percent_y / 100],
                s=80,
                color=[color.normalized],
                edgecolors='black',
                transform=ax.transAxes,
                zorder=3
            )
            ax.add_patch(Rectangle(
                (0.78, 0.84), 0.18, 0.12,
                transform=ax.transAxes,
                facecolor=color.normalized,
                edgecolor='black'
            ))

        try:
            figure.savefig(self.path)
        except OSError as e:
            raise DisplayFailed(self.path, e) from e
        logger.debug('wrote diagram to %s', self.path)

        return figure


class RecordingDisplay():
    """Appends every reading to a file as one JSON object per line."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self.count = 0

    def log(self, message, kind='data'):
        pass

    def show_reading(self, reading):
        try:
            with self.path.open('a') as fp:
                fp.write(json.dumps(reading.as_dict()) + '\n')
        except OSError as e:
            raise DisplayFailed(self.path, e) from e
        self.count += 1

    def show_color(self, color, position):
        pass

    def clear(self):
        pass


class DisplayGroup():
    def __init__(self, *displays: Display):
        self.displays = list(displays)

    def log(self, message, kind='data'):
        for display in self.displays:
            display.log(message, kind)

    def show_reading(self, reading):
        for display in self.displays:
            display.show_reading(reading)

    def show_color(self, color, position):
        for display in self.displays:
            display.show_color(color, position)

    def clear(self):
        for display in self.displays:
            display.clear()
