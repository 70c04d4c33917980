#!/usr/bin/env python3

from lightprobe.color import DisplayColor, PlotBounds, PlotPosition, to_display_color, to_plot_position
from lightprobe.errors import CommandFailed, ConnectionFailed, DisplayFailed, LightprobeError
from lightprobe.lines import LineAssembler
from lightprobe.telemetry import Reading, decode

__version__ = '0.3.0'
