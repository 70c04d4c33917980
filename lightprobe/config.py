#!/usr/bin/env python3

import os
from dataclasses import dataclass, field

from lightprobe.color import DEFAULT_BOUNDS, PlotBounds

DEFAULT_BAUD = 115200
DEFAULT_TIMEOUT = 0.1  # seconds, also bounds how long a stop request waits
DEFAULT_ENCODING = 'utf-8'


@dataclass(frozen=True)
class SerialConfig():
    port: str | None = None
    baudrate: int = DEFAULT_BAUD
    timeout: float = DEFAULT_TIMEOUT
    encoding: str = DEFAULT_ENCODING
    bounds: PlotBounds = field(default=DEFAULT_BOUNDS)

    def __post_init__(self):
        if self.baudrate < 1:
            raise ValueError(f'baud rate must be positive, got {self.baudrate}')
        if self.timeout <= 0:
            raise ValueError(f'timeout must be positive, got {self.timeout}')


def env_defaults(environ=None) -> dict:
    """Defaults taken from LIGHTPROBE_PORT and LIGHTPROBE_BAUD."""
    if environ is None:
        environ = os.environ

    defaults = {'port': environ.get('LIGHTPROBE_PORT') or None, 'baudrate': DEFAULT_BAUD}

    baud = environ.get('LIGHTPROBE_BAUD')
    if baud:
        try:
            defaults['baudrate'] = int(baud)
        except ValueError:
            raise ValueError(f'LIGHTPROBE_BAUD is not an integer: {baud!r}') from None

    return defaults
