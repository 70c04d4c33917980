#!/usr/bin/env python3

# Board speaks newline terminated text in both directions:
#   board -> host: telemetry and log lines (see lightprobe.telemetry)
#   host -> board: one command per line, no acknowledgement

import codecs
import logging
import threading
from contextlib import contextmanager

from serial import Serial, SerialException
from serial.tools import list_ports

from lightprobe.color import DEFAULT_BOUNDS, to_display_color, to_plot_position
from lightprobe.config import DEFAULT_ENCODING, SerialConfig
from lightprobe.errors import CommandFailed, ConnectionFailed
from lightprobe.lines import LineAssembler
from lightprobe.telemetry import Reading, decode

logger = logging.getLogger(__name__)

# (method, description) in the order they run on disconnect
TEARDOWN_STEPS = (
    ('cancel_read', 'releasing reader'),
    ('flush', 'releasing writer'),
    ('close', 'closing port'),
)


class SensorSession():
    """One connection to the board, from open to close.

    run() is the only reader. stop() may be called from any thread and takes
    effect after the read in progress returns, at most one port timeout later.
    """

    def __init__(self, serial, display, encoding: str = DEFAULT_ENCODING, bounds=DEFAULT_BOUNDS) -> None:
        self.serial = serial
        self.display = display
        self.encoding = encoding
        self.bounds = bounds

        self.lines = LineAssembler()
        self._decoder = codecs.getincrementaldecoder(encoding)(errors='replace')
        self._stop = threading.Event()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    @property
    def is_open(self) -> bool:
        return self.serial is not None

    def stop(self):
        self._stop.set()

    def run(self):
        try:
            while not self._stop.is_set():
                serial = self.serial
                if serial is None:
                    break

                try:
                    data = serial.read(serial.in_waiting or 1)
                except EOFError:
                    logger.info('stream ended')
                    break
                except (SerialException, OSError) as e:
                    logger.error('error reading data: %s', e)
                    self.display.log(f'Error reading data: {e}', 'error')
                    break

                if data:
                    self.process(self._decoder.decode(data))
        finally:
            self.close()

    def process(self, chunk: str):
        for line in self.lines.feed(chunk):
            if not line:
                continue

            self.display.log(line)
            self.dispatch(decode(line))

    def dispatch(self, reading: Reading):
        if reading.is_empty:
            return

        self.display.show_reading(reading)

        if not reading.has_chromaticity:
            return

        color = to_display_color(reading.cie_x, reading.cie_y)
        if color is None:
            logger.warning('chromaticity out of range: x=%s y=%s', reading.cie_x, reading.cie_y)
            return

        self.display.show_color(color, to_plot_position(reading.cie_x, reading.cie_y, self.bounds))

    def send_command(self, command: str):
        if self.serial is None:
            logger.warning('not connected, dropping command %r', command)
            return

        try:
            self.serial.write((command + '\n').encode(self.encoding))
        except (SerialException, OSError) as e:
            logger.error('error sending command: %s', e)
            self.display.log(f'Error sending command: {e}', 'error')
            raise CommandFailed(command, e) from e

        self.display.log(f'Sent: {command}', 'command')

    def close(self):
        self._stop.set()

        serial, self.serial = self.serial, None
        if serial is None:
            return

        for method, description in TEARDOWN_STEPS:
            try:
                getattr(serial, method)()
            except Exception as e:
                # termios.error from a vanished adapter is not an OSError
                logger.error('error %s: %s', description, e)

        self.lines.clear()
        self._decoder.reset()

        self.display.log('Disconnected', 'status')
        self.display.clear()


@contextmanager
def open_session(config: SerialConfig, display, serial_cls=None):
    if serial_cls is None:
        serial_cls = Serial if config.port else DebugSerial

    if config.port:
        ser_args = {'port': config.port, 'baudrate': config.baudrate, 'timeout': config.timeout}
    else:
        ser_args = {}

    try:
        serial = serial_cls(**ser_args)
    except (SerialException, OSError, ValueError) as e:
        display.log(f'Error connecting: {e}', 'error')
        raise ConnectionFailed(config.port or 'stdin', e) from e

    try:
        session = SensorSession(serial, display, encoding=config.encoding, bounds=config.bounds)
    except LookupError as e:
        serial.close()
        display.log(f'Error connecting: {e}', 'error')
        raise ConnectionFailed(config.port or 'stdin', e) from e

    display.log(f'Connected to {config.port or "stdin"}', 'status')

    with session:
        yield session


def available_ports() -> list[tuple[str, str]]:
    return [(port.device, port.description) for port in sorted(list_ports.comports(), key=lambda p: p.device)]


class DebugSerial():
    """Stands in for a board: each line typed on stdin is one line the board sent."""

    def __init__(self, encoding: str = DEFAULT_ENCODING):
        self.encoding = encoding

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        pass

    @property
    def in_waiting(self):
        return 0

    def read(self, length):
        # input() raises EOFError once stdin is exhausted
        return (input() + '\n').encode(self.encoding)

    def write(self, data):
        print(f'>> {data.decode(self.encoding).rstrip()}')
        return len(data)

    def cancel_read(self):
        pass

    def flush(self):
        pass

    def close(self):
        pass
