#!/usr/bin/env python3

import argparse
import logging
import sys
from pathlib import Path

from lightprobe.color import PlotBounds
from lightprobe.comms import available_ports, open_session
from lightprobe.config import DEFAULT_TIMEOUT, SerialConfig, env_defaults
from lightprobe.display import ConsoleDisplay, DiagramDisplay, DisplayGroup, LogBook, RecordingDisplay
from lightprobe.errors import LightprobeError


def build_parser(defaults):
    parser = argparse.ArgumentParser(
        prog='lightprobe',
        description='OPT4048 colour sensor monitor'
    )

    parser.add_argument(
        '-p', '--port',
        type=str,
        default=defaults['port'],
        help='Serial port of the board, reads simulated output from stdin when omitted'
    )
    parser.add_argument(
        '-b', '--baud',
        type=int,
        default=defaults['baudrate']
    )
    parser.add_argument(
        '--timeout',
        type=float,
        default=DEFAULT_TIMEOUT,
        help='Read timeout in seconds'
    )
    parser.add_argument(
        '--bounds',
        type=float,
        nargs=2,
        metavar=('X_MAX', 'Y_MAX'),
        default=(0.8, 0.9),
        help='Chromaticity range shown on the diagram'
    )
    parser.add_argument(
        '--plot',
        type=Path,
        help='Path to PNG file updated with the latest chromaticity'
    )
    parser.add_argument(
        '--record',
        type=Path,
        help='Path to text file that readings are appended to'
    )
    parser.add_argument(
        '--log',
        type=Path,
        help='Path to text file the session log is written to on exit'
    )
    parser.add_argument(
        '-c', '--command',
        action='append',
        default=[],
        help='Command sent to the board after connecting, may be repeated'
    )
    parser.add_argument(
        '-q', '--quiet',
        action='store_true',
        help='Do not echo raw serial lines'
    )
    parser.add_argument(
        '--list',
        action='store_true',
        help='List serial ports and exit'
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true'
    )

    return parser


def main(argv=None):
    try:
        defaults = env_defaults()
    except ValueError as e:
        print(f'lightprobe: error: {e}', file=sys.stderr)
        sys.exit(1)

    args = build_parser(defaults).parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s'
    )

    if args.list:
        for device, description in available_ports():
            print(f'{device}\t{description}')
        sys.exit(0)

    # validate serial settings and diagram bounds
    try:
        bounds = PlotBounds(x_max=args.bounds[0], y_max=args.bounds[1])
        config = SerialConfig(port=args.port, baudrate=args.baud, timeout=args.timeout, bounds=bounds)
    except ValueError as e:
        print(f'lightprobe: error: {e}', file=sys.stderr)
        sys.exit(1)

    logbook = LogBook()
    displays = [ConsoleDisplay(show_log=not args.quiet), logbook]
    if args.plot:
        displays.append(DiagramDisplay(args.plot, bounds))
    if args.record:
        displays.append(RecordingDisplay(args.record))
    display = DisplayGroup(*displays)

    try:
        try:
            with open_session(config, display) as session:
                for command in args.command:
                    session.send_command(command)

                try:
                    session.run()
                except (KeyboardInterrupt, EOFError):
                    session.stop()
        finally:
            if args.log:
                logbook.dump(args.log)
                logbook.clear_log()
    except LightprobeError as e:
        print(f'lightprobe: error: {e}', file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
