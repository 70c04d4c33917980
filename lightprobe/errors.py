#!/usr/bin/env python3

class LightprobeError(Exception):
    """Base exception for lightprobe errors."""


class ConnectionFailed(LightprobeError):
    """Serial port could not be opened or configured."""

    def __init__(self, port, reason):
        self.port = port
        self.reason = reason
        super().__init__(f'could not open {port}: {reason}')


class CommandFailed(LightprobeError):
    """Command could not be written to the board."""

    def __init__(self, command: str, reason):
        self.command = command
        self.reason = reason
        super().__init__(f'could not send {command!r}: {reason}')


class DisplayFailed(LightprobeError):
    """Display sink could not write its output file."""

    def __init__(self, path, reason):
        self.path = path
        self.reason = reason
        super().__init__(f'could not write {path}: {reason}')
