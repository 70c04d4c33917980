#!/usr/bin/env python3

# Prints telemetry the way the board does. Pipe it into a pty or straight into
#   python -m lightprobe.fake < points.txt | python -m lightprobe
# with one "x y lux cct" per input line.

import sys


def format_telemetry(cie_x, cie_y, lux, color_temp_k):
    return f'CIE x: {cie_x:.6f} CIE y: {cie_y:.6f} Lux: {lux:.2f} Color Temperature: {color_temp_k:.0f}'


def send_reading(fileobj, cie_x, cie_y, lux, color_temp_k):
    return fileobj.write(format_telemetry(cie_x, cie_y, lux, color_temp_k) + '\n')


if __name__ == '__main__':
    for line in sys.stdin:
        if not line.strip():
            continue
        send_reading(sys.stdout, *(float(tok) for tok in line.split()))
        sys.stdout.flush()
