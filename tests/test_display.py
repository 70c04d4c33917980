from __future__ import annotations

import io
import json

import pytest

from lightprobe.color import DisplayColor, PlotPosition
from lightprobe.display import (
    ConsoleDisplay,
    DiagramDisplay,
    DisplayGroup,
    LogBook,
    RecordingDisplay,
    spectral_locus,
)
from lightprobe.errors import DisplayFailed
from lightprobe.telemetry import Reading

WHITE = DisplayColor(255, 255, 255)
CENTER = PlotPosition(50.0, 50.0)


def test_console_keeps_last_value_of_each_field() -> None:
    stream = io.StringIO()
    console = ConsoleDisplay(stream)

    console.show_reading(Reading(cie_x=0.3127, cie_y=0.329))
    console.show_reading(Reading(lux=123.456))

    assert console.fields == {
        "cie_x": "0.312700",
        "cie_y": "0.329000",
        "lux": "123.46",
        "color_temp_k": "-",
    }
    assert stream.getvalue().splitlines()[-1] == "CIE x: 0.312700  CIE y: 0.329000  Lux: 123.46  CCT (K): -"


def test_console_clear_resets_placeholders() -> None:
    console = ConsoleDisplay(io.StringIO())
    console.show_reading(Reading(color_temp_k=6504.2))
    console.show_color(WHITE, CENTER)

    console.clear()

    assert set(console.fields.values()) == {"-"}
    assert console.color is None


def test_console_log_kinds() -> None:
    stream = io.StringIO()
    console = ConsoleDisplay(stream)

    console.log("CIE x: 0.3")
    console.log("Connected to COM5", "status")
    console.log("Error reading data: gone", "error")

    assert stream.getvalue().splitlines() == [
        "CIE x: 0.3",
        "lightprobe: Connected to COM5",
        "lightprobe: error: Error reading data: gone",
    ]


def test_console_quiet_hides_log() -> None:
    stream = io.StringIO()
    ConsoleDisplay(stream, show_log=False).log("noise")

    assert stream.getvalue() == ""


def test_logbook_is_bounded_and_clearable() -> None:
    book = LogBook(maxlen=2)
    book.log("one")
    book.log("Sent: LED ON", "command")
    book.log("three")

    assert book.messages() == ["Sent: LED ON", "three"]
    assert book.messages("command") == ["Sent: LED ON"]

    book.clear()
    assert len(book.entries) == 2

    book.clear_log()
    assert book.messages() == []


def test_logbook_rejects_unknown_kind() -> None:
    with pytest.raises(ValueError):
        LogBook().log("x", "debug")


def test_recording_appends_json_lines(tmp_path) -> None:
    path = tmp_path / "readings.jsonl"
    recorder = RecordingDisplay(path)

    recorder.show_reading(Reading(cie_x=0.31, cie_y=0.33))
    recorder.show_reading(Reading(lux=0.0))

    lines = path.read_text().splitlines()
    assert [json.loads(line) for line in lines] == [{"cie_x": 0.31, "cie_y": 0.33}, {"lux": 0.0}]
    assert recorder.count == 2


def test_spectral_locus_spans_visible_range() -> None:
    locus = spectral_locus()

    assert locus.shape[1] == 2
    assert locus[:, 0].max() < 0.75
    assert locus[:, 1].max() < 0.85


def test_diagram_writes_png(tmp_path) -> None:
    path = tmp_path / "cie.png"
    diagram = DiagramDisplay(path)

    diagram.show_color(WHITE, CENTER)

    assert path.read_bytes()[:8] == b"\x89PNG\r\n\x1a\n"
    assert diagram.marker == (WHITE, CENTER)


def test_diagram_clear_hides_marker(tmp_path) -> None:
    diagram = DiagramDisplay(tmp_path / "cie.png")
    diagram.show_color(WHITE, CENTER)

    figure = diagram.render()
    assert len(figure.axes[0].collections) == 1

    diagram.clear()
    assert diagram.marker is None
    assert len(diagram.render().axes[0].collections) == 0


def test_group_fans_out(tmp_path) -> None:
    book = LogBook()
    console = ConsoleDisplay(io.StringIO())
    group = DisplayGroup(book, console)

    group.log("Lux: 1")
    group.show_reading(Reading(lux=1.0))
    group.clear()

    assert book.messages() == ["Lux: 1"]
    assert console.fields["lux"] == "-"


def test_console_rounds_ties_like_a_dashboard() -> None:
    console = ConsoleDisplay(io.StringIO())

    console.show_reading(Reading(lux=0.125, color_temp_k=6504.5))

    assert console.fields["lux"] == "0.13"
    assert console.fields["color_temp_k"] == "6505"


def test_logbook_dump(tmp_path) -> None:
    book = LogBook()
    book.log("Connected to COM5", "status")
    book.log("Lux: 1")

    book.dump(tmp_path / "session.log")

    assert (tmp_path / "session.log").read_text() == "status\tConnected to COM5\ndata\tLux: 1\n"


def test_unwritable_outputs_raise_display_failed(tmp_path) -> None:
    # a directory cannot be opened as a file
    with pytest.raises(DisplayFailed) as excinfo:
        RecordingDisplay(tmp_path).show_reading(Reading(lux=1.0))
    assert excinfo.value.path == tmp_path

    with pytest.raises(DisplayFailed):
        DiagramDisplay(tmp_path / "missing" / "cie.png").show_color(WHITE, CENTER)

    with pytest.raises(DisplayFailed):
        LogBook().dump(tmp_path)
