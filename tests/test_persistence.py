import numpy as np
import pytest

from mandelbrot_explorer import Bounds, ColorTheme, Viewport, compute_escape_grid, load_session, parse_session, save_session
from mandelbrot_explorer.errors import CorruptData, InvalidResolution, IOFailure
from mandelbrot_explorer.persistence import dump_session, session_path

RES = 8


@pytest.fixture
def viewport():
    return Viewport(
        bounds=Bounds(-0.7436438870371587, -0.7436438870371, 0.1318259042053, 0.13182590420536),
        max_iterations=60,
        radius_squared=4.0,
        color_theme=ColorTheme.CYAN,
        magnification=1.2345678901234567e13,
    )


@pytest.fixture
def grid(viewport):
    return compute_escape_grid(RES, RES, viewport.bounds, viewport.max_iterations, viewport.radius_squared)


def _lines(viewport, grid):
    return dump_session(viewport, grid, RES).splitlines()


def test_dump_layout(viewport, grid):
    lines = _lines(viewport, grid)
    assert len(lines) == 10 + RES * RES
    assert lines[:2] == [str(RES), str(RES)]
    assert lines[6] == "60"
    assert lines[8] == "cyan"
    assert lines[10:] == [str(v) for v in grid.ravel()]


def test_parse_round_trip_is_exact(viewport, grid):
    snapshot = parse_session(dump_session(viewport, grid, RES), RES)
    assert snapshot.viewport == viewport
    assert np.array_equal(snapshot.grid, grid)
    assert not snapshot.grid.flags.writeable


def test_save_and_load_round_trip(tmp_path, viewport, grid):
    written = save_session(tmp_path / "view.txt", viewport, grid, RES)
    assert written == tmp_path / "view.txt"
    snapshot = load_session(written, RES)
    assert snapshot.viewport == viewport
    assert np.array_equal(snapshot.grid, grid)


def test_save_appends_txt_suffix(tmp_path, viewport, grid):
    written = save_session(tmp_path / "nested" / "session", viewport, grid, RES)
    assert written == tmp_path / "nested" / "session.txt"
    assert written.is_file()
    assert session_path("a.json").name == "a.json.txt"
    assert session_path("b.TXT").name == "b.TXT"


def test_resolution_mismatch(viewport, grid):
    text = dump_session(viewport, grid, RES)
    with pytest.raises(InvalidResolution) as excinfo:
        parse_session(text, RES + 1)
    assert excinfo.value.message == "Invalid draw sizes"


def test_second_resolution_line_is_checked(viewport, grid):
    lines = _lines(viewport, grid)
    lines[1] = str(RES * 2)
    with pytest.raises(InvalidResolution):
        parse_session("\n".join(lines), RES)


@pytest.mark.parametrize(
    "index, value",
    [
        (0, "eight"),
        (2, "abc"),
        (5, ""),
        (6, "60.5"),
        (6, "0"),
        (7, "-4.0"),
        (7, "nan"),
        (8, "purple"),
        (9, "inf"),
        (10, "x"),
        (11, "-1"),
        (12, "61"),
    ],
)
def test_corrupt_fields(viewport, grid, index, value):
    lines = _lines(viewport, grid)
    lines[index] = value
    with pytest.raises(CorruptData):
        parse_session("\n".join(lines), RES)


def test_inverted_bounds_are_corrupt(viewport, grid):
    lines = _lines(viewport, grid)
    lines[2], lines[3] = lines[3], lines[2]
    with pytest.raises(CorruptData):
        parse_session("\n".join(lines), RES)


def test_iteration_cap_beyond_int32_is_corrupt(viewport, grid):
    cap = 2**32 + 5
    lines = _lines(viewport, grid)
    lines[6] = str(cap)
    lines[10] = str(cap)
    with pytest.raises(CorruptData):
        parse_session("\n".join(lines), RES)


@pytest.mark.parametrize("delta", [-1, 1])
def test_wrong_line_count(viewport, grid, delta):
    lines = _lines(viewport, grid)
    lines = lines[:delta] if delta < 0 else lines + ["0"]
    with pytest.raises(CorruptData):
        parse_session("\n".join(lines), RES)


def test_empty_file_is_corrupt():
    with pytest.raises(CorruptData):
        parse_session("", RES)


def test_missing_file_is_io_failure(tmp_path):
    with pytest.raises(IOFailure):
        load_session(tmp_path / "missing.txt", RES)


def test_binary_file_is_corrupt(tmp_path):
    path = tmp_path / "blob.txt"
    path.write_bytes(b"\xff\xfe\x00\x81")
    with pytest.raises(CorruptData):
        load_session(path, RES)


def test_unwritable_destination_is_io_failure(tmp_path, viewport, grid):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    with pytest.raises(IOFailure):
        save_session(blocker / "session.txt", viewport, grid, RES)


def test_dump_rejects_mismatched_grid(viewport, grid):
    with pytest.raises(ValueError):
        dump_session(viewport, grid, RES + 2)
