import numpy as np
import pytest

from mandelbrot_explorer import INITIAL_BOUNDS, Bounds, RenderRequest, Viewport, compute_escape_grid
from mandelbrot_explorer.renderer import render_request, sample_axes


@pytest.fixture(scope="module")
def default_grid():
    return compute_escape_grid(1000, 1000, INITIAL_BOUNDS, 100, 4.0)


def test_default_grid_shape_and_dtype(default_grid):
    assert default_grid.shape == (1000, 1000)
    assert default_grid.dtype == np.int32


def test_centre_pixel_reaches_iteration_cap(default_grid):
    # (500, 500) samples c = -0.5 + 0i, inside the main cardioid
    assert default_grid[500, 500] == 100


def test_corner_pixel_escapes_immediately(default_grid):
    # (0, 0) samples c = -2 - 1.5i, |c|**2 = 6.25
    assert default_grid[0, 0] <= 2
    assert default_grid[0, 0] == 1


def test_values_within_iteration_range(default_grid):
    assert default_grid.min() >= 0
    assert default_grid.max() <= 100


def test_grid_is_read_only(default_grid):
    with pytest.raises(ValueError):
        default_grid[0, 0] = 5


def test_identical_inputs_give_identical_grids():
    bounds = Bounds(-0.8, -0.7, 0.05, 0.15)
    first = compute_escape_grid(48, 48, bounds, 200, 4.0)
    second = compute_escape_grid(48, 48, bounds, 200, 4.0)
    assert np.array_equal(first, second)


def test_rectangular_grid_is_row_major():
    grid = compute_escape_grid(30, 20, INITIAL_BOUNDS, 50, 4.0)
    assert grid.shape == (20, 30)


def test_single_iteration_caps_every_cell():
    grid = compute_escape_grid(16, 16, INITIAL_BOUNDS, 1, 4.0)
    assert np.all(grid == 1)


def test_larger_radius_never_escapes_sooner():
    small = compute_escape_grid(24, 24, INITIAL_BOUNDS, 60, 4.0)
    large = compute_escape_grid(24, 24, INITIAL_BOUNDS, 60, 100.0)
    assert np.all(large >= small)


def test_sample_axes_follow_linear_mapping():
    x, y = sample_axes(1000, 1000, INITIAL_BOUNDS)
    assert x[0] == -2.0
    assert y[0] == -1.5
    assert x[500] == pytest.approx(-0.5)
    assert y[500] == pytest.approx(0.0)
    # the right/bottom edge itself is never sampled
    assert x[-1] < INITIAL_BOUNDS.max_real


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(width=0, height=10, bounds=INITIAL_BOUNDS, max_iterations=10, radius_squared=4.0),
        dict(width=10, height=-1, bounds=INITIAL_BOUNDS, max_iterations=10, radius_squared=4.0),
        dict(width=10, height=10, bounds=Bounds(1.0, -1.0, -1.0, 1.0), max_iterations=10, radius_squared=4.0),
        dict(width=10, height=10, bounds=INITIAL_BOUNDS, max_iterations=0, radius_squared=4.0),
        dict(width=10, height=10, bounds=INITIAL_BOUNDS, max_iterations=2**31, radius_squared=4.0),
        dict(width=10, height=10, bounds=INITIAL_BOUNDS, max_iterations=10, radius_squared=0.0),
    ],
)
def test_invalid_arguments_are_rejected(kwargs):
    with pytest.raises(ValueError):
        compute_escape_grid(**kwargs)


def test_render_request_for_viewport_matches_direct_call():
    viewport = Viewport(max_iterations=40)
    request = RenderRequest.for_viewport(viewport, 20)
    assert request.width == request.height == 20
    assert np.array_equal(render_request(request), compute_escape_grid(20, 20, INITIAL_BOUNDS, 40, 4.0))
