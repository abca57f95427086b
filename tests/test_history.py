import pytest

from mandelbrot_explorer import INITIAL_BOUNDS, Bounds, ColorChange, ColorTheme, CommandHistory, IterationChange, Pan, ToggleOverlay, Zoom


class Recorder:
    def __init__(self):
        self.calls = []

    def __call__(self, command, forward):
        self.calls.append((command, forward))


def _pan(step: float) -> Pan:
    moved = Bounds(-2.0 + step, 1.0 + step, -1.5, 1.5)
    return Pan(old_bounds=INITIAL_BOUNDS, new_bounds=moved)


def test_undo_and_redo_on_empty_history_are_noops():
    history = CommandHistory()
    apply = Recorder()
    assert history.undo(apply) is None
    assert history.redo(apply) is None
    assert apply.calls == []


def test_undo_applies_inverse_and_moves_to_redo():
    history = CommandHistory()
    apply = Recorder()
    command = _pan(0.5)
    history.record(command)

    assert history.undo(apply) is command
    assert apply.calls == [(command, False)]
    assert not history.can_undo
    assert history.can_redo


def test_redo_applies_forward_and_moves_back():
    history = CommandHistory()
    apply = Recorder()
    command = IterationChange(old_max=100, new_max=250)
    history.record(command)
    history.undo(apply)

    assert history.redo(apply) is command
    assert apply.calls[-1] == (command, True)
    assert history.undo_depth == 1
    assert history.redo_depth == 0


def test_new_action_after_undo_discards_redo():
    history = CommandHistory()
    apply = Recorder()
    history.record(_pan(0.1))
    history.record(_pan(0.2))
    history.undo(apply)
    assert history.can_redo

    history.record(ColorChange(ColorTheme.GREY_SCALE, ColorTheme.RED))
    assert not history.can_redo
    assert history.redo(apply) is None


def test_redo_chain_survives_consecutive_undos_and_redos():
    history = CommandHistory()
    apply = Recorder()
    first, second, third = _pan(0.1), ToggleOverlay(), Zoom(INITIAL_BOUNDS, Bounds(-1.0, 0.0, -0.5, 0.5))
    for command in (first, second, third):
        history.record(command)

    history.undo(apply)
    history.undo(apply)
    history.undo(apply)
    assert history.redo_depth == 3

    assert history.redo(apply) is first
    assert history.redo(apply) is second
    assert history.redo_depth == 1

    history.record(_pan(0.4))
    assert history.redo_depth == 0
    assert history.undo_depth == 3


def test_action_after_redo_exhausts_stack_keeps_undo_entries():
    history = CommandHistory()
    apply = Recorder()
    history.record(_pan(0.1))
    history.undo(apply)
    history.redo(apply)
    history.record(_pan(0.2))
    assert history.undo_depth == 2
    assert history.redo_depth == 0


def test_failed_apply_restores_stacks():
    history = CommandHistory()
    command = _pan(0.3)
    history.record(command)

    def explode(command, forward):
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        history.undo(explode)
    assert history.undo_depth == 1
    assert history.redo_depth == 0

    history.undo(Recorder())
    with pytest.raises(RuntimeError):
        history.redo(explode)
    assert history.undo_depth == 0
    assert history.redo_depth == 1


def test_reset_clears_both_stacks():
    history = CommandHistory()
    history.record(_pan(0.1))
    history.record(_pan(0.2))
    history.undo(Recorder())
    history.reset()
    assert history.undo_depth == 0
    assert history.redo_depth == 0


def test_commands_report_whether_they_change_the_grid():
    assert Pan.affects_grid and Zoom.affects_grid and IterationChange.affects_grid
    assert not ColorChange.affects_grid
    assert not ToggleOverlay.affects_grid


def test_commands_are_value_copies():
    command = _pan(0.25)
    with pytest.raises(AttributeError):
        command.new_bounds = INITIAL_BOUNDS
