"""Tests for command-line parsing and mode dispatch."""

import pytest

from delux.cli.common import load_cli_config
from delux.cli.run_mode import apply_mode, build_parser
from delux.config import DeluxConfig
from delux.lights.targets import TargetId


def parse(*argv):
    return build_parser().parse_args(list(argv))


def test_meeting_options():
    args = parse("meeting", "--total-time", "30", "--warn-time", "2", "--no-animation")
    assert args.mode == "meeting"
    assert args.total_time == 30.0
    assert args.warn_time == 2.0
    assert args.animated is False


def test_animation_unset_by_default():
    assert parse("meeting").animated is None


def test_target_option():
    assert parse("color", "--color", "#F00", "--target", "bottom").target == TargetId.BOTTOM


def test_unknown_target_rejected():
    with pytest.raises(SystemExit):
        parse("color", "--target", "middle")


def test_unknown_mode_rejected():
    with pytest.raises(SystemExit):
        parse("party")


def test_apply_busy(controller, sink):
    apply_mode(controller, parse("busy"))
    assert controller.mode == "busy"
    assert [c.command for c in sink.calls] == ["off", "set_color"]


def test_apply_meeting(controller, sink):
    apply_mode(controller, parse("meeting", "--total-time", "1", "--meeting-color", "#00F"))
    assert controller.scheduler.is_running
    assert sink.calls[-1].command == "flash"
    assert sink.calls[-1].color.as_tuple() == (0, 0, 255)


def test_apply_color_needs_color(controller):
    with pytest.raises(ValueError):
        apply_mode(controller, parse("color"))


def test_config_defaults_without_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert load_cli_config(None) == DeluxConfig.with_defaults()


def test_config_from_path(tmp_path):
    path = tmp_path / "delux.yaml"
    path.write_text("brightness: 0.3\n")
    assert load_cli_config(path).brightness == 0.3


def test_missing_config_path(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_cli_config(tmp_path / "missing.yaml")
