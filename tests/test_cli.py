import logging

import pytest

from brotview.cli import build_arg_parser, main, run_bench, settings_from_args
from brotview.compute import INTERIOR_BLACK, INTERIOR_FULL
from brotview.config import ViewerSettings
from brotview.util.logging_setup import configure_logging, get_logger, parse_level


def test_default_settings_are_valid():
    settings = ViewerSettings().validate()
    assert settings.max_iterations == 100
    assert settings.interior_policy == INTERIOR_BLACK
    assert settings.zoom_magnification == 2.0


@pytest.mark.parametrize("overrides", [
    {"width": 0},
    {"height": -1},
    {"max_iterations": 0},
    {"threads": 0},
    {"interior": "blue"},
    {"zoom_magnification": 1.0},
])
def test_invalid_settings(overrides):
    with pytest.raises(ValueError):
        ViewerSettings(**overrides).validate()


def test_with_overrides_ignores_none():
    settings = ViewerSettings().with_overrides(width=320, height=None, interior="full")
    assert (settings.width, settings.height) == (320, 600)
    assert settings.interior_policy == INTERIOR_FULL


def test_parser_maps_view_options():
    args = build_arg_parser().parse_args(
        ["view", "--width", "640", "--height", "480", "--max-iter", "255", "--threads", "2"]
    )
    settings = settings_from_args(args)
    assert (settings.width, settings.height) == (640, 480)
    assert settings.max_iterations == 255
    assert settings.threads == 2


def test_parser_requires_a_command():
    with pytest.raises(SystemExit):
        build_arg_parser().parse_args([])


def test_bad_settings_exit_through_parser():
    with pytest.raises(SystemExit):
        main(["--log-level", "ERROR", "bench", "--width", "0"])


def test_run_bench_reports_timings():
    result = run_bench(ViewerSettings(width=32, height=24, threads=1), repeat=2)
    assert result["threads"] == 1
    assert 0 < result["min_seconds"] <= result["mean_seconds"]


def test_bench_command(tmp_path):
    log_file = tmp_path / "bench.log"
    code = main(["--log-level", "INFO", "--log-file", str(log_file),
                 "bench", "--width", "24", "--height", "16", "--repeat", "1"])
    assert code == 0
    for handler in get_logger().handlers:
        handler.flush()
    assert "Bench 24x16" in log_file.read_text(encoding="utf-8")
    configure_logging(level=logging.WARNING)


def test_failing_command_is_logged_and_exits_nonzero(tmp_path):
    log_file = tmp_path / "bench.log"
    code = main(["--log-level", "ERROR", "--log-file", str(log_file),
                 "bench", "--width", "8", "--height", "8", "--repeat", "0"])
    assert code == 1
    for handler in get_logger().handlers:
        handler.flush()
    text = log_file.read_text(encoding="utf-8")
    assert "Command bench failed" in text
    assert "repeat must be >= 1." in text
    configure_logging(level=logging.WARNING)


def test_parse_level():
    assert parse_level("debug") == logging.DEBUG
    with pytest.raises(ValueError):
        parse_level("loud")


def test_child_loggers_share_namespace():
    assert get_logger("brotview.renderer").name == "brotview.renderer"
    assert get_logger("extras").name == "brotview.extras"
    assert get_logger().name == "brotview"
