"""Shared command-line options and setup."""

import argparse
from pathlib import Path

from ..config.loader import load_config
from ..config.schema import DeluxConfig
from ..lights.luxafor import LuxaforSink
from ..lights.sink import DeviceCommandSink, RecordingSink

DEFAULT_CONFIG_PATH = Path("config.yaml")


def add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help=f"YAML config file (default: {DEFAULT_CONFIG_PATH} if present)",
    )
    parser.add_argument(
        "--mock",
        action="store_true",
        help="Record commands instead of driving a Luxafor device",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log every device command",
    )


def load_cli_config(config_path: Path | None) -> DeluxConfig:
    """
    Load the config given on the command line.

    Falls back to ./config.yaml, then to the built-in defaults.
    """
    if config_path is None:
        if not DEFAULT_CONFIG_PATH.exists():
            print("[CONFIG] No config file, using defaults")
            return DeluxConfig.with_defaults()
        config_path = DEFAULT_CONFIG_PATH

    if not config_path.exists():
        raise FileNotFoundError(f"Config not found: {config_path}")

    print(f"[CONFIG] Loaded {config_path}")
    return load_config(config_path)


def create_sink(mock: bool) -> DeviceCommandSink:
    """
    Open the light, or a recording sink with --mock.

    Raises:
        DeviceError: If no Luxafor device can be opened
        ImportError: If hidapi is not installed
    """
    if mock:
        print("[DEVICE] Mock mode: commands are logged, not sent")
        return RecordingSink()

    sink = LuxaforSink()
    sink.open()
    print("[DEVICE] Luxafor connected")
    return sink


def close_sink(sink: DeviceCommandSink) -> None:
    if isinstance(sink, LuxaforSink):
        sink.close()
