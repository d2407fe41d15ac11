"""Apply one mode to the light from the command line.

Run as: delux busy
        delux meeting --total-time 30 --warn-time 5
        delux disco --cycle-speed 150      (Ctrl-C to stop)

Sequences run in the foreground until they finish.
"""

import argparse
import asyncio
import sys

from ..controller import Controller
from ..errors import DeluxError
from ..lights.targets import parse_target
from ..log import configure_logging
from .common import add_common_arguments, close_sink, create_sink, load_cli_config

MODES = (
    "available",
    "busy",
    "dnd",
    "random",
    "disco",
    "france",
    "meeting",
    "off",
    "color",
    "flash",
    "wave",
)

POLL_INTERVAL = 0.1


def _target(value: str):
    target = parse_target(value)
    if target is None:
        raise argparse.ArgumentTypeError(f"unknown target {value!r}")
    return target


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Set a Luxafor indicator light to a mode"
    )
    parser.add_argument("mode", choices=MODES, help="Mode to apply")
    add_common_arguments(parser)

    commands = parser.add_argument_group("color, flash, wave and random")
    commands.add_argument("--color", help="Hex color or preset name")
    commands.add_argument("--target", type=_target, help="top, bottom, all or zone 1-6")
    commands.add_argument("--speed", type=int, help="Transition speed 0-255")
    commands.add_argument("--repeat", type=int, help="Flash/wave repetitions")
    commands.add_argument("--type", dest="wave_type", type=int, help="Wave type 1-4")

    disco = parser.add_argument_group("disco")
    disco.add_argument("--cycle-speed", type=int, help="Milliseconds between steps")

    meeting = parser.add_argument_group("meeting")
    meeting.add_argument("--total-time", type=float, help="Meeting length in minutes")
    meeting.add_argument("--alternate-time", type=float, help="Minutes between color swaps")
    meeting.add_argument("--warn-time", type=float, help="Warn this many minutes before the end")
    meeting.add_argument("--meeting-color", help="Meeting color")
    meeting.add_argument("--alternate-color", help="Alternate meeting color")
    meeting.add_argument("--warn-color", help="Warning color")
    meeting.add_argument("--end-color", help="Color when the meeting is over")
    meeting.add_argument(
        "--no-animation",
        dest="animated",
        action="store_false",
        default=None,
        help="Hold colors instead of pulsing",
    )
    return parser


def apply_mode(controller: Controller, args: argparse.Namespace) -> None:
    """Call the controller operation for args.mode."""
    mode = args.mode

    if mode in ("color", "flash", "wave") and not args.color:
        raise ValueError(f"{mode} needs --color")

    if mode == "available":
        controller.set_available()
    elif mode == "busy":
        controller.set_busy()
    elif mode == "dnd":
        controller.set_do_not_disturb()
    elif mode == "random":
        controller.set_random(args.target, args.speed)
    elif mode == "disco":
        controller.set_disco(args.cycle_speed)
    elif mode == "france":
        controller.set_france()
    elif mode == "meeting":
        controller.set_meeting(
            total_time=args.total_time,
            alternate_time=args.alternate_time,
            warn_time=args.warn_time,
            color=args.meeting_color,
            alternate_color=args.alternate_color,
            warn_color=args.warn_color,
            end_color=args.end_color,
            animated=args.animated,
        )
    elif mode == "off":
        controller.off()
    elif mode == "color":
        controller.fade_to(args.color, args.target, args.speed)
    elif mode == "flash":
        controller.flash(args.color, args.speed, args.repeat, args.target)
    elif mode == "wave":
        controller.wave(args.color, args.wave_type, args.speed, args.repeat)


async def run_mode(args: argparse.Namespace) -> bool:
    """Apply the mode and wait for its sequence to finish. Returns device health."""
    config = load_cli_config(args.config)
    sink = create_sink(args.mock)

    controller = Controller(config, sink, asyncio.get_running_loop())
    try:
        apply_mode(controller, args)

        if controller.scheduler.is_running:
            print(f"[DELUX] Running {args.mode} (Ctrl-C to stop)")
        while controller.scheduler.is_running:
            await asyncio.sleep(POLL_INTERVAL)
    finally:
        controller.stop_sequence()
        close_sink(sink)

    status = controller.get_status()
    if status.ok:
        print(f"[DELUX] {args.mode}: ok")
    else:
        print(f"[DELUX] {args.mode}: device error: {status.error}")
    return status.ok


def main():
    """Entry point for delux command."""
    parser = build_parser()
    args = parser.parse_args()
    configure_logging(args.debug)

    try:
        ok = asyncio.run(run_mode(args))
    except KeyboardInterrupt:
        print("\n[DELUX] Stopped")
        return
    except (DeluxError, ValueError, FileNotFoundError, ImportError) as e:
        print(f"[DELUX] Error: {e}")
        sys.exit(1)

    if not ok:
        sys.exit(1)


if __name__ == "__main__":
    main()
