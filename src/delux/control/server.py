"""HTTP control server for Delux.

Exposes the controller's modes as simple GET routes, e.g.
http://localhost:9000/busy or /meeting?total_time=30&warn_time=5.
Every response is JSON with the applied mode and the device status.
Colors are hex with the "#" URL-encoded (%23) or left off, or preset names.
"""

from typing import Any, Awaitable, Callable

from aiohttp import web

from ..controller import Controller
from ..lights.targets import TargetId, parse_target

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 9000

CONTROLLER_KEY = web.AppKey("controller", Controller)

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]

_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off")


# === Query parsing ===

def _param(request: web.Request, name: str) -> str | None:
    value = request.query.get(name)
    if value is None or value == "":
        return None
    return value


def _required(request: web.Request, name: str) -> str:
    value = _param(request, name)
    if value is None:
        raise ValueError(f"Missing '{name}' parameter")
    return value


def _int(request: web.Request, name: str) -> int | None:
    value = _param(request, name)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"'{name}' must be an integer, got {value!r}") from None


def _float(request: web.Request, name: str) -> float | None:
    value = _param(request, name)
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"'{name}' must be a number, got {value!r}") from None


def _bool(request: web.Request, name: str) -> bool | None:
    value = _param(request, name)
    if value is None:
        return None
    if value.lower() in _TRUE:
        return True
    if value.lower() in _FALSE:
        return False
    raise ValueError(f"'{name}' must be true or false, got {value!r}")


def _target(request: web.Request, name: str = "target") -> TargetId | None:
    value = _param(request, name)
    if value is None:
        return None
    target = parse_target(value)
    if target is None:
        raise ValueError(f"Unknown target {value!r}")
    return target


@web.middleware
async def error_middleware(request: web.Request, handler: Handler) -> web.StreamResponse:
    """Answer 400 for invalid colors, targets, numbers and sequences."""
    try:
        return await handler(request)
    except ValueError as e:
        return web.json_response({"error": str(e)}, status=400)


# === Routes ===

def _controller(request: web.Request) -> Controller:
    return request.app[CONTROLLER_KEY]


def _respond(request: web.Request, mode: str, **extra: Any) -> web.Response:
    body = {"mode": mode, "status": _controller(request).get_status().to_json()}
    body.update({key: value for key, value in extra.items() if value is not None})
    return web.json_response(body)


async def handle_index(request: web.Request) -> web.Response:
    return _respond(request, "ready")


async def handle_status(request: web.Request) -> web.Response:
    return _respond(request, "status")


async def handle_off(request: web.Request) -> web.Response:
    _controller(request).off()
    return _respond(request, "off")


async def handle_available(request: web.Request) -> web.Response:
    _controller(request).set_available()
    return _respond(request, "available")


async def handle_busy(request: web.Request) -> web.Response:
    _controller(request).set_busy()
    return _respond(request, "busy")


async def handle_dnd(request: web.Request) -> web.Response:
    _controller(request).set_do_not_disturb()
    return _respond(request, "dnd")


async def handle_random(request: web.Request) -> web.Response:
    _controller(request).set_random(_target(request), _int(request, "speed"))
    return _respond(request, "random")


async def handle_disco(request: web.Request) -> web.Response:
    cycle_speed = _int(request, "cycle_speed")
    _controller(request).set_disco(cycle_speed)
    return _respond(request, "disco", cycle_speed=cycle_speed)


async def handle_france(request: web.Request) -> web.Response:
    _controller(request).set_france()
    return _respond(request, "france")


async def handle_flash(request: web.Request) -> web.Response:
    color = _required(request, "color")
    speed = _int(request, "speed")
    repeat = _int(request, "repeat")
    _controller(request).flash(color, speed, repeat)
    return _respond(request, "flash", color=color, speed=speed, repeat=repeat)


async def handle_wave(request: web.Request) -> web.Response:
    color = _required(request, "color")
    wave_type = _int(request, "type")
    speed = _int(request, "speed")
    repeat = _int(request, "repeat")
    _controller(request).wave(color, wave_type, speed, repeat)
    return _respond(request, "wave", color=color, type=wave_type, speed=speed, repeat=repeat)


async def handle_color(request: web.Request) -> web.Response:
    color = _required(request, "color")
    target = _target(request)
    speed = _int(request, "speed")
    _controller(request).fade_to(color, target, speed)
    return _respond(
        request,
        "color",
        color=color,
        target=target.name.lower() if target is not None else None,
        speed=speed,
    )


async def handle_meeting(request: web.Request) -> web.Response:
    options = {
        "total_time": _float(request, "total_time"),
        "alternate_time": _float(request, "alternate_time"),
        "warn_time": _float(request, "warn_time"),
        "color": _param(request, "color"),
        "alternate_color": _param(request, "alternate_color"),
        "warn_color": _param(request, "warn_color"),
        "end_color": _param(request, "end_color"),
        "animated": _bool(request, "animated"),
    }
    _controller(request).set_meeting(**options)
    return _respond(
        request,
        "meeting",
        options={key: value for key, value in options.items() if value is not None},
    )


ROUTES: dict[str, Handler] = {
    "/": handle_index,
    "/status": handle_status,
    "/off": handle_off,
    "/available": handle_available,
    "/busy": handle_busy,
    "/dnd": handle_dnd,
    "/random": handle_random,
    "/disco": handle_disco,
    "/france": handle_france,
    "/flash": handle_flash,
    "/wave": handle_wave,
    "/color": handle_color,
    "/meeting": handle_meeting,
}


def create_app(controller: Controller) -> web.Application:
    """Build the aiohttp application around a controller."""
    app = web.Application(middlewares=[error_middleware])
    app[CONTROLLER_KEY] = controller
    for path, handler in ROUTES.items():
        app.router.add_get(path, handler)
    return app


class ControlServer:
    """HTTP server for remote control of an indicator light."""

    def __init__(
        self,
        controller: Controller,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
    ):
        self.controller = controller
        self.host = host
        self.port = port

        self._app: web.Application | None = None
        self._runner: web.AppRunner | None = None

    async def start(self) -> None:
        """Start the server."""
        self._app = create_app(self.controller)

        self._runner = web.AppRunner(self._app)
        await self._runner.setup()

        site = web.TCPSite(self._runner, self.host, self.port)
        await site.start()

        print(f"[CONTROL] Server running on http://{self.host}:{self.port}")

    async def stop(self) -> None:
        """Stop the server and switch the light off."""
        self.controller.off()
        if self._runner:
            await self._runner.cleanup()
