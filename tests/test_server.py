"""Tests for the HTTP control server."""

import pytest

from delux.controller import Controller
from delux.control.server import create_app
from delux.lights import RecordingSink, SinkCall
from delux.lights.color import RGB
from delux.lights.targets import TargetId
from delux.sequence import SchedulerState


@pytest.fixture
async def client(aiohttp_client, controller):
    return await aiohttp_client(create_app(controller))


async def get_json(client, path, status=200):
    response = await client.get(path)
    assert response.status == status
    return await response.json()


async def test_index(client):
    assert await get_json(client, "/") == {"mode": "ready", "status": True}


async def test_status(client):
    assert await get_json(client, "/status") == {"mode": "status", "status": True}


@pytest.mark.parametrize("path, mode", [
    ("/off", "off"),
    ("/available", "available"),
    ("/busy", "busy"),
    ("/dnd", "dnd"),
    ("/random", "random"),
    ("/disco", "disco"),
    ("/france", "france"),
    ("/meeting", "meeting"),
])
async def test_modes(client, controller, path, mode):
    body = await get_json(client, path)
    assert body["mode"] == mode
    assert body["status"] is True
    assert controller.mode == mode


async def test_busy_sends_preset(client, sink):
    await get_json(client, "/busy")
    assert sink.calls[-1] == SinkCall("set_color", (RGB(255, 0, 0), TargetId.TOP))


async def test_color(client, sink):
    body = await get_json(client, "/color?color=%2300F&target=bottom&speed=40")
    assert body == {"mode": "color", "status": True, "color": "#00F", "target": "bottom", "speed": 40}
    assert sink.calls == [SinkCall("fade_to", (RGB(0, 0, 255), TargetId.BOTTOM, 40))]


async def test_color_without_hash(client, sink):
    await get_json(client, "/color?color=00F&target=2")
    assert sink.calls[-1].target == TargetId.ZONE_2


async def test_flash(client, sink):
    await get_json(client, "/flash?color=F00&repeat=3")
    assert sink.calls == [SinkCall("flash", (RGB(255, 0, 0), 180, 3, TargetId.TOP))]


async def test_wave(client, sink):
    body = await get_json(client, "/wave?color=F00&type=4")
    assert body["type"] == 4
    assert sink.calls == [SinkCall("wave", (RGB(255, 0, 0), 4, 90, 5))]


async def test_disco_cycle_speed(client, controller, clock, sink):
    body = await get_json(client, "/disco?cycle_speed=100")
    assert body["cycle_speed"] == 100

    clock.advance(1.0)
    assert len(sink.commands("fade_to")) == 10


async def test_meeting_options(client, controller, clock, sink):
    body = await get_json(client, "/meeting?total_time=1&warn_time=0&animated=false")
    assert body["options"] == {"total_time": 1.0, "warn_time": 0.0, "animated": False}

    clock.advance(60)
    assert controller.scheduler.state is SchedulerState.COMPLETED
    assert sink.calls[-1] == SinkCall("set_color", (RGB(255, 0, 0), TargetId.TOP))


@pytest.mark.parametrize("path", [
    "/color",
    "/color?color=nope",
    "/color?color=F00&target=middle",
    "/color?color=F00&speed=fast",
    "/flash?color=%23GG0000",
    "/disco?cycle_speed=0",
    "/meeting?total_time=soon",
    "/meeting?animated=maybe",
    "/meeting?color=zzz",
    "/meeting?warn_color=%23GG0",
])
async def test_bad_input(client, sink, path):
    body = await get_json(client, path, status=400)
    assert "error" in body
    assert sink.calls == []


async def test_device_error_reported(aiohttp_client, config, clock):
    sink = RecordingSink(fail_on={1})
    client = await aiohttp_client(create_app(Controller(config, sink, clock)))

    body = await get_json(client, "/off")
    assert body["mode"] == "off"
    assert body["status"] == "off failed (call 1)"

    body = await get_json(client, "/status")
    assert body["status"] == "off failed (call 1)"


async def test_meeting_colors(client, sink):
    body = await get_json(client, "/meeting?color=00F&end_color=%23F0F")
    assert body["options"] == {"color": "00F", "end_color": "#F0F"}
    assert sink.calls[-1] == SinkCall("flash", (RGB(0, 0, 255), 90, 5, TargetId.TOP))
