"""WebSocket endpoint for real-time sky telemetry."""

import asyncio
import json
import logging
from typing import Optional

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from domesky.config import check_config_changed, get_config
from domesky.simulation.engine import SkyEngine


logger = logging.getLogger(__name__)

router = APIRouter()

# Global sky engine instance
_engine: Optional[SkyEngine] = None

# Config check interval (seconds)
CONFIG_CHECK_INTERVAL = 1.0


def get_engine() -> SkyEngine:
    """Get or create sky engine instance."""
    global _engine
    if _engine is None:
        _engine = SkyEngine()
    return _engine


def reset_engine() -> SkyEngine:
    """Reset engine with new config."""
    global _engine
    _engine = SkyEngine(config=get_config())
    return _engine


@router.websocket("/ws/telemetry")
async def telemetry_websocket(websocket: WebSocket):
    """WebSocket endpoint for real-time sky telemetry.

    Sends telemetry at the configured rate.
    Receives animation commands and slider input from the client.
    All connections share the global engine, looked up on every use so a
    config reload reaches both loops.
    """
    await websocket.accept()

    send_task = asyncio.create_task(send_telemetry_loop(websocket))
    receive_task = asyncio.create_task(receive_message_loop(websocket))

    try:
        # Wait for either task to complete (usually due to disconnect)
        done, pending = await asyncio.wait(
            [send_task, receive_task],
            return_when=asyncio.FIRST_COMPLETED,
        )

        for task in pending:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
    finally:
        send_task.cancel()
        receive_task.cancel()


def _tick_and_get_telemetry(engine: SkyEngine) -> dict:
    """Apply the ticks due now and get telemetry in a single call."""
    engine.tick()
    telemetry = engine.get_telemetry()
    telemetry["type"] = "telemetry"
    return telemetry


async def send_telemetry_loop(websocket: WebSocket) -> None:
    """Background task to send telemetry at regular intervals.

    Also checks for config file changes periodically.
    """
    loop = asyncio.get_event_loop()
    last_config_check = loop.time()

    try:
        while True:
            loop_start = loop.time()

            if loop_start - last_config_check >= CONFIG_CHECK_INTERVAL:
                last_config_check = loop_start
                config_changed = await asyncio.to_thread(check_config_changed)
                if config_changed:
                    reset_engine()
                    await websocket.send_json({
                        "type": "config_reload",
                        "message": "Configuration reloaded, sky reset",
                    })

            engine = get_engine()
            telemetry = _tick_and_get_telemetry(engine)
            await websocket.send_json(telemetry)

            interval = 1.0 / engine.config.server.telemetry_rate
            elapsed = loop.time() - loop_start
            sleep_time = max(0, interval - elapsed)
            if sleep_time > 0:
                await asyncio.sleep(sleep_time)
    except WebSocketDisconnect:
        pass
    except Exception as e:
        logger.error(f"Telemetry loop error: {e}", exc_info=True)


async def receive_message_loop(websocket: WebSocket) -> None:
    """Background task to receive and handle messages."""
    try:
        while True:
            data = await websocket.receive_text()
            await handle_message(data, get_engine(), websocket)
    except WebSocketDisconnect:
        pass
    except Exception as e:
        logger.error(f"Receive loop error: {e}", exc_info=True)


async def handle_message(
    data: str,
    engine: SkyEngine,
    websocket: WebSocket,
) -> None:
    """Handle incoming WebSocket message.

    Args:
        data: JSON message string
        engine: Sky engine instance
        websocket: WebSocket connection
    """
    try:
        message = json.loads(data)
        msg_type = message.get("type")

        if msg_type == "command":
            await handle_command(message, engine, websocket)
        elif msg_type == "time":
            await handle_time(message, engine, websocket)
        elif msg_type == "config":
            await handle_config(message, engine, websocket)
        else:
            await send_error(websocket, f"Unknown message type: {msg_type}")

    except json.JSONDecodeError:
        await send_error(websocket, "Invalid JSON")
    except (TypeError, ValueError) as e:
        await send_error(websocket, str(e))


async def handle_command(
    message: dict,
    engine: SkyEngine,
    websocket: WebSocket,
) -> None:
    """Handle animation commands (START, STOP, PAUSE, RESET)."""
    command = message.get("command")

    if command == "START":
        engine.start()
    elif command == "STOP":
        engine.stop()
    elif command == "PAUSE":
        engine.pause()
    elif command == "RESET":
        engine.reset()
    else:
        await send_error(websocket, f"Unknown command: {command}")
        return

    await send_status(websocket, engine)


async def handle_time(
    message: dict,
    engine: SkyEngine,
    websocket: WebSocket,
) -> None:
    """Handle slider input.

    Message format:
        {"type": "time", "dayOfYear": 172, "hourOfDay": 12, "moonPhaseDay": 15}
    Omitted fields keep their current value.
    """
    engine.set_time(
        day_of_year=message.get("dayOfYear"),
        hour_of_day=message.get("hourOfDay"),
        moon_phase_day=message.get("moonPhaseDay"),
    )
    await send_status(websocket, engine)


async def handle_config(
    message: dict,
    engine: SkyEngine,
    websocket: WebSocket,
) -> None:
    """Handle configuration changes."""
    if "timeWarp" in message:
        try:
            engine.set_time_warp(message["timeWarp"])
        except ValueError as e:
            await send_error(websocket, str(e))
            return

    await send_status(websocket, engine)


async def send_status(websocket: WebSocket, engine: SkyEngine) -> None:
    """Send status update to client."""
    status = {
        "type": "status",
        "state": engine.state.name,
        "timeWarp": engine.time_warp,
        "time": engine.time.to_dict(),
    }
    await websocket.send_json(status)


async def send_error(websocket: WebSocket, message: str) -> None:
    """Send error message to client."""
    error = {
        "type": "error",
        "message": message,
    }
    await websocket.send_json(error)
