# FILE: server.py

import asyncio
import logging
import os
from typing import Optional
from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.staticfiles import StaticFiles
from fastapi.responses import JSONResponse
import uvicorn
from dotenv import load_dotenv

from config import DEFAULT_VARIANT, DEFAULT_HOST, DEFAULT_PORT, DEFAULT_STATIC_DIR
from environment import Point, WeatherSystem
from simulation.session import SimulationSession
from system_state import dumps_state


# --- Load Environment Variables ---
load_dotenv()

# --- Logging Configuration ---
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')


def _point_from(payload: dict) -> Point:
    return Point(float(payload['x']), float(payload['y']))

def apply_command(session: SimulationSession, command: str, payload: Optional[dict], tick_fn=None) -> dict:
    """Applies one client command to the session and returns the reply message."""
    payload = payload or {}
    result = None
    if command == "toggle_simulation":
        running = session.toggle(tick_fn)
        logging.info(f"Simulation {'started' if running else 'paused'}.")
    elif command == "start_simulation":
        result = session.start(tick_fn)
    elif command == "stop_simulation":
        result = session.stop()
    elif command == "reset_ants":
        session.reset()
    elif command == "clear_items":
        session.clear_items()
    elif command == "add_item":
        result = session.add_item(payload.get('kind'), _point_from(payload))
    elif command == "remove_item":
        result = session.remove_item(payload['id'])
    elif command == "set_placing_mode":
        result = session.set_placing_mode(payload.get('kind'))
    elif command == "set_transit_mode":
        result = session.set_transit_mode(payload.get('mode'))
    elif command in ("map_click", "navigate"):
        point = _point_from(payload)
        if command == "map_click":
            result = session.handle_map_click(point)
            navigating = result.get('action') == 'navigating'
        else:
            result = {ant_id: len(path) for ant_id, path in session.navigate_to(point, payload.get('ant_id')).items()}
            navigating = bool(result)
        if navigating and session.profile['auto_start_on_navigate'] and not session.is_running:
            session.start(tick_fn)
    else:
        logging.warning(f"Ignoring unknown command '{command}'.")
        return {'type': 'error', 'error': f"Unknown command '{command}'"}
    return {'type': 'state', 'command': command, 'result': result, 'state': session.state()}


def create_app(variant: Optional[str] = None, seed: Optional[int] = None, static_dir: Optional[str] = None) -> FastAPI:
    """Builds the API around a single SimulationSession stored on app.state."""
    app = FastAPI()
    app.state.session = SimulationSession(variant or os.getenv("ANTMAPS_VARIANT", DEFAULT_VARIANT), seed=seed)
    app.state.weather = WeatherSystem(seed=seed)
    app.state.clients = set()

    # --- WebSocket Communication ---
    async def broadcast(message: dict):
        """Sends a message to all connected clients."""
        clients = app.state.clients
        if clients:
            text = dumps_state(message)
            await asyncio.gather(*[client.send_text(text) for client in list(clients)], return_exceptions=True)

    async def on_tick():
        session = app.state.session
        diff = session.tick_and_diff()
        if diff['updated'] or diff['removed']:
            await broadcast({'type': 'ants_diff', **diff, 'stats': session.stats()})
        if session.is_idle():
            logging.info("All ants have arrived. Pausing simulation.")
            session.stop()

    @app.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket):
        """Handles WebSocket connections for commands and live updates."""
        await websocket.accept()
        app.state.clients.add(websocket)
        logging.info("Client connected. Total clients: %d", len(app.state.clients))
        try:
            await websocket.send_text(dumps_state({'type': 'state', 'state': app.state.session.state()}))
            while True:
                data = await websocket.receive_json()
                try:
                    reply = apply_command(app.state.session, data.get("type"), data.get("payload"), on_tick)
                except (KeyError, TypeError, ValueError) as e:
                    logging.warning(f"Malformed command {data!r}: {e}")
                    reply = {'type': 'error', 'error': f"Malformed command: {e}"}
                if reply['type'] == 'error':
                    await websocket.send_text(dumps_state(reply))
                else:
                    await broadcast(reply)
        except WebSocketDisconnect:
            app.state.clients.discard(websocket)
            logging.info("Client disconnected. Total clients: %d", len(app.state.clients))
        except Exception as e:
            logging.error(f"WebSocket Error: {e}")
            app.state.clients.discard(websocket)

    # --- API Endpoints for Frontend ---
    @app.get("/api/weather")
    async def get_weather(lat: Optional[float] = None, lon: Optional[float] = None):
        if lat is None or lon is None:
            return JSONResponse(content={"error": "Latitude and longitude are required"}, status_code=400)
        try:
            return JSONResponse(content=app.state.weather.get_report(lat, lon))
        except Exception as e:
            logging.error(f"Weather API error: {e}")
            return JSONResponse(content={"error": "Failed to fetch weather data"}, status_code=500)

    @app.get("/api/state")
    async def get_state():
        return JSONResponse(content=app.state.session.state())

    @app.get("/api/targets")
    async def search_targets(query: str = ""):
        return JSONResponse(content=app.state.session.search_targets(query))

    @app.get("/api/ants/{ant_id}/route-time")
    async def get_route_time(ant_id: str):
        route_time = app.state.session.route_time(ant_id)
        if route_time is None:
            return JSONResponse(content={"error": f"No ant with id '{ant_id}'"}, status_code=404)
        return JSONResponse(content={"ant_id": ant_id, "route_time": route_time})

    @app.on_event("shutdown")
    async def shutdown_event():
        app.state.session.dispose()

    # Mount the static frontend files when they are present
    static_dir = static_dir or os.getenv("ANTMAPS_STATIC_DIR", DEFAULT_STATIC_DIR)
    if os.path.isdir(static_dir):
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host=os.getenv("ANTMAPS_HOST", DEFAULT_HOST), port=int(os.getenv("ANTMAPS_PORT", DEFAULT_PORT)))
