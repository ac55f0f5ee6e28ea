from fastapi import FastAPI, HTTPException, WebSocket
from fastapi.middleware.cors import CORSMiddleware
import json
import logging

from renderfarm.api.schemas import SimulationConfig
from renderfarm.errors import ConfigError
from renderfarm.simulation.engine import SimulationEngine
from renderfarm.store.config_store import load_config

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
)

app = FastAPI()

# Enable CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # tighten for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

engine = None          # holds current live SimulationEngine
stop_signal = False    # flag to stop live simulation
last_results = None    # cached BatchResult for frontend after run


@app.get("/config")
async def get_config():
    """
    Current config from the default config file.
    """
    try:
        return load_config()
    except ConfigError as e:
        raise HTTPException(status_code=422, detail=str(e))


@app.post("/simulate")
def simulate(config: SimulationConfig):
    """
    Run a full batch synchronously and return every repetition's series.
    """
    global last_results
    last_results = SimulationEngine(config).run()
    return last_results


@app.post("/start-simulation")
async def start_simulation(config: SimulationConfig):
    """
    Receive config from frontend and prepare a live SimulationEngine.
    """
    global engine, stop_signal, last_results
    engine = SimulationEngine(config)
    stop_signal = False
    last_results = None
    return {"status": "simulation started"}


@app.post("/stop-simulation")
async def stop_simulation():
    """
    Stop a currently running simulation.
    """
    global stop_signal
    stop_signal = True
    return {"status": "simulation stopping"}


@app.get("/results")
async def get_results():
    """
    Fetch last simulation results for frontend display.
    """
    if last_results is None:
        return {"status": "no results yet"}
    return last_results


@app.post("/clear-results")
async def clear_results():
    global last_results
    last_results = None
    return {"status": "cleared"}


@app.websocket("/ws/simulation")
async def simulation_ws(ws: WebSocket):
    global engine, last_results
    await ws.accept()

    if engine is None:
        await ws.send_text(json.dumps({"error": "Simulation not started"}))
        await ws.close()
        return

    try:
        async for update in engine.run_live(stop_flag=lambda: stop_signal):
            await ws.send_text(json.dumps(update))
    finally:
        last_results = engine._collect_results()
        await ws.close()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
