import os
from dataclasses import asdict

from fastapi import FastAPI
from pydantic import BaseModel, Field

from services.query_sim.app.core.protocol import SimModel
from services.query_sim.app.core.responder import start_responder
from hyquery.api.models import Player, Plugin

HTTP_HOST = os.getenv("SIM_HTTP_HOST", "127.0.0.1")
HTTP_PORT = int(os.getenv("SIM_HTTP_PORT", "8000"))

UDP_HOST = os.getenv("SIM_UDP_HOST", "127.0.0.1")
UDP_PORT = int(os.getenv("SIM_UDP_PORT", "9000"))

app = FastAPI(title="Query Server Simulator", version="0.3.0")

MODEL = SimModel()

class FaultsIn(BaseModel):
    delay_ms: int = Field(0, ge=0, le=5000)
    drop_rate: float = Field(0.0, ge=0.0, le=1.0)
    corrupt_rate: float = Field(0.0, ge=0.0, le=1.0)
    truncate_rate: float = Field(0.0, ge=0.0, le=1.0)

class PlayerIn(BaseModel):
    name: str
    uuid: str = Field(..., pattern=r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$")

class PluginIn(BaseModel):
    id: str
    version: str
    enabled: bool = True

class ServerIn(BaseModel):
    server_name: str | None = None
    motd: str | None = None
    current_players: int | None = Field(None, ge=-2**31, le=2**31 - 1)
    max_players: int | None = Field(None, ge=-2**31, le=2**31 - 1)
    host_port: int | None = Field(None, ge=0, le=65535)
    version: str | None = None
    protocol_version: int | None = Field(None, ge=-2**31, le=2**31 - 1)
    protocol_hash: str | None = None
    players: list[PlayerIn] | None = None
    plugins: list[PluginIn] | None = None

def _faults_dict() -> dict:
    return {
        "delay_ms": MODEL.faults.delay_ms,
        "drop_rate": MODEL.faults.drop_rate,
        "corrupt_rate": MODEL.faults.corrupt_rate,
        "truncate_rate": MODEL.faults.truncate_rate,
    }

@app.get("/health")
def health():
    return {"status": "ok"}

@app.get("/status")
def status():
    return {
        "server": asdict(MODEL.state),
        "reset_count": MODEL.reset_count,
        "faults": _faults_dict(),
    }

@app.post("/control/reset")
def reset():
    MODEL.reset()
    return {"status": "reset", "reset_count": MODEL.reset_count}

@app.post("/control/server")
def set_server(s: ServerIn):
    changes = s.model_dump(exclude_none=True)
    if "players" in changes:
        changes["players"] = [Player(p.name, p.uuid.lower()) for p in s.players]
    if "plugins" in changes:
        changes["plugins"] = [Plugin(p.id, p.version, p.enabled) for p in s.plugins]
    for name, value in changes.items():
        setattr(MODEL.state, name, value)
    return {"status": "server_updated", "server": asdict(MODEL.state)}

@app.get("/control/faults")
def get_faults():
    return _faults_dict()

@app.post("/control/faults")
def set_faults(f: FaultsIn):
    MODEL.faults.delay_ms = f.delay_ms
    MODEL.faults.drop_rate = f.drop_rate
    MODEL.faults.corrupt_rate = f.corrupt_rate
    MODEL.faults.truncate_rate = f.truncate_rate
    return {"status": "faults_updated", "faults": f.model_dump()}

@app.on_event("startup")
async def start_udp():
    transport, _ = await start_responder(MODEL, UDP_HOST, UDP_PORT)
    app.state.udp_transport = transport

@app.on_event("shutdown")
async def stop_udp():
    t = getattr(app.state, "udp_transport", None)
    if t:
        t.close()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        app,
        host=HTTP_HOST,
        port=HTTP_PORT,
        reload=False)
