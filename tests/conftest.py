import os
import subprocess
import time
import sys
from pathlib import Path

import pytest
import httpx

from hyquery.config.settings import get_settings
from hyquery.api.client import SimApiClient
from hyquery.transport.udp import UdpClient, UdpEndpoint

REPO_ROOT = Path(__file__).resolve().parents[1]

def _wait_for_http_ready(url: str, proc: subprocess.Popen, log_path: Path, timeout_s: float = 15.0) -> None:
    """
    Wait for the simulator to respond at url. If the process exits, surface logs.
    """
    deadline = time.time() + timeout_s

    while time.time() < deadline:
        # If process died, show output immediately
        if proc.poll() is not None:
            raise RuntimeError(
                f"Simulator exited early (code={proc.returncode}).\n"
                f"--- simulator output ---\n{log_path.read_text(errors='replace')}"
            )

        # Check HTTP
        try:
            r = httpx.get(url, timeout=1.0)
            if r.status_code == 200:
                return
        except httpx.HTTPError:
            pass

        time.sleep(0.2)

    raise RuntimeError(
        f"Simulator did not become ready at {url} within {timeout_s}s.\n"
        f"--- last simulator output ---\n{log_path.read_text(errors='replace')[-8000:]}"
    )

@pytest.fixture(scope="session")
def simulator_process(tmp_path_factory):
    """
    Starts the simulator for the tests that talk to it over HTTP/UDP.
    Uses `python -m uvicorn ...` from repo root so `services.*` imports resolve.
    """
    sim_host = "127.0.0.1"
    sim_port = int(os.getenv("SIM_HTTP_PORT", "8000"))
    sim_http = os.getenv("SIM_HTTP", f"http://{sim_host}:{sim_port}")

    env = os.environ.copy()
    env["SIM_HTTP"] = sim_http
    env["SIM_HTTP_HOST"] = sim_host
    env["SIM_HTTP_PORT"] = str(sim_port)
    env["SIM_UDP_HOST"] = os.getenv("SIM_UDP_HOST", "127.0.0.1")
    env["SIM_UDP_PORT"] = os.getenv("SIM_UDP_PORT", "9000")
    env["PYTHONPATH"] = os.pathsep.join(
        p for p in (str(REPO_ROOT), str(REPO_ROOT / "src"), env.get("PYTHONPATH")) if p
    )

    # Start uvicorn as a module, from repo root
    cmd = [
        sys.executable, "-m", "uvicorn",
        "services.query_sim.app.main:app",
        "--host", sim_host,
        "--port", str(sim_port),
        "--log-level", "info",
    ]

    log_path = tmp_path_factory.mktemp("simulator") / "simulator.log"
    with open(log_path, "w") as log:
        p = subprocess.Popen(
            cmd,
            cwd=str(REPO_ROOT),
            env=env,
            stdout=log,
            stderr=subprocess.STDOUT,
        )

    try:
        _wait_for_http_ready(f"{sim_http}/health", p, log_path, timeout_s=15.0)
        yield p
    finally:
        # Graceful terminate, then force kill if needed
        p.terminate()
        try:
            p.wait(timeout=5)
        except subprocess.TimeoutExpired:
            p.kill()
            p.wait()

@pytest.fixture
def settings():
    return get_settings()

@pytest.fixture
def sim_api(simulator_process, settings):
    """
    Control-plane client; each test starts from a freshly reset simulator.
    """
    client = SimApiClient(settings.sim_http)
    try:
        client.reset()
        yield client
    finally:
        client.close()

@pytest.fixture
def sim_udp(simulator_process, settings):
    return UdpClient(
        UdpEndpoint(settings.sim_udp_host, settings.sim_udp_port),
        timeout_s=settings.sim_query_timeout_ms / 1000.0,
    )
