from __future__ import annotations

from dataclasses import dataclass
import os

from hyquery.api.models import QueryOptions


@dataclass(frozen=True)
class Settings:
    sim_http: str
    sim_udp_host: str
    sim_udp_port: int
    sim_query_timeout_ms: int

    def query_options(self, *, full: bool = False) -> QueryOptions:
        """Options for a query against the simulator's UDP endpoint."""
        return QueryOptions(timeout=self.sim_query_timeout_ms, full=full)


def get_settings() -> Settings:
    """
    Harness and test configuration, read from SIM_* environment variables.
    The query library itself takes everything as call arguments.
    """
    return Settings(
        sim_http=os.getenv("SIM_HTTP", "http://127.0.0.1:8000"),
        sim_udp_host=os.getenv("SIM_UDP_HOST", "127.0.0.1"),
        sim_udp_port=int(os.getenv("SIM_UDP_PORT", "9000")),
        # loopback replies are immediate; keeps failing system tests quick
        sim_query_timeout_ms=int(os.getenv("SIM_QUERY_TIMEOUT_MS", "2000")),
    )
