"""
============================================================================
ENDPOINT PINGER - MONITORING PACKAGE
============================================================================
The scheduled endpoint-probing engine:
    • expand_endpoints   : endpoint templates -> concrete endpoints
    • ProbeExecutor      : one HTTP request against one endpoint
    • build_http_client  : shared httpx client with LoggingTransport
    • build_trigger      : schedule expression -> APScheduler trigger
    • PingScheduler      : lifecycle, startup probes, recurring jobs, drain

File layout
-----------
monitoring/
├── __init__.py          ← this file
├── expander.py          ← expand_endpoints
├── probe.py             ← ProbeExecutor, ProbeResult
├── http_client.py       ← LoggingTransport, build_http_client
├── cron.py              ← build_trigger
└── scheduler.py         ← PingScheduler, RunnerState, ScheduledJob

============================================================================
"""

from monitoring.expander import expand_endpoints
from monitoring.probe import ProbeExecutor, ProbeOutcome, ProbeResult
from monitoring.http_client import LoggingTransport, build_http_client
from monitoring.cron import build_trigger
from monitoring.scheduler import PingScheduler, RunnerState, ScheduledJob

__all__ = [
    # Expansion
    "expand_endpoints",

    # Probing
    "ProbeExecutor",
    "ProbeOutcome",
    "ProbeResult",

    # HTTP
    "LoggingTransport",
    "build_http_client",

    # Scheduling
    "build_trigger",
    "PingScheduler",
    "RunnerState",
    "ScheduledJob",
]
