"""
Competence Gateway - Health Check Route
=======================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Reports the circuit breaker state and pings the competence API.

Status levels:
    - healthy:   Competence API answers (HTTP 200)
    - degraded:  Competence API unreachable or circuit open (HTTP 200);
                 the gateway itself still serves errors quickly
"""

import logging
import time

from fastapi import APIRouter

from competence_gateway import __version__
from competence_gateway.dao import client as client_module
from competence_gateway.schemas.common import CircuitStatus, HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    description=(
        "Returns the health status of the gateway and whether the competence API "
        "can be reached."
    ),
)
async def health_check() -> HealthResponse:
    """
    Check the gateway and its downstream dependency.

    An open circuit is reported without pinging, so probes do not hammer an
    API that is already known to be down.
    """
    client = client_module.get_downstream_client()
    breaker = client.circuit_breaker

    if breaker.is_rejecting:
        downstream = "circuit_open"
    elif await client.ping():
        downstream = "reachable"
    else:
        downstream = "unreachable"

    overall = "healthy" if downstream == "reachable" else "degraded"
    if overall != "healthy":
        logger.warning("Health check: competence API %s", downstream)

    return HealthResponse(
        status=overall,
        version=__version__,
        downstream=downstream,
        uptime_seconds=round(time.time() - _start_time, 2),
        circuit=CircuitStatus(**breaker.snapshot()),
    )
