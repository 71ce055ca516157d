"""Health-check payload."""

from fincalc.config import Settings
from fincalc.schemas.ping import PingResponse


def build_ping(settings: Settings) -> PingResponse:
    return PingResponse(message="pong", service=settings.PROJECT_NAME, version=settings.VERSION)
