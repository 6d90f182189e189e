"""FastAPI dependencies."""

from fastapi import Request

from shieldpay.engine import RiskEngine


def get_engine(request: Request) -> RiskEngine:
    """The engine constructed at startup and attached to the app state."""
    return request.app.state.engine
