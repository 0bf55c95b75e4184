"""
FastAPI dependencies.

The Ledger is built once by the application lifespan (main.py) and kept on
`app.state`. Routes receive it through get_ledger, so tests can swap in
their own Ledger with `app.dependency_overrides[get_ledger]`.
"""

from fastapi import Request

from bank_sim.services.ledger_service import Ledger


def get_ledger(request: Request) -> Ledger:
    """Return the application's Ledger."""
    return request.app.state.ledger
