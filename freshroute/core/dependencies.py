"""FastAPI dependencies for dispatch planning."""
from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from freshroute.db.database import get_sync_session
from freshroute.services.dispatch.factory import build_planner
from freshroute.services.dispatch.planner import DispatchPlanner


def get_dispatch_planner(
    session: Annotated[Session, Depends(get_sync_session)],
) -> DispatchPlanner:
    """Dependency to get a planner bound to a request-scoped sync session.

    Usage:
        @router.post("/orders/{order_id}/assign")
        def assign(planner: Annotated[DispatchPlanner, Depends(get_dispatch_planner)]):
            ...
    """
    return build_planner(session)
