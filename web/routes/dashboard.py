from __future__ import annotations

import logging

from fastapi import APIRouter, Request

from paygo.services.serializers import serialize_dashboard
from web.deps import get_actor, get_dashboard_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/dashboard")


@router.get("")
def dashboard(request: Request):
    actor = get_actor(request)
    logger.info("GET /dashboard by %s", actor.principal)
    return serialize_dashboard(get_dashboard_service(request).summary())
