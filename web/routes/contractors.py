from __future__ import annotations

import logging

from fastapi import APIRouter, Request, Response

from paygo.exceptions import NotFound
from paygo.models.contractor import Contractor
from paygo.services.serializers import serialize_contractor
from web.deps import get_actor, get_contractor_service
from web.schemas import ContractorBody, DeleteBody

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/contractors")


@router.get("")
def contractor_list(request: Request):
    get_actor(request)
    return [serialize_contractor(c) for c in get_contractor_service(request).list_contractors()]


@router.post("", status_code=201)
def contractor_create(request: Request, body: ContractorBody):
    actor = get_actor(request)
    logger.info("POST /contractors name=%s by %s", body.contractor_name, actor.principal)
    contractor = get_contractor_service(request).create_contractor(Contractor(**body.model_dump()), actor=actor)
    return serialize_contractor(contractor)


@router.get("/{contractor_uuid}")
def contractor_detail(request: Request, contractor_uuid: str):
    get_actor(request)
    contractor = get_contractor_service(request).get_contractor(contractor_uuid)
    if contractor is None:
        raise NotFound(f"contractor {contractor_uuid} not found")
    return serialize_contractor(contractor)


@router.put("/{contractor_uuid}")
def contractor_update(request: Request, contractor_uuid: str, body: ContractorBody):
    actor = get_actor(request)
    service = get_contractor_service(request)
    contractor = service.get_contractor(contractor_uuid)
    if contractor is None:
        raise NotFound(f"contractor {contractor_uuid} not found")
    logger.info("PUT /contractors/%s by %s", contractor_uuid, actor.principal)
    updated = service.update_contractor(contractor.model_copy(update=body.model_dump()), actor=actor)
    return serialize_contractor(updated)


@router.delete("/{contractor_uuid}", status_code=204)
def contractor_delete(request: Request, contractor_uuid: str, body: DeleteBody):
    actor = get_actor(request)
    logger.info("DELETE /contractors/%s by %s", contractor_uuid, actor.principal)
    get_contractor_service(request).delete_contractor(contractor_uuid, body.password, actor=actor)
    return Response(status_code=204)
