from __future__ import annotations

import logging

from fastapi import APIRouter, Request, Response

from paygo.exceptions import NotFound
from paygo.models.approval import ApprovalStatus
from paygo.services.serializers import serialize_weekly_record
from web.deps import get_actor, get_nmr_service
from web.schemas import BillingDecisionBody, DeleteBody, StageDecisionBody, WeeklyRecordCreate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/nmrs")


@router.get("")
def nmr_list(request: Request, status: ApprovalStatus | None = None):
    get_actor(request)
    records = get_nmr_service(request).list_records(status)
    logger.info("GET /nmrs: %d records", len(records))
    return [serialize_weekly_record(r) for r in records]


@router.post("", status_code=201)
def nmr_create(request: Request, body: WeeklyRecordCreate):
    actor = get_actor(request)
    logger.info("POST /nmrs by %s (%d entries)", actor.principal, len(body.entries))
    record = get_nmr_service(request).create_weekly_record(
        project=body.project,
        contractor=body.contractor,
        week_start=body.week_start,
        week_end=body.week_end,
        entries=[entry.model_dump() for entry in body.entries],
        actor=actor,
        trade=body.trade,
        engineer_name=body.engineer_name,
    )
    return serialize_weekly_record(record)


@router.get("/{nmr_uuid}")
def nmr_detail(request: Request, nmr_uuid: str):
    get_actor(request)
    record = get_nmr_service(request).get_record(nmr_uuid)
    if record is None:
        logger.warning("Weekly record not found: %s", nmr_uuid)
        raise NotFound(f"nmr {nmr_uuid} not found")
    return serialize_weekly_record(record)


@router.post("/{nmr_uuid}/pm")
def nmr_approve_pm(request: Request, nmr_uuid: str, body: StageDecisionBody):
    actor = get_actor(request)
    record = get_nmr_service(request).approve_pm(nmr_uuid, body.approved, body.debit, body.note, actor=actor)
    return serialize_weekly_record(record)


@router.post("/{nmr_uuid}/qc")
def nmr_approve_qc(request: Request, nmr_uuid: str, body: StageDecisionBody):
    actor = get_actor(request)
    record = get_nmr_service(request).approve_qc(nmr_uuid, body.approved, body.debit, body.note, actor=actor)
    return serialize_weekly_record(record)


@router.post("/{nmr_uuid}/billing")
def nmr_approve_billing(request: Request, nmr_uuid: str, body: BillingDecisionBody):
    actor = get_actor(request)
    record = get_nmr_service(request).approve_billing(
        nmr_uuid, body.approved, body.final_amount, body.note, actor=actor
    )
    return serialize_weekly_record(record)


@router.delete("/{nmr_uuid}", status_code=204)
def nmr_delete(request: Request, nmr_uuid: str, body: DeleteBody):
    actor = get_actor(request)
    logger.info("DELETE /nmrs/%s by %s", nmr_uuid, actor.principal)
    get_nmr_service(request).delete_nmr(nmr_uuid, body.password, actor=actor)
    return Response(status_code=204)
