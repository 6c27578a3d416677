from __future__ import annotations

import logging

from fastapi import APIRouter, Request, Response

from paygo.exceptions import NotFound
from paygo.models.approval import ApprovalStatus
from paygo.services.serializers import serialize_bill
from web.deps import get_actor, get_bill_service, get_payment_service
from web.schemas import BillCreate, BillingDecisionBody, DeleteBody, StageDecisionBody

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bills")


@router.get("")
def bill_list(request: Request, status: ApprovalStatus | None = None):
    get_actor(request)
    bills = get_bill_service(request).list_bills(status)
    logger.info("GET /bills: %d bills (status=%s)", len(bills), status.value if status else "any")
    return [serialize_bill(b) for b in bills]


@router.post("", status_code=201)
def bill_create(request: Request, body: BillCreate):
    actor = get_actor(request)
    logger.info("POST /bills by %s", actor.principal)
    bill = get_bill_service(request).create_bill(
        contractor=body.contractor,
        project=body.project,
        project_date=body.project_date,
        trade=body.trade,
        unit=body.unit,
        unit_price=body.unit_price,
        quantity=body.quantity,
        description=body.description,
        location=body.location,
        actor=actor,
    )
    return serialize_bill(bill)


@router.get("/{bill_uuid}")
def bill_detail(request: Request, bill_uuid: str):
    get_actor(request)
    bill = get_bill_service(request).get_bill(bill_uuid)
    if bill is None:
        logger.warning("Bill not found: %s", bill_uuid)
        raise NotFound(f"bill {bill_uuid} not found")
    return serialize_bill(bill)


@router.get("/{bill_uuid}/balance")
def bill_balance(request: Request, bill_uuid: str):
    get_actor(request)
    bill = get_bill_service(request).get_bill(bill_uuid)
    if bill is None:
        raise NotFound(f"bill {bill_uuid} not found")
    payments = get_payment_service(request)
    return {
        "bill_number": bill.bill_number,
        "final_amount": f"{bill.final_amount:.2f}",
        "paid": f"{payments.total_paid(bill.bill_number):.2f}",
        "balance": f"{payments.get_balance(bill.bill_number):.2f}",
        "status": payments.settlement_status(bill.bill_number).value,
    }


@router.post("/{bill_uuid}/pm")
def bill_approve_pm(request: Request, bill_uuid: str, body: StageDecisionBody):
    actor = get_actor(request)
    logger.info("POST /bills/%s/pm approved=%s by %s", bill_uuid, body.approved, actor.principal)
    bill = get_bill_service(request).approve_pm(bill_uuid, body.approved, body.debit, body.note, actor=actor)
    return serialize_bill(bill)


@router.post("/{bill_uuid}/qc")
def bill_approve_qc(request: Request, bill_uuid: str, body: StageDecisionBody):
    actor = get_actor(request)
    logger.info("POST /bills/%s/qc approved=%s by %s", bill_uuid, body.approved, actor.principal)
    bill = get_bill_service(request).approve_qc(bill_uuid, body.approved, body.debit, body.note, actor=actor)
    return serialize_bill(bill)


@router.post("/{bill_uuid}/billing")
def bill_approve_billing(request: Request, bill_uuid: str, body: BillingDecisionBody):
    actor = get_actor(request)
    logger.info("POST /bills/%s/billing approved=%s by %s", bill_uuid, body.approved, actor.principal)
    bill = get_bill_service(request).approve_billing(
        bill_uuid, body.approved, body.final_amount, body.note, actor=actor
    )
    return serialize_bill(bill)


@router.delete("/{bill_uuid}", status_code=204)
def bill_delete(request: Request, bill_uuid: str, body: DeleteBody):
    actor = get_actor(request)
    logger.info("DELETE /bills/%s by %s", bill_uuid, actor.principal)
    get_bill_service(request).delete_bill(bill_uuid, body.password, actor=actor)
    return Response(status_code=204)
