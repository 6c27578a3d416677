from __future__ import annotations

import logging

from fastapi import APIRouter, Request, Response

from paygo.exceptions import NotFound
from paygo.services.serializers import serialize_payment
from web.deps import get_actor, get_payment_service
from web.schemas import DeleteBody, PaymentCreate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/payments")


@router.get("")
def payment_list(request: Request, bill_number: str | None = None):
    get_actor(request)
    payments = get_payment_service(request).list_payments(bill_number)
    logger.info("GET /payments: %d payments", len(payments))
    return [serialize_payment(p) for p in payments]


@router.post("", status_code=201)
def payment_create(request: Request, body: PaymentCreate):
    actor = get_actor(request)
    logger.info("POST /payments bill=%s amount=%s by %s", body.bill_number, body.paid_amount, actor.principal)
    payment = get_payment_service(request).create_payment(
        body.bill_number,
        body.payment_date,
        body.paid_amount,
        actor=actor,
    )
    return serialize_payment(payment)


@router.get("/{payment_uuid}")
def payment_detail(request: Request, payment_uuid: str):
    get_actor(request)
    payment = get_payment_service(request).get_payment(payment_uuid)
    if payment is None:
        raise NotFound(f"payment {payment_uuid} not found")
    return serialize_payment(payment)


@router.delete("/{payment_uuid}", status_code=204)
def payment_delete(request: Request, payment_uuid: str, body: DeleteBody):
    actor = get_actor(request)
    logger.info("DELETE /payments/%s by %s", payment_uuid, actor.principal)
    get_payment_service(request).delete_payment(payment_uuid, body.password, actor=actor)
    return Response(status_code=204)
