from __future__ import annotations

import logging

from fastapi import APIRouter, Request, Response

from paygo.exceptions import NotFound
from paygo.services.serializers import serialize_user
from web.deps import get_actor, get_principal, get_user_service
from web.schemas import DeleteBody, LoginBody, UserCreate, UserUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users")


@router.post("/login")
def user_login(request: Request, body: LoginBody):
    principal = get_principal(request)
    logger.info("POST /users/login principal=%s", principal)
    user = get_user_service(request).login(principal, body.name, body.email)
    return serialize_user(user)


@router.get("/me")
def user_me(request: Request):
    actor = get_actor(request)
    user = get_user_service(request).get_user(actor.principal)
    if user is None:
        raise NotFound(f"user {actor.principal} not found")
    return serialize_user(user)


@router.get("")
def user_list(request: Request):
    actor = get_actor(request)
    service = get_user_service(request)
    service.authz.require(service.authz.can_manage_users(actor), actor, "list users")
    return [serialize_user(u) for u in service.list_users()]


@router.post("", status_code=201)
def user_create(request: Request, body: UserCreate):
    actor = get_actor(request)
    logger.info("POST /users principal=%s role=%s by %s", body.principal, body.role.value, actor.principal)
    user = get_user_service(request).create_user(
        body.principal,
        body.name,
        body.email,
        body.mobile,
        body.role,
        body.paygo_id,
        actor=actor,
    )
    return serialize_user(user)


@router.patch("/{principal}")
def user_update(request: Request, principal: str, body: UserUpdate):
    actor = get_actor(request)
    logger.info("PATCH /users/%s by %s", principal, actor.principal)
    user = get_user_service(request).update_user(principal, actor=actor, **body.model_dump(exclude_none=True))
    return serialize_user(user)


@router.delete("/{principal}", status_code=204)
def user_delete(request: Request, principal: str, body: DeleteBody):
    actor = get_actor(request)
    logger.info("DELETE /users/%s by %s", principal, actor.principal)
    get_user_service(request).delete_user(principal, body.password, actor=actor)
    return Response(status_code=204)
