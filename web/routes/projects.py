from __future__ import annotations

import logging

from fastapi import APIRouter, Request, Response

from paygo.exceptions import NotFound
from paygo.models.project import Project
from paygo.services.serializers import serialize_project
from web.deps import get_actor, get_project_service
from web.schemas import DeleteBody, ProjectBody

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/projects")


@router.get("")
def project_list(request: Request):
    get_actor(request)
    return [serialize_project(p) for p in get_project_service(request).list_projects()]


@router.post("", status_code=201)
def project_create(request: Request, body: ProjectBody):
    actor = get_actor(request)
    logger.info("POST /projects name=%s by %s", body.project_name, actor.principal)
    project = get_project_service(request).create_project(Project(**body.model_dump()), actor=actor)
    return serialize_project(project)


@router.get("/{project_uuid}")
def project_detail(request: Request, project_uuid: str):
    get_actor(request)
    project = get_project_service(request).get_project(project_uuid)
    if project is None:
        raise NotFound(f"project {project_uuid} not found")
    return serialize_project(project)


@router.put("/{project_uuid}")
def project_update(request: Request, project_uuid: str, body: ProjectBody):
    actor = get_actor(request)
    service = get_project_service(request)
    project = service.get_project(project_uuid)
    if project is None:
        raise NotFound(f"project {project_uuid} not found")
    logger.info("PUT /projects/%s by %s", project_uuid, actor.principal)
    updated = service.update_project(project.model_copy(update=body.model_dump()), actor=actor)
    return serialize_project(updated)


@router.delete("/{project_uuid}", status_code=204)
def project_delete(request: Request, project_uuid: str, body: DeleteBody):
    actor = get_actor(request)
    logger.info("DELETE /projects/%s by %s", project_uuid, actor.principal)
    get_project_service(request).delete_project(project_uuid, body.password, actor=actor)
    return Response(status_code=204)
