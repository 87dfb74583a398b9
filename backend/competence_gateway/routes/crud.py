"""
Competence Gateway - Resource Router Factory
============================================

What:  Builds the REST routes for one controller.
How:   Every resource gets the same verbs; updatable resources add PUT and
       connectors add read/delete by foreign key.

Generated Routes (resource "skill"):
    POST   /skill          → controller.create(body)         200 downstream body
    GET    /skill          → controller.get_many(query)      200 downstream list
    GET    /skill/{id}     → controller.get_by_id(id)        200 downstream body
    PUT    /skill/{id}     → controller.update(id, body)     200 {"message": ...}
    DELETE /skill/{id}     → controller.delete_by_id(id)     200 {"message": ...}

    Connector extras, registered before /{id} so the literal segment wins:
    GET    /<connector>/<side>/{id}
    DELETE /<connector>/<side>/{id}
"""

import json
import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, Request

from competence_gateway import messages
from competence_gateway.controllers.base import ResourceController
from competence_gateway.controllers.connectors import ConnectorController
from competence_gateway.exceptions import InvalidJSONError
from competence_gateway.schemas.common import ErrorResponse, MessageResponse

logger = logging.getLogger(__name__)

_ERRORS = {
    502: {"description": "Competence API answered with an error", "model": ErrorResponse},
    503: {"description": "Competence API unreachable", "model": ErrorResponse},
}
_WRITE_ERRORS = {400: {"description": "Invalid JSON object", "model": ErrorResponse}, **_ERRORS}
_ITEM_ERRORS = {404: {"description": "No such item", "model": ErrorResponse}, **_ERRORS}


def _reject_constant(name: str) -> Any:
    # NaN and Infinity are accepted by the json module but are not JSON
    raise ValueError(f"Non-standard JSON constant: {name}")


async def read_json_body(request: Request) -> Any:
    """
    Parse the request body as JSON.

    Returns:
        The decoded value, or None for an empty body (the controller then
        rejects it as a missing object).

    Raises:
        InvalidJSONError: the body is not valid JSON, uses NaN/Infinity,
            or nests too deeply to decode.
    """
    body = await request.body()
    if not body.strip():
        return None
    try:
        return json.loads(body, parse_constant=_reject_constant)
    except (ValueError, RecursionError):
        raise InvalidJSONError(context={"content_type": request.headers.get("content-type")})


def build_resource_router(controller: ResourceController, tag: Optional[str] = None) -> APIRouter:
    """Create the router for one resource; see the module docstring for the routes."""
    resource = controller.resource
    router = APIRouter(prefix=f"/{resource}", tags=[tag or resource])

    if isinstance(controller, ConnectorController):
        for side in controller.foreign_keys:
            _add_foreign_key_routes(router, controller, side)

    @router.post(
        "",
        responses=_WRITE_ERRORS,
        summary=f"Create a {resource}",
    )
    async def create_item(payload: Any = Depends(read_json_body)) -> Any:
        return await controller.create(payload)

    @router.get(
        "",
        responses=_ITEM_ERRORS,
        summary=f"List {resource} items",
        description="Query string parameters are forwarded to the competence API as filters.",
    )
    async def list_items(request: Request) -> Any:
        return await controller.get_many(request.query_params.multi_items())

    @router.get(
        "/{item_id}",
        responses=_ITEM_ERRORS,
        summary=f"Get a {resource} by id",
    )
    async def get_item(item_id: str) -> Any:
        return await controller.get_by_id(item_id)

    if controller.updatable:
        @router.put(
            "/{item_id}",
            response_model=MessageResponse,
            response_model_exclude_none=True,
            responses={**_WRITE_ERRORS, **_ITEM_ERRORS},
            summary=f"Update a {resource}",
        )
        async def update_item(
            item_id: str,
            payload: Any = Depends(read_json_body),
        ) -> MessageResponse:
            await controller.update(item_id, payload)
            return MessageResponse(message=messages.SUCCESS_UPDATE)

    @router.delete(
        "/{item_id}",
        response_model=MessageResponse,
        response_model_exclude_none=True,
        responses=_ITEM_ERRORS,
        summary=f"Delete a {resource}",
    )
    async def delete_item(item_id: str) -> MessageResponse:
        await controller.delete_by_id(item_id)
        return MessageResponse(message=messages.SUCCESS_DELETE)

    return router


def _add_foreign_key_routes(router: APIRouter, controller: ConnectorController, side: str) -> None:
    field = controller.foreign_key(side)
    resource = controller.resource

    @router.get(
        f"/{side}/{{item_id}}",
        responses=_ITEM_ERRORS,
        summary=f"List {resource} items by {field}",
    )
    async def list_by_foreign_key(item_id: str) -> Any:
        return await controller.get_by_foreign_key(side, item_id)

    @router.delete(
        f"/{side}/{{item_id}}",
        response_model=MessageResponse,
        responses=_ERRORS,
        summary=f"Delete {resource} items by {field}",
    )
    async def delete_by_foreign_key(item_id: str) -> MessageResponse:
        removed = await controller.delete_by_foreign_key(side, item_id)
        return MessageResponse(message=messages.SUCCESS_DELETE, count=removed)
