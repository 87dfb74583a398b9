"""
Competence Gateway - Downstream Response Translation
====================================================

What:  Maps the status code of a downstream response to a value or an exception.
Who:   Called by ResourceDAO after every downstream request.

Status Translation:
    ┌────────────────┬───────────────┬─────────┬──────────┬──────────────────────┐
    │ Translator     │ Success       │ 400     │ 404      │ 500 / other          │
    ├────────────────┼───────────────┼─────────┼──────────┼──────────────────────┤
    │ parse_post     │ 200, 201 body │ invalid │    -     │ not saved / invalid  │
    │ parse_get      │ 200 body      │    -    │ no item  │ not fetched / invalid│
    │ parse_get_many │ 200 list      │    -    │ no item  │ not fetched / invalid│
    │ parse_put      │ 200, 204      │ invalid │ no item  │ not saved / invalid  │
    │ parse_delete   │ 200, 204      │    -    │ no item  │ not removed / invalid│
    └────────────────┴───────────────┴─────────┴──────────┴──────────────────────┘

    invalid → ValidationError (400), no item → NotFoundError (404),
    everything else → DownstreamError (502) with the downstream status in context.
"""

import logging
from typing import Any, Optional

import httpx

from competence_gateway import messages
from competence_gateway.exceptions import DownstreamError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def _json_body(response: httpx.Response) -> Any:
    """Decode a success body; an empty body decodes to None."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        logger.error(
            "Malformed JSON from %s %s (status %d)",
            response.request.method,
            response.request.url,
            response.status_code,
        )
        raise DownstreamError(
            message=messages.INVALID_RESPONSE_BODY,
            status_code=response.status_code,
            context={"url": str(response.request.url)},
        )


def _unexpected(response: httpx.Response, server_error_message: str) -> DownstreamError:
    status = response.status_code
    message = server_error_message if status == 500 else messages.INVALID_RESPONSE_CODE
    return DownstreamError(
        message=message,
        status_code=status,
        context={
            "method": response.request.method,
            "url": str(response.request.url),
        },
    )


def parse_post(response: httpx.Response) -> Any:
    """Translate the response to a create call; returns the created item."""
    if response.status_code in (200, 201):
        return _json_body(response)
    if response.status_code == 400:
        raise ValidationError(context={"downstream_status": 400})
    raise _unexpected(response, messages.ITEM_NOT_SAVED)


def parse_get(
    response: httpx.Response,
    resource: str = "resource",
    resource_id: Optional[str] = None,
) -> Any:
    """Translate the response to a single-item read; returns the item."""
    if response.status_code == 200:
        return _json_body(response)
    if response.status_code == 404:
        raise NotFoundError(resource=resource, resource_id=resource_id)
    raise _unexpected(response, messages.ITEMS_NOT_FETCHED)


def parse_get_many(response: httpx.Response, resource: str = "resource") -> Any:
    """Translate the response to a query read; an empty body means no items."""
    if response.status_code == 200:
        body = _json_body(response)
        return [] if body is None else body
    if response.status_code == 404:
        raise NotFoundError(resource=resource)
    raise _unexpected(response, messages.ITEMS_NOT_FETCHED)


def parse_put(
    response: httpx.Response,
    resource: str = "resource",
    resource_id: Optional[str] = None,
) -> Any:
    """Translate the response to an update; returns the body if the API sent one."""
    if response.status_code in (200, 204):
        return _json_body(response)
    if response.status_code == 400:
        raise ValidationError(context={"downstream_status": 400})
    if response.status_code == 404:
        raise NotFoundError(resource=resource, resource_id=resource_id)
    raise _unexpected(response, messages.ITEM_NOT_SAVED)


def parse_delete(
    response: httpx.Response,
    resource: str = "resource",
    resource_id: Optional[str] = None,
) -> None:
    """Translate the response to a delete; the body is ignored."""
    if response.status_code in (200, 204):
        return None
    if response.status_code == 404:
        raise NotFoundError(resource=resource, resource_id=resource_id)
    raise _unexpected(response, messages.ITEM_NOT_REMOVED)
