"""
Competence Gateway - Resource Controller
========================================

What:  The validate → merge → delegate step shared by every resource.
Who:   Subclassed or instantiated per resource; called by route handlers.

Validation Rules:
    1. The payload must be a JSON object (not a list, scalar or missing body)
    2. Only template keys are kept; template defaults fill the gaps
    3. Every required field must be present and non-blank
    4. Resource-specific checks run last (see check())
    5. Keys that are still None are not forwarded downstream
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

from competence_gateway.dao.resource import QueryParams, ResourceDAO
from competence_gateway.exceptions import ValidationError

logger = logging.getLogger(__name__)


def is_present(value: Any) -> bool:
    """A required field counts as present unless None, empty or whitespace-only."""
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


class ResourceController:
    """
    Validates payloads for one resource and delegates to its DAO.

    Args:
        dao:       DAO for the downstream resource
        template:  Accepted fields and their defaults (None = no default)
        required:  Fields that must be present and non-blank
        updatable: Whether update() is offered for this resource
    """

    def __init__(
        self,
        dao: ResourceDAO,
        template: Mapping[str, Any],
        required: Sequence[str] = (),
        updatable: bool = False,
    ):
        self.dao = dao
        self.template = dict(template)
        self.required = tuple(required)
        self.updatable = updatable

    @property
    def resource(self) -> str:
        return self.dao.resource

    # ── Validation ────────────────────────────────────────────────────────

    def merge(self, payload: Mapping[str, Any], base: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        """Overlay template ← base ← payload, restricted to template keys."""
        item = dict(self.template)
        for source in (base or {}, payload):
            item.update({key: source[key] for key in self.template if key in source})
        return item

    def check(self, item: Dict[str, Any]) -> None:
        """Resource-specific rules on the merged item. Raise ValidationError to reject."""

    def validate(self, payload: Any, base: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        """
        Turn an inbound payload into the object sent downstream.

        Raises:
            ValidationError: payload is not an object, a required field is
                missing or blank, or check() rejected it.
        """
        if not isinstance(payload, dict):
            raise ValidationError(
                context={"resource": self.resource, "reason": "expected a JSON object"}
            )

        item = self.merge(payload, base)
        for field in self.required:
            if not is_present(item.get(field)):
                raise ValidationError(field=field, context={"resource": self.resource})

        self.check(item)
        return {key: value for key, value in item.items() if value is not None}

    # ── Operations ────────────────────────────────────────────────────────

    async def create(self, payload: Any) -> Any:
        item = self.validate(payload)
        logger.info("Creating %s", self.resource)
        return await self.dao.create(item)

    async def get_by_id(self, item_id: str) -> Any:
        return await self.dao.get_by_id(item_id)

    async def get_many(self, query: QueryParams = None) -> List[Any]:
        return await self.dao.get_many(query)

    async def update(self, item_id: str, payload: Any) -> None:
        """
        Read-merge-write update.

        The current item is fetched first (404 propagates), the payload is
        merged over its template fields and the result is validated as a
        whole before the PUT.
        """
        if not self.updatable:
            raise ValidationError(
                message=f"{self.resource} items cannot be updated",
                context={"resource": self.resource},
            )
        if not isinstance(payload, dict):
            raise ValidationError(
                context={"resource": self.resource, "reason": "expected a JSON object"}
            )

        current = await self.dao.get_by_id(item_id)
        base = current if isinstance(current, dict) else {}
        item = self.validate(payload, base=base)

        logger.info("Updating %s %s", self.resource, item_id)
        await self.dao.update(item_id, item)

    async def delete_by_id(self, item_id: str) -> None:
        await self.dao.delete(item_id)

    def __repr__(self) -> str:
        return f"<{type(self).__name__}(resource='{self.resource}')>"
