"""
Competence Gateway - Connector Controllers
==========================================

What:  Many-to-many join resources between catalog entries.
How:   A connector holds one foreign key per side. Besides plain CRUD the
       frontend reads and deletes connectors by either side's id:

    GET    /skillToSkillGroupConnector/skill/{id}  → GET <API>skillToSkillGroupConnector?skillId={id}
    DELETE /skillToSkillGroupConnector/skill/{id}  → list as above, DELETE each by _id

Connector Inventory:
    userToSkillConnector       userId, skillId (+ level 1-5, years >= 1)
    skillToSkillGroupConnector skillId, skillGroupId
    roleToAttributeConnector   roleId, attributeId
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

from competence_gateway.controllers.base import ResourceController
from competence_gateway.dao.resource import ResourceDAO
from competence_gateway.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

SKILL_LEVEL_MIN = 1
SKILL_LEVEL_MAX = 5
SKILL_YEARS_MIN = 1


class ConnectorController(ResourceController):
    """
    Controller for a join resource.

    Args:
        dao:          DAO for the connector resource
        foreign_keys: Route segment → field name, e.g. {"skill": "skillId"}
        template:     Accepted fields; defaults to the foreign keys alone
        updatable:    Whether update() is offered
    """

    def __init__(
        self,
        dao: ResourceDAO,
        foreign_keys: Mapping[str, str],
        template: Optional[Mapping[str, Any]] = None,
        updatable: bool = False,
    ):
        self.foreign_keys = dict(foreign_keys)
        super().__init__(
            dao=dao,
            template=template or {field: None for field in self.foreign_keys.values()},
            required=tuple(self.foreign_keys.values()),
            updatable=updatable,
        )

    def foreign_key(self, side: str) -> str:
        try:
            return self.foreign_keys[side]
        except KeyError:
            raise ValueError(f"{self.resource} has no foreign key for '{side}'") from None

    async def get_by_foreign_key(self, side: str, item_id: str) -> List[Any]:
        return await self.dao.get_many({self.foreign_key(side): item_id})

    async def delete_by_foreign_key(self, side: str, item_id: str) -> int:
        """
        Delete every connector that references item_id on the given side.

        Returns:
            Number of connectors removed. A 404 from the listing (nothing
            references the id) returns 0, as does a connector that vanished
            between the listing and its delete.
        """
        try:
            connectors = await self.get_by_foreign_key(side, item_id)
        except NotFoundError:
            return 0

        removed = 0
        for connector in connectors:
            connector_id = connector.get("_id") if isinstance(connector, dict) else None
            if not connector_id:
                continue
            try:
                await self.dao.delete(connector_id)
            except NotFoundError:
                logger.info("%s %s already removed", self.resource, connector_id)
                continue
            removed += 1

        logger.info(
            "Removed %d %s item(s) with %s=%s",
            removed,
            self.resource,
            self.foreign_key(side),
            item_id,
        )
        return removed


def _as_int(value: Any) -> Optional[int]:
    """Read an int from a JSON number or a numeric string; None if it is neither."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


class UserToSkillConnectorController(ConnectorController):
    """Connects a user to a skill with a self-assessed level and years of experience."""

    def __init__(self, dao: ResourceDAO):
        super().__init__(
            dao=dao,
            foreign_keys={"user": "userId", "skill": "skillId"},
            template={"userId": None, "skillId": None, "level": None, "years": None},
            updatable=True,
        )

    def check(self, item: Dict[str, Any]) -> None:
        level = item.get("level")
        if level is not None:
            number = _as_int(level)
            if number is None or not SKILL_LEVEL_MIN <= number <= SKILL_LEVEL_MAX:
                raise ValidationError(
                    field="level",
                    context={"allowed": [SKILL_LEVEL_MIN, SKILL_LEVEL_MAX]},
                )

        years = item.get("years")
        if years is not None:
            number = _as_int(years)
            if number is None or number < SKILL_YEARS_MIN:
                raise ValidationError(field="years", context={"minimum": SKILL_YEARS_MIN})


user_to_skill_connector_controller = UserToSkillConnectorController(
    ResourceDAO("userToSkillConnector")
)

skill_to_skill_group_connector_controller = ConnectorController(
    dao=ResourceDAO("skillToSkillGroupConnector"),
    foreign_keys={"skill": "skillId", "skillGroup": "skillGroupId"},
)

role_to_attribute_connector_controller = ConnectorController(
    dao=ResourceDAO("roleToAttributeConnector"),
    foreign_keys={"role": "roleId", "attribute": "attributeId"},
)
