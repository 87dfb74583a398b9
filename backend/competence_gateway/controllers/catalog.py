"""
Competence Gateway - Catalog Controllers
========================================

Named catalog entries that only carry a name (plus an icon for skills).
"""

from competence_gateway.controllers.base import ResourceController
from competence_gateway.dao.resource import ResourceDAO

DEFAULT_SKILL_ICON = "fa fa-flask"


def named_resource(resource: str) -> ResourceController:
    """Controller for a resource whose only field is a required name."""
    return ResourceController(
        dao=ResourceDAO(resource),
        template={"name": None},
        required=("name",),
    )


customer_controller = named_resource("customer")
skill_group_controller = named_resource("skillGroup")
office_controller = named_resource("office")
assignment_controller = named_resource("assignment")
role_controller = named_resource("role")
attribute_controller = named_resource("attribute")

skill_controller = ResourceController(
    dao=ResourceDAO("skill"),
    template={"name": None, "icon": DEFAULT_SKILL_ICON},
    required=("name",),
)
