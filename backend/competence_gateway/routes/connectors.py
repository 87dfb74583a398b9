"""
Competence Gateway - Connector Routes
=====================================

What:  REST routes for the join resources, including read and delete by
       either side's id (e.g. DELETE /roleToAttributeConnector/role/{id}
       when a role is removed).
"""

from competence_gateway.controllers.connectors import (
    role_to_attribute_connector_controller,
    skill_to_skill_group_connector_controller,
    user_to_skill_connector_controller,
)
from competence_gateway.routes.crud import build_resource_router

routers = [
    build_resource_router(user_to_skill_connector_controller, tag="Connectors"),
    build_resource_router(skill_to_skill_group_connector_controller, tag="Connectors"),
    build_resource_router(role_to_attribute_connector_controller, tag="Connectors"),
]
