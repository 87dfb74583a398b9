"""
Competence Gateway - Catalog, User and File Routes
==================================================

What:  REST routes for the plain resources.
Who:   Called by the frontend's admin views and profile pages.
"""

from competence_gateway.controllers.catalog import (
    assignment_controller,
    attribute_controller,
    customer_controller,
    office_controller,
    role_controller,
    skill_controller,
    skill_group_controller,
)
from competence_gateway.controllers.files import file_controller
from competence_gateway.controllers.users import user_controller
from competence_gateway.routes.crud import build_resource_router

routers = [
    build_resource_router(customer_controller, tag="Customers"),
    build_resource_router(skill_controller, tag="Skills"),
    build_resource_router(skill_group_controller, tag="Skill Groups"),
    build_resource_router(office_controller, tag="Offices"),
    build_resource_router(assignment_controller, tag="Assignments"),
    build_resource_router(role_controller, tag="Roles"),
    build_resource_router(attribute_controller, tag="Attributes"),
    build_resource_router(user_controller, tag="Users"),
    build_resource_router(file_controller, tag="Files"),
]
