"""
Competence Gateway - User Controller
====================================

Users are identified by e-mail; the frontend looks them up with
GET /user?email=<address>. Both fields are required on create and must
remain present after an update.
"""

from competence_gateway.controllers.base import ResourceController
from competence_gateway.dao.resource import ResourceDAO

user_controller = ResourceController(
    dao=ResourceDAO("user"),
    template={"email": None, "name": None},
    required=("email", "name"),
    updatable=True,
)
