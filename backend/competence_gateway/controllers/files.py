"""
Competence Gateway - File Controller
====================================

What:  Manages file *records* in the competence API.
How:   The upload service stores the binary and reports its generated name;
       this controller validates and forwards the record. Removing the
       stored binary belongs to the upload service.
"""

import logging

from competence_gateway.controllers.base import ResourceController
from competence_gateway.dao.resource import ResourceDAO

logger = logging.getLogger(__name__)


class FileController(ResourceController):
    """File records: both the generated and the original name are required."""

    def __init__(self, dao: ResourceDAO):
        super().__init__(
            dao=dao,
            template={"generatedName": None, "originalName": None},
            required=("generatedName", "originalName"),
        )

    async def delete_by_id(self, item_id: str) -> None:
        """Confirm the record exists (404 otherwise), then remove it."""
        record = await self.dao.get_by_id(item_id)
        generated = record.get("generatedName") if isinstance(record, dict) else None
        logger.info("Removing file record %s (%s)", item_id, generated or "unnamed")
        await self.dao.delete(item_id)


file_controller = FileController(ResourceDAO("file"))
