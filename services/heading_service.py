from typing import List, Optional
import logging

from pydantic import ValidationError

from app.exceptions import ServiceValidationError
from domain.models import Heading
from repositories.base import RecordRepository

logger = logging.getLogger("menuboard.headings")


class HeadingService:
    """CRUD for menu headings.

    Headings are independent of meals: deleting or renaming one never
    touches meals whose ``headingId`` points at it.
    """

    def __init__(self, headings: RecordRepository):
        self.headings = headings

    @staticmethod
    def validate_name(name: Optional[str]) -> str:
        name = (name or "").strip()
        if not name:
            raise ServiceValidationError("Heading name is required", details={"field": "name"})
        return name

    def list_headings(self) -> List[Heading]:
        headings = []
        for record in self.headings.get_all():
            try:
                headings.append(Heading.model_validate(record))
            except ValidationError as exc:
                logger.warning("Skipping malformed heading %s: %s", record.get("id"), exc)
        return headings

    def create_heading(self, name: Optional[str]) -> Heading:
        heading = Heading.model_validate(self.headings.create({"name": self.validate_name(name)}))
        logger.info("Created heading %s (%s)", heading.id, heading.name)
        return heading

    def rename_heading(self, heading_id: str, name: Optional[str]) -> Heading:
        name = self.validate_name(name)
        heading = Heading.model_validate(self.headings.update(heading_id, {"name": name}))
        logger.info("Renamed heading %s to %s", heading_id, name)
        return heading

    def delete_heading(self, heading_id: str) -> Heading:
        removed = self.headings.delete(heading_id)
        heading = Heading.model_validate({"name": "", **{k: v for k, v in removed.items() if v is not None}})
        logger.info("Deleted heading %s", heading_id)
        return heading
