from typing import Any, Dict, List, Optional
import logging

from pydantic import ValidationError

from adapters.asset_storage import LocalAssetStore
from app.exceptions import NotFoundError, ServiceValidationError, StorageIOError
from domain.models import Meal, PhotoUpload
from domain.schemas import MealInput
from repositories.base import RecordRepository

logger = logging.getLogger("menuboard.meals")

REQUIRED_FIELDS = ("name", "description")

# MealInput attribute -> stored record key
WIRE_KEYS = {
    "name": "name",
    "description": "description",
    "half_serve_available": "halfServeAvailable",
    "heading_id": "headingId",
}


class MealService:
    """
    Meal lifecycle: keeps each meal record and its photo file in step.

    Ordering rules (no transactions, best-effort cleanup):

    - create: validate fields, store the photo, persist the record. A
      persistence failure leaves the stored photo orphaned on disk.
    - update: store the new photo, persist the record, then delete the old
      photo. A rejected upload never touches the current photo.
    - delete: remove the record, then delete its photo. A crash in between
      leaves an orphaned file, never a readable dangling reference.

    Failing to delete an old photo is logged and does not fail the request.
    """

    def __init__(self, meals: RecordRepository, assets: LocalAssetStore):
        self.meals = meals
        self.assets = assets

    @staticmethod
    def validate_required(fields: MealInput) -> None:
        """
        Check that every required field is present and non-empty.

        Raises:
            ServiceValidationError: Naming the first missing field
        """
        for field in REQUIRED_FIELDS:
            if not getattr(fields, field):
                raise ServiceValidationError(
                    f"Missing required field: {field}", details={"field": field}
                )

    @staticmethod
    def validate_supplied(fields: MealInput) -> None:
        """Required fields may be omitted on update, but not blanked"""
        supplied = fields.supplied()
        for field in REQUIRED_FIELDS:
            if field in supplied and not supplied[field]:
                raise ServiceValidationError(
                    f"Missing required field: {field}", details={"field": field}
                )

    @staticmethod
    def _to_meal(record: Dict[str, Any]) -> Meal:
        try:
            return Meal.model_validate(record)
        except ValidationError as exc:
            raise StorageIOError(f"Stored meal {record.get('id')} is malformed: {exc}") from exc

    @staticmethod
    def _patch(fields: MealInput) -> Dict[str, Any]:
        """Supplied fields only, under their stored keys"""
        return {WIRE_KEYS[name]: value for name, value in fields.supplied().items()}

    def list_meals(self) -> List[Meal]:
        """
        All meals that can be read.

        Stored records missing a required field (written by older clients)
        are skipped with a warning instead of failing the whole listing.
        """
        meals = []
        for record in self.meals.get_all():
            try:
                meals.append(Meal.model_validate(record))
            except ValidationError as exc:
                logger.warning("Skipping malformed meal %s: %s", record.get("id"), exc)
        return meals

    def get_meal(self, meal_id: str) -> Meal:
        record = self.meals.get_by_id(meal_id)
        if record is None:
            raise NotFoundError("Meal not found", details={"id": meal_id})
        return self._to_meal(record)

    def _store_photo(self, upload: PhotoUpload) -> str:
        return self.assets.store(upload.content, upload.filename, upload.content_type)

    def _discard_photo(self, ref: str, meal_id: str) -> None:
        """Best-effort removal of a photo no longer referenced by ``meal_id``"""
        if not ref:
            return
        try:
            self.assets.delete(ref)
        except StorageIOError as exc:
            logger.warning(
                "Could not delete photo %s of meal %s, leaving it orphaned: %s",
                ref,
                meal_id,
                exc,
            )

    def create_meal(self, fields: MealInput, upload: Optional[PhotoUpload] = None) -> Meal:
        """
        Create a meal, storing its photo first when one is uploaded.

        Raises:
            ServiceValidationError: Missing name/description or rejected upload
            StorageIOError: If the photo or the record cannot be written
        """
        self.validate_required(fields)

        photo = self._store_photo(upload) if upload is not None else ""
        record = {
            "name": fields.name,
            "description": fields.description,
            "photo": photo,
            "halfServeAvailable": bool(fields.half_serve_available),
            "headingId": fields.heading_id,
        }

        try:
            stored = self.meals.create(record)
        except StorageIOError:
            if photo:
                logger.error("Meal was not saved; photo %s is orphaned", photo)
            raise

        meal = Meal.model_validate(stored)
        logger.info("Created meal %s (%s)", meal.id, meal.name)
        return meal

    def update_meal(
        self, meal_id: str, fields: MealInput, upload: Optional[PhotoUpload] = None
    ) -> Meal:
        """
        Partially update a meal; supplied fields overwrite, others are kept.

        Without an upload the existing photo is preserved as-is. With one, the
        new photo replaces the old, which is deleted after the record is saved.

        Raises:
            NotFoundError: If the meal does not exist
            ServiceValidationError: Blank required field or rejected upload
            StorageIOError: If the photo or the record cannot be written
        """
        if not self.meals.exists(meal_id):
            raise NotFoundError("Meal not found", details={"id": meal_id})
        self.validate_supplied(fields)

        # only the supplied keys are written so concurrent edits to other
        # fields survive
        patch = self._patch(fields)
        if upload is not None:
            patch["photo"] = self._store_photo(upload)

        try:
            previous, stored = self.meals.update_returning_previous(meal_id, patch)
        except (StorageIOError, NotFoundError):
            if upload is not None:
                logger.error("Meal %s was not saved; photo %s is orphaned", meal_id, patch["photo"])
            raise

        old_photo = previous.get("photo") or ""
        if upload is not None and old_photo != patch["photo"]:
            self._discard_photo(old_photo, meal_id)

        meal = self._to_meal(stored)
        logger.info("Updated meal %s", meal_id)
        return meal

    def delete_meal(self, meal_id: str) -> Meal:
        """
        Delete a meal and then its photo.

        Raises:
            NotFoundError: If the meal does not exist
            StorageIOError: If the record cannot be removed
        """
        removed = self.meals.delete(meal_id)
        self._discard_photo(removed.get("photo") or "", meal_id)
        # a malformed legacy record is still deletable
        known = {k: v for k, v in removed.items() if v is not None}
        meal = Meal.model_validate({"name": "", "description": "", **known})
        logger.info("Deleted meal %s", meal_id)
        return meal
