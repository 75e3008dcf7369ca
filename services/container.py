"""
Service container - everything a request needs, built once at startup.

Replaces module-level connection objects: ``main.create_app`` builds one
container from the settings and stores it on ``app.state``.
"""

from dataclasses import dataclass
from typing import Optional

from adapters.asset_storage import LocalAssetStore
from app.config import Settings
from repositories.factory import RecordStores, create_record_stores
from services.heading_service import HeadingService
from services.meal_service import MealService


@dataclass
class ServiceContainer:
    settings: Settings
    stores: RecordStores
    assets: LocalAssetStore
    meals: MealService
    headings: HeadingService

    @classmethod
    def build(
        cls, settings: Settings, stores: Optional[RecordStores] = None
    ) -> "ServiceContainer":
        if stores is None:
            stores = create_record_stores(settings)
        assets = LocalAssetStore(
            settings.upload_dir,
            url_prefix=settings.upload_url_prefix,
            max_bytes=settings.max_upload_bytes,
        )
        assets.ensure_directory()
        return cls(
            settings=settings,
            stores=stores,
            assets=assets,
            meals=MealService(stores.meals, assets),
            headings=HeadingService(stores.headings),
        )

    def close(self) -> None:
        self.stores.close()
