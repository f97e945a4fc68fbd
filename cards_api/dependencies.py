from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from cards_api.config import settings
from cards_api.database import get_db
from cards_api.services.card_service import CardService
from cards_api.stores.blob_store import BlobStore, S3BlobStore
from cards_api.stores.card_store import CardStore


@lru_cache(maxsize=1)
def get_blob_store() -> BlobStore:
    """
    Return the process-wide blob store.

    Built once on first use.  Tests override this dependency with an
    in-memory fake via ``app.dependency_overrides``.
    """
    return S3BlobStore.from_settings(settings)


def get_card_service(
    db: AsyncSession = Depends(get_db),
    blobs: BlobStore = Depends(get_blob_store),
) -> CardService:
    """Compose a CardService for the current request's session."""
    return CardService(CardStore(db), blobs)
