"""
Card service — lifecycle of a Card and its single attached file.

Design notes
------------
- ``get`` is the only lookup primitive; every other operation on an
  existing card calls it first, so a missing ID fails the same way
  everywhere (``CardNotFoundError``).
- A card holds at most one file.  Uploading replaces the previous blob and
  overwrites ``file_key``; there is no operation that detaches a file.
- Blob deletions in ``remove`` and in ``upload_file``'s cleanup step are
  best-effort: failures are logged and swallowed, and a stale key or an
  orphaned blob is tolerated.  Every other store failure propagates.
- The service never commits; the ``get_db`` dependency owns the
  transaction.
"""
from __future__ import annotations

import logging
import time
from pathlib import PurePosixPath

from cards_api.exceptions import CardFileNotFoundError, CardNotFoundError, MissingFileError
from cards_api.models import Card
from cards_api.schemas import CardCreate, CardUpdate, FileUrlResponse, UploadedFile
from cards_api.stores.blob_store import BlobStore
from cards_api.stores.card_store import CardStore

logger = logging.getLogger(__name__)


def build_file_key(card_id: str, filename: str, timestamp_ms: int | None = None) -> str:
    """
    Return the object key for a file uploaded to *card_id*.

    Keys look like ``cards/{card_id}/{epoch_ms}-{filename}``; the timestamp
    keeps repeated uploads to the same card from colliding.  Only the base
    name of *filename* is kept, so client-supplied directories never leak
    into the key.
    """
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    name = PurePosixPath(filename.replace("\\", "/")).name or "file"
    return f"cards/{card_id}/{timestamp_ms}-{name}"


class CardService:
    def __init__(self, cards: CardStore, blobs: BlobStore) -> None:
        self.cards = cards
        self.blobs = blobs

    async def create(self, data: CardCreate) -> Card:
        card = await self.cards.create(
            {"title": data.title, "description": data.description}
        )
        logger.info("Created card %s", card.id)
        return card

    async def list(self) -> list[Card]:
        return await self.cards.find_many()

    async def get(self, card_id: str) -> Card:
        card = await self.cards.find_unique(card_id)
        if card is None:
            raise CardNotFoundError(card_id)
        return card

    async def update(self, card_id: str, data: CardUpdate) -> Card:
        """
        Apply the fields present in *data* and return the updated card.

        Fields omitted from the request (or sent as null) keep their
        current value.  ``file_key`` is never touched here.
        """
        await self.get(card_id)
        fields = data.model_dump(exclude_unset=True, exclude_none=True)
        return await self.cards.update(card_id, fields)

    async def remove(self, card_id: str) -> None:
        card = await self.get(card_id)

        if card.file_key:
            await self._delete_blob_quietly(card.file_key, "Error deleting file from storage")

        await self.cards.delete(card_id)
        logger.info("Deleted card %s", card_id)

    async def upload_file(self, card_id: str, file: UploadedFile | None) -> Card:
        """
        Attach *file* to the card, replacing any previous file.

        The old blob is removed best-effort before the new one is written.
        A failed upload propagates and leaves the record (and its old key)
        untouched.
        """
        if file is None:
            raise MissingFileError()

        card = await self.get(card_id)

        if card.file_key:
            await self._delete_blob_quietly(card.file_key, "Error deleting old file from storage")

        file_key = build_file_key(card_id, file.filename)
        await self.blobs.upload_file(file, file_key)

        updated = await self.cards.update(card_id, {"file_key": file_key})
        logger.info("Attached %s to card %s", file_key, card_id)
        return updated

    async def get_file_url(self, card_id: str) -> FileUrlResponse:
        card = await self.get(card_id)

        if not card.file_key:
            raise CardFileNotFoundError(card_id)

        url = await self.blobs.get_presigned_url(card.file_key)
        return FileUrlResponse(url=url)

    async def _delete_blob_quietly(self, key: str, message: str) -> None:
        try:
            await self.blobs.delete_file(key)
        except Exception:
            logger.exception("%s: key=%s", message, key)
