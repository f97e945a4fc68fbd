"""
Card store — persistence for Card records on an AsyncSession.

The store flushes but does not commit; the transaction boundary is owned
by the ``get_db`` dependency in the router layer.
"""
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cards_api.exceptions import CardNotFoundError
from cards_api.models import Card


class CardStore:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def create(self, fields: dict[str, Any]) -> Card:
        card = Card(**fields)
        self.db.add(card)
        await self.db.flush()
        return card

    async def find_many(self) -> list[Card]:
        """Return every card, most recently created first."""
        result = await self.db.execute(select(Card).order_by(Card.created_at.desc()))
        return list(result.scalars().all())

    async def find_unique(self, card_id: str) -> Card | None:
        result = await self.db.execute(select(Card).where(Card.id == card_id))
        return result.scalar_one_or_none()

    async def update(self, card_id: str, fields: dict[str, Any]) -> Card:
        card = await self._require(card_id)
        for field, value in fields.items():
            setattr(card, field, value)
        await self.db.flush()
        return card

    async def delete(self, card_id: str) -> Card:
        card = await self._require(card_id)
        await self.db.delete(card)
        await self.db.flush()
        return card

    async def _require(self, card_id: str) -> Card:
        # The row can disappear between the service's lookup and this call.
        card = await self.find_unique(card_id)
        if card is None:
            raise CardNotFoundError(card_id)
        return card
