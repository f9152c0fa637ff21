# src/qa_closing/domain/repository.py
"""ResultRepository Protocol — interface contract for auction result rows."""
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.qa_allocation.domain.models import ItemAllocation
from src.qa_closing.domain.models import AuctionResult


class ResultRepositoryProtocol(Protocol):
    async def replace_results(
        self, db: AsyncSession, auction_id: str, allocations: list[ItemAllocation]
    ) -> list[AuctionResult]: ...

    async def list_results(self, db: AsyncSession, auction_id: str) -> list[AuctionResult]: ...

    async def delete_results(self, db: AsyncSession, auction_id: str) -> int: ...
