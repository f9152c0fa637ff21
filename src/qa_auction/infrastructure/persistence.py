"""AuctionRepository — concrete implementation of AuctionRepositoryProtocol.

All queries use raw text() SQL (no ORM).
asyncpg NULL parameter pattern: CAST(:param AS TYPE) IS NULL required for None values.

Transaction ownership: the CALLER (application service) commits or rolls back.
"""

from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.qa_auction.domain.models import Auction, Collection, Item, NewItem

# ---------------------------------------------------------------------------
# SQL: auctions
# ---------------------------------------------------------------------------

_AUCTION_COLUMNS = """
    id, name, description, status, max_budget_per_bidder, slug,
    created_at, updated_at, closed_at
"""

_INSERT_AUCTION_SQL = text(f"""
    INSERT INTO auctions (name, description, max_budget_per_bidder, slug)
    VALUES (:name, :description, :max_budget_per_bidder, generate_auction_slug(:name))
    RETURNING {_AUCTION_COLUMNS}
""")

_GET_AUCTION_SQL = text(f"SELECT {_AUCTION_COLUMNS} FROM auctions WHERE id = :auction_id")

_GET_AUCTION_BY_SLUG_SQL = text(f"SELECT {_AUCTION_COLUMNS} FROM auctions WHERE slug = :slug")

# Close/reset take the exclusive lock; bid submission takes the shared one so that
# no bid can land between the close snapshot and the status flip.
_GET_AUCTION_FOR_UPDATE_SQL = text(f"""
    SELECT {_AUCTION_COLUMNS} FROM auctions WHERE id = :auction_id FOR UPDATE
""")

_GET_AUCTION_FOR_SHARE_SQL = text(f"""
    SELECT {_AUCTION_COLUMNS} FROM auctions WHERE id = :auction_id FOR SHARE
""")

_LIST_AUCTIONS_SQL = text(f"""
    SELECT {_AUCTION_COLUMNS}
    FROM auctions
    WHERE CAST(:status AS TEXT) IS NULL OR status = CAST(:status AS TEXT)
    ORDER BY created_at DESC, id DESC
""")

_UPDATE_AUCTION_SQL = text(f"""
    UPDATE auctions
    SET name = COALESCE(CAST(:name AS TEXT), name),
        description = COALESCE(CAST(:description AS TEXT), description),
        max_budget_per_bidder = COALESCE(CAST(:max_budget AS BIGINT), max_budget_per_bidder)
    WHERE id = :auction_id
    RETURNING {_AUCTION_COLUMNS}
""")

_DELETE_AUCTION_SQL = text("DELETE FROM auctions WHERE id = :auction_id RETURNING id")

# Status-guarded write: zero rows means the status moved under us.
_TRANSITION_SQL = text(f"""
    UPDATE auctions
    SET status = CAST(:new_status AS TEXT),
        slug = COALESCE(CAST(:new_slug AS TEXT), slug),
        closed_at = CASE
            WHEN CAST(:new_status AS TEXT) = 'closed' THEN NOW()
            WHEN CAST(:new_status AS TEXT) = 'draft' THEN NULL
            ELSE closed_at
        END
    WHERE id = :auction_id AND status = CAST(:expected_status AS TEXT)
    RETURNING {_AUCTION_COLUMNS}
""")

# ---------------------------------------------------------------------------
# SQL: collections
# ---------------------------------------------------------------------------

_COLLECTION_COLUMNS = "id, auction_id, name, description, sort_order, created_at"

_INSERT_COLLECTION_SQL = text(f"""
    INSERT INTO collections (auction_id, name, description, sort_order)
    VALUES (
        :auction_id, :name, :description,
        COALESCE(
            CAST(:sort_order AS INT),
            (SELECT COALESCE(MAX(sort_order) + 1, 0) FROM collections
             WHERE auction_id = :auction_id)
        )
    )
    RETURNING {_COLLECTION_COLUMNS}
""")

_GET_COLLECTION_SQL = text(f"""
    SELECT {_COLLECTION_COLUMNS} FROM collections WHERE id = :collection_id
""")

_LIST_COLLECTIONS_SQL = text(f"""
    SELECT {_COLLECTION_COLUMNS}
    FROM collections
    WHERE auction_id = :auction_id
    ORDER BY sort_order, created_at
""")

_DELETE_COLLECTION_SQL = text(
    "DELETE FROM collections WHERE id = :collection_id RETURNING id"
)

# ---------------------------------------------------------------------------
# SQL: items (always joined to their collection for auction_id / name)
# ---------------------------------------------------------------------------

_ITEM_COLUMNS = """
    i.id, i.collection_id, c.auction_id, i.name, i.description,
    i.starting_bid, i.inventory, i.sort_order, c.name AS collection_name, i.created_at
"""

_INSERT_ITEM_SQL = text(f"""
    WITH i AS (
        INSERT INTO items (collection_id, name, description, starting_bid, inventory, sort_order)
        VALUES (
            :collection_id, :name, :description, :starting_bid, :inventory,
            (SELECT COALESCE(MAX(sort_order) + 1, 0) FROM items
             WHERE collection_id = :collection_id)
        )
        RETURNING *
    )
    SELECT {_ITEM_COLUMNS}
    FROM i JOIN collections c ON c.id = i.collection_id
""")

_GET_ITEM_SQL = text(f"""
    SELECT {_ITEM_COLUMNS}
    FROM items i JOIN collections c ON c.id = i.collection_id
    WHERE i.id = :item_id
""")

_LIST_ITEMS_SQL = text(f"""
    SELECT {_ITEM_COLUMNS}
    FROM items i JOIN collections c ON c.id = i.collection_id
    WHERE c.auction_id = :auction_id
    ORDER BY c.sort_order, c.created_at, i.sort_order, i.created_at
""")

_UPDATE_ITEM_SQL = text(f"""
    WITH i AS (
        UPDATE items
        SET name = COALESCE(CAST(:name AS TEXT), name),
            description = COALESCE(CAST(:description AS TEXT), description),
            starting_bid = COALESCE(CAST(:starting_bid AS BIGINT), starting_bid),
            inventory = COALESCE(CAST(:inventory AS INT), inventory),
            sort_order = COALESCE(CAST(:sort_order AS INT), sort_order)
        WHERE id = :item_id
        RETURNING *
    )
    SELECT {_ITEM_COLUMNS}
    FROM i JOIN collections c ON c.id = i.collection_id
""")

_DELETE_ITEM_SQL = text("DELETE FROM items WHERE id = :item_id RETURNING id")

# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _row_to_auction(row: Any) -> Auction:
    return Auction(
        id=row.id,
        name=row.name,
        description=row.description,
        status=row.status,
        max_budget_per_bidder=row.max_budget_per_bidder,
        slug=row.slug,
        created_at=row.created_at,
        updated_at=row.updated_at,
        closed_at=row.closed_at,
    )


def _row_to_collection(row: Any) -> Collection:
    return Collection(
        id=row.id,
        auction_id=row.auction_id,
        name=row.name,
        description=row.description,
        sort_order=row.sort_order,
        created_at=row.created_at,
    )


def _row_to_item(row: Any) -> Item:
    return Item(
        id=row.id,
        collection_id=row.collection_id,
        auction_id=row.auction_id,
        name=row.name,
        description=row.description,
        starting_bid=row.starting_bid,
        inventory=row.inventory,
        sort_order=row.sort_order,
        collection_name=row.collection_name,
        created_at=row.created_at,
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class AuctionRepository:
    """Concrete repository for auctions, collections and items."""

    # --- auctions ---

    async def create_auction(
        self,
        db: AsyncSession,
        name: str,
        description: str | None,
        max_budget_per_bidder: int,
    ) -> Auction:
        result = await db.execute(
            _INSERT_AUCTION_SQL,
            {
                "name": name,
                "description": description,
                "max_budget_per_bidder": max_budget_per_bidder,
            },
        )
        return _row_to_auction(result.fetchone())

    async def list_auctions(self, db: AsyncSession, status: str | None) -> list[Auction]:
        result = await db.execute(_LIST_AUCTIONS_SQL, {"status": status})
        return [_row_to_auction(row) for row in result.fetchall()]

    async def get_auction(self, db: AsyncSession, auction_id: str) -> Auction | None:
        result = await db.execute(_GET_AUCTION_SQL, {"auction_id": auction_id})
        row = result.fetchone()
        return _row_to_auction(row) if row else None

    async def get_auction_by_slug(self, db: AsyncSession, slug: str) -> Auction | None:
        result = await db.execute(_GET_AUCTION_BY_SLUG_SQL, {"slug": slug})
        row = result.fetchone()
        return _row_to_auction(row) if row else None

    async def get_auction_for_update(
        self, db: AsyncSession, auction_id: str
    ) -> Auction | None:
        result = await db.execute(_GET_AUCTION_FOR_UPDATE_SQL, {"auction_id": auction_id})
        row = result.fetchone()
        return _row_to_auction(row) if row else None

    async def get_auction_for_share(
        self, db: AsyncSession, auction_id: str
    ) -> Auction | None:
        result = await db.execute(_GET_AUCTION_FOR_SHARE_SQL, {"auction_id": auction_id})
        row = result.fetchone()
        return _row_to_auction(row) if row else None

    async def update_auction(
        self,
        db: AsyncSession,
        auction_id: str,
        name: str | None,
        description: str | None,
        max_budget_per_bidder: int | None,
    ) -> Auction | None:
        result = await db.execute(
            _UPDATE_AUCTION_SQL,
            {
                "auction_id": auction_id,
                "name": name,
                "description": description,
                "max_budget": max_budget_per_bidder,
            },
        )
        row = result.fetchone()
        return _row_to_auction(row) if row else None

    async def delete_auction(self, db: AsyncSession, auction_id: str) -> bool:
        result = await db.execute(_DELETE_AUCTION_SQL, {"auction_id": auction_id})
        return result.fetchone() is not None

    async def transition_status(
        self,
        db: AsyncSession,
        auction_id: str,
        expected_status: str,
        new_status: str,
        new_slug: str | None = None,
    ) -> Auction | None:
        result = await db.execute(
            _TRANSITION_SQL,
            {
                "auction_id": auction_id,
                "expected_status": expected_status,
                "new_status": new_status,
                "new_slug": new_slug,
            },
        )
        row = result.fetchone()
        return _row_to_auction(row) if row else None

    # --- collections ---

    async def create_collection(
        self,
        db: AsyncSession,
        auction_id: str,
        name: str,
        description: str | None,
        sort_order: int | None,
    ) -> Collection:
        result = await db.execute(
            _INSERT_COLLECTION_SQL,
            {
                "auction_id": auction_id,
                "name": name,
                "description": description,
                "sort_order": sort_order,
            },
        )
        return _row_to_collection(result.fetchone())

    async def get_collection(
        self, db: AsyncSession, collection_id: str
    ) -> Collection | None:
        result = await db.execute(_GET_COLLECTION_SQL, {"collection_id": collection_id})
        row = result.fetchone()
        return _row_to_collection(row) if row else None

    async def list_collections(self, db: AsyncSession, auction_id: str) -> list[Collection]:
        result = await db.execute(_LIST_COLLECTIONS_SQL, {"auction_id": auction_id})
        collections = [_row_to_collection(row) for row in result.fetchall()]

        # Attach items in one extra query instead of one per collection
        by_id = {c.id: c for c in collections}
        for item in await self.list_items(db, auction_id):
            by_id[item.collection_id].items.append(item)
        return collections

    async def delete_collection(self, db: AsyncSession, collection_id: str) -> bool:
        result = await db.execute(_DELETE_COLLECTION_SQL, {"collection_id": collection_id})
        return result.fetchone() is not None

    # --- items ---

    async def create_items(
        self, db: AsyncSession, collection_id: str, items: list[NewItem]
    ) -> list[Item]:
        created: list[Item] = []
        for new_item in items:
            result = await db.execute(
                _INSERT_ITEM_SQL,
                {
                    "collection_id": collection_id,
                    "name": new_item.name,
                    "description": new_item.description,
                    "starting_bid": new_item.starting_bid,
                    "inventory": new_item.inventory,
                },
            )
            created.append(_row_to_item(result.fetchone()))
        return created

    async def get_item(self, db: AsyncSession, item_id: str) -> Item | None:
        result = await db.execute(_GET_ITEM_SQL, {"item_id": item_id})
        row = result.fetchone()
        return _row_to_item(row) if row else None

    async def list_items(self, db: AsyncSession, auction_id: str) -> list[Item]:
        result = await db.execute(_LIST_ITEMS_SQL, {"auction_id": auction_id})
        return [_row_to_item(row) for row in result.fetchall()]

    async def update_item(
        self,
        db: AsyncSession,
        item_id: str,
        name: str | None,
        description: str | None,
        starting_bid: int | None,
        inventory: int | None,
        sort_order: int | None,
    ) -> Item | None:
        result = await db.execute(
            _UPDATE_ITEM_SQL,
            {
                "item_id": item_id,
                "name": name,
                "description": description,
                "starting_bid": starting_bid,
                "inventory": inventory,
                "sort_order": sort_order,
            },
        )
        row = result.fetchone()
        return _row_to_item(row) if row else None

    async def delete_item(self, db: AsyncSession, item_id: str) -> bool:
        result = await db.execute(_DELETE_ITEM_SQL, {"item_id": item_id})
        return result.fetchone() is not None
