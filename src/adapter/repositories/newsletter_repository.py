from typing import Iterable, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import delete, func, or_, update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.newsletter_repository import INewsletterRepository
from src.domain.entities import Newsletter


class NewsletterRepository(INewsletterRepository):
    """Newsletter repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, team_id: UUID, newsletter_id: UUID) -> Optional[Newsletter]:
        stmt = select(Newsletter).where(
            Newsletter.id == newsletter_id, Newsletter.team_id == team_id
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_by_team(
        self,
        team_id: UUID,
        project_id: Optional[UUID] = None,
        tag: Optional[str] = None,
        search: Optional[str] = None,
        offset: int = 0,
        limit: int = 20,
    ) -> Tuple[List[Newsletter], int]:
        conditions = [Newsletter.team_id == team_id]
        if project_id is not None:
            conditions.append(Newsletter.project_id == project_id)
        if search:
            pattern = f"%{search.lower()}%"
            conditions.append(
                or_(
                    func.lower(Newsletter.title).like(pattern),
                    func.lower(Newsletter.summary).like(pattern),
                )
            )
        order = (Newsletter.is_pinned.desc(), Newsletter.created_at.desc())

        if tag:
            # Tags live in a JSON column, so the tag match runs over the filtered rows
            stmt = select(Newsletter).where(*conditions).order_by(*order)
            result = await self.session.execute(stmt)
            tagged = [item for item in result.scalars().all() if tag in (item.tags or [])]
            return tagged[offset : offset + limit], len(tagged)

        count_stmt = select(func.count()).select_from(Newsletter).where(*conditions)
        total = (await self.session.execute(count_stmt)).scalar_one()

        stmt = select(Newsletter).where(*conditions).order_by(*order).offset(offset).limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total

    async def create(self, newsletter: Newsletter) -> Newsletter:
        self.session.add(newsletter)
        await self.session.flush()
        await self.session.refresh(newsletter)
        return newsletter

    async def update(self, newsletter: Newsletter) -> Newsletter:
        self.session.add(newsletter)
        await self.session.flush()
        await self.session.refresh(newsletter)
        return newsletter

    async def delete(self, newsletter: Newsletter) -> None:
        await self.session.delete(newsletter)
        await self.session.flush()

    async def detach_from_projects(self, project_ids: Iterable[UUID]) -> int:
        ids = list(project_ids)
        if not ids:
            return 0
        result = await self.session.execute(
            update(Newsletter).where(Newsletter.project_id.in_(ids)).values(project_id=None)
        )
        return result.rowcount

    async def delete_by_team(self, team_id: UUID) -> int:
        result = await self.session.execute(
            delete(Newsletter).where(Newsletter.team_id == team_id)
        )
        return result.rowcount
