"""
Base Repository for the Classifieds Marketplace

Generic async repository implementing CRUD operations against a
request-scoped session. Writes are flushed, never committed: the session
owner decides when the unit of work ends.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, Iterable, List, Optional, Type, TypeVar
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel


# Type variable for generic repository
ModelType = TypeVar("ModelType", bound=SQLModel)


class IReadRepository(ABC, Generic[ModelType]):
    """Interface for read operations."""

    @abstractmethod
    async def get_by_id(self, id: UUID) -> Optional[ModelType]:
        """Get a single record by ID."""
        pass

    @abstractmethod
    async def get_all(
        self,
        skip: int = 0,
        limit: int = 100
    ) -> List[ModelType]:
        """Get all records with pagination."""
        pass


class IWriteRepository(ABC, Generic[ModelType]):
    """Interface for write operations."""

    @abstractmethod
    async def save(self, obj: ModelType) -> ModelType:
        """Insert or update a record."""
        pass

    @abstractmethod
    async def update(self, id: UUID, data: Dict[str, Any]) -> Optional[ModelType]:
        """Update an existing record."""
        pass


class BaseRepository(
    IReadRepository[ModelType],
    IWriteRepository[ModelType],
    Generic[ModelType]
):
    """
    Generic async repository with CRUD operations.

    Args:
        model: The SQLModel class to operate on
        session: Async database session
    """

    def __init__(self, model: Type[ModelType], session: AsyncSession):
        self._model = model
        self._session = session

    @property
    def session(self) -> AsyncSession:
        """Get the current session."""
        return self._session

    async def get_by_id(self, id: UUID) -> Optional[ModelType]:
        """
        Get a single record by its primary key.

        Args:
            id: UUID primary key

        Returns:
            Model instance or None if not found
        """
        return await self._session.get(self._model, id)

    async def get_many(self, ids: Iterable[UUID]) -> Dict[UUID, ModelType]:
        """
        Get several records by primary key in one query.

        Returns:
            Mapping of id to model instance (missing ids are absent)
        """
        id_list = list({i for i in ids if i is not None})
        if not id_list:
            return {}
        stmt = select(self._model).where(self._model.id.in_(id_list))
        result = await self._session.execute(stmt)
        return {obj.id: obj for obj in result.scalars().all()}

    async def get_all(
        self,
        skip: int = 0,
        limit: int = 100
    ) -> List[ModelType]:
        """
        Get all records with pagination.

        Args:
            skip: Number of records to skip
            limit: Maximum records to return
        """
        stmt = select(self._model).offset(skip).limit(limit)
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def save(self, obj: ModelType) -> ModelType:
        """
        Add a new or modified instance and flush it.

        Args:
            obj: Model instance

        Returns:
            The refreshed instance
        """
        self._session.add(obj)
        await self._session.flush()
        await self._session.refresh(obj)
        return obj

    async def update(self, id: UUID, data: Dict[str, Any]) -> Optional[ModelType]:
        """
        Update an existing record.

        Args:
            id: UUID primary key
            data: Field values to set

        Returns:
            Updated model instance or None if not found
        """
        db_obj = await self.get_by_id(id)
        if not db_obj:
            return None

        for field, value in data.items():
            setattr(db_obj, field, value)

        return await self.save(db_obj)

    async def count(self) -> int:
        """Get total count of records."""
        stmt = select(func.count()).select_from(self._model)
        result = await self._session.execute(stmt)
        return result.scalar_one()
