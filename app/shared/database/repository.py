# -*- coding: utf-8 -*-
"""
backend/app/shared/database/repository.py

Repositorio base async sobre SQLAlchemy 2.

Los repositorios no abren transacciones: operan dentro de la unidad de
trabajo que el servicio abrió con `session.begin()`.

- update_where(): UPDATE condicionado que devuelve filas afectadas. Es la
  primitiva de los cambios de estado compare-and-set (0 = perdió la carrera).
- fetch_page(): ejecuta un SELECT ordenado con limit/offset.

Autor: Arena
Fecha: 2026-10-19
"""

from typing import Any, Generic, Optional, Sequence, Type, TypeVar

from sqlalchemy import Select, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

ModelT = TypeVar("ModelT")


class BaseRepository(Generic[ModelT]):
    def __init__(self, model: Type[ModelT]):
        self.model = model

    async def get(self, session: AsyncSession, obj_id: Any) -> Optional[ModelT]:
        return await session.get(self.model, obj_id)

    async def get_for_update(self, session: AsyncSession, obj_id: Any) -> Optional[ModelT]:
        """Lee la fila ignorando la identity map (estado fresco tras un UPDATE masivo)."""
        return await session.get(self.model, obj_id, populate_existing=True)

    async def create(self, session: AsyncSession, **values: Any) -> ModelT:
        obj = self.model(**values)
        session.add(obj)
        await session.flush()
        return obj

    async def count(self, session: AsyncSession, *criteria: Any) -> int:
        stmt = select(func.count()).select_from(self.model)
        if criteria:
            stmt = stmt.where(*criteria)
        return int((await session.execute(stmt)).scalar_one())

    async def update_where(self, session: AsyncSession, *criteria: Any, **values: Any) -> int:
        stmt = (
            update(self.model)
            .where(*criteria)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        return result.rowcount or 0

    async def fetch_page(
        self,
        session: AsyncSession,
        stmt: Select,
        *,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> Sequence[ModelT]:
        if limit is not None:
            stmt = stmt.limit(limit).offset(offset)
        result = await session.execute(stmt)
        return result.scalars().all()


__all__ = ["BaseRepository"]

# Fin del archivo backend/app/shared/database/repository.py
