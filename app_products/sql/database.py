# -*- coding: utf-8 -*-
"""Configuración de SQLAlchemy Async para Products.

Nota:
    - expire_on_commit=False evita que SQLAlchemy "expire" (invalide) atributos de objetos ORM
      tras hacer commit. El catálogo devuelve filas ya commiteadas a quien llama, y acceder a
      atributos expirados provocaría recargas implícitas (IO) que en async disparan
      MissingGreenlet.
    - La URL sale de SQLALCHEMY_DATABASE_URL (ver config.py).
"""

import logging

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from app_products.config import envs

logger = logging.getLogger(__name__)

Base = declarative_base()


def make_engine(url: str) -> AsyncEngine:
    """Crea un engine async. check_same_thread solo aplica a SQLite."""
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_async_engine(url, connect_args=connect_args, echo=False)


def make_session_factory(bind: AsyncEngine) -> sessionmaker:
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=bind,
        class_=AsyncSession,
        future=True,
        expire_on_commit=False,
    )


engine = make_engine(envs.database_url)
SessionLocal = make_session_factory(engine)


async def init_models(bind: AsyncEngine = engine):
    """Crea las tablas declaradas en Base (idempotente)."""
    # Importa los modelos para que queden registrados en Base.metadata
    from app_products.sql import models  # noqa: F401

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("[PRODUCTS] Tablas creadas/verificadas en %s", bind.url.render_as_string(hide_password=True))


async def dispose(bind: AsyncEngine = engine):
    """Cierra el pool de conexiones."""
    await bind.dispose()
    logger.info("[PRODUCTS] Conexiones de base de datos cerradas")
