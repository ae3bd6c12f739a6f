# -*- coding: utf-8 -*-
"""Punto de entrada del microservicio de productos (products)."""

import asyncio
import logging.config
import os
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from app_products.broker import products_broker_service
from app_products.broker.dispatcher import ProductCommandDispatcher
from app_products.config import envs
from app_products.routers import products_router
from app_products.services.product_service import get_store
from app_products.sql import database

logging.config.fileConfig(os.path.join(os.path.dirname(__file__), "logging.ini"), disable_existing_loggers=False)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Gestiona el ciclo de vida de la aplicación products.

    - Crea las tablas de base de datos.
    - Lanza el consumer RPC de patrones de mensaje (si BROKER_ENABLED).
    - Libera recursos al apagar (task del consumer + conexiones de BD).
    """
    task_commands = None
    try:
        logger.info("Starting up (version=%s)", envs.app_version)

        logger.info("[PRODUCTS] 🗄️ Creando tablas de base de datos")
        await database.init_models()

        if envs.broker_enabled:
            logger.info("🚀 Lanzando task del consumer RPC de productos...")
            dispatcher = ProductCommandDispatcher(get_store())
            task_commands = asyncio.create_task(products_broker_service.consume_product_commands(dispatcher))
        else:
            logger.info("[PRODUCTS] BROKER_ENABLED=false: solo front HTTP")

        yield

    finally:
        if task_commands is not None:
            logger.info("Shutting down rabbitmq")
            task_commands.cancel()
            try:
                await task_commands
            except asyncio.CancelledError:
                pass
        logger.info("Shutting down database")
        await database.dispose()


app = FastAPI(
    redoc_url=None,
    version=envs.app_version,
    servers=[{"url": "/", "description": "Development"}],
    license_info={
        "name": "MIT License",
        "url": "https://choosealicense.com/licenses/mit/",
    },
    lifespan=lifespan,
)

app.include_router(products_router.router)


def run():
    """Arranca Uvicorn en el puerto SERVICE_PORT."""
    uvicorn.run(
        "app_products.main:app",
        host="0.0.0.0",
        port=envs.port,
    )


if __name__ == "__main__":
    run()
