# -*- coding: utf-8 -*-
"""Conexión con RabbitMQ (aio_pika) para Products.

Products solo necesita:
- una conexión robusta (se reconecta sola) y un canal,
- la cola durable de comandos RPC, con prefetch para no acaparar mensajes.
"""

import logging
from typing import Tuple

import aio_pika
from aio_pika.abc import AbstractChannel, AbstractQueue, AbstractRobustConnection

from app_products.config import envs

logger = logging.getLogger(__name__)

PREFETCH_COUNT = 10


async def get_channel(url: str = None) -> Tuple[AbstractRobustConnection, AbstractChannel]:
    """Abre conexión + canal contra el broker."""
    connection = await aio_pika.connect_robust(url or envs.rabbitmq_url)
    channel = await connection.channel()
    await channel.set_qos(prefetch_count=PREFETCH_COUNT)
    return connection, channel


async def declare_products_queue(channel: AbstractChannel, name: str = None) -> AbstractQueue:
    """Declara (idempotente) la cola de comandos de productos."""
    queue = await channel.declare_queue(name or envs.products_queue, durable=True)
    logger.info("[PRODUCTS] Cola RPC declarada: %s", queue.name)
    return queue
