# -*- coding: utf-8 -*-
"""Servicio RPC de productos sobre RabbitMQ.

Este módulo define las corrutinas que se conectan a RabbitMQ, declaran la
cola de comandos y atienden los patrones de mensaje del catálogo
(create_product, find_all_products, find_one_product, update_product,
remove_product).

Formato del mensaje de entrada (JSON):
    {"pattern": {"cmd": "find_one_product"}, "data": {"id": 1}, "id": "req-1"}

La respuesta se publica en `reply_to` (exchange por defecto) con el mismo
`correlation_id`. Si el mensaje no trae reply_to se procesa igualmente
(evento sin respuesta).
"""

import asyncio
import json
import logging
from functools import partial

from aio_pika import Message

from app_products.broker.dispatcher import ProductCommandDispatcher, error_reply
from app_products.broker.rabbitmq_core import declare_products_queue, get_channel

logger = logging.getLogger(__name__)


async def consume_product_commands(dispatcher: ProductCommandDispatcher):
    """Consume comandos de productos desde RabbitMQ.

    Esta corrutina:
    - Abre conexión y canal contra RabbitMQ (via `get_channel`).
    - Declara la cola durable de comandos.
    - Asocia la cola con `handle_product_command`.
    - Se queda bloqueada escuchando hasta que la cancelen (shutdown de la app).
    """
    connection = None
    try:
        logger.info("[PRODUCTS] 🔄 Iniciando consume_product_commands...")
        connection, channel = await get_channel()

        queue = await declare_products_queue(channel)
        await queue.consume(
            partial(handle_product_command, dispatcher=dispatcher, exchange=channel.default_exchange)
        )

        logger.info("[PRODUCTS] 🟢 Escuchando patrones %s en %s", dispatcher.patterns, queue.name)

        # Mantener la corrutina viva
        await asyncio.Future()

    except asyncio.CancelledError:
        logger.info("[PRODUCTS] Consumer de comandos detenido")
        raise
    except Exception as exc:  # noqa: BLE001
        logger.error("[PRODUCTS] ❌ Error en consume_product_commands: %s", exc, exc_info=True)
    finally:
        if connection:
            await connection.close()


async def handle_product_command(message, dispatcher: ProductCommandDispatcher, exchange):
    """Procesa un comando y publica la respuesta.

    El ack lo gestiona `message.process()`. Los errores de negocio viajan en
    la respuesta (`err`), nunca como nack.
    """
    async with message.process():
        request_id = None
        try:
            body = json.loads(message.body)
        except ValueError as exc:
            reply = error_reply(400, "ValidationError", f"Invalid JSON body: {exc}")
        else:
            if isinstance(body, dict):
                request_id = body.get("id")
                reply = await dispatcher.dispatch(body.get("pattern"), body.get("data"))
            else:
                reply = error_reply(400, "ValidationError", "Message body must be a JSON object")

        reply["id"] = request_id
        await publish_reply(exchange, message, reply)


async def publish_reply(exchange, request, reply: dict):
    """Publica `reply` en la cola `reply_to` del mensaje original."""
    if not request.reply_to:
        logger.debug("[PRODUCTS][RPC] Mensaje sin reply_to; respuesta descartada")
        return

    try:
        msg = Message(
            body=json.dumps(reply).encode(),
            content_type="application/json",
            correlation_id=request.correlation_id,
        )
        await exchange.publish(message=msg, routing_key=request.reply_to)
    except Exception as exc:  # noqa: BLE001
        logger.error("[PRODUCTS] ❌ Error publicando respuesta en %s: %s", request.reply_to, exc, exc_info=True)
