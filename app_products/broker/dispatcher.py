# -*- coding: utf-8 -*-
"""Enrutado de patrones de mensaje (`{"cmd": ...}`) hacia el catálogo.

El dispatcher no sabe nada de RabbitMQ: recibe (pattern, data), valida el
payload con los esquemas Pydantic, llama a ProductCatalogStore y devuelve un
sobre de respuesta listo para serializar a JSON:

- éxito: {"response": <resultado>, "isDisposed": True}
- error: {"err": {"status": 400|404|500, "error": <tipo>, "message": <texto>}, "isDisposed": True}
"""

import logging
from typing import Any, Awaitable, Callable, Dict, Optional

from pydantic import ValidationError as PayloadError

from app_products.errors import ProductsError
from app_products.services.product_service import ProductCatalogStore
from app_products.sql import schemas

logger = logging.getLogger(__name__)

CREATE_PRODUCT = "create_product"
FIND_ALL_PRODUCTS = "find_all_products"
FIND_ONE_PRODUCT = "find_one_product"
UPDATE_PRODUCT = "update_product"
REMOVE_PRODUCT = "remove_product"


class UnknownPatternError(ProductsError):
    """No hay handler registrado para el patrón recibido."""

    status_code = 404


def pattern_name(pattern: Any) -> Optional[str]:
    """Extrae el nombre del comando: acepta {"cmd": "x"} o directamente "x"."""
    if isinstance(pattern, dict):
        pattern = pattern.get("cmd")
    return pattern if isinstance(pattern, str) else None


def error_reply(status: int, error: str, message: str) -> dict:
    return {"err": {"status": status, "error": error, "message": message}, "isDisposed": True}


def _product_json(product) -> dict:
    return schemas.ProductOut.model_validate(product).model_dump(mode="json", by_alias=True)


def _id_payload(data: Any) -> schemas.ProductId:
    # find_one/remove aceptan {"id": 1} o el id "pelado"
    if isinstance(data, (int, str)) and not isinstance(data, bool):
        data = {"id": data}
    return schemas.ProductId.model_validate(data)


class ProductCommandDispatcher:
    """Tabla cmd -> handler sobre un ProductCatalogStore."""

    def __init__(self, store: ProductCatalogStore):
        self._store = store
        self._handlers: Dict[str, Callable[[Any], Awaitable[Any]]] = {
            CREATE_PRODUCT: self._create,
            FIND_ALL_PRODUCTS: self._find_all,
            FIND_ONE_PRODUCT: self._find_one,
            UPDATE_PRODUCT: self._update,
            REMOVE_PRODUCT: self._remove,
        }

    @property
    def patterns(self):
        return sorted(self._handlers)

    async def dispatch(self, pattern: Any, data: Any = None) -> dict:
        """Ejecuta el comando y devuelve el sobre de respuesta (nunca lanza ProductsError)."""
        cmd = pattern_name(pattern)
        try:
            handler = self._handlers.get(cmd)
            if handler is None:
                raise UnknownPatternError(f"There is no matching message handler defined for {pattern!r}")
            result = await handler(data)

        except PayloadError as exc:
            logger.warning("[PRODUCTS][RPC] Payload inválido en %s: %s", cmd, exc)
            return error_reply(400, "ValidationError", str(exc))

        except ProductsError as exc:
            if exc.status_code >= 500:
                logger.exception("[PRODUCTS][RPC] ❌ Error procesando %s", cmd)
            else:
                logger.warning("[PRODUCTS][RPC] %s -> %s: %s", cmd, type(exc).__name__, exc)
            return error_reply(exc.status_code, type(exc).__name__, str(exc))

        logger.debug("[PRODUCTS][RPC] %s OK", cmd)
        return {"response": result, "isDisposed": True}

    # ----------------------------- handlers -------------------------------------------------------

    async def _create(self, data):
        payload = schemas.CreateProduct.model_validate(data)
        return _product_json(await self._store.create(payload))

    async def _find_all(self, data):
        pagination = schemas.Pagination.model_validate(data or {})
        page = await self._store.find_all(page=pagination.page, limit=pagination.limit)
        return schemas.ProductPage.model_validate(page).model_dump(mode="json", by_alias=True)

    async def _find_one(self, data):
        payload = _id_payload(data)
        return _product_json(await self._store.find_one(payload.id))

    async def _update(self, data):
        payload = schemas.UpdateProduct.model_validate(data)
        return _product_json(await self._store.update(payload.id, payload))

    async def _remove(self, data):
        payload = _id_payload(data)
        return _product_json(await self._store.remove(payload.id))
