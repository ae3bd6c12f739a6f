# -*- coding: utf-8 -*-
"""Definición de rutas HTTP del microservicio Products.

El canal principal son los patrones de mensaje (RabbitMQ). Estos endpoints
exponen el mismo catálogo por HTTP, útil para depurar y para clientes que no
hablan AMQP.

El router debe mantenerse fino:
- validar entrada (Pydantic)
- llamar a ProductCatalogStore
- traducir errores a HTTP (404 / 400 / 500)
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app_products.errors import NotFoundError, PersistenceError, ValidationError
from app_products.services.product_service import ProductCatalogStore, get_store
from app_products.sql import schemas

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/products")


def _to_http(exc: Exception) -> HTTPException:
    """Traduce un error del catálogo a HTTPException."""
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, ValidationError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    logger.error("[PRODUCTS] Error de persistencia: %s", exc)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error")


@router.get(
    "/health",
    summary="Health check endpoint",
    response_model=schemas.Message,
)
async def health_check():
    """Healthcheck básico."""
    logger.debug("GET '/products/health' endpoint called.")
    return {"detail": "OK"}


#region /products
@router.post(
    "",
    summary="Crea un producto",
    status_code=status.HTTP_201_CREATED,
    response_model=schemas.ProductOut,
)
async def create_product(
    product_in: schemas.CreateProduct,
    store: ProductCatalogStore = Depends(get_store),
):
    try:
        return await store.create(product_in)
    except PersistenceError as exc:
        raise _to_http(exc) from exc


@router.get(
    "",
    summary="Lista paginada de productos disponibles",
    response_model=schemas.ProductPage,
)
async def find_all_products(
    page: int = Query(default=1, gt=0),
    limit: int = Query(default=10, gt=0),
    store: ProductCatalogStore = Depends(get_store),
):
    """Devuelve {data, meta: {page, total, lastPage}}. Páginas fuera de rango -> data vacía."""
    try:
        return await store.find_all(page=page, limit=limit)
    except (ValidationError, PersistenceError) as exc:
        raise _to_http(exc) from exc


#region /products/{product_id}
@router.get(
    "/{product_id}",
    summary="Obtiene un producto disponible por id",
    response_model=schemas.ProductOut,
)
async def find_one_product(
    product_id: int,
    store: ProductCatalogStore = Depends(get_store),
):
    try:
        return await store.find_one(product_id)
    except (NotFoundError, PersistenceError) as exc:
        raise _to_http(exc) from exc


@router.patch(
    "/{product_id}",
    summary="Modifica parcialmente un producto disponible",
    response_model=schemas.ProductOut,
)
async def update_product(
    product_id: int,
    patch: schemas.ProductPatch,
    store: ProductCatalogStore = Depends(get_store),
):
    """Solo cambian los campos enviados; updated_at se refresca siempre."""
    try:
        return await store.update(product_id, patch)
    except (NotFoundError, ValidationError, PersistenceError) as exc:
        raise _to_http(exc) from exc


@router.delete(
    "/{product_id}",
    summary="Borrado lógico de un producto (available=false)",
    response_model=schemas.ProductOut,
)
async def remove_product(
    product_id: int,
    store: ProductCatalogStore = Depends(get_store),
):
    """No elimina la fila: la marca como no disponible. Un segundo DELETE da 404."""
    try:
        return await store.remove(product_id)
    except (NotFoundError, PersistenceError) as exc:
        raise _to_http(exc) from exc
