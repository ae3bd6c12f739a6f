# -*- coding: utf-8 -*-
"""Errores de dominio del microservicio Products.

La capa de servicio (ProductCatalogStore) lanza estos errores y las capas de
transporte (dispatcher RPC y router HTTP) los traducen a códigos de estado:

- ValidationError  -> 400
- NotFoundError    -> 404
- PersistenceError -> 500
"""


class ProductsError(Exception):
    """Base de todos los errores del microservicio."""

    status_code = 500


class ValidationError(ProductsError):
    """Entrada mal formada (precio negativo, nombre vacío, página < 1...)."""

    status_code = 400


class NotFoundError(ProductsError):
    """No existe producto disponible con ese id.

    Cubre tanto "nunca existió" como "borrado lógicamente": para quien llama
    ambos casos son indistinguibles.
    """

    status_code = 404

    def __init__(self, product_id: int):
        self.product_id = product_id
        super().__init__(f"Product with id #{product_id} not found")


class PersistenceError(ProductsError):
    """Fallo originado en la base de datos (conexión, constraints, tabla...)."""

    status_code = 500
