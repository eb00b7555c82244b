# src/atlas_codegen/core/execution/provisioning.py
"""
Catálogo de provisionamento de databases temporários.

Mapeia a classe de driver JDBC para o sabor de database e a imagem de
container usada para subir a instância temporária.

    org.postgresql.Driver                        → postgresql (postgres:17-alpine)
    com.mysql.cj.jdbc.Driver, com.mysql.jdbc.Driver → mysql (mysql:8.4)

Precedência da imagem: override explícito → imagem configurada
(`containers.images.<sabor>`) → default embutido.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

from atlas_codegen.core.exceptions import UnsupportedDriverError


@dataclass(frozen=True)
class DatabaseFlavor:
    name: str
    drivers: Tuple[str, ...]
    default_image: str

    def supports(self, driver_class_name: str) -> bool:
        return driver_class_name in self.drivers


POSTGRESQL = DatabaseFlavor(
    name="postgresql",
    drivers=("org.postgresql.Driver",),
    default_image="postgres:17-alpine",
)

MYSQL = DatabaseFlavor(
    name="mysql",
    drivers=("com.mysql.cj.jdbc.Driver", "com.mysql.jdbc.Driver"),
    default_image="mysql:8.4",
)

FLAVORS: Tuple[DatabaseFlavor, ...] = (POSTGRESQL, MYSQL)


def flavor_for_driver(driver_class_name: str) -> DatabaseFlavor:
    driver = (driver_class_name or "").strip()
    for flavor in FLAVORS:
        if flavor.supports(driver):
            return flavor
    raise UnsupportedDriverError(
        message=f"Driver '{driver}' is not yet supported",
        details={
            "driver": driver,
            "supported": [d for f in FLAVORS for d in f.drivers],
        },
        hint="Use um driver suportado ou declare outro database.",
    )


def determine_container_image(
    driver_class_name: str,
    *,
    override: Optional[str] = None,
    images: Optional[Mapping[str, str]] = None,
) -> str:
    """Imagem de container para o driver; UnsupportedDriverError se não reconhecido."""
    flavor = flavor_for_driver(driver_class_name)
    for candidate in (override, (images or {}).get(flavor.name), flavor.default_image):
        if candidate is not None and candidate.strip():
            return candidate.strip()
    return flavor.default_image
