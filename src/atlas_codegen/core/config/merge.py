# src/atlas_codegen/core/config/merge.py
"""
Deep-merge de settings de run com semântica de herança.

Política de merge:
    - dict → merge recursivo por chave
    - list → sobrescrita total (sem merge elemento a elemento)
    - escalar → sobrescrita direta
    - None no override → ausência: o valor da base é herdado
    - conflito de tipos → ConfigTypeConflictError com o caminho pontuado
      da chave (`containers.images.mysql`) e os dois valores

Ausência significa "herdar do nível anterior", nunca "usar valor zero".
É a mesma regra aplicada à cadeia de precedência do ConfigurationResolver.

Invariantes:
    - Nenhum input é mutado
    - A mesma entrada sempre produz a mesma saída
    - Conflitos estruturais interrompem o merge (nenhum resultado parcial)
"""

from copy import deepcopy
from typing import Any, Dict, Tuple

from .errors import ConfigTypeConflictError


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Sobrepõe `override` a `base` e retorna um novo dicionário.

    Raises:
        ConfigTypeConflictError: raiz não-dict ou tipos incompatíveis numa chave.
    """
    if not isinstance(base, dict) or not isinstance(override, dict):
        raise ConfigTypeConflictError(
            f"Deep-merge requer dicts no nível raiz, recebido: "
            f"{type(base).__name__} vs {type(override).__name__}"
        )
    return _merge(base, override, ())


def _merge(base: Dict[str, Any], override: Dict[str, Any], path: Tuple[str, ...]) -> Dict[str, Any]:
    result: Dict[str, Any] = deepcopy(base)

    for key, incoming in override.items():
        current = result.get(key)
        here = path + (str(key),)

        if incoming is None:
            result.setdefault(key, None)
        elif current is None:
            result[key] = deepcopy(incoming)
        elif isinstance(current, dict) and isinstance(incoming, dict):
            result[key] = _merge(current, incoming, here)
        elif _compatible(current, incoming):
            result[key] = deepcopy(incoming)
        else:
            raise ConfigTypeConflictError(
                f"Conflito de tipo em '{'.'.join(here)}': "
                f"{type(current).__name__} ({current!r}) vs "
                f"{type(incoming).__name__} ({incoming!r})",
                key=".".join(here),
            )

    return result


def _compatible(current: Any, incoming: Any) -> bool:
    # bool é subclasse de int; tratados como tipos distintos
    if isinstance(current, bool) or isinstance(incoming, bool):
        return isinstance(current, bool) and isinstance(incoming, bool)
    if isinstance(current, (int, float)) and isinstance(incoming, (int, float)):
        return True
    if isinstance(current, list) and isinstance(incoming, list):
        return True
    return type(current) is type(incoming)
