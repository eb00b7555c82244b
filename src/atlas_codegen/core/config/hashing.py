# src/atlas_codegen/core/config/hashing.py
"""
Hashing canônico do Atlas Codegen.

Este módulo implementa duas identidades determinísticas:

    - `compute_config_hash`: identidade dos settings efetivos da run
      (JSON canônico + SHA-256), registrada no RunContext.
    - `compute_cache_key`: chave de cache de uma unidade de trabalho,
      combinando o fingerprint da configuração efetiva com o estado atual
      das locations de migração resolvidas.

Princípios fundamentais:
    - Hashing determinístico e reprodutível entre processos
    - Algoritmo criptográfico estável (SHA-256)
    - Locations inexistentes participam do hash (arquivos *futuros*
      também invalidam o cache)

Invariantes:
    - O valor gerado é sempre uma string hexadecimal de 64 caracteres
    - Nenhuma mutação ocorre sobre os inputs
"""

import hashlib
import json
import os
from pathlib import Path
from typing import Any, Dict, Iterable, Union


PathLike = Union[str, "os.PathLike[str]"]

_CHUNK_SIZE = 1024 * 64


def compute_config_hash(config: Dict[str, Any]) -> str:
    """
    Gera um hash determinístico dos settings efetivos da run.

    Política de hashing (v1):
        - Serialização JSON canônica (chaves ordenadas, separadores compactos)
        - Codificação UTF-8
        - Algoritmo SHA-256

    Args:
        config (Dict[str, Any]): Settings efetivos da run.

    Returns:
        str: Hash SHA-256 hexadecimal da configuração.

    Raises:
        TypeError: Se o objeto fornecido não for um dicionário.
    """

    if not isinstance(config, dict):
        raise TypeError(
            f"Config para hashing deve ser dict, recebido: {type(config).__name__}"
        )

    canonical_json = json.dumps(
        config,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        default=str,
    )

    return hashlib.sha256(canonical_json.encode("utf-8")).hexdigest()


def compute_cache_key(fingerprint: str, locations: Iterable[PathLike]) -> str:
    """
    Gera a chave de cache de uma unidade de trabalho.

    O digest cobre o fingerprint e, para cada location na ordem recebida,
    o caminho e o estado do conteúdo:
        - location inexistente → marcador `missing`
        - arquivo (inclusive .jar/.zip) → digest dos bytes
        - diretório → listagem relativa ordenada com digest por arquivo

    Args:
        fingerprint (str): Fingerprint da configuração efetiva.
        locations (Iterable[PathLike]): Locations resolvidas.

    Returns:
        str: Hash SHA-256 hexadecimal.
    """
    digest = hashlib.sha256()
    digest.update(fingerprint.encode("utf-8"))

    for location in locations:
        path = Path(os.fspath(location))
        digest.update(b"\x00location:")
        digest.update(str(path).encode("utf-8"))
        if not path.exists():
            digest.update(b":missing")
        elif path.is_file():
            digest.update(b":file:")
            digest.update(_file_digest(path).encode("ascii"))
        else:
            digest.update(b":dir")
            for child in sorted(p for p in path.rglob("*") if p.is_file()):
                digest.update(b"\x00")
                digest.update(child.relative_to(path).as_posix().encode("utf-8"))
                digest.update(b"=")
                digest.update(_file_digest(child).encode("ascii"))

    return digest.hexdigest()


def _file_digest(path: Path) -> str:
    h = hashlib.sha256()
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(_CHUNK_SIZE), b""):
            h.update(chunk)
    return h.hexdigest()
