# tests/core/model/test_claim_set.py
"""
Testes do ClaimSet observável.

Os testes asseguram que:
- toda mutação notifica observers de forma síncrona, com snapshot imutável
- nomes são únicos e mantêm a ordem da primeira declaração
- entradas None são descartadas
- observer inscrito após configuração recebe o snapshot atual
- mutação rejeitada por um observer é desfeita
"""

import pytest

from atlas_codegen.core.model.declarations import ClaimSet


def test_mutations_notify_with_snapshot():
    seen = []
    claims = ClaimSet()
    claims.subscribe(seen.append)

    claims.set(["main", "audit"])
    claims.add("reporting", "main")
    claims.remove("audit")
    claims.clear()

    assert seen == [
        ("main", "audit"),
        ("main", "audit", "reporting"),
        ("main", "reporting"),
        (),
    ]


def test_unconfigured_set_does_not_notify_on_subscribe():
    seen = []
    ClaimSet().subscribe(seen.append)
    assert seen == []


def test_late_subscriber_gets_current_snapshot():
    claims = ClaimSet(["main", None, "main"])
    seen = []
    claims.subscribe(seen.append)
    assert seen == [("main",)]


def test_container_protocol():
    claims = ClaimSet(["a", "b"])
    assert "a" in claims
    assert list(claims) == ["a", "b"]
    assert len(claims) == 2


def test_rejected_mutation_is_rolled_back():
    def reject_extra(names):
        if "extra" in names:
            raise ValueError("rejected")

    claims = ClaimSet()
    claims.subscribe(reject_extra)
    claims.set(["main"])

    with pytest.raises(ValueError):
        claims.add("extra")

    assert claims.snapshot() == ("main",)


def test_rejected_first_mutation_leaves_set_unconfigured():
    def reject_all(names):
        raise ValueError("rejected")

    claims = ClaimSet()
    claims.subscribe(reject_all)

    with pytest.raises(ValueError):
        claims.set(["main"])

    assert claims.configured is False
    assert len(claims) == 0
