# tests/core/execution/test_naming.py
import pytest

from atlas_codegen.core.exceptions import InvalidTargetNameError
from atlas_codegen.core.execution.naming import (
    capitalize_first_letter,
    generate_unit_name,
    migrate_unit_name,
)


@pytest.mark.parametrize(
    "target, generate, migrate",
    [
        ("main", "generateMainDatabaseClasses", "migrateDatabaseSchema"),
        ("Main", "generateMainDatabaseClasses", "migrateDatabaseSchema"),
        ("reporting", "generateReportingDatabaseClasses", "migrateReportingDatabaseSchema"),
        ("myTarget", "generateMytargetDatabaseClasses", "migrateMytargetDatabaseSchema"),
    ],
)
def test_unit_names(target, generate, migrate):
    assert generate_unit_name(target) == generate
    assert migrate_unit_name(target) == migrate


def test_capitalize_first_letter():
    assert capitalize_first_letter("") == ""
    assert capitalize_first_letter("aBC") == "Abc"


@pytest.mark.parametrize("name", ["", "   ", None])
def test_blank_target_name_is_rejected(name):
    with pytest.raises(InvalidTargetNameError):
        generate_unit_name(name)
    with pytest.raises(InvalidTargetNameError):
        migrate_unit_name(name)
