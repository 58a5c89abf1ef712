import logging

import pytest

from sqlcatalog.core.catalog import Catalog
from sqlcatalog.core.errors import AlreadyExistsError, NotFoundError
from sqlcatalog.core.operations import (
    CreateMode,
    copy_catalog,
    create_function,
    create_procedure,
    create_table,
    create_tvf,
    delete_function,
    delete_procedure,
    delete_table,
    delete_tvf,
    resource_paths,
)
from sqlcatalog.core.resources import (
    Column,
    Function,
    FunctionSignature,
    Procedure,
    Table,
    TableValuedFunction,
)
from sqlcatalog.core.sqltypes import simple


def _sample_table(kind: str = "STRING", name: str = "sample") -> Table:
    return Table(name, [Column("column", simple(kind))])


def _sample_catalog(name: str) -> Catalog:
    catalog = Catalog(name)
    create_table(catalog, "sample", _sample_table())
    return catalog


@pytest.fixture
def catalog() -> Catalog:
    root = _sample_catalog("catalog")
    root.add_catalog(_sample_catalog("nested"))
    return root


def _function(name: str = "qualified.newFunction", group: str = "UDF") -> Function:
    return Function(
        name_path=(name,),
        group=group,
        signatures=[FunctionSignature(return_type=simple("STRING"))],
    )


def _procedure(name: str = "qualified.newProcedure") -> Procedure:
    return Procedure(name_path=(name,))


def _tvf(name: str = "qualified.newTVF") -> TableValuedFunction:
    return TableValuedFunction.value_table_based(name, FunctionSignature(), simple("STRING"))


def test_resource_paths():
    assert resource_paths("sample") == [["sample"]]
    assert resource_paths("a.b.c") == [["a.b.c"], ["a", "b", "c"]]
    assert resource_paths("a..c") == [["a..c"]]


def test_create_table_in_catalog(catalog: Catalog):
    table = Table("newTable", [Column("column", simple("STRING"))], full_name="qualified.newTable")

    create_table(catalog, table.full_name, table)

    assert catalog.find_table(["qualified.newTable"]) is table
    assert catalog.find_table(["qualified", "newTable"]) is table


def test_delete_table_from_catalog(catalog: Catalog):
    delete_table(catalog, "sample")

    with pytest.raises(NotFoundError):
        catalog.find_table(["sample"])
    # the nested catalog has its own table
    assert catalog.find_table(["nested", "sample"]).name == "sample"


def test_table_already_exists(catalog: Catalog):
    original = catalog.find_table(["sample"])

    with pytest.raises(AlreadyExistsError) as excinfo:
        create_table(catalog, "sample", _sample_table("INT64"), CreateMode.CREATE_DEFAULT)

    assert excinfo.value.name == "sample"
    assert catalog.find_table(["sample"]) is original


def test_replace_table(catalog: Catalog):
    create_table(catalog, "sample", _sample_table("INT64"), CreateMode.CREATE_OR_REPLACE)

    found = catalog.find_table(["sample"])
    assert found.column(0).type == simple("INT64")


def test_replace_into_empty_catalog():
    root = Catalog("root")

    create_table(root, "sample", _sample_table("STRING"), CreateMode.CREATE_DEFAULT)
    create_table(root, "sample", _sample_table("INT64"), CreateMode.CREATE_OR_REPLACE)

    assert root.find_table(["sample"]).column(0).type == simple("INT64")


def test_create_or_replace_when_absent_creates():
    root = Catalog("root")
    table = _sample_table()

    stored = create_table(root, "fresh", table, CreateMode.CREATE_OR_REPLACE)

    assert stored is table
    assert root.find_table("fresh") is table


def test_create_table_if_not_exists_existing_table(catalog: Catalog):
    original = catalog.find_table(["sample"])

    stored = create_table(
        catalog, "sample", _sample_table("INT64"), CreateMode.CREATE_IF_NOT_EXISTS
    )

    assert stored is original
    assert catalog.find_table(["sample"]) is original


def test_create_table_if_not_exists_new_table(catalog: Catalog):
    table = _sample_table("INT64", name="newTable")

    create_table(catalog, "newTable", table, CreateMode.CREATE_IF_NOT_EXISTS)

    assert catalog.find_table(["newTable"]) is table


def test_failed_create_leaves_nested_catalogs_untouched(catalog: Catalog):
    create_table(catalog, "a.b", _sample_table())

    with pytest.raises(AlreadyExistsError):
        create_table(catalog, "a.b", _sample_table("INT64"))

    assert catalog.find_table(["a", "b"]).column(0).type == simple("STRING")
    assert set(catalog.catalogs) == {"nested", "a"}


def test_create_function_in_catalog(catalog: Catalog):
    function = _function()

    create_function(catalog, "qualified.newFunction", function)

    assert catalog.get_function_by_full_name("UDF:qualified.newFunction") is function
    assert catalog.find_function(["qualified", "newFunction"]) is function


def test_functions_in_different_groups_are_distinct(catalog: Catalog):
    udf = _function(group="UDF")
    builtin = _function(group="ZetaSQL")

    create_function(catalog, "qualified.newFunction", udf)
    create_function(catalog, "qualified.newFunction", builtin)

    assert catalog.find_function("qualified.newFunction") is udf
    assert catalog.find_function("qualified.newFunction", group="ZetaSQL") is builtin


def test_delete_function_from_catalog(catalog: Catalog):
    create_function(catalog, "qualified.newFunction", _function())

    delete_function(catalog, "qualified.newFunction")

    assert catalog.get_function_by_full_name("UDF:qualified.newFunction") is None
    with pytest.raises(NotFoundError):
        catalog.find_function(["qualified", "newFunction"])


def test_create_tvf_in_catalog(catalog: Catalog):
    tvf = _tvf()

    create_tvf(catalog, "qualified.newTVF", tvf)

    assert catalog.get_tvf_by_name("qualified.newTVF") is tvf
    assert tvf.output_columns[0].type == simple("STRING")


def test_delete_tvf_from_catalog(catalog: Catalog):
    create_tvf(catalog, "qualified.newTVF", _tvf())

    delete_tvf(catalog, "qualified.newTVF")

    assert catalog.get_tvf_by_name("qualified.newTVF") is None


def test_create_procedure_in_catalog(catalog: Catalog):
    procedure = _procedure()

    create_procedure(catalog, "qualified.newProcedure", procedure)

    assert catalog.find_procedure(["qualified.newProcedure"]) is procedure
    assert catalog.find_procedure(["qualified", "newProcedure"]) is procedure


def test_delete_procedure_from_catalog(catalog: Catalog):
    create_procedure(catalog, "qualified.newProcedure", _procedure())

    delete_procedure(catalog, "qualified.newProcedure")

    for path in (["newProcedure"], ["qualified", "newProcedure"], ["qualified.newProcedure"]):
        with pytest.raises(NotFoundError):
            catalog.find_procedure(path)


@pytest.mark.parametrize(
    "delete",
    [
        lambda c: delete_table(c, "missing"),
        lambda c: delete_function(c, "missing"),
        lambda c: delete_procedure(c, "missing"),
        lambda c: delete_tvf(c, "missing"),
    ],
)
def test_delete_missing_resource_raises(catalog: Catalog, delete):
    with pytest.raises(NotFoundError):
        delete(catalog)


def test_delete_missing_resource_with_missing_ok(catalog: Catalog):
    delete_table(catalog, "missing", missing_ok=True)
    delete_procedure(catalog, "a.missing", missing_ok=True)

    assert set(catalog.tables) == {"sample"}


def test_create_modes_apply_to_every_kind(catalog: Catalog):
    first, second = _procedure("p"), _procedure("p")

    create_procedure(catalog, "p", first)
    with pytest.raises(AlreadyExistsError):
        create_procedure(catalog, "p", second)
    assert create_procedure(catalog, "p", second, CreateMode.CREATE_IF_NOT_EXISTS) is first
    assert create_procedure(catalog, "p", second, CreateMode.CREATE_OR_REPLACE) is second
    assert catalog.find_procedure("p") is second


def test_copy_catalog(catalog: Catalog):
    copied = copy_catalog(catalog)

    copied_table = copied.find_table(["sample"])
    assert copied.find_table(["nested", "sample"]) == catalog.find_table(["nested", "sample"])
    assert copied_table.name == "sample"
    assert copied_table.column(0).name == "column"
    # leaves are shared, containers are not
    assert copied_table is catalog.find_table(["sample"])
    assert copied is not catalog
    assert copied.get_catalog("nested") is not catalog.get_catalog("nested")


def test_copy_is_independent_of_source(catalog: Catalog):
    create_procedure(catalog, "qualified.newProcedure", _procedure())
    copied = copy_catalog(catalog)

    delete_table(copied, "sample")
    delete_procedure(copied, "qualified.newProcedure")
    copied.remove_catalog("nested")
    create_table(catalog, "added", _sample_table())

    assert catalog.find_table(["sample"]).name == "sample"
    assert catalog.find_table(["nested", "sample"]).name == "sample"
    assert catalog.find_procedure(["qualified", "newProcedure"]).name == "qualified.newProcedure"
    with pytest.raises(NotFoundError):
        copied.find_table(["added"])


def test_operations_print_nothing_without_logging_configured(capsys):
    catalog = Catalog("root")

    create_table(catalog, "sample", _sample_table())
    create_table(catalog, "sample", _sample_table(), CreateMode.CREATE_OR_REPLACE)
    delete_table(catalog, "sample")
    copy_catalog(catalog)

    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err == ""


def test_operations_log_through_stdlib_logging(caplog):
    caplog.set_level(logging.DEBUG, logger="sqlcatalog")

    create_table(Catalog("root"), "sample", _sample_table())

    records = [r for r in caplog.records if r.name == "sqlcatalog.core.operations"]
    assert records and records[0].levelno == logging.DEBUG
    assert records[0].msg["event"] == "resource_created"
    assert records[0].msg["name"] == "sample"


def test_copy_catalog_keeps_functions_and_tvfs(catalog: Catalog):
    udf = _function()
    builtin = _function(group="ZetaSQL")
    tvf = _tvf()
    create_function(catalog, "qualified.newFunction", udf)
    create_function(catalog, "qualified.newFunction", builtin)
    create_tvf(catalog, "qualified.newTVF", tvf)

    copied = copy_catalog(catalog)

    assert copied.get_function_by_full_name("UDF:qualified.newFunction") is udf
    assert copied.get_function_by_full_name("ZetaSQL:qualified.newFunction") is builtin
    assert copied.find_function(["qualified", "newFunction"]) is udf
    assert copied.find_function(["qualified", "newFunction"], group="ZetaSQL") is builtin
    assert copied.get_tvf_by_name("qualified.newTVF") is tvf
    assert copied.find_tvf(["qualified", "newTVF"]) is tvf
    assert copied.get_catalog("qualified") is not catalog.get_catalog("qualified")
