from types import SimpleNamespace

import pytest
from typer.testing import CliRunner

from sqlcatalog.cli.cli import app
from sqlcatalog.cli.commands import unitycatalog
from sqlcatalog.core.catalog import Catalog
from sqlcatalog.core.loader import load_tables
from sqlcatalog.core.uc import UCColumn, UCFunction, UCTable

runner = CliRunner()

ORDERS = UCTable(
    full_name="main.sales.orders",
    columns=(UCColumn("id", "bigint", 0), UCColumn("total", "decimal(10,2)", 1)),
)
BROKEN = UCTable(full_name="main.sales.broken", columns=(UCColumn("m", "map<string,int>", 0),))


class _Adapter:
    def __init__(self, tables=(), functions=()):
        self.tables = list(tables)
        self.functions = list(functions)

    def list_tables(self, *, catalog: str, schema: str) -> list[UCTable]:
        return self.tables

    def list_functions(self, *, catalog: str, schema: str) -> list[UCFunction]:
        return self.functions


@pytest.fixture
def use_adapter(monkeypatch):
    def _use(adapter: _Adapter) -> None:
        monkeypatch.setattr(
            unitycatalog,
            "build_uc_context",
            lambda profile: SimpleNamespace(profile=profile, client=None, adapter=adapter),
        )

    return _use


def test_types_parse_prints_canonical_form():
    result = runner.invoke(app, ["types", "parse", "array<struct<a numeric(10,2)>>"])

    assert result.exit_code == 0
    assert "ARRAY<STRUCT<a NUMERIC>>" in result.output


def test_types_parse_databricks_dialect():
    result = runner.invoke(
        app, ["types", "parse", "--dialect", "databricks", "struct<a:int>"]
    )

    assert result.exit_code == 0
    assert "STRUCT<a INT32>" in result.output


def test_types_parse_rejects_unknown_type():
    result = runner.invoke(app, ["types", "parse", "NOT_A_TYPE"])

    assert result.exit_code == 2
    assert "unknown type" in result.output


def test_uc_load_success(use_adapter):
    use_adapter(
        _Adapter(
            tables=[ORDERS],
            functions=[UCFunction(full_name="main.sales.f", return_type_text="string")],
        )
    )

    result = runner.invoke(app, ["uc", "load", "main.sales"])

    assert result.exit_code == 0, result.output
    assert "main.sales.orders" in result.output
    assert "LOADED" in result.output
    assert "Loaded 2 resource(s)." in result.output


def test_uc_load_exits_1_when_a_table_fails(use_adapter):
    use_adapter(_Adapter(tables=[ORDERS, BROKEN]))

    result = runner.invoke(app, ["uc", "load", "main.sales", "--no-functions"])

    assert result.exit_code == 1
    assert "FAIL" in result.output
    assert "Failed to load 1 resource(s)." in result.output
    assert "resource_load_failed" in result.output


def test_uc_load_rejects_invalid_schema(use_adapter):
    use_adapter(_Adapter(tables=[ORDERS]))

    result = runner.invoke(app, ["uc", "load", "main"])

    assert result.exit_code == 2
    assert "Schema must be in the form" in result.output


def test_uc_load_warns_on_empty_schema(use_adapter):
    use_adapter(_Adapter())

    result = runner.invoke(app, ["uc", "load", "--schema", "main.sales"])

    assert result.exit_code == 0
    assert "No tables or functions found." in result.output


def test_uc_load_without_subcommand_shows_help(use_adapter):
    use_adapter(_Adapter())

    result = runner.invoke(app, ["uc"])

    assert result.exit_code == 0
    assert "load" in result.output


def test_load_failures_are_reported_after_a_cli_run():
    runner.invoke(app, ["types", "parse", "STRING"])

    results = load_tables(Catalog("main"), [BROKEN])

    assert results[0].loaded is False
    assert "map" in (results[0].error or "")
