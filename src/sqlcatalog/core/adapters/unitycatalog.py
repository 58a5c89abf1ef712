from __future__ import annotations

from databricks.sdk import WorkspaceClient

from sqlcatalog.core.uc import UCColumn, UCFunction, UCTable

_TABLE_TYPE = "TABLE_TYPE"


def _columns(items) -> tuple[UCColumn, ...]:
    """Convert SDK ColumnInfo / FunctionParameterInfo objects, skipping nameless ones."""
    out: list[UCColumn] = []
    for c in items or []:
        name = getattr(c, "name", None)
        type_text = getattr(c, "type_text", None)
        if not name or not type_text:
            continue
        out.append(UCColumn(name=name, type_text=type_text, position=getattr(c, "position", None)))
    # the API does not guarantee ordering; position is authoritative when present
    if all(c.position is not None for c in out):
        out.sort(key=lambda c: c.position)
    return tuple(out)


def _params(infos) -> tuple[UCColumn, ...]:
    """Unwrap a FunctionParameterInfos container."""
    return _columns(getattr(infos, "parameters", None))


class UnityCatalogAdapter:
    """Adapter around Databricks SDK Unity Catalog APIs (tables/functions)."""

    def __init__(self, client: WorkspaceClient) -> None:
        self.client = client

    def list_tables(self, catalog: str, schema: str) -> list[UCTable]:
        """List tables in a given catalog.schema, with their columns."""
        out: list[UCTable] = []
        for t in self.client.tables.list(catalog_name=catalog, schema_name=schema):
            full_name = getattr(t, "full_name", None)
            if not full_name:
                continue
            table_type = getattr(t, "table_type", None)
            out.append(
                UCTable(
                    full_name=full_name,
                    columns=_columns(getattr(t, "columns", None)),
                    # TableType enum on recent SDKs, plain string on older ones
                    table_type=getattr(table_type, "value", table_type) if table_type else None,
                )
            )
        return out

    def list_functions(self, catalog: str, schema: str) -> list[UCFunction]:
        """List functions in a given catalog.schema, with parameters and result types."""
        out: list[UCFunction] = []
        for f in self.client.functions.list(catalog_name=catalog, schema_name=schema):
            full_name = getattr(f, "full_name", None)
            if not full_name:
                continue
            data_type = getattr(f, "data_type", None)
            returns_table = getattr(data_type, "value", data_type) == _TABLE_TYPE
            out.append(
                UCFunction(
                    full_name=full_name,
                    params=_params(getattr(f, "input_params", None)),
                    return_type_text=None
                    if returns_table
                    else getattr(f, "full_data_type", None) or None,
                    returns_table=returns_table,
                    return_columns=_params(getattr(f, "return_params", None))
                    if returns_table
                    else (),
                )
            )
        return out
