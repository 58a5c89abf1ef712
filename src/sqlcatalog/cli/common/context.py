"""Application context management for the CLI."""

from dataclasses import dataclass

from databricks.sdk import WorkspaceClient

from sqlcatalog.cli.common.exits import die
from sqlcatalog.core.adapters.unitycatalog import UnityCatalogAdapter
from sqlcatalog.core.auth import AuthError, get_client


@dataclass
class UCAppContext:
    """Application context holding Databricks client and Unity Catalog adapter."""

    profile: str | None
    client: WorkspaceClient
    adapter: UnityCatalogAdapter


def build_uc_context(profile: str | None) -> UCAppContext:
    """Build and return the application context for Unity Catalog commands."""
    try:
        client = get_client(profile)
    except AuthError as exc:
        die(str(exc))
    return UCAppContext(profile=profile, client=client, adapter=UnityCatalogAdapter(client))
