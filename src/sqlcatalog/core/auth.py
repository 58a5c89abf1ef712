"""Databricks workspace client construction for the Unity Catalog loader.

Connection settings come from the Databricks unified auth configuration
(`~/.databrickscfg` profiles or `DATABRICKS_*` environment variables); this
module only picks the profile and normalizes the host URL.
"""

from __future__ import annotations

import re

from databricks.sdk import WorkspaceClient
from databricks.sdk.core import Config

from sqlcatalog.core.errors import SqlCatalogError


class AuthError(SqlCatalogError):
    """Raised when a Databricks configuration cannot be resolved."""


def _auth_error_message(message: str, profile: str | None) -> str:
    """Turn an SDK configuration error into a message that says what to run."""
    if re.search(r"databricks auth login", message):
        cmd = "databricks auth login"
        if profile:
            cmd = f"{cmd} --profile {profile}"
        return f"Databricks authentication failed. Re-authenticate with:\n  $ {cmd}"
    return f"Databricks authentication failed: {message}"


def sanitize_host(host: str | None) -> str | None:
    """Strip query strings (`?o=<workspace id>`) and trailing slashes from a host URL."""
    if not host:
        return host
    return host.split("?", 1)[0].rstrip("/")


def get_client(profile: str | None = None) -> WorkspaceClient:
    """
    Create a WorkspaceClient for the given Databricks CLI profile.

    Raises:
        AuthError: If the profile or environment does not yield a usable config.
    """
    try:
        cfg = Config(profile=profile) if profile else Config()
    except ValueError as exc:
        raise AuthError(_auth_error_message(str(exc), profile)) from exc
    cfg.host = sanitize_host(cfg.host)
    return WorkspaceClient(config=cfg)
