"""FastAPI dependencies."""
from portal.dependencies.auth import (
    get_admin_client,
    get_auth_context,
    get_public_client,
    require_importer,
)

__all__ = ["get_admin_client", "get_auth_context", "get_public_client", "require_importer"]
