"""
Shared module for common utilities used by the REST API and the CLI.

STRUCTURE:
- shared.infrastructure: Database and request correlation
  - db.py: SQLAlchemy sessions, safe_commit()
  - correlation.py: X-Request-ID middleware and log filter

- shared.config: Configuration
  - settings.py: Environment config (Pydantic)
  - logging.py: Structured logging and access audit events
  - constants.py: Roles, job roles, location tags, permission tokens

- shared.utils: Utilities
  - exceptions.py: HTTP exceptions with auto-logging
  - schemas.py: Shared Pydantic schemas

IMPORT EXAMPLES:
    from shared.infrastructure.db import get_db, safe_commit
    from shared.config.settings import settings
    from shared.config.constants import Role, Permissions
    from shared.utils.exceptions import NotFoundError, ForbiddenError
"""
