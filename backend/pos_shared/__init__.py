"""
Shared module for infrastructure used by the POS engine and its HTTP/CLI surfaces.

STRUCTURE:
- pos_shared.config: Configuration
  - settings.py: Environment config (pydantic-settings)
  - logging.py: Structured logging
  - constants.py: OrderStatus, OrderSource, PaymentMethod, room statuses, transitions

- pos_shared.infrastructure: Persistence
  - db.py: SQLAlchemy engine, sessions, safe_commit()
  - store.py: Collection store interface (create/update/delete/list)

- pos_shared.utils: Utilities
  - exceptions.py: Domain errors with HTTP status codes and auto-logging
  - schemas.py: Request/response Pydantic schemas
  - money.py: Cent arithmetic and service-charge rounding

IMPORT EXAMPLES:
    from pos_shared.infrastructure.db import get_db, safe_commit
    from pos_shared.config.settings import settings
    from pos_shared.config.constants import OrderStatus, OrderSource
    from pos_shared.utils.exceptions import InvalidTransitionError, NotFoundError
"""
