import logging

from dotenv import load_dotenv

from app.custreg.config import Settings, load_settings, require_database_path
from app.custreg.db import ConnectionProvider
from app.custreg.modules.customers.repository import CustomerRepository
from app.custreg.modules.customers.service import CustomerService


def create_store(settings: Settings | None = None) -> CustomerService:
    """
    Wire provider -> repository -> service for the configured database file
    and make sure the customers table exists.

    Raises ConfigurationError when no database path is configured and
    StorageError when the file cannot be opened or has an incompatible schema.
    """
    if settings is None:
        load_dotenv()
        settings = load_settings()

    # Fail fast with a clear message before touching the driver.
    require_database_path(settings)

    provider = ConnectionProvider(settings)
    service = CustomerService(CustomerRepository(provider))
    service.ensure_schema()

    logging.getLogger(__name__).info("create_store() complete; db=%s", settings.database_path)
    return service
