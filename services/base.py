"""Base services container for dependency injection."""

from config import Config
from db.manager import DatabaseManager


class Services:
    """Container for all application services.

    This class provides a centralized way to access all services and makes
    it easy to inject a test database or an in-memory store.

    Args:
        config: Application configuration object.
        db_manager: Optional database manager for testing. If provided, it is
            used instead of one built from config.
        store: Optional expense store. If provided, db_manager is not used
            for expense storage.
    """

    def __init__(self, config: Config, db_manager=None, store=None):
        self.config = config
        self.db_manager = db_manager or DatabaseManager(config)

        # Lazy import to avoid circular dependencies
        from db.store import MemoryExpenseStore, SqliteExpenseStore
        from services.analytics import AnalyticsService
        from services.expenses import ExpenseService

        if store is None:
            if config.store_backend == "memory":
                store = MemoryExpenseStore()
            else:
                store = SqliteExpenseStore(self.db_manager)
        self.store = store

        self.expenses = ExpenseService(self.store)
        self.analytics = AnalyticsService(self.store)
