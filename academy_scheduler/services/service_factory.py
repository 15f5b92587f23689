# File: academy_scheduler/services/service_factory.py

from pathlib import Path
from typing import Optional

from academy_scheduler.core.config_manager import Config
from academy_scheduler.utils.logger import setup_logger
from academy_scheduler.services.session_store import SessionStore, RestSessionStore
from academy_scheduler.services.memory_store import InMemorySessionStore

logger = setup_logger(__name__)

class ServiceFactory:
    """Factory for creating session store instances."""

    @staticmethod
    def create_session_store(fixture_path: Optional[Path] = None) -> SessionStore:
        """
        Create the session store the portal talks to.

        Args:
            fixture_path: JSON fixture for an offline in-memory store; when omitted
                the REST backend configured in .env is used

        Returns:
            SessionStore instance

        Raises:
            ValueError: If no fixture is given and the backend is not configured
        """
        if fixture_path is not None:
            logger.info(f"Using in-memory session store from {fixture_path}")
            return InMemorySessionStore.from_fixture(fixture_path)

        if not Config.validate():
            raise ValueError(
                "Backend configuration is incomplete. "
                "Set ACADEMY_API_BASE_URL and ACADEMY_API_TOKEN in .env"
            )

        logger.info(f"Using REST session store at {Config.API_BASE_URL}")
        return RestSessionStore()
