"""
Startup utilities for the application.
"""
import logging
from sqlalchemy import select, func, text
from sqlalchemy.exc import OperationalError, ProgrammingError

from rental_api.core.config import settings
from rental_api.core.database import get_async_session_maker_instance
from rental_api.core.security import get_password_hash
from rental_api.models.enums import Role
from rental_api.models.user import User

logger = logging.getLogger(__name__)


async def users_table_exists(session) -> bool:
    try:
        await session.execute(text("SELECT 1 FROM users LIMIT 1"))
        return True
    except (ProgrammingError, OperationalError):
        logger.warning("Users table not found. Please run 'alembic upgrade head' to create it.")
        return False


async def ensure_default_admin():
    """
    Check if any ADMIN exists in the database.
    If not, create one with the credentials from settings.
    """
    async_session_maker = get_async_session_maker_instance()
    async with async_session_maker() as session:
        try:
            if not await users_table_exists(session):
                return

            result = await session.execute(
                select(func.count(User.id)).where(User.role == Role.admin.value)
            )
            admin_count = result.scalar()

            if admin_count:
                logger.info("Found %s admin(s) in database. Skipping default admin creation.", admin_count)
                return

            logger.info("No admin found in database. Creating default admin...")
            default_admin = User(
                name="Admin User",
                email=settings.DEFAULT_ADMIN_EMAIL,
                password_hash=get_password_hash(settings.DEFAULT_ADMIN_PASSWORD),
                role=Role.admin.value,
                is_verified_by_admin=True,
                is_active=True,
            )
            session.add(default_admin)
            await session.commit()
            logger.info("Default admin created successfully with email: %s", settings.DEFAULT_ADMIN_EMAIL)

        except (OperationalError, ProgrammingError) as e:
            # The API can still serve requests; the admin can be created manually
            logger.warning(
                "Database error during admin check/creation. Error: %s. "
                "Please ensure database is accessible and migrations are run.",
                e,
            )
