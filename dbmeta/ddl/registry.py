"""
Dialect registry for dbmeta.

Maps each supported database type to its DDL generator. The mapping is
built once at import time and is read-only afterwards.
"""

from types import MappingProxyType
from typing import Callable, Mapping

from dbmeta.ddl.base import DialectGenerator
from dbmeta.ddl.dm import DMDialectGenerator
from dbmeta.ddl.mysql import MySQLDialectGenerator
from dbmeta.exceptions import UnsupportedDialectError
from dbmeta.models.schema import DatabaseType
from dbmeta.utils.logger import get_logger

logger = get_logger(__name__)

_GENERATORS: Mapping[DatabaseType, Callable[[], DialectGenerator]] = MappingProxyType(
    {
        DatabaseType.MYSQL: MySQLDialectGenerator,
        DatabaseType.DM: DMDialectGenerator,
    }
)


class DialectRegistry:
    """
    Factory for DDL generators.

    Usage:
        generator = DialectRegistry.resolve(DatabaseType.MYSQL)
        ddl = generator.generate_table_ddl(table)
    """

    @classmethod
    def resolve(cls, db_type: DatabaseType | str) -> DialectGenerator:
        """
        Create the generator for a database type.

        Args:
            db_type: Database type, or its identifier (e.g. ``"mysql"``)

        Returns:
            A new generator instance

        Raises:
            UnsupportedDialectError: If no generator is registered for the type
        """
        requested = db_type.value if isinstance(db_type, DatabaseType) else str(db_type)
        member = db_type if isinstance(db_type, DatabaseType) else DatabaseType.from_name(requested)

        factory = _GENERATORS.get(member)
        if factory is None:
            logger.error(f"No DDL generator registered for database type '{requested}'")
            raise UnsupportedDialectError(requested, supported=cls.get_supported_types())

        generator = factory()
        logger.debug(f"Resolved {type(generator).__name__} for {requested}")
        return generator

    @classmethod
    def get_supported_types(cls) -> list[str]:
        """Get list of supported database types."""
        return [db_type.value for db_type in _GENERATORS]
