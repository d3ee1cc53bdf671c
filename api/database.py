import logging
from contextlib import contextmanager
from typing import Generator, Optional

from neo4j import GraphDatabase, READ_ACCESS, WRITE_ACCESS, Session
from config import settings

logger = logging.getLogger(__name__)


class Neo4jConnection:
    """Owns the Neo4j driver behind the entity store."""

    def __init__(self):
        self.uri = settings.neo4j_uri
        self.user = settings.neo4j_user
        self.password = settings.neo4j_password
        self.database: Optional[str] = settings.neo4j_database

        if not self.password:
            raise ValueError("NEO4J_PASSWORD is required in settings")

        # One session per collection read; the analytics view reads four at once
        self.driver = GraphDatabase.driver(
            self.uri,
            auth=(self.user, self.password),
            max_connection_pool_size=settings.neo4j_pool_size,
            connection_acquisition_timeout=30,
            max_transaction_retry_time=30
        )

    def close(self):
        """Close the driver connection"""
        if self.driver:
            self.driver.close()

    @contextmanager
    def get_session(self, readonly: bool = False) -> Generator[Session, None, None]:
        """Get a session on the configured database, closed on exit.

        Args:
            readonly: Open the session in read access mode so clustered
                deployments can route it to a follower
        """
        session = self.driver.session(
            database=self.database,
            default_access_mode=READ_ACCESS if readonly else WRITE_ACCESS
        )
        try:
            yield session
        finally:
            session.close()

    def verify_connectivity(self) -> bool:
        """Verify database connectivity.

        Returns:
            bool: True if connected, False otherwise
        """
        try:
            with self.get_session(readonly=True) as session:
                result = session.run("RETURN 1 as test")
                return result.single()["test"] == 1
        except Exception as e:
            logger.error(f"Entity store connectivity check failed: {e}")
            return False


db = Neo4jConnection()


class BaseRepository:
    """Base repository running Cypher against the shared connection."""

    def __init__(self):
        self.db = db

    def execute_query(self, query: str, parameters: dict = None) -> list:
        """Execute a read query and return results.

        Args:
            query: Cypher query string
            parameters: Optional query parameters

        Returns:
            list: Query results as list of dictionaries
        """
        with self.db.get_session(readonly=True) as session:
            result = session.run(query, parameters or {})
            return [record.data() for record in result]

    def execute_write(self, query: str, parameters: dict = None) -> list:
        """Execute a write query and return the records it returns."""
        with self.db.get_session() as session:
            result = session.run(query, parameters or {})
            records = [record.data() for record in result]
            summary = result.consume()
            logger.debug(
                f"Write query created {summary.counters.nodes_created} nodes, "
                f"set {summary.counters.properties_set} properties"
            )
            return records
