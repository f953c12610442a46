from sqlalchemy import create_engine, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker
from db.clients.base_document_client import BaseDocumentClient
from errors import NotFoundError, StoreUnavailableError

from config import config

def get_db_session(db_url: str, **engine_options):
    """Establishes a connection to the database and returns a session maker and engine."""
    try:
        engine = create_engine(db_url, **engine_options)
    except SQLAlchemyError as e:
        raise StoreUnavailableError(f"Could not connect to the database: {e}") from e
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    return SessionLocal, engine

class RdsDocumentClient(BaseDocumentClient):
    """A document client backed by one relational table (Amazon RDS / PostgreSQL).

    List fields are stored as JSON columns; appends lock the row for the
    duration of the read-merge-write so concurrent appends serialize.
    """
    def __init__(self, **config_: dict):
        """Initialize the RDS document client with configuration parameters.

        Args:
            base_orm (any): The ORM class mapped to the table.
            db_url (str): The database URL. Defaults to the configured PostgreSQL database.
            engine_options (dict): Extra keyword arguments for sqlalchemy.create_engine.
        """
        super().__init__(**config_)
        self.db_url = config_.get('db_url') or config.postgres.url
        self.base_orm = config_.get('base_orm')
        if not self.base_orm:
            raise ValueError("Base ORM class must be provided in the configuration.")
        self.engine_options = config_.get('engine_options', {})
        self.session_maker = None
        self.engine = None

    def connect(self):
        """Connect to the database and create the table if needed."""
        self.session_maker, self.engine = get_db_session(self.db_url, **self.engine_options)
        try:
            self.base_orm.metadata.create_all(self.engine)
        except SQLAlchemyError as e:
            raise StoreUnavailableError(f"Could not connect to the database: {e}") from e
        self.connected = True

    def disconnect(self):
        """Disconnect from the database."""
        if self.engine:
            self.engine.dispose()
        self.connected = False

    def _ensure_connected(self):
        if not self.connected:
            self.connect()

    def _to_dict(self, orm) -> dict:
        return {column.key: getattr(orm, column.key) for column in self.base_orm.__table__.columns}

    def _key_column(self):
        return getattr(self.base_orm, self.key)

    def get(self, key):
        self._ensure_connected()
        try:
            with self.session_maker() as session:
                orm = session.get(self.base_orm, key)
                return self._to_dict(orm) if orm is not None else None
        except SQLAlchemyError as e:
            raise StoreUnavailableError(f"Failed to read {key}: {e}") from e

    def put(self, document):
        self._ensure_connected()
        try:
            with self.session_maker() as session:
                session.merge(self.base_orm(**document))
                session.commit()
        except SQLAlchemyError as e:
            raise StoreUnavailableError(f"Failed to write {document.get(self.key)}: {e}") from e

    def _locked(self, session, key):
        statement = select(self.base_orm).where(self._key_column() == key).with_for_update()
        orm = session.execute(statement).scalar_one_or_none()
        if orm is None:
            raise NotFoundError(f"No document stored under {key}")
        return orm

    def update(self, key, fields):
        self._ensure_connected()
        try:
            with self.session_maker() as session:
                orm = self._locked(session, key)
                for field, value in fields.items():
                    setattr(orm, field, value)
                session.commit()
                return self._to_dict(orm)
        except SQLAlchemyError as e:
            raise StoreUnavailableError(f"Failed to update {key}: {e}") from e

    def append(self, key, field, values):
        self._ensure_connected()
        try:
            with self.session_maker() as session:
                orm = self._locked(session, key)
                # Assign a new list, JSON columns do not track in-place mutation
                setattr(orm, field, list(getattr(orm, field) or []) + list(values))
                session.commit()
                return self._to_dict(orm)
        except SQLAlchemyError as e:
            raise StoreUnavailableError(f"Failed to append to {key}: {e}") from e

    def delete(self, key):
        self._ensure_connected()
        try:
            with self.session_maker() as session:
                orm = session.get(self.base_orm, key)
                if orm is not None:
                    session.delete(orm)
                    session.commit()
        except SQLAlchemyError as e:
            raise StoreUnavailableError(f"Failed to delete {key}: {e}") from e

    def query(self, field, value):
        self._ensure_connected()
        try:
            with self.session_maker() as session:
                statement = select(self.base_orm).where(getattr(self.base_orm, field) == value)
                return [self._to_dict(orm) for orm in session.execute(statement).scalars()]
        except SQLAlchemyError as e:
            raise StoreUnavailableError(f"Failed to query {field} = {value}: {e}") from e
