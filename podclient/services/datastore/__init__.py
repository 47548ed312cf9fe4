"""Database integration for persisting pod registrations."""

from abc import ABC, abstractmethod
from threading import RLock
from typing import Any, ContextManager, List, Mapping, Optional
import json
import logging

from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.orm.session import Session

from . import util, models
from ...domain import PodRegistration
from ...locks import HostLocks
from ...exceptions import NoSuchRegistration

logger = logging.getLogger(__name__)

CREDENTIAL_FIELDS = ('client_id', 'client_secret')


class PodRegistry(ABC):
    """Keeps one :class:`.PodRegistration` per pod host."""

    @abstractmethod
    def get(self, host: str) -> PodRegistration:
        """Load the registration for ``host``, or raise NoSuchRegistration."""

    @abstractmethod
    def upsert_by_host(self, host: str,
                       fields: Optional[Mapping[str, Any]] = None) \
            -> PodRegistration:
        """
        Find or create the registration for ``host`` and merge ``fields``.

        Must be atomic per host: concurrent calls for the same host leave
        exactly one record. A call that loses a race to create the record
        returns the winner's record unchanged.
        """

    @abstractmethod
    def all(self) -> List[PodRegistration]:
        """Load all registrations."""

    @abstractmethod
    def delete(self, host: str) -> None:
        """Remove the registration for ``host``."""


class SQLPodRegistry(PodRegistry):
    """:class:`.PodRegistry` backed by a SQL table with a unique host."""

    def __init__(self, database_uri: str = 'sqlite://',
                 engine: Optional[Engine] = None) -> None:
        self.engine = engine or util.engine_for(database_uri)
        self._sessions = sessionmaker(bind=self.engine, autoflush=False,
                                      expire_on_commit=False)
        self._locks = HostLocks()
        self._serial = RLock() if util.shares_connection(self.engine) \
            else None

    def _transaction(self) -> ContextManager[Session]:
        return util.transaction(self._sessions, self._serial)

    def create_all(self) -> None:
        util.create_all(self.engine)

    def drop_all(self) -> None:
        util.drop_all(self.engine)

    def get(self, host: str) -> PodRegistration:
        with self._transaction() as session:
            db_reg = _load_dbregistration(host, session)
        if db_reg is None:
            raise NoSuchRegistration(f'No registration for {host}')
        return _to_domain(db_reg)

    def all(self) -> List[PodRegistration]:
        with self._transaction() as session:
            return [_to_domain(db_reg) for db_reg
                    in session.query(models.DBPodRegistration)
                    .order_by(models.DBPodRegistration.host)]

    def delete(self, host: str) -> None:
        with self._locks.hold(host):
            with self._transaction() as session:
                db_reg = _load_dbregistration(host, session)
                if db_reg is not None:
                    session.delete(db_reg)
            if db_reg is None:
                raise NoSuchRegistration(f'No registration for {host}')
        logger.info('Deleted registration for %s', host)

    def upsert_by_host(self, host: str,
                       fields: Optional[Mapping[str, Any]] = None) \
            -> PodRegistration:
        with self._locks.hold(host):
            try:
                return self._upsert(host, fields)
            except IntegrityError:
                # Another writer created the row first; theirs stands.
                logger.info('Lost concurrent insert for %s', host)
                return self.get(host)

    def _upsert(self, host: str,
                fields: Optional[Mapping[str, Any]]) -> PodRegistration:
        with self._transaction() as session:
            db_reg = _load_dbregistration(host, session)
            if db_reg is None:
                db_reg = models.DBPodRegistration(host=host)
                session.add(db_reg)
                logger.debug('Created pending registration for %s', host)
            if fields:
                _merge(db_reg, fields)
            session.flush()
            return _to_domain(db_reg)


def _merge(db_reg: models.DBPodRegistration,
           fields: Mapping[str, Any]) -> None:
    extra = json.loads(db_reg.extra) if db_reg.extra else {}
    for key, value in fields.items():
        if key == 'host':
            continue
        if key in CREDENTIAL_FIELDS:
            setattr(db_reg, key, str(value) if value is not None else None)
        else:
            extra[key] = value
    db_reg.extra = json.dumps(extra, sort_keys=True) if extra else None


def _to_domain(db_reg: models.DBPodRegistration) -> PodRegistration:
    return PodRegistration(
        host=db_reg.host,
        client_id=db_reg.client_id,
        client_secret=db_reg.client_secret,
        extra=json.loads(db_reg.extra) if db_reg.extra else None
    )


def _load_dbregistration(host: str, session: Session) \
        -> Optional[models.DBPodRegistration]:
    db_reg: Optional[models.DBPodRegistration] = \
        session.query(models.DBPodRegistration) \
        .filter(models.DBPodRegistration.host == host) \
        .first()
    return db_reg
