from collections.abc import Callable, Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine
from sqlmodel import Session, create_engine

from ..core.config import Settings
from ..core.db import init_db
from ..main import create_app
from ..models import AccountResponse
from ..services import SqlAccountStore, SqlUserDirectory, TransferEngine


@pytest.fixture
def database_url(tmp_path) -> str:
    return f"sqlite:///{tmp_path / 'test.db'}"


@pytest.fixture
def engine(database_url: str) -> Iterator[Engine]:
    # Generous busy timeout so contending writer threads wait instead of failing.
    engine = create_engine(
        database_url,
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine: Engine) -> Iterator[Session]:
    with Session(engine) as session:
        yield session


@pytest.fixture
def store(session: Session) -> SqlAccountStore:
    return SqlAccountStore(session)


@pytest.fixture
def users(session: Session, store: SqlAccountStore) -> SqlUserDirectory:
    return SqlUserDirectory(session, store)


@pytest.fixture
def ledger(store: SqlAccountStore) -> TransferEngine:
    return TransferEngine(store)


@pytest.fixture
def open_account(
    users: SqlUserDirectory, store: SqlAccountStore, ledger: TransferEngine
) -> Callable[..., AccountResponse]:
    owner = users.create("Ada", "Lovelace")

    def _open(account_number: int, balance: int = 0, name: str = "Checking") -> AccountResponse:
        account = store.create(owner.id, account_number, name)
        if balance:
            account = ledger.deposit(account.id, balance)
        return account

    return _open


@pytest.fixture
def balance_of(engine: Engine) -> Callable[[int], int]:
    """Read a balance through a fresh session, as another request would."""

    def _balance(account_number: int) -> int:
        with Session(engine) as fresh:
            return SqlAccountStore(fresh).get_by_account_number(account_number).balance

    return _balance


@pytest.fixture
def client(database_url: str) -> Iterator[TestClient]:
    app = create_app(Settings(database_url=database_url))
    with TestClient(app) as test_client:
        yield test_client
