import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from app.config import settings
from app.database import get_db
from app.errors import SummarizerError
from app.main import app
from app.services.summarizer_client import get_summarizer


def _set_sqlite_pragmas(dbapi_conn, connection_record):
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class FakeSummarizer:
    """Records prompts and returns a canned reply or raises a canned error."""

    def __init__(self, reply: str = "## Summary\n- point", error: SummarizerError | None = None):
        self.reply = reply
        self.error = error
        self.prompts: list[str] = []

    async def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def tmp_data(tmp_path):
    data_path = tmp_path / "DocSummarizer"
    data_path.mkdir()
    (data_path / "documents").mkdir()
    return data_path


@pytest.fixture
def test_db(tmp_data):
    db_path = tmp_data / "db.sqlite"
    engine = create_engine(
        f"sqlite:///{db_path}",
        connect_args={"check_same_thread": False},
    )
    event.listen(engine, "connect", _set_sqlite_pragmas)
    TestSession = sessionmaker(bind=engine, autoflush=False, autocommit=False)

    from app.database import init_db
    init_db(db_path)

    def override_get_db():
        db = TestSession()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestSession
    app.dependency_overrides.clear()
    engine.dispose()


@pytest.fixture
def make_summarizer():
    return FakeSummarizer


@pytest.fixture
def fake_summarizer():
    return FakeSummarizer()


@pytest.fixture
def client(tmp_data, test_db, fake_summarizer):
    original_data_path = settings.data_path
    settings.data_path = tmp_data
    app.dependency_overrides[get_summarizer] = lambda: fake_summarizer
    c = TestClient(app)
    yield c
    settings.data_path = original_data_path
