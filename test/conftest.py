import pytest

from dynatable.db import DbClient, DbConfig
from table_models import Account, Base, Post, User

USERS = [
    ("Ada", "Lovelace", True),
    ("Alan", "Turing", True),
    ("Grace", "Hopper", False),
    ("Edsger", "Dijkstra", True),
    ("Barbara", "Liskov", False),
]


@pytest.fixture
def db_client(tmp_path):
    client = DbClient(DbConfig(driver="sqlite", database=str(tmp_path / "dynatable.db")))
    Base.metadata.create_all(client.engine)

    with client.SessionLocal() as session:
        for index, (first, last, active) in enumerate(USERS, start=1):
            session.add(
                User(
                    id=index,
                    first_name=first,
                    last_name=last,
                    email=f"{first.lower()}@example.com",
                    active=active,
                )
            )
            session.add(Account(id=index, first_name=first, last_name=last, active=active))
        session.add_all(
            [
                Post(id=1, user_id=1, title="Notes on the Analytical Engine"),
                Post(id=2, user_id=2, title="Computing Machinery and Intelligence"),
                Post(id=3, user_id=2, title="On Computable Numbers"),
            ]
        )
        session.commit()

    yield client
    client.dispose()


@pytest.fixture
def session(db_client):
    with db_client.SessionLocal() as session:
        yield session
