from __future__ import annotations

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from ushering.auth.deps import get_current_user, get_feature_gates
from ushering.core.db import Base, get_db
from ushering.main import app
from ushering.models.church import Church, ChurchPosition, ChurchZone
from ushering.models.mass import Mass, MassZone
from ushering.models.region import Lingkungan, Wilayah
from ushering.models.user import User

SQLALCHEMY_TEST_URL = "sqlite+pysqlite:///:memory:"
engine = create_engine(
    SQLALCHEMY_TEST_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)


def override_get_db() -> Generator[Session, None, None]:
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


class FakeGates:
    """Gate client double recording every lookup."""

    def __init__(self, value: bool = False, error: Exception | None = None) -> None:
        self.value = value
        self.error = error
        self.calls: list[str] = []

    async def check_gate(self, name: str) -> bool:
        self.calls.append(name)
        if self.error is not None:
            raise self.error
        return self.value


@pytest.fixture(autouse=True)
def setup_database() -> Generator[None, None, None]:
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db_session() -> Generator[Session, None, None]:
    session = TestingSessionLocal()
    try:
        yield session
        session.commit()
    finally:
        session.close()


@pytest.fixture()
def client(db_session: Session) -> Generator[TestClient, None, None]:
    app.dependency_overrides.clear()
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def authorize(client: TestClient):
    def _apply(user: User):
        app.dependency_overrides[get_current_user] = lambda: user

    yield _apply
    app.dependency_overrides.pop(get_current_user, None)


@pytest.fixture()
def gates(client: TestClient) -> Generator[FakeGates, None, None]:
    fake = FakeGates()
    app.dependency_overrides[get_feature_gates] = lambda: fake
    yield fake
    app.dependency_overrides.pop(get_feature_gates, None)


@pytest.fixture()
def church(db_session: Session) -> Church:
    church = Church(code="KBR", name="Gereja Kristus Raja", parish="Kristus Raja")
    db_session.add(church)
    db_session.commit()
    db_session.refresh(church)
    return church


@pytest.fixture()
def mass(db_session: Session, church: Church) -> Mass:
    zone = ChurchZone(church_id=church.id, name="Gereja Utama", sequence=1)
    db_session.add(zone)
    db_session.flush()
    positions = [
        ChurchPosition(zone_id=zone.id, name="PPG Kiri", is_ppg=True, sequence=1),
        ChurchPosition(zone_id=zone.id, name="PPG Kanan", is_ppg=True, sequence=2),
    ] + [
        ChurchPosition(zone_id=zone.id, name=f"Pintu {index}", is_ppg=False, sequence=index + 2)
        for index in range(1, 7)
    ]
    db_session.add_all(positions)
    mass = Mass(church_id=church.id, name="Misa Minggu Pagi", day="sunday", time="07:00", sequence=1)
    db_session.add(mass)
    db_session.flush()
    db_session.add(MassZone(mass_id=mass.id, zone_id=zone.id, sequence=1))
    db_session.commit()
    db_session.refresh(mass)
    return mass


@pytest.fixture()
def lingkungan(db_session: Session, church: Church) -> Lingkungan:
    wilayah = Wilayah(church_id=church.id, name="Wilayah Satu", sequence=1)
    db_session.add(wilayah)
    db_session.flush()
    lingkungan = Lingkungan(church_id=church.id, wilayah_id=wilayah.id, name="Santo Yosef", sequence=1)
    db_session.add(lingkungan)
    db_session.commit()
    db_session.refresh(lingkungan)
    return lingkungan


@pytest.fixture()
def member_user(db_session: Session, church: Church) -> User:
    user = User(email="lingkungan@example.com", name="Ketua Lingkungan", role="user", church_id=church.id)
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture()
def admin_user(db_session: Session, church: Church) -> User:
    user = User(email="admin@example.com", name="Admin", role="admin", church_id=church.id)
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user
