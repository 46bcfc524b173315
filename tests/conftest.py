# tests/conftest.py
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session

import db
from models.task import Task


@pytest.fixture(autouse=True)
def memdb(monkeypatch):
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    monkeypatch.setattr(db, "engine", engine)
    monkeypatch.setattr(db, "SessionLocal",
                        sessionmaker(bind=engine, class_=Session, autoflush=False, expire_on_commit=False))
    db.init_db()
    try:
        yield engine
    finally:
        SQLModel.metadata.drop_all(engine)
        engine.dispose()


@pytest.fixture()
def statuses(memdb):
    return {
        "todo": db.create_status("To Do", "To do"),
        "doing": db.create_status("In Progress", "Doing"),
        "done": db.create_status("Done", "Done"),
    }


@pytest.fixture()
def load_task():
    def _load(task_id: int) -> Task:
        with db.get_session() as s:
            return s.get(Task, task_id)
    return _load
