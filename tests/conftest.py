import os

# Keep test runs off the real services and out of the log directory
os.environ["LOG_DIR"] = ""
os.environ["KV_BACKEND"] = "sql"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.pop("OPENAI_API_KEY", None)
os.environ.pop("AZURE_SPEECH_KEY", None)
os.environ.pop("AZURE_SPEECH_REGION", None)

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from classtalk.db import Base
from classtalk.kv import SqlStore, get_store
from classtalk.main import app


@pytest.fixture
def session_factory(tmp_path):
	engine = create_engine(f"sqlite:///{tmp_path / 'kv.db'}", future=True)
	Base.metadata.create_all(bind=engine)
	yield sessionmaker(bind=engine, future=True)
	engine.dispose()


@pytest.fixture
def store(session_factory):
	return SqlStore(session_factory)


@pytest.fixture
def client(store):
	app.dependency_overrides[get_store] = lambda: store
	yield TestClient(app)
	app.dependency_overrides.clear()


class Recorder:
	"""httpx.MockTransport handler that records requests and replays a canned response."""

	def __init__(self, response):
		self.response = response
		self.requests = []

	def __call__(self, request: httpx.Request) -> httpx.Response:
		self.requests.append(request)
		if callable(self.response):
			return self.response(request)
		return self.response

	@property
	def last(self) -> httpx.Request:
		return self.requests[-1]


@pytest.fixture
def recorder():
	return Recorder
