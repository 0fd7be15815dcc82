import asyncio
import os
import sys

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from services import TextGenerator


class FakeGenerator(TextGenerator):
    """
    Test double for the text-generation service.

    Returns a canned reply, raises a given error, or sleeps past a timeout.
    Every prompt it receives is recorded.
    """

    def __init__(self, reply=None, error=None, delay=0):
        self.reply = reply
        self.error = error
        self.delay = delay
        self.prompts = []

    async def _answer(self, prompt):
        self.prompts.append(prompt)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.reply

    async def request_allocation(self, prompt):
        return await self._answer(prompt)

    async def request_insights(self, prompt):
        return await self._answer(prompt)


@pytest.fixture
def fake_generator():
    return FakeGenerator


@pytest.fixture
def app():
    from app import create_app, init_db
    from models import db

    app = create_app('testing')
    init_db(app)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()

