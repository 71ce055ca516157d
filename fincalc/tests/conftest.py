from __future__ import annotations

import pytest
from flask.testing import FlaskClient

from fincalc.app import create_app
from fincalc.config import Settings


@pytest.fixture()
def app():
    return create_app(Settings(LOG_LEVEL="WARNING", LOG_JSON=False, HISTORY_MAX_ITEMS=5))


@pytest.fixture()
def client(app) -> FlaskClient:
    with app.test_client() as test_client:
        yield test_client
