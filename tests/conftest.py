import pytest
from unittest.mock import Mock

from address_mapper.store.json_store import JsonStore


@pytest.fixture
def make_response():
    """Factory for fake `requests.Response` objects."""
    def _make(status_code=200, json_data=None, text=""):
        response = Mock()
        response.status_code = status_code
        response.ok = status_code < 400
        response.json.return_value = json_data
        response.text = text
        return response
    return _make


@pytest.fixture
def store(tmp_path):
    return JsonStore(str(tmp_path / "data" / "addresses.json"))
