from unittest.mock import MagicMock

import pytest

from http_manager.dispatcher import Dispatcher, resolve_method
from http_manager.errors import UnsupportedMethod
from http_manager.models import HttpMethod, TransportResponse

URL = "https://api.example.com/things"
HEADERS = {"Accept": "application/json"}
QUERY = {"q": "x"}
BODY = {"amount": 1}


def _make_dispatcher() -> tuple[Dispatcher, MagicMock]:
    transport = MagicMock()
    transport.send.return_value = TransportResponse(status_code=200, body="{}")
    return Dispatcher(transport), transport


class TestResolveMethod:
    @pytest.mark.parametrize("method", ["get", "Post", "PUT", "patch", "delete"])
    def test_case_insensitive(self, method):
        assert resolve_method(method) is HttpMethod(method.upper())

    @pytest.mark.parametrize("method", ["INVALID", "head", "OPTIONS", ""])
    def test_unsupported(self, method):
        with pytest.raises(UnsupportedMethod) as exc:
            resolve_method(method)
        assert exc.value.method == method.upper()


class TestDispatch:
    def test_get_sends_query_only(self):
        dispatcher, transport = _make_dispatcher()
        response = dispatcher.dispatch("get", URL, HEADERS, QUERY, BODY)

        assert response.status_code == 200
        transport.send.assert_called_once_with("GET", URL, HEADERS, QUERY, None)

    @pytest.mark.parametrize("method", ["POST", "PUT", "PATCH", "DELETE"])
    def test_body_methods_send_body_only(self, method):
        dispatcher, transport = _make_dispatcher()
        dispatcher.dispatch(method.lower(), URL, HEADERS, QUERY, BODY)

        transport.send.assert_called_once_with(method, URL, HEADERS, None, BODY)

    def test_unsupported_method_never_reaches_transport(self):
        dispatcher, transport = _make_dispatcher()
        with pytest.raises(UnsupportedMethod, match="Unsupported HTTP method: INVALID"):
            dispatcher.dispatch("INVALID", URL, HEADERS, QUERY, BODY)
        transport.send.assert_not_called()
