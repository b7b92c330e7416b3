import pytest

from http_manager.errors import InvalidType, MissingParameter
from http_manager.models import ConfigurationValues, Endpoint, Provider
from http_manager.validators.configuration import validate_configuration

PROVIDER = Provider(id="p", base_url="https://api.example.com")


def _make_endpoint(options: dict | None) -> Endpoint:
    return Endpoint(id="e", provider=PROVIDER, method="POST", path="/v1/charges", options=options)


CHARGE_OPTIONS = {
    "body": {
        "amount": {"type": "integer", "required": True},
        "currency": {"type": "string", "required": True},
    },
}


class TestEmptySchema:
    @pytest.mark.parametrize("options", [None, {}, {"body": {}}])
    def test_anything_goes(self, options):
        endpoint = _make_endpoint(options)
        values = ConfigurationValues(
            url_params={"x": [1, 2]},
            query_params={"y": {"z": 1}},
            body={"anything": object()},
        )
        validate_configuration(endpoint, values)


class TestRequired:
    def test_missing_required_body_param(self):
        endpoint = _make_endpoint(CHARGE_OPTIONS)
        with pytest.raises(MissingParameter, match="Missing required parameter 'amount' in body") as exc:
            validate_configuration(endpoint, ConfigurationValues())
        assert exc.value.group == "body"
        assert exc.value.name == "amount"

    def test_passes_with_valid_configuration(self):
        endpoint = _make_endpoint(CHARGE_OPTIONS)
        validate_configuration(endpoint, ConfigurationValues(body={"amount": 5000, "currency": "usd"}))

    def test_optional_param_may_be_missing(self):
        endpoint = _make_endpoint({
            "body": {
                "amount": {"type": "integer", "required": True},
                "description": {"type": "string", "required": False},
            },
        })
        validate_configuration(endpoint, ConfigurationValues(body={"amount": 5000}))

    def test_null_value_counts_as_missing(self):
        endpoint = _make_endpoint(CHARGE_OPTIONS)
        with pytest.raises(MissingParameter):
            validate_configuration(endpoint, ConfigurationValues(body={"amount": None, "currency": "usd"}))

    def test_url_params(self):
        endpoint = _make_endpoint({"url_params": {"username": {"type": "string", "required": True}}})
        with pytest.raises(MissingParameter, match="Missing required parameter 'username' in url_params"):
            validate_configuration(endpoint, ConfigurationValues())
        validate_configuration(endpoint, ConfigurationValues(url_params={"username": "octocat"}))

    def test_required_defaults_to_false(self):
        endpoint = _make_endpoint({"query_params": {"page": {"type": "integer"}}})
        validate_configuration(endpoint, ConfigurationValues())


class TestOrdering:
    def test_type_error_on_earlier_entry_wins(self):
        endpoint = _make_endpoint(CHARGE_OPTIONS)
        with pytest.raises(InvalidType) as exc:
            validate_configuration(endpoint, ConfigurationValues(body={"amount": "wrong"}))
        assert exc.value.name == "amount"

    def test_groups_scanned_url_query_body(self):
        endpoint = _make_endpoint({
            "body": {"amount": {"type": "integer", "required": True}},
            "query_params": {"expand": {"type": "boolean", "required": True}},
            "url_params": {"account": {"type": "string", "required": True}},
        })
        with pytest.raises(MissingParameter) as exc:
            validate_configuration(endpoint, ConfigurationValues())
        assert exc.value.group == "url_params"

        with pytest.raises(MissingParameter) as exc:
            validate_configuration(endpoint, ConfigurationValues(url_params={"account": "a"}))
        assert exc.value.group == "query_params"

        with pytest.raises(MissingParameter) as exc:
            validate_configuration(
                endpoint,
                ConfigurationValues(url_params={"account": "a"}, query_params={"expand": True}),
            )
        assert exc.value.group == "body"

    def test_stops_at_first_violation(self):
        endpoint = _make_endpoint({
            "body": {
                "first": {"type": "string", "required": True},
                "second": {"type": "integer", "required": True},
            },
        })
        with pytest.raises(MissingParameter) as exc:
            validate_configuration(endpoint, ConfigurationValues(body={"second": "not-an-int"}))
        assert exc.value.name == "first"


class TestTypes:
    def test_invalid_integer(self):
        endpoint = _make_endpoint({"body": {"amount": {"type": "integer", "required": True}}})
        with pytest.raises(
            InvalidType,
            match="Invalid type for parameter 'amount' in body. Expected integer, got string",
        ) as exc:
            validate_configuration(endpoint, ConfigurationValues(body={"amount": "not-an-integer"}))
        assert exc.value.expected == "integer"
        assert exc.value.actual == "string"

    @pytest.mark.parametrize(
        "declared, value",
        [
            ("string", "x"),
            ("integer", 5),
            ("boolean", False),
            ("array", [1, 2]),
            ("object", {"a": 1}),
        ],
    )
    def test_matching_types_accepted(self, declared, value):
        endpoint = _make_endpoint({"body": {"field": {"type": declared, "required": True}}})
        validate_configuration(endpoint, ConfigurationValues(body={"field": value}))

    @pytest.mark.parametrize(
        "declared, value, actual",
        [
            ("string", 5, "integer"),
            ("integer", True, "boolean"),
            ("integer", 1.5, "float"),
            ("boolean", "true", "string"),
            ("array", {"a": 1}, "object"),
            ("object", [1], "array"),
        ],
    )
    def test_mismatches_report_actual_type(self, declared, value, actual):
        endpoint = _make_endpoint({"query_params": {"field": {"type": declared, "required": False}}})
        with pytest.raises(InvalidType) as exc:
            validate_configuration(endpoint, ConfigurationValues(query_params={"field": value}))
        assert exc.value.group == "query_params"
        assert exc.value.expected == declared
        assert exc.value.actual == actual

    def test_undeclared_values_not_checked(self):
        endpoint = _make_endpoint({"body": {"amount": {"type": "integer", "required": True}}})
        validate_configuration(endpoint, ConfigurationValues(body={"amount": 1, "metadata": 3.14}))
