"""Unit tests for validation.py - template declaration schemas."""

from validation import (
    DECLARATION_SCHEMAS,
    validate_declaration,
    validate_spec_against_schema,
)


class TestValidateSpecAgainstSchema:
    """Tests for validate_spec_against_schema function."""

    def test_valid_spec(self):
        """Test that a conforming spec passes."""
        schema = {"type": "object", "properties": {"name": {"type": "string"}}}
        is_valid, error = validate_spec_against_schema({"name": "x"}, schema)
        assert is_valid is True
        assert error is None

    def test_errors_carry_path(self):
        """Test that error messages include the failing path."""
        schema = {
            "type": "object",
            "properties": {
                "trigger": {
                    "type": "object",
                    "properties": {"frequency": {"type": "integer"}},
                }
            },
        }
        is_valid, error = validate_spec_against_schema(
            {"trigger": {"frequency": "often"}}, schema
        )
        assert is_valid is False
        assert error.startswith("trigger.frequency:")

    def test_root_errors(self):
        """Test that root level errors are labelled as such."""
        is_valid, error = validate_spec_against_schema(5, {"type": "object"})
        assert is_valid is False
        assert error.startswith("(root):")

    def test_errors_ordered_by_location(self):
        """Test that errors are reported in a stable location order."""
        schema = {
            "type": "object",
            "properties": {"b": {"type": "string"}, "a": {"type": "string"}},
        }
        is_valid, error = validate_spec_against_schema({"b": 1, "a": 2}, schema)
        assert is_valid is False
        assert error.index("a:") < error.index("b:")

    def test_multiple_errors_joined(self):
        """Test that all errors are collected."""
        schema = {"type": "object", "required": ["a", "b"]}
        is_valid, error = validate_spec_against_schema({}, schema)
        assert is_valid is False
        assert "'a' is a required property" in error
        assert "'b' is a required property" in error
        assert "; " in error


class TestValidateDeclaration:
    """Tests for validate_declaration function."""

    def test_every_kind_has_a_schema(self):
        """Test that all six kinds are covered."""
        assert set(DECLARATION_SCHEMAS) == {
            "secrets",
            "contracts",
            "relayers",
            "autotasks",
            "notifications",
            "sentinels",
        }

    def test_unknown_kind(self):
        """Test that an unknown kind is rejected."""
        is_valid, error = validate_declaration("widgets", {})
        assert is_valid is False
        assert "Unknown resource kind" in error

    def test_secret_must_be_string(self):
        """Test secret values."""
        assert validate_declaration("secrets", "value")[0] is True
        assert validate_declaration("secrets", {"value": 1})[0] is False

    def test_contract_requires_address(self):
        """Test contract required fields."""
        is_valid, error = validate_declaration(
            "contracts", {"name": "Box", "network": "goerli"}
        )
        assert is_valid is False
        assert "address" in error

    def test_relayer_api_keys_unique(self):
        """Test that duplicate API key names are rejected."""
        spec = {"name": "R", "network": "goerli", "api-keys": ["a", "a"]}
        assert validate_declaration("relayers", spec)[0] is False

    def test_relayer_api_key_without_separator(self):
        """Test that API key names cannot contain a dot."""
        spec = {"name": "R", "network": "goerli", "api-keys": ["a.b"]}
        assert validate_declaration("relayers", spec)[0] is False

    def test_autotask_trigger_type(self):
        """Test the autotask trigger type enum."""
        spec = {"name": "T", "path": "./t", "trigger": {"type": "schedule", "frequency": 5}}
        assert validate_declaration("autotasks", spec)[0] is True
        spec["trigger"]["type"] = "hourly"
        assert validate_declaration("autotasks", spec)[0] is False

    def test_notification_type(self):
        """Test the notification type enum."""
        spec = {"type": "slack", "name": "Alerts", "config": {"url": "https://x"}}
        assert validate_declaration("notifications", spec)[0] is True
        spec["type"] = "carrier-pigeon"
        assert validate_declaration("notifications", spec)[0] is False

    def test_sentinel_type(self):
        """Test the sentinel type enum."""
        spec = {"name": "S", "network": "goerli", "type": "FORTA"}
        assert validate_declaration("sentinels", spec)[0] is True
        spec["type"] = "TX"
        assert validate_declaration("sentinels", spec)[0] is False
