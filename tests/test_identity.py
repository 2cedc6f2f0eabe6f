"""
Tests for the role identifier codec.
"""

import pytest

from rolesync.core.exceptions import ConfigurationError, IdentityFormatError
from rolesync.core.identity import RoleIdentity, encode_role_id, parse_role_id


class TestEncode:
    """Tests for encode_role_id."""

    def test_token_is_hex_of_database_dot_role(self):
        token = encode_role_id("admin", "readOnlyApp")

        assert token == "admin.readOnlyApp".encode().hex()
        assert token == "61646d696e2e726561644f6e6c79417070"

    def test_database_with_separator_is_rejected(self):
        with pytest.raises(IdentityFormatError):
            encode_role_id("my.db", "role")

    @pytest.mark.parametrize("database, role", [("", "role"), ("admin", "")])
    def test_empty_parts_are_rejected(self, database, role):
        with pytest.raises(IdentityFormatError):
            encode_role_id(database, role)


class TestParse:
    """Tests for parse_role_id."""

    @pytest.mark.parametrize(
        "database, role",
        [
            ("admin", "readOnlyApp"),
            ("sales", "writer"),
            ("admin", "app.v2"),
            ("données", "rôle"),
        ],
    )
    def test_round_trip(self, database, role):
        identity = parse_role_id(encode_role_id(database, role))

        assert identity.role == role
        assert identity.database == database

    def test_decoded_order_is_role_then_database(self):
        identity = parse_role_id(encode_role_id("admin", "readOnlyApp"))

        assert tuple(identity) == ("readOnlyApp", "admin")
        assert identity == RoleIdentity(role="readOnlyApp", database="admin")

    def test_document_id(self):
        identity = parse_role_id(encode_role_id("admin", "readOnlyApp"))

        assert identity.document_id == "admin.readOnlyApp"

    @pytest.mark.parametrize(
        "token",
        [
            "zz",                              # not hex
            "abc",                             # odd length
            "",                                # empty
            "admin".encode().hex(),            # no separator
            ".role".encode().hex(),            # empty database
            "admin.".encode().hex(),           # empty role
            b"\xff\xfe.role".hex(),            # not UTF-8
            "61646d696e 2e 726f6c65",          # whitespace between pairs
            " 6162",                           # leading whitespace
            "61646d696e2e726f6c65\n",          # trailing newline
        ],
    )
    def test_malformed_tokens(self, token):
        with pytest.raises(IdentityFormatError):
            parse_role_id(token)

    def test_format_error_is_a_configuration_error(self):
        with pytest.raises(ConfigurationError) as exc:
            parse_role_id("zz")

        assert exc.value.field == "id"
