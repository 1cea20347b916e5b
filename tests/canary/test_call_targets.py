"""
Call target table, abort code names and result models.
"""

import pytest

from canary_client.canary import (
    ABORT_CODES,
    LAYOUTS,
    CallTarget,
    MemberInfo,
    RegistryInfo,
    describe_abort,
    target_for,
)
from canary_client.codec.move_types import is_valid_identifier, parse_type_tag
from canary_client.runtime.address import SuiAddress
from canary_client.runtime.errors import DecodeError


class TestCallTargets:

    @pytest.mark.parametrize("target", list(CallTarget), ids=lambda t: t.name)
    def test_names_are_identifiers(self, target):
        assert is_valid_identifier(target.module)
        assert is_valid_identifier(target.function)

    @pytest.mark.parametrize("target", list(CallTarget), ids=lambda t: t.name)
    def test_return_types_parse(self, target):
        for type_str in target.value.returns:
            parse_type_tag(type_str.format(package="0xcafe"))

    def test_lookup(self):
        assert target_for("member_registry", "join_registry") is CallTarget.JOIN_REGISTRY
        assert target_for("pkg_storage", "get_blob_id") is CallTarget.GET_BLOB_IDS

    def test_unknown_function(self):
        with pytest.raises(KeyError):
            target_for("member_registry", "set_admin")

    def test_entry_functions_return_nothing(self):
        assert CallTarget.JOIN_REGISTRY.value.returns == ()
        assert CallTarget.STORE_BLOB.value.returns == ()

    def test_member_layout(self):
        layout = LAYOUTS["member_registry::MemberInfoWithAddress"]
        assert [name for name, _ in layout.fields] == ["member", "domain", "joined_at"]


class TestAbortCodes:

    def test_registry_codes(self):
        assert describe_abort("member_registry", 2) == "E_NOT_ADMIN: caller is not the registry admin"
        assert ABORT_CODES["member_registry"][0] == "E_INSUFFICIENT_PAYMENT"

    def test_storage_codes(self):
        assert describe_abort("pkg_storage", 1).startswith("E_DERIVED_OBJECT_ALREADY_EXISTS:")

    @pytest.mark.parametrize("module,code", [
        ("member_registry", 99),
        ("pkg_storage", 0),
        ("coin", 1),
    ])
    def test_unknown(self, module, code):
        assert describe_abort(module, code) is None


class TestModels:

    def test_registry_info_from_fields(self):
        info = RegistryInfo.from_fields(SuiAddress("0x1"),
                                        {"fee": "1500000000", "member_count": "7"},
                                        SuiAddress("0x2"))
        assert info.fee == 1_500_000_000
        assert info.fee_sui == "1.5"
        assert info.member_count == 7

    @pytest.mark.parametrize("fields", [
        {},
        {"fee": "1"},
        {"fee": None, "member_count": "1"},
        {"fee": "ten", "member_count": "1"},
    ])
    def test_registry_info_malformed(self, fields):
        with pytest.raises(DecodeError):
            RegistryInfo.from_fields(SuiAddress("0x1"), fields, SuiAddress("0x2"))

    def test_models_are_frozen(self):
        member = MemberInfo(domain="example.com", joined_at=0)
        with pytest.raises(Exception):
            member.domain = "other.com"

    def test_member_timestamp(self):
        member = MemberInfo(domain="example.com", joined_at=86_400_000, member="0xb0b")
        assert member.member == SuiAddress("0xb0b")
        assert member.joined_at_datetime.isoformat() == "1970-01-02T00:00:00+00:00"
