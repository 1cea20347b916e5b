"""
MemberRegistry: joining, admin operations and membership queries against the
fake fullnode.
"""

from unittest.mock import patch

import pytest

from helpers.mocks import make_address

from canary_client.canary import MemberRegistry, RegistryInfo
from canary_client.codec import BinaryWriter
from canary_client.objects import clock_arg
from canary_client.runtime.address import SuiAddress
from canary_client.runtime.errors import (
    BuildError,
    DecodeError,
    ErrorCode,
    ExecutionError,
    NotFoundError,
)
from canary_client.tx import (
    GasCoin,
    ImmOrOwnedObject,
    Input,
    MoveCall,
    NestedResult,
    SharedObject,
    SplitCoins,
    pure_address,
    pure_string,
    pure_u64,
    sign_and_submit,
)

SUBMIT = "canary_client.canary.contract.sign_and_submit"


def _abort(module, code):
    return {
        "status": "failure",
        "error": f'MoveAbort(MoveLocation {{ module: ModuleId {{ address: 0xcafe, name: '
                 f'Identifier("{module}") }}, function: 0, instruction: 1, function_name: '
                 f'Some("f") }}, {code}) in command 1',
    }


def _string(value):
    w = BinaryWriter()
    w.string(value)
    return w.to_bytes()


def _u64(value):
    return value.to_bytes(8, "little")


@pytest.fixture
def registry(sui, signer):
    return MemberRegistry(sui.rpc, signer)


async def _submitted_payload(operation):
    with patch(SUBMIT, wraps=sign_and_submit) as spy:
        response = await operation
    assert spy.call_count == 1
    return response, spy.call_args.args[1]


@pytest.mark.asyncio
class TestJoinRegistry:

    async def test_fee_is_split_from_gas(self, sui, canary, registry):
        response, payload = await _submitted_payload(
            registry.join_registry(canary["registry"], "example.com"))
        assert response.succeeded

        inputs = payload.kind.inputs
        split, call = payload.kind.commands
        assert split == SplitCoins(GasCoin(), (Input(inputs.index(pure_u64(100_000_000))),))
        assert call == MoveCall(canary["package"], "member_registry", "join_registry", (), (
            Input(inputs.index(SharedObject(canary["registry"], 5, True))),
            NestedResult(0, 0),
            Input(inputs.index(pure_string("example.com"))),
            Input(inputs.index(clock_arg())),
        ))
        assert payload.gas_data.payment[0].object_id == canary["gas"]

    async def test_with_payment_coin(self, sui, signer, canary, registry):
        payment = sui.add_coin(signer.address, 100_000_000)
        _, payload = await _submitted_payload(
            registry.join_registry(canary["registry"], "example.com", payment_coin=payment))

        (call,) = payload.kind.commands
        coin_input = payload.kind.inputs[call.arguments[1].index]
        assert isinstance(coin_input, ImmOrOwnedObject)
        assert coin_input.object_id == payment
        assert payload.gas_data.payment[0].object_id == canary["gas"]

    async def test_already_member(self, sui, canary, registry):
        sui.execute_status = _abort("member_registry", 1)
        with pytest.raises(ExecutionError) as exc_info:
            await registry.join_registry(canary["registry"], "example.com")
        error = exc_info.value
        assert error.code is ErrorCode.MOVE_ABORT
        assert error.details["abort_name"] == "E_ALREADY_MEMBER: address is already a member"

    async def test_insufficient_payment_caught_by_dry_run(self, sui, canary, registry):
        sui.dry_run_status = _abort("member_registry", 0)
        with pytest.raises(ExecutionError, match="E_INSUFFICIENT_PAYMENT"):
            await registry.join_registry(canary["registry"], "example.com")
        assert sui.executed == []

    async def test_requires_signer(self, sui, canary):
        with pytest.raises(BuildError, match="signer"):
            await MemberRegistry(sui.rpc).join_registry(canary["registry"], "example.com")

    async def test_missing_registry(self, sui, canary, registry):
        with pytest.raises(NotFoundError):
            await registry.join_registry(make_address(0xDEAD), "example.com")

    async def test_pinned_package(self, sui, signer, canary):
        pinned = make_address(0xF00D)
        registry = MemberRegistry(sui.rpc, signer, package_id=pinned)
        _, payload = await _submitted_payload(
            registry.join_registry(canary["registry"], "example.com"))
        assert payload.kind.commands[1].package == pinned


@pytest.mark.asyncio
class TestAdminOperations:

    @pytest.mark.parametrize("method,function,value,encoded", [
        ("withdraw", "withdraw", 5_000, pure_u64(5_000)),
        ("update_fee", "update_fee", 200_000_000, pure_u64(200_000_000)),
        ("remove_member", "remove_member", "0xb0b", pure_address("0xb0b")),
    ])
    async def test_admin_call(self, sui, canary, registry, method, function, value, encoded):
        _, payload = await _submitted_payload(
            getattr(registry, method)(canary["registry"], canary["admin_cap"], value))
        (call,) = payload.kind.commands
        assert (call.module, call.function) == ("member_registry", function)

        registry_arg, cap_arg, value_arg = (payload.kind.inputs[a.index] for a in call.arguments)
        assert registry_arg == SharedObject(canary["registry"], 5, True)
        assert isinstance(cap_arg, ImmOrOwnedObject)
        assert cap_arg.object_id == canary["admin_cap"]
        assert value_arg == encoded

    async def test_not_admin(self, sui, canary, registry):
        sui.execute_status = _abort("member_registry", 2)
        with pytest.raises(ExecutionError, match="E_NOT_ADMIN"):
            await registry.withdraw(canary["registry"], canary["admin_cap"], 1)


@pytest.mark.asyncio
class TestQueries:

    async def test_query_registry(self, sui, signer, canary):
        sui.set_return_values([(signer.address.to_bytes(), "address")])
        info = await MemberRegistry(sui.rpc).query_registry(canary["registry"])
        assert info == RegistryInfo(id=canary["registry"], fee=100_000_000, member_count=2,
                                    admin=signer.address)
        assert info.fee_sui == "0.1"

    async def test_queries_need_no_gas(self, sui, canary):
        sui.set_return_values([(b"\x01", "bool")])
        await MemberRegistry(sui.rpc).is_member(canary["registry"], "0xb0b")
        assert sui.executed == []
        assert sui.transport.calls_to("suix_getCoins") == []

    async def test_is_member(self, sui, canary):
        sui.set_return_values([(b"\x00", "bool")])
        assert await MemberRegistry(sui.rpc).is_member(canary["registry"], "0xb0b") is False

    async def test_query_member(self, sui, canary):
        sui.queue_return_values(
            [(b"\x01", "bool")],
            [(_string("example.com"), "0x1::string::String"), (_u64(1_700_000_000_000), "u64")],
        )
        member = await MemberRegistry(sui.rpc).query_member(canary["registry"], "0xb0b")
        assert member.member == SuiAddress("0xb0b")
        assert member.domain == "example.com"
        assert member.joined_at_datetime.year == 2023

    async def test_query_non_member(self, sui, canary):
        sui.set_return_values([(b"\x00", "bool")])
        assert await MemberRegistry(sui.rpc).query_member(canary["registry"], "0xb0b") is None
        assert len(sui.transport.calls_to("sui_devInspectTransactionBlock")) == 1

    async def test_list_members(self, sui, canary):
        w = BinaryWriter()
        w.uvarint(2)
        for seed, domain, joined in ((1, "a.com", 10), (2, "b.org", 20)):
            w.address(make_address(seed))
            w.string(domain)
            w.u64(joined)
        sui.set_return_values([(w.to_bytes(),
                                f"vector<{canary['package']}::member_registry::MemberInfoWithAddress>")])
        members = await MemberRegistry(sui.rpc).list_members(canary["registry"])
        assert [(m.member, m.domain, m.joined_at) for m in members] == [
            (make_address(1), "a.com", 10),
            (make_address(2), "b.org", 20),
        ]

    async def test_get_fee(self, sui, canary):
        assert await MemberRegistry(sui.rpc).get_fee(canary["registry"]) == 100_000_000
        assert sui.transport.calls_to("sui_devInspectTransactionBlock") == []

    async def test_malformed_registry(self, sui):
        broken = sui.add_shared("0xcafe::member_registry::Registry", fields={"fee": "lots"})
        with pytest.raises(DecodeError):
            await MemberRegistry(sui.rpc).get_fee(broken)

    async def test_wrong_arity_from_node(self, sui, canary):
        sui.set_return_values([(b"\x01", "bool"), (b"\x01", "bool")])
        with pytest.raises(DecodeError):
            await MemberRegistry(sui.rpc).is_member(canary["registry"], "0xb0b")

