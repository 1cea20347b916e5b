"""
Signing, single-shot submission, outcome classification and reconciliation.
"""

import pytest
import pytest_asyncio

from helpers.mocks import make_address

from canary_client.runtime.errors import (
    BuildError,
    ConnectionError,
    ErrorCode,
    ExecutionError,
    NetworkError,
    TimeoutError,
    UnknownOutcomeError,
)
from canary_client.signers.signer import verify_transaction_signature
from canary_client.tx import TransactionResponse, reconcile, sign_and_submit, sign_transaction
from canary_client.tx.builder import TransactionAssembler


@pytest_asyncio.fixture
async def payload(sui, signer):
    sui.add_coin(signer.address)
    assembler = TransactionAssembler(sui.rpc, sender=signer.address)
    assembler.transfer_sui(make_address(0xB0B), 1_000)
    return await assembler.finalize()


@pytest.mark.asyncio
class TestSubmit:

    async def test_signs_the_exact_bytes_submitted(self, sui, signer, payload):
        response = await sign_and_submit(sui.rpc, payload, signer)
        assert response.succeeded
        assert response.digest == payload.digest()

        ((tx_bytes, signatures),) = sui.executed
        assert tx_bytes == payload.to_bcs()
        assert verify_transaction_signature(signatures[0], tx_bytes)

    async def test_submits_once(self, sui, signer, payload):
        sui.transport.fail("sui_executeTransactionBlock", TimeoutError("no response"))
        with pytest.raises(UnknownOutcomeError):
            await sign_and_submit(sui.rpc, payload, signer)
        assert len(sui.transport.calls_to("sui_executeTransactionBlock")) == 1

    async def test_lost_response_reports_digest(self, sui, signer, payload):
        sui.transport.fail("sui_executeTransactionBlock", NetworkError("connection reset"))
        with pytest.raises(UnknownOutcomeError) as exc_info:
            await sign_and_submit(sui.rpc, payload, signer)
        assert exc_info.value.digest == payload.digest()
        assert exc_info.value.code is ErrorCode.UNKNOWN_OUTCOME

    async def test_connection_refused_is_not_ambiguous(self, sui, signer, payload):
        sui.transport.fail("sui_executeTransactionBlock", ConnectionError("refused"))
        with pytest.raises(ConnectionError):
            await sign_and_submit(sui.rpc, payload, signer)

    async def test_client_http_error_is_not_ambiguous(self, sui, signer, payload):
        sui.transport.fail("sui_executeTransactionBlock",
                           NetworkError("HTTP 413", details={"status": 413}))
        with pytest.raises(NetworkError) as exc_info:
            await sign_and_submit(sui.rpc, payload, signer)
        assert not isinstance(exc_info.value, UnknownOutcomeError)

    async def test_node_rejection(self, sui, signer, payload):
        sui.transport.rpc_error("sui_executeTransactionBlock", -32002,
                                "Transaction validator signing failed")
        with pytest.raises(ExecutionError, match="rejected") as exc_info:
            await sign_and_submit(sui.rpc, payload, signer)
        assert exc_info.value.details["digest"] == payload.digest()

    async def test_invalid_params_is_a_rejection(self, sui, signer, payload):
        sui.transport.rpc_error("sui_executeTransactionBlock", -32602, "Invalid params")
        with pytest.raises(ExecutionError, match="rejected"):
            await sign_and_submit(sui.rpc, payload, signer)

    @pytest.mark.parametrize("code,message", [
        (-32050, "Transaction timed out before reaching finality"),
        (-32000, "Internal server error"),
    ])
    async def test_transient_node_error_is_ambiguous(self, sui, signer, payload, code, message):
        """A finality timeout may still commit, so the outcome is unknown."""
        sui.transport.rpc_error("sui_executeTransactionBlock", code, message)
        with pytest.raises(UnknownOutcomeError) as exc_info:
            await sign_and_submit(sui.rpc, payload, signer)
        assert exc_info.value.digest == payload.digest()
        assert exc_info.value.details["rpc_code"] == code

    async def test_move_abort(self, sui, signer, payload):
        sui.execute_status = {
            "status": "failure",
            "error": 'MoveAbort(MoveLocation { module: ModuleId { address: 0xcafe, name: '
                     'Identifier("member_registry") }, function: 2, instruction: 9, '
                     'function_name: Some("withdraw") }, 2) in command 0',
        }
        with pytest.raises(ExecutionError) as exc_info:
            await sign_and_submit(sui.rpc, payload, signer,
                                  describe_abort=lambda module, code: "E_NOT_ADMIN")
        error = exc_info.value
        assert error.code is ErrorCode.MOVE_ABORT
        assert error.details["module"] == "member_registry"
        assert error.abort_code == 2
        assert "E_NOT_ADMIN" in error.message
        assert error.details["digest"] == payload.digest()

    async def test_wrong_signer(self, payload, other_signer):
        with pytest.raises(BuildError, match="cannot sign"):
            sign_transaction(payload, other_signer)


@pytest.mark.asyncio
class TestReconcile:

    async def test_after_lost_response(self, sui, signer, payload):
        # the node executed the transaction but the response never arrived
        original = sui.transport.handlers["sui_executeTransactionBlock"]

        def execute_then_drop(params):
            original(params)
            raise TimeoutError("response lost")

        sui.transport.on("sui_executeTransactionBlock", execute_then_drop)
        with pytest.raises(UnknownOutcomeError):
            await sign_and_submit(sui.rpc, payload, signer)

        response = await reconcile(sui.rpc, payload.digest())
        assert response is not None
        assert response.succeeded

    async def test_unknown_digest(self, sui):
        assert await reconcile(sui.rpc, "UnknownDigest") is None


def test_response_model():
    response = TransactionResponse.model_validate({
        "digest": "abc",
        "effects": {"status": {"status": "success"},
                    "gasUsed": {"computationCost": "10", "storageCost": "20",
                                "storageRebate": "5"}},
        "objectChanges": [
            {"type": "created", "objectType": "0xcafe::pkg_storage::CanaryBlob", "objectId": "0x1"},
            {"type": "mutated", "objectType": "0x2::coin::Coin<0x2::sui::SUI>", "objectId": "0x2"},
        ],
        "unexpected": True,
    })
    assert response.succeeded
    assert response.gas_used.net_cost == 25
    assert [c["objectId"] for c in response.created_objects("::pkg_storage::CanaryBlob")] == ["0x1"]
