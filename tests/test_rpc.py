import pytest

from blockawait.rpc import InvalidResponseError, JsonRpcClient, RpcError
from conftest import FakeResponse, FakeSession


def _client(*responses):
    return JsonRpcClient("http://node.test/rpc", name="node", session=FakeSession(*responses))


def test_payload_and_ids():
    rpc = _client(FakeResponse({"jsonrpc": "2.0", "id": 1, "result": "0x1"}))

    assert rpc.eth_blockNumber() == "0x1"
    assert rpc.call("chain_get_block", {"Height": 3}) == "0x1"

    first, second = rpc.session.payloads
    assert first == {"jsonrpc": "2.0", "method": "eth_blockNumber", "params": [], "id": 1}
    assert second["method"] == "chain_get_block"
    assert second["params"] == [{"Height": 3}]
    assert second["id"] == 2


def test_rpc_error_fields():
    error = {"code": -32001, "message": "block not known", "data": "abc"}
    rpc = _client(FakeResponse({"jsonrpc": "2.0", "id": 1, "error": error}))

    with pytest.raises(RpcError) as exc_info:
        rpc.call("chain_get_block")

    assert exc_info.value.code == -32001
    assert exc_info.value.message == "block not known"
    assert exc_info.value.data == "abc"


def test_invalid_json():
    rpc = _client(FakeResponse(text="502 Bad Gateway"))
    with pytest.raises(InvalidResponseError):
        rpc.call("chain_get_block")


def test_pre_call_hook_runs_before_request():
    rpc = _client(FakeResponse({"jsonrpc": "2.0", "id": 1, "result": 1}))
    seen = []

    def _hook(method):
        seen.append(method)
        raise RuntimeError("process 'node' crashed")

    rpc.set_pre_call_hook(_hook)
    with pytest.raises(RuntimeError):
        rpc.info_get_status()

    assert seen == ["info_get_status"]
    assert rpc.session.payloads == []


def test_private_attributes_are_not_rpc_methods():
    rpc = _client(FakeResponse({}))
    with pytest.raises(AttributeError):
        rpc._not_a_method  # noqa: B018


@pytest.mark.parametrize("timeout", [0, -1.0])
def test_non_positive_timeout_is_rejected(timeout):
    with pytest.raises(ValueError):
        JsonRpcClient("http://node.test/rpc", timeout=timeout)


def test_close_releases_session():
    rpc = _client(FakeResponse({}))
    rpc.close()
    assert rpc.session.closed
