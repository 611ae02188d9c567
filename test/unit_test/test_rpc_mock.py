"""
Test RPC Client with Mocks

Tests for RPC client behavior against an httpx.MockTransport.
"""

import base64
import json
import unittest

import httpx

from solana_wingman.errors import ConfigurationError, ErrorCode, RpcError
from solana_wingman.infra import RpcClient

ENDPOINT = "https://rpc.test"


def rpc_result(result):
    return {"jsonrpc": "2.0", "id": 1, "result": result}


class RecordingTransport:
    """Answers every request with a fixed response and keeps the JSON bodies"""

    def __init__(self, response=None, raises=None):
        self.response = response
        self.raises = raises
        self.bodies = []
        self.transport = httpx.MockTransport(self.handle)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.bodies.append(json.loads(request.content))
        if self.raises is not None:
            raise self.raises(request)
        return self.response


def make_rpc(response=None, raises=None, commitment="confirmed"):
    recorder = RecordingTransport(response, raises)
    rpc = RpcClient(ENDPOINT, commitment=commitment, timeout_seconds=5.0, transport=recorder.transport)
    return rpc, recorder


class TestRpcClientInit(unittest.TestCase):

    def test_empty_endpoint_raises(self):
        """An RPC client needs an endpoint"""
        with self.assertRaises(ConfigurationError):
            RpcClient("")

    def test_commitment_override(self):
        """Commitment given at construction is the default for calls"""
        rpc = RpcClient(ENDPOINT, commitment="finalized")
        self.assertEqual(rpc.commitment, "finalized")
        self.assertEqual(rpc.endpoint, ENDPOINT)


class TestRpcCalls(unittest.IsolatedAsyncioTestCase):

    async def test_get_balance(self):
        """getBalance returns lamports and sends the commitment"""
        rpc, recorder = make_rpc(httpx.Response(200, json=rpc_result({"context": {"slot": 1}, "value": 2_500_000_000})))

        lamports = await rpc.get_balance("Addr")

        self.assertEqual(lamports, 2_500_000_000)
        body = recorder.bodies[0]
        self.assertEqual(body["method"], "getBalance")
        self.assertEqual(body["params"], ["Addr", {"commitment": "confirmed"}])
        await rpc.close()

    async def test_get_balance_null_result(self):
        rpc, _ = make_rpc(httpx.Response(200, json=rpc_result(None)))
        self.assertEqual(await rpc.get_balance("Addr"), 0)

    async def test_get_latest_blockhash(self):
        """Blockhash and lastValidBlockHeight form the freshness anchor"""
        value = {"blockhash": "EkSnNWid2cvwEVnVx9aBqawnmiCNiDgp3gUdkDPTKN1N", "lastValidBlockHeight": 3090}
        rpc, _ = make_rpc(httpx.Response(200, json=rpc_result({"context": {"slot": 1}, "value": value})))

        anchor = await rpc.get_latest_blockhash()

        self.assertEqual(anchor.blockhash, value["blockhash"])
        self.assertEqual(anchor.last_valid_block_height, 3090)

    async def test_send_transaction_params(self):
        """Signed bytes are base64 encoded and node rebroadcast is off"""
        rpc, recorder = make_rpc(httpx.Response(200, json=rpc_result("5sig")))

        signature = await rpc.send_transaction(b"\x01\x02\x03", skip_preflight=True)

        self.assertEqual(signature, "5sig")
        tx_data, options = recorder.bodies[0]["params"]
        self.assertEqual(base64.b64decode(tx_data), b"\x01\x02\x03")
        self.assertEqual(options["maxRetries"], 0)
        self.assertTrue(options["skipPreflight"])
        self.assertEqual(options["encoding"], "base64")

    async def test_get_account_info_missing(self):
        """A null value means the account does not exist"""
        rpc, _ = make_rpc(httpx.Response(200, json=rpc_result({"context": {"slot": 1}, "value": None})))
        self.assertIsNone(await rpc.get_account_info("Addr"))

    async def test_get_transaction_upgrades_processed(self):
        """getTransaction does not accept processed; confirmed is used instead"""
        rpc, recorder = make_rpc(httpx.Response(200, json=rpc_result(None)), commitment="processed")

        self.assertIsNone(await rpc.get_transaction("5sig"))

        options = recorder.bodies[0]["params"][1]
        self.assertEqual(options["commitment"], "confirmed")
        self.assertEqual(options["maxSupportedTransactionVersion"], 0)

    async def test_token_accounts_filter(self):
        """Mint filter wins over program filter"""
        rpc, recorder = make_rpc(httpx.Response(200, json=rpc_result({"context": {"slot": 1}, "value": []})))

        await rpc.get_token_accounts_by_owner("Owner", mint="Mint")
        await rpc.get_token_accounts_by_owner("Owner", program_id="Prog")

        self.assertEqual(recorder.bodies[0]["params"][1], {"mint": "Mint"})
        self.assertEqual(recorder.bodies[1]["params"][1], {"programId": "Prog"})

    async def test_request_ids_increase(self):
        rpc, recorder = make_rpc(httpx.Response(200, json=rpc_result(10)))
        await rpc.get_block_height()
        await rpc.get_block_height()
        self.assertEqual([b["id"] for b in recorder.bodies], [1, 2])


class TestRpcErrors(unittest.IsolatedAsyncioTestCase):

    async def test_json_rpc_error(self):
        """A JSON-RPC error object is raised as a classified RpcError"""
        rpc, _ = make_rpc(httpx.Response(200, json={
            "jsonrpc": "2.0",
            "id": 1,
            "error": {"code": -32002, "message": "Transaction simulation failed: Blockhash not found"},
        }))

        with self.assertRaises(RpcError) as ctx:
            await rpc.send_transaction(b"\x00")

        self.assertEqual(ctx.exception.code, ErrorCode.TX_EXPIRED)
        self.assertTrue(ctx.exception.recoverable)

    async def test_rate_limited(self):
        rpc, _ = make_rpc(httpx.Response(429, text="Too Many Requests"))

        with self.assertRaises(RpcError) as ctx:
            await rpc.get_block_height()

        self.assertEqual(ctx.exception.code, ErrorCode.RPC_RATE_LIMITED)
        self.assertTrue(ctx.exception.recoverable)

    async def test_http_errors(self):
        """Gateway errors are recoverable, other HTTP errors are not"""
        rpc, _ = make_rpc(httpx.Response(503, text="unavailable"))
        with self.assertRaises(RpcError) as ctx:
            await rpc.get_block_height()
        self.assertTrue(ctx.exception.recoverable)

        rpc, _ = make_rpc(httpx.Response(401, text="unauthorized"))
        with self.assertRaises(RpcError) as ctx:
            await rpc.get_block_height()
        self.assertFalse(ctx.exception.recoverable)
        self.assertEqual(ctx.exception.details["status_code"], 401)

    async def test_timeout(self):
        rpc, _ = make_rpc(raises=lambda request: httpx.ReadTimeout("timed out", request=request))

        with self.assertRaises(RpcError) as ctx:
            await rpc.get_block_height()

        self.assertEqual(ctx.exception.code, ErrorCode.RPC_TIMEOUT)
        self.assertTrue(ctx.exception.recoverable)

    async def test_connection_error(self):
        rpc, _ = make_rpc(raises=lambda request: httpx.ConnectError("refused", request=request))

        with self.assertRaises(RpcError) as ctx:
            await rpc.get_balance("Addr")

        self.assertEqual(ctx.exception.code, ErrorCode.RPC_CONNECTION_FAILED)
        self.assertIsInstance(ctx.exception.original_error, httpx.ConnectError)

    async def test_invalid_json(self):
        """A non-JSON body is not retried"""
        rpc, _ = make_rpc(httpx.Response(200, text="<html>gateway</html>"))

        with self.assertRaises(RpcError) as ctx:
            await rpc.get_block_height()

        self.assertEqual(ctx.exception.code, ErrorCode.RPC_INVALID_RESPONSE)
        self.assertFalse(ctx.exception.recoverable)

    async def test_missing_blockhash(self):
        rpc, _ = make_rpc(httpx.Response(200, json=rpc_result({"context": {"slot": 1}, "value": None})))

        with self.assertRaises(RpcError):
            await rpc.get_latest_blockhash()


if __name__ == "__main__":
    unittest.main()
