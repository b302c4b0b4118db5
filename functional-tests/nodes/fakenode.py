#!/usr/bin/env python3
"""
Fake chain node for functional tests.

Serves a JSON-RPC endpoint whose chain height grows by one every `--block-time`
seconds. The genesis timestamp is kept in the datadir, so a restarted node
resumes at the height a live chain would have reached in the meantime.

Answers the height RPCs of every node kind the awaiter supports:
    chain_get_block, info_get_status, eth_blockNumber, strata_syncStatus
"""

import argparse
import json
import logging
import os
import sys
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

logger = logging.getLogger("fakenode")


class Chain:
    def __init__(self, datadir: str, block_time: float, start_height: int):
        self.block_time = block_time
        self.start_height = start_height
        self.genesis = self._load_genesis(os.path.join(datadir, "genesis.json"))

    @staticmethod
    def _load_genesis(path: str) -> float:
        if os.path.exists(path):
            with open(path) as f:
                return json.load(f)["timestamp"]
        ts = time.time()
        with open(path, "w") as f:
            json.dump({"timestamp": ts}, f)
        return ts

    def height(self) -> int:
        return self.start_height + int((time.time() - self.genesis) / self.block_time)


def _block(height: int) -> dict:
    return {"hash": f"{height:064x}", "header": {"height": height, "era_id": height // 10}}


def handle(chain: Chain, method: str) -> dict:
    height = chain.height()
    if method == "chain_get_block":
        return {"api_version": "1.0.0", "block": _block(height)}
    if method == "info_get_status":
        return {"last_added_block_info": {"height": height, "hash": f"{height:064x}"}}
    if method == "eth_blockNumber":
        return hex(height)
    if method == "strata_syncStatus":
        return {"tip_height": height, "tip_block_id": f"{height:064x}", "cur_epoch": height // 4}
    raise KeyError(method)


def make_handler(chain: Chain):
    class Handler(BaseHTTPRequestHandler):
        def do_POST(self):
            length = int(self.headers.get("Content-Length", 0))
            try:
                req = json.loads(self.rfile.read(length))
            except json.JSONDecodeError:
                self._reply(400, {"jsonrpc": "2.0", "id": None, "error": {"code": -32700}})
                return

            resp = {"jsonrpc": "2.0", "id": req.get("id")}
            try:
                resp["result"] = handle(chain, req.get("method", ""))
            except KeyError:
                resp["error"] = {"code": -32601, "message": "Method not found"}
            self._reply(200, resp)

        def _reply(self, status: int, body: dict):
            data = json.dumps(body).encode()
            self.send_response(status)
            self.send_header("Content-Type", "application/json")
            self.send_header("Content-Length", str(len(data)))
            self.end_headers()
            self.wfile.write(data)

        def log_message(self, format, *args):
            logger.debug(format % args)

    return Handler


def main(argv: list[str]) -> int:
    parser = argparse.ArgumentParser(prog="fakenode", description=__doc__)
    parser.add_argument("--port", type=int, required=True)
    parser.add_argument("--datadir", required=True)
    parser.add_argument("--block-time", type=float, default=1.0)
    parser.add_argument("--start-height", type=int, default=0)
    args = parser.parse_args(argv[1:])

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    chain = Chain(args.datadir, args.block_time, args.start_height)
    server = ThreadingHTTPServer(("127.0.0.1", args.port), make_handler(chain))
    logger.info(f"serving on 127.0.0.1:{args.port}, height {chain.height()}")
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        pass
    finally:
        server.server_close()
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
