"""
Local stand-in for the vendor gateway.

Says Hello, acknowledges heartbeats and answers Identify with READY, which
is enough to watch a full handshake:

    python examples/fake_gateway.py
    python -m botgate --gateway-url ws://127.0.0.1:8765 --log-level DEBUG
"""

import argparse
import asyncio
import json
import uuid

from websockets.asyncio.server import ServerConnection, serve


async def handle(websocket: ServerConnection, heartbeat_interval: int) -> None:
    sequence = 0
    print("client connected")
    await websocket.send(json.dumps({"op": 10, "d": {"heartbeat_interval": heartbeat_interval}, "s": None, "t": None}))

    async for message in websocket:
        frame = json.loads(message)
        print(f"received: {frame['op']}")

        if frame["op"] == 1:
            await websocket.send(json.dumps({"op": 11}))
        elif frame["op"] == 2:
            sequence += 1
            ready = {
                "session_id": uuid.uuid4().hex,
                "resume_gateway_url": "ws://127.0.0.1:8765",
            }
            await websocket.send(json.dumps({"op": 0, "t": "READY", "s": sequence, "d": ready}))


async def run(host: str, port: int, heartbeat_interval: int) -> None:
    async with serve(lambda ws: handle(ws, heartbeat_interval), host, port) as server:
        print(f"listening: ws://{host}:{port}")
        await server.serve_forever()


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser()
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8765)
    parser.add_argument("--heartbeat-interval", type=int, default=5000, help="milliseconds")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    asyncio.run(run(args.host, args.port, args.heartbeat_interval))


if __name__ == "__main__":
    main()
