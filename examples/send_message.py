"""Post a message to a channel through the REST API and print the response."""

import argparse
import asyncio
import json

from botgate import BotgateConfig, RestClient


async def run(channel_id: str, content: str) -> None:
    rest = RestClient(BotgateConfig())
    try:
        response = await rest.create_message(channel_id, content)
    finally:
        await rest.aclose()
    print(json.dumps(response, indent=2))


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser()
    parser.add_argument("--channel-id", required=True)
    parser.add_argument("--content", default="Pong!")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    asyncio.run(run(args.channel_id, args.content))


if __name__ == "__main__":
    main()
