"""Run the bot: discover the gateway and keep a session open until it closes."""

import argparse
import asyncio
import logging

from botgate.client import GatewayClient
from botgate.config import BotgateConfig
from botgate.rest import RestClient

LOG = logging.getLogger("botgate")


async def run(config: BotgateConfig, gateway_url: str | None) -> None:
    rest = RestClient(config)
    client = GatewayClient(config, rest)

    try:
        if gateway_url is None:
            gateway_url = await rest.get_gateway_url()
        else:
            gateway_url = config.gateway_query(gateway_url)
        await client.connect(gateway_url)
    finally:
        await rest.aclose()


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="botgate")
    parser.add_argument("--log-level", default=None, help="overrides DISCORD_LOG_LEVEL")
    parser.add_argument("--gateway-url", default=None, help="skip gateway discovery")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    config = BotgateConfig()
    if args.log_level:
        config.log_level = args.log_level

    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not config.token:
        raise SystemExit("DISCORD_TOKEN is not set")

    try:
        asyncio.run(run(config, args.gateway_url))
    except KeyboardInterrupt:
        LOG.info("Interrupted, shutting down")


if __name__ == "__main__":
    main()
