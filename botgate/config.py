"""Configuration for botgate components."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class BotgateConfig(BaseSettings):
    token: str = ""
    log_level: str = "INFO"

    api_base_url: str = "https://discord.com/api/v10"
    gateway_version: int = 10
    gateway_encoding: str = "json"

    intents: int = 33349
    os: str = "linux"
    browser: str = "botgate"
    device: str = "botgate"

    status: str = "online"
    activity_name: str = "with Python"
    activity_type: int = 0

    model_config = SettingsConfigDict(env_prefix="discord_", env_file=".env", extra="ignore")

    def gateway_query(self, url: str) -> str:
        return f"{url}?v={self.gateway_version}&encoding={self.gateway_encoding}"

    def authorization(self) -> str:
        return f"Bot {self.token}"
