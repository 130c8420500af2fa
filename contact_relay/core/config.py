from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from typing import Optional

DEFAULT_RECIPIENT_EMAIL = "nvidal@synotec.cl"
SENDGRID_ENDPOINT = "https://api.sendgrid.com/v3/mail/send"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
    )

    # SendGrid credentials - must be provided via environment variables (secrets)
    sendgrid_api_key: Optional[str] = Field(default=None, alias="SENDGRID_API_KEY")
    sender_email: Optional[str] = Field(default=None, alias="SENDER_EMAIL")
    sender_name: str = Field(default="SYNOTEC Contacto", alias="SENDER_NAME")

    # Mailbox that receives every contact submission
    recipient_email: str = Field(default=DEFAULT_RECIPIENT_EMAIL, alias="CONTACT_RECIPIENT_EMAIL")

    sendgrid_endpoint: str = Field(default=SENDGRID_ENDPOINT, alias="SENDGRID_ENDPOINT")
    sendgrid_timeout: float = Field(default=15.0, alias="SENDGRID_TIMEOUT")

    # CORS settings
    cors_allow_origin: str = Field(default="*", alias="CORS_ALLOW_ORIGIN")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    @property
    def is_mail_configured(self) -> bool:
        """True when both the API key and the verified sender are set (empty strings count as missing)"""
        return bool(self.sendgrid_api_key) and bool(self.sender_email)


@lru_cache
def get_settings():
    return Settings()


# Worker secret bindings and the Settings fields they fill
BINDING_FIELDS = {
    "SENDGRID_API_KEY": "sendgrid_api_key",
    "SENDER_EMAIL": "sender_email",
    "SENDER_NAME": "sender_name",
    "CONTACT_RECIPIENT_EMAIL": "recipient_email",
    "CORS_ALLOW_ORIGIN": "cors_allow_origin",
}


def settings_from_bindings(env) -> Settings:
    """
    Build Settings from a Cloudflare worker `env`, where secrets are attributes
    rather than process environment variables. Unset or empty bindings keep the
    regular environment/default value.
    """
    overrides = {
        field: getattr(env, name)
        for name, field in BINDING_FIELDS.items()
        if getattr(env, name, None)
    }
    return Settings(**overrides)
