"""Process configuration, read from the environment once at startup.

A ``.env`` file in the working directory is loaded first when present.
Missing provider credentials do not stop the process; they are reported by
``Settings.missing_required`` and surface again as provider errors per call.
"""

import os
from dataclasses import dataclass

from dotenv import find_dotenv, load_dotenv

DEFAULT_GRAPH_API_VERSION = "v22.0"
DEFAULT_PORT = 3000
DEFAULT_OTP_TEMPLATE = "calibrecueauth"
DEFAULT_OTP_TTL_SECONDS = 300


@dataclass(frozen=True)
class Settings:
    verify_token: str = ""
    phone_number_id: str = ""
    access_token: str = ""
    graph_api_version: str = DEFAULT_GRAPH_API_VERSION
    app_secret: str = ""
    exotel_account_sid: str = ""
    cors_origin: str = "*"
    port: int = DEFAULT_PORT
    frontend_build_dir: str = "client/build"
    otp_template: str = DEFAULT_OTP_TEMPLATE
    otp_ttl_seconds: int = DEFAULT_OTP_TTL_SECONDS

    def missing_required(self) -> list[str]:
        """Names of required env vars that are not set."""
        required = {
            "WEBHOOK_VERIFY_TOKEN": self.verify_token,
            "PHONE_NUMBER_ID": self.phone_number_id,
            "WHATSAPP_ACCESS_TOKEN": self.access_token,
        }
        return [name for name, value in required.items() if not value]


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}") from None


def load_settings(*, dotenv: bool = True) -> Settings:
    """Build Settings from environment variables.

    Args:
        dotenv: Load ``.env`` before reading the environment. Existing
            environment variables are never overridden.
    """
    if dotenv:
        load_dotenv(find_dotenv(usecwd=True), override=False)

    return Settings(
        verify_token=os.environ.get("WEBHOOK_VERIFY_TOKEN", ""),
        phone_number_id=os.environ.get("PHONE_NUMBER_ID", ""),
        access_token=os.environ.get("WHATSAPP_ACCESS_TOKEN", ""),
        graph_api_version=os.environ.get("WHATSAPP_API_VERSION", DEFAULT_GRAPH_API_VERSION),
        app_secret=os.environ.get("WHATSAPP_APP_SECRET", ""),
        exotel_account_sid=os.environ.get("EXOTEL_ACCOUNT_SID", ""),
        cors_origin=os.environ.get("FRONTEND_URL") or "*",
        port=_int_env("BACKEND_PORT", DEFAULT_PORT),
        frontend_build_dir=os.environ.get("FRONTEND_BUILD_DIR", "client/build"),
        otp_template=os.environ.get("WHATSAPP_OTP_TEMPLATE", DEFAULT_OTP_TEMPLATE),
        otp_ttl_seconds=_int_env("OTP_TTL_SECONDS", DEFAULT_OTP_TTL_SECONDS),
    )
