import logging
from enum import Enum

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class BillDeletePolicy(str, Enum):
    RESTRICT = "restrict"
    CASCADE = "cascade"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="PAYGO_", extra="ignore")

    db_url: str = "sqlite:///paygo.db"

    log_level: str = "INFO"
    log_json: bool = False

    delete_password: SecretStr = SecretStr("")
    main_admin_email: str = ""

    bill_delete_policy: BillDeletePolicy = BillDeletePolicy.RESTRICT
    reject_excess_debit: bool = False

    identifier_retries: int = 3
    lock_timeout_seconds: float = 10.0

    currency_symbol: str = "₹"

    def get_delete_password(self) -> str:
        secret = self.delete_password.get_secret_value()
        if not secret:
            logger.warning(
                "PAYGO_DELETE_PASSWORD is not set. All delete operations will be refused. "
                "Set PAYGO_DELETE_PASSWORD in your environment or .env file."
            )
        return secret


settings = Settings()
