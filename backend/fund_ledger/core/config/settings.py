from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict

from fund_ledger.shared.enums import Env, LedgerBackend


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="FUND_LEDGER_",
        extra="ignore",
    )

    env: Env = Env.dev
    log_level: str = "INFO"

    # World-state backend injected into the contract
    ledger_backend: LedgerBackend = LedgerBackend.memory
    database_url: str = "sqlite+pysqlite:///./fund_ledger.db"

    # Contract metadata
    contract_name: str = "admin_contract"
    contract_version: str = "0.0.1"
    contract_description: str = "Fund administration ledger contract"
    contract_license: str = "Apache-2.0"


settings = Settings()
