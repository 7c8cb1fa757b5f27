from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Blockchain
    RPC_URL: str = "https://ethereum-hoodi-rpc.publicnode.com"
    CHAIN_ID: int = 560048

    # Trap target
    TRACKED_ADDRESS: str = "0x0000000000000000000000000000000000000001"
    TOKEN_ADDRESS: str = "0x0000000000000000000000000000000000000002"

    # Thresholds (token base units / basis points)
    ABSOLUTE_THRESHOLD: int = 1000 * 10**18
    RELATIVE_THRESHOLD_BPS: int = 100  # 1%, 0 disables the relative rule

    # 'resilient' or 'strict'
    TRAP_VARIANT: str = "resilient"

    # Privileged identities
    DEPLOYER_ADDRESS: str = "0x0000000000000000000000000000000000000003"
    GUARDIAN_ADDRESS: str = ""  # empty = ungated respond()

    # Dry-run polling
    DRYRUN_ENABLED: bool = False
    POLL_INTERVAL: int = 12  # seconds, roughly one block
    HISTORY_SIZE: int = 10

    # Application
    API_SECRET_KEY: str = "dev-secret-key"
    LOG_LEVEL: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
