from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="XRPC_", extra="ignore")

    output_dir: str = "generated"
    default_targets: list[str] = ["python-server"]

    package_name: str = "xrpc_server"
    go_package_name: str = "server"

    log_level: str = "INFO"
    strict: bool = False

settings = Settings()
