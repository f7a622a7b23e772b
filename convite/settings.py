from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="CONVITE_", extra="ignore")

    pix_key: str = ""
    pix_merchant_name: str = ""
    pix_merchant_city: str = ""

    qr_box_size: int = 6
    qr_border: int = 2

    cors_origins: list[str] = ["*"]

    log_level: str = "INFO"
    log_json: bool = False


settings = Settings()
