from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="CARDAPIO_", extra="ignore")

    pix_merchant_name: str = "LANCHONETE"
    pix_merchant_city: str = "SAO PAULO"

    receipt_header: str = "LANCHONETE"

    printer_backend: str = "file"
    printer_spool_path: str = "./spool/receipts.bin"

    qrcode_output_dir: str = "./qrcodes"

    log_level: str = "INFO"
    log_json: bool = False


settings = Settings()
