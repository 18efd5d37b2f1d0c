from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "billedy"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "info"
    log_json: bool = True
    cors_origins: list[str] = ["*"]

    session_secret: str = "change-me"
    default_theme: str = "system"
    html_lang: str = "en"

    cloudinary_cloud_name: str = ""
    cloudinary_api_key: str = ""
    cloudinary_api_secret: str = ""

    image_root_folder: str = "billedy"
    image_default_folder: str = "entities"
    image_size: int = 128
    max_upload_bytes: int = 5 * 1024 * 1024


settings = Settings()
