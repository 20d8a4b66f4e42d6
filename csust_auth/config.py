from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator

class Settings(BaseSettings):
    DB_PATH: str = "data/csust_auth.db"
    JWT_SECRET: str = "a_very_secret_key_change_it_in_production"
    JWT_TTL_SECONDS: int = 3600
    # 用于加密落盘的 cookie 值（Fernet key）
    ENCRYPTION_KEY: str = "5ZNNJxlB_leSfnTvWTWZp5dqc1-6gvW97_3CeYl43PE="

    # 内存中 SSOHelper 的存活时间，略短于 JWT
    SESSION_TTL_SECONDS: int = 3300

    HTTP_TIMEOUT: float = 10.0
    USER_AGENT: str = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/121.0.0.0 Safari/537.36"

    LOG_LEVEL: str = "INFO"

    # 短信验证码请求是否走当前会话（携带 cookie）；False 时与原客户端一致，单独发请求
    DYNAMIC_CODE_VIA_SESSION: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("HTTP_TIMEOUT")
    @classmethod
    def validate_timeout(cls, v: float):
        if v <= 0:
            raise ValueError("HTTP_TIMEOUT must be positive")
        return v

    @field_validator("JWT_TTL_SECONDS", "SESSION_TTL_SECONDS")
    @classmethod
    def validate_ttl(cls, v: int):
        if v <= 0:
            raise ValueError("TTL must be a positive number of seconds")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str):
        level = v.upper()
        if level not in ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"):
            raise ValueError(f"Unknown LOG_LEVEL: {v}")
        return level

settings = Settings()
