# staffdesk/core/config.py

import os
from typing import Any

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# 프로젝트의 루트 디렉토리 경로를 계산합니다.
BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


class Settings(BaseSettings):
    """
    애플리케이션의 모든 설정을 정의하는 Pydantic BaseSettings 모델입니다.
    환경 변수 및 .env 파일에서 값을 자동으로 로드하며, 프로세스 시작 시 한 번만 생성됩니다.
    """

    # --- Pydantic Settings 설정 ---
    model_config = SettingsConfigDict(
        env_file=os.path.join(BASE_DIR, '.env'),  # 프로젝트 루트의 .env 파일
        env_file_encoding='utf-8',
        extra='ignore',                      # 모델에 없는 변수는 무시
        case_sensitive=True                  # 환경 변수 이름 대소문자 구분
    )

    # --- 애플리케이션 기본 설정 ---
    APP_NAME: str = "staffdesk API"
    APP_VERSION: str = "0.1.0"
    APP_ENV: str = Field("development", description="Application environment (e.g., development, production, testing)")
    DEBUG_MODE: bool = Field(False, description="Enable debug mode (SQL echo)")
    LOG_LEVEL: str = Field("INFO", description="Root log level")

    # --- 데이터베이스 설정 ---
    DATABASE_URL: SecretStr = Field(..., description="Async SQLAlchemy database URL (e.g. postgresql+asyncpg://...)")
    DB_POOL_SIZE: int = Field(10, ge=1, description="Number of pooled connections kept open")
    DB_MAX_OVERFLOW: int = Field(20, ge=0, description="Extra connections allowed above the pool size")
    DB_POOL_TIMEOUT: float = Field(10.0, gt=0, description="Seconds a request waits for a pooled connection")

    # --- JWT (JSON Web Token) 설정 ---
    SECRET_KEY: SecretStr = Field(..., description="Secret key for JWT token signing. Keep this highly secure!")
    ALGORITHM: str = Field("HS256", description="Algorithm used for JWT signing (e.g., HS256)")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(60 * 24 * 7, description="Access token lifetime in minutes (7 days)")

    # --- 파일 업로드 설정 ---
    UPLOAD_DIR: str = Field(os.path.join(BASE_DIR, "data", "uploads"), description="Directory uploaded images are written to")
    UPLOAD_BASE_URL: str = Field("http://localhost:8000/uploads", description="Public URL prefix for stored images")
    MAX_UPLOAD_BYTES: int = Field(100 * 1024, gt=0, description="Hard ceiling for one uploaded image (bytes)")

    @field_validator("SECRET_KEY")
    @classmethod
    def secret_key_not_empty(cls, value: SecretStr) -> SecretStr:
        if not value.get_secret_value():
            raise ValueError("SECRET_KEY cannot be empty")
        return value

    def model_post_init(self, __context: Any) -> None:  # noqa: ANN001
        # 공개 URL 접두사는 항상 슬래시 없이 끝나도록 정규화합니다.
        self.UPLOAD_BASE_URL = self.UPLOAD_BASE_URL.rstrip("/")


settings = Settings()
