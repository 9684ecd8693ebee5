from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """애플리케이션 설정"""

    environment: str = "development"

    # OpenAI 설정 - 릴리즈 노트 스트리밍 생성
    openai_api_key: str = ""
    openai_api_url: str = "https://api.openai.com/v1/chat/completions"
    openai_model: str = "gpt-4o-mini"
    openai_timeout: float = 120.0

    # GitHub - merged PR diff 목록 조회 대상
    github_token: str = ""
    github_repo_url: str = "https://github.com/openai/openai-node"
    github_timeout: float = 60.0

    # 동시 요청 제한
    github_max_concurrent_requests: int = 5

    # 목록 페이지 크기
    sample_diffs_per_page: int = 10

    # 요청 속도 제한 (slowapi 형식)
    rate_limit: str = "30/minute"
    rate_limit_enabled: bool = True

    # 로깅 설정
    log_level: str = "INFO"

    # CORS 설정
    cors_allowed_origins: str = ""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_allowed_origins.split(",") if o.strip()]

    def validate_for_production(self) -> list[str]:
        """프로덕션 환경에서 필수 설정 검증 후 누락된 항목 반환"""
        errors = []
        if not self.openai_api_key:
            errors.append("OPENAI_API_KEY")
        return errors

    @model_validator(mode="after")
    def validate_production_settings(self):
        """프로덕션 환경에서 필수 설정 검증"""
        if self.is_production:
            missing = self.validate_for_production()
            if missing:
                raise ValueError(f"프로덕션 환경에서 필수 설정 누락: {', '.join(missing)}")
        return self


settings = Settings()
