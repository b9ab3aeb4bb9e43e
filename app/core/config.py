"""
config.py

애플리케이션 전역 설정(Configuration) 관리 파일.

이 파일은 .env 환경 변수들을 Pydantic BaseSettings를 통해 로드하여
애플리케이션 전반에서 공통으로 사용하는 설정 값을 제공한다.

주요 설정 항목:
- 데이터베이스 연결 정보
- 세션 쿠키 이름 / 만료 정책 / 보안 옵션
- 비밀번호 해시 강도(bcrypt rounds)
- CORS 허용 도메인 목록
- 로그 레벨 / 출력 형식

설계 원칙:
- 모든 환경 변수는 이 파일을 통해서만 접근
- 로컬 / 테스트 / 운영 환경을 .env로 분리하여 관리
- 설정 값은 런타임 중 변경되지 않는 불변 객체로 취급

관련 파일:
- app.main               : CORS / 로깅 초기화 시 설정 사용
- app.core.security      : bcrypt rounds 사용
- app.services.sessions  : 세션 만료 정책 사용
- app.routers.auth       : 세션 쿠키 옵션 사용
- app.db.session         : DATABASE_URL 사용

"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List

# .env 파일에 정의된 환경 변수를 로드하는 설정 클래스
# extra="ignore" 옵션으로 정의되지 않은 환경 변수는 무시
class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    DATABASE_URL: str = "sqlite:///./nursery.db"
    TEST_DATABASE_URL: str | None = None

    # 세션 옵션
    # - SESSION_MAX_AGE_MINUTES: 로그인 시점부터의 절대 만료 시간
    SESSION_COOKIE_NAME: str = "nursery_sid"
    SESSION_MAX_AGE_MINUTES: int = 24 * 60

    # 쿠키/배포 옵션
    # - COOKIE_SECURE: HTTPS 환경에서만 True 권장
    # - COOKIE_SAMESITE: CSRF 완화를 위해 "lax" 기본값
    COOKIE_SECURE: bool = False
    COOKIE_SAMESITE: str = "lax"
    COOKIE_DOMAIN: str | None = None

    # bcrypt 해시 비용 (테스트에서는 낮춰서 사용)
    BCRYPT_ROUNDS: int = 12

    # 요청 횟수 제한 (클라이언트 IP 기준, 0 이면 비활성화)
    RATE_LIMIT_REQUESTS: int = 100
    RATE_LIMIT_WINDOW_SECONDS: int = 15 * 60
    LOGIN_RATE_LIMIT_REQUESTS: int = 10

    # 로그 옵션
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "text"

    # CORS 허용 도메인 (프론트엔드 주소)
    CORS_ORIGINS: List[str] = ["http://localhost:5000", "http://127.0.0.1:5000"]

# 애플리케이션 전역에서 import하여 사용하는 Settings 인스턴스
# 실행 시 한 번만 생성됨
settings = Settings()
