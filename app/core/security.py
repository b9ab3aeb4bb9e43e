"""
security.py

비밀번호 해싱 및 세션/CSRF 토큰 생성·비교를 담당하는 보안 유틸리티 모음.

이 파일은 인증(auth) 로직에서 사용하는
저수준(low-level) 보안 기능만을 제공하며,
라우터나 비즈니스 로직은 포함하지 않는다.

주요 기능:
- 비밀번호 해싱 및 검증 (bcrypt)
- 존재하지 않는 사용자에 대한 더미 검증 (응답 시간 균등화)
- 세션 ID / CSRF 토큰 생성
- 토큰 상수 시간 비교

설계 원칙:
- 세션 ID 와 CSRF 토큰은 서로 독립적인 난수로 생성
- 토큰 비교는 항상 hmac.compare_digest 사용 (타이밍 공격 방지)

관련 파일:
- app.core.config          : bcrypt rounds 설정
- app.services.auth        : 로그인 시 비밀번호 검증
- app.services.sessions    : 세션 ID / CSRF 토큰 생성

"""

import hmac
import secrets

from passlib.context import CryptContext

from app.core.config import settings


# bcrypt 기반 비밀번호 해싱 컨텍스트
# deprecated="auto"로 향후 알고리즘 교체 가능하도록 설정

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)


"""
비밀번호 해싱 함수

- 평문 비밀번호를 bcrypt 해시로 변환
- DB에는 해시 값만 저장

"""

def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


"""
비밀번호 검증 함수

- 사용자가 입력한 평문 비밀번호와
  DB에 저장된 해시 값을 비교

"""

def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


"""
더미 비밀번호 검증 함수

- 존재하지 않는 사용자로 로그인 시도 시에도
  실제 검증과 같은 비용의 해시 연산을 수행
- "아이디 없음"과 "비밀번호 틀림"의 응답 시간 차이를 없앰

"""

def dummy_verify_password() -> None:
    pwd_context.dummy_verify()


def new_session_id() -> str:
    return secrets.token_urlsafe(32)


def new_csrf_token() -> str:
    return secrets.token_urlsafe(32)


def tokens_match(expected: str | None, presented: str | None) -> bool:
    if not expected or not presented:
        return False
    return hmac.compare_digest(expected.encode(), presented.encode())
