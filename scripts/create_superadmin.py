"""

SUPER_ADMIN 초기 계정 생성 및 기본 어린이집 등록 스크립트.

- 서버 최초 세팅 시 단 한 번 실행하는 용도
- 기본 어린이집(hayes / uxbridge / hounslow)이 없으면 등록한다.
- .env에 정의된 SUPERADMIN_* 환경 변수를 읽어
  SUPER_ADMIN 계정을 생성한다.
- 이미 SUPER_ADMIN 계정이 존재하면 생성하지 않고 종료한다.

사용 목적:
- 사용자 관리 / 사이트 설정 API에 접근할 수 있는
  최상위 관리자 계정을 안전하게 초기화하기 위함

사용 방법
- 가상환경 접속
- (.venv) ~\backend~$ python -m scripts.create_superadmin

"""

import os
from dotenv import load_dotenv
load_dotenv()

from sqlalchemy import select
from app.db.session import SessionLocal
from app.core.roles import Role
from app.core.security import get_password_hash
from app.models.nursery import Nursery, NurseryLocation
from app.models.user import User


DEFAULT_NURSERIES = [
    {
        "name": "Hayes Nursery",
        "location": NurseryLocation.HAYES,
        "address": "192 Church Road, Hayes, UB3 2LT",
        "phone_number": "01895 272885",
        "email": "hayes@cmcnursery.co.uk",
    },
    {
        "name": "Uxbridge Nursery",
        "location": NurseryLocation.UXBRIDGE,
        "address": "4 New Windsor Street, Uxbridge, UB8 2TU",
        "phone_number": "01895 272885",
        "email": "uxbridge@cmcnursery.co.uk",
    },
    {
        "name": "Hounslow Nursery",
        "location": NurseryLocation.HOUNSLOW,
        "address": "488, 490 Great West Rd, Hounslow TW5 0TA",
        "phone_number": "01895 272885",
        "email": "hounslow@cmcnursery.co.uk",
    },
]


def seed_nurseries(db) -> None:
    for data in DEFAULT_NURSERIES:
        exists = db.scalar(select(Nursery).where(Nursery.location == data["location"]))
        if exists:
            continue
        db.add(Nursery(**data))
        print(f"🏫 Nursery created: {data['name']}")
    db.commit()


def main():
    db = SessionLocal()
    try:
        seed_nurseries(db)

        exists = db.scalar(
            select(User).where(User.role == Role.SUPER_ADMIN)
        )
        if exists:
            print("✅ SUPER_ADMIN already exists. Skip creation.")
            return

        username = os.environ.get("SUPERADMIN_USERNAME", "superadmin")
        email = os.environ["SUPERADMIN_EMAIL"]
        password = os.environ["SUPERADMIN_PASSWORD"]
        first_name = os.environ.get("SUPERADMIN_FIRST_NAME", "Super")
        last_name = os.environ.get("SUPERADMIN_LAST_NAME", "Admin")

        taken = db.scalar(
            select(User).where((User.email == email) | (User.username == username))
        )
        if taken:
            raise RuntimeError("Username or email already exists but is not SUPER_ADMIN")

        user = User(
            username=username,
            email=email,
            password_hash=get_password_hash(password),
            first_name=first_name,
            last_name=last_name,
            role=Role.SUPER_ADMIN,
            nursery_id=None,
        )

        db.add(user)
        db.commit()

        print(f"🚀 SUPER_ADMIN created: {username} <{email}>")

    finally:
        db.close()


if __name__ == "__main__":
    main()
