# Base.metadata 에 모든 테이블을 등록하기 위한 import
from app.models.nursery import Nursery, NurseryLocation  # noqa: F401
from app.models.user import User  # noqa: F401
from app.models.auth_session import AuthSession  # noqa: F401
from app.models.content import Event, GalleryImage, Newsletter, StaffMember  # noqa: F401
from app.models.contact import ContactSubmission  # noqa: F401
from app.models.activity_log import ActivityLog, ActionType  # noqa: F401
from app.models.setting import SiteSetting  # noqa: F401
