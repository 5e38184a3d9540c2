from enum import Enum


class Role(str, Enum):
    """Account role; USER is a student."""
    USER = "USER"
    TEACHER = "TEACHER"
    ADMIN = "ADMIN"
    SUPERVISOR = "SUPERVISOR"


STAFF_ROLES = [Role.ADMIN, Role.SUPERVISOR]
AUTHOR_ROLES = [Role.TEACHER, Role.ADMIN]
GRADER_ROLES = [Role.TEACHER, Role.ADMIN, Role.SUPERVISOR]


class ContentType(str, Enum):
    """Kind of item shown in a course's content list."""
    CHAPTER = "chapter"
    QUIZ = "quiz"
    LIVESTREAM = "livestream"


class PurchaseStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class SubscriptionStatus(str, Enum):
    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    EXPIRED = "EXPIRED"
    DENIED = "DENIED"


class SubscriptionRequestStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    DENIED = "DENIED"


class CurriculumType(str, Enum):
    MORNING = "morning"
    EVENING = "evening"


class UploadEndpoint(str, Enum):
    """Logical upload targets accepted by the upload route."""
    COURSE_IMAGE = "courseImage"
    COURSE_ATTACHMENT = "courseAttachment"
    HOMEWORK_IMAGE = "homeworkImage"
    ACTIVITY_IMAGE = "activityImage"
    CERTIFICATE_IMAGE = "certificateImage"
    TIMETABLE_IMAGE = "timetableImage"
    TRANSACTION_IMAGE = "transactionImage"
