from typing import Any, Optional
import datetime
import decimal
import uuid

from sqlalchemy import JSON, Boolean, DateTime, Enum, ForeignKeyConstraint, Index, Integer, Numeric, PrimaryKeyConstraint, SmallInteger, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from academy.core.enum import PurchaseStatus, Role, SubscriptionRequestStatus, SubscriptionStatus
from academy.libs.formats.datetime import now


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = 'user'
    __table_args__ = (
        PrimaryKeyConstraint('id', name='user_pk'),
        UniqueConstraint('email', name='user_email_unique'),
        UniqueConstraint('phone_number', name='user_phone_unique'),
        Index('idx_user_classification', 'curriculum', 'level', 'grade'),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    full_name: Mapped[str] = mapped_column(String, nullable=False)
    email: Mapped[str] = mapped_column(String, nullable=False)
    password: Mapped[str] = mapped_column(String, nullable=False)
    role: Mapped[Role] = mapped_column(Enum(Role, native_enum=False, length=20), nullable=False, default=Role.USER)
    phone_number: Mapped[Optional[str]] = mapped_column(String)
    parent_phone_number: Mapped[Optional[str]] = mapped_column(String)
    curriculum: Mapped[Optional[str]] = mapped_column(String)
    curriculum_type: Mapped[Optional[str]] = mapped_column(String)
    level: Mapped[Optional[str]] = mapped_column(String)
    language: Mapped[Optional[str]] = mapped_column(String)
    grade: Mapped[Optional[str]] = mapped_column(String)
    balance: Mapped[decimal.Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=decimal.Decimal('0'))
    points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_suspended: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime, default=now)
    updated_at: Mapped[datetime.datetime] = mapped_column(DateTime, default=now, onupdate=now)

    courses: Mapped[list['Course']] = relationship('Course', back_populates='user')
    purchases: Mapped[list['Purchase']] = relationship('Purchase', back_populates='user', cascade='all, delete-orphan')
    user_progress: Mapped[list['UserProgress']] = relationship('UserProgress', back_populates='user', cascade='all, delete-orphan')
    homework_submissions: Mapped[list['HomeworkSubmission']] = relationship('HomeworkSubmission', back_populates='student', cascade='all, delete-orphan')
    activity_submissions: Mapped[list['ActivitySubmission']] = relationship('ActivitySubmission', back_populates='student', cascade='all, delete-orphan')
    certificates: Mapped[list['Certificate']] = relationship('Certificate', foreign_keys='[Certificate.student_id]', back_populates='student', cascade='all, delete-orphan')
    subscriptions: Mapped[list['Subscription']] = relationship('Subscription', back_populates='user', cascade='all, delete-orphan')
    quiz_results: Mapped[list['QuizResult']] = relationship('QuizResult', back_populates='user', cascade='all, delete-orphan')
    live_stream_attendances: Mapped[list['LiveStreamAttendance']] = relationship('LiveStreamAttendance', back_populates='user', cascade='all, delete-orphan')


class Course(Base):
    __tablename__ = 'course'
    __table_args__ = (
        ForeignKeyConstraint(['user_id'], ['user.id'], name='course_user_fk'),
        PrimaryKeyConstraint('id', name='course_pkey'),
        Index('idx_course_target', 'target_curriculum', 'target_grade'),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    image_url: Mapped[Optional[str]] = mapped_column(Text)
    price: Mapped[decimal.Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=decimal.Decimal('0'))
    is_free: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    target_curriculum: Mapped[Optional[str]] = mapped_column(String)
    target_level: Mapped[Optional[str]] = mapped_column(String)
    target_language: Mapped[Optional[str]] = mapped_column(String)
    target_grade: Mapped[Optional[str]] = mapped_column(String)
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime, default=now)
    updated_at: Mapped[datetime.datetime] = mapped_column(DateTime, default=now, onupdate=now)

    user: Mapped['User'] = relationship('User', back_populates='courses')
    chapters: Mapped[list['Chapter']] = relationship('Chapter', back_populates='course', cascade='all, delete-orphan')
    quizzes: Mapped[list['Quiz']] = relationship('Quiz', back_populates='course', cascade='all, delete-orphan')
    live_streams: Mapped[list['LiveStream']] = relationship('LiveStream', back_populates='course', cascade='all, delete-orphan')
    purchases: Mapped[list['Purchase']] = relationship('Purchase', back_populates='course', cascade='all, delete-orphan')
    timetables: Mapped[list['Timetable']] = relationship('Timetable', back_populates='course', cascade='all, delete-orphan')


class Chapter(Base):
    __tablename__ = 'chapter'
    __table_args__ = (
        ForeignKeyConstraint(['course_id'], ['course.id'], ondelete='CASCADE', name='chapter_course_id_fkey'),
        PrimaryKeyConstraint('id', name='chapter_pkey'),
        Index('idx_chapter_course_position', 'course_id', 'position'),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    course_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    video_url: Mapped[Optional[str]] = mapped_column(Text)
    is_published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_free: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime, default=now)
    updated_at: Mapped[datetime.datetime] = mapped_column(DateTime, default=now, onupdate=now)

    course: Mapped['Course'] = relationship('Course', back_populates='chapters')
    attachments: Mapped[list['Attachment']] = relationship('Attachment', back_populates='chapter', cascade='all, delete-orphan')
    activities: Mapped[list['Activity']] = relationship('Activity', back_populates='chapter', cascade='all, delete-orphan')
    user_progress: Mapped[list['UserProgress']] = relationship('UserProgress', back_populates='chapter', cascade='all, delete-orphan')
    homework_submissions: Mapped[list['HomeworkSubmission']] = relationship('HomeworkSubmission', back_populates='chapter', cascade='all, delete-orphan')


class Attachment(Base):
    __tablename__ = 'attachment'
    __table_args__ = (
        ForeignKeyConstraint(['chapter_id'], ['chapter.id'], ondelete='CASCADE', name='attachment_chapter_id_fkey'),
        PrimaryKeyConstraint('id', name='attachment_pkey'),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    chapter_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    url: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime, default=now)

    chapter: Mapped['Chapter'] = relationship('Chapter', back_populates='attachments')


class Activity(Base):
    __tablename__ = 'activity'
    __table_args__ = (
        ForeignKeyConstraint(['chapter_id'], ['chapter.id'], ondelete='CASCADE', name='activity_chapter_id_fkey'),
        PrimaryKeyConstraint('id', name='activity_pkey'),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    chapter_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime, default=now)

    chapter: Mapped['Chapter'] = relationship('Chapter', back_populates='activities')
    submissions: Mapped[list['ActivitySubmission']] = relationship('ActivitySubmission', back_populates='activity', cascade='all, delete-orphan')


class Quiz(Base):
    __tablename__ = 'quiz'
    __table_args__ = (
        ForeignKeyConstraint(['course_id'], ['course.id'], ondelete='CASCADE', name='quiz_course_id_fkey'),
        PrimaryKeyConstraint('id', name='quiz_pkey'),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    course_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    questions: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    max_attempts: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    timer: Mapped[Optional[int]] = mapped_column(Integer)
    is_published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime, default=now)
    updated_at: Mapped[datetime.datetime] = mapped_column(DateTime, default=now, onupdate=now)

    course: Mapped['Course'] = relationship('Course', back_populates='quizzes')
    quiz_results: Mapped[list['QuizResult']] = relationship('QuizResult', back_populates='quiz', cascade='all, delete-orphan')


class QuizResult(Base):
    __tablename__ = 'quiz_result'
    __table_args__ = (
        ForeignKeyConstraint(['quiz_id'], ['quiz.id'], ondelete='CASCADE', name='quiz_result_quiz_id_fkey'),
        ForeignKeyConstraint(['user_id'], ['user.id'], ondelete='CASCADE', name='quiz_result_user_id_fkey'),
        PrimaryKeyConstraint('id', name='quiz_result_pkey'),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    quiz_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    attempt_number: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    score: Mapped[int] = mapped_column(Integer, nullable=False)
    total_points: Mapped[int] = mapped_column(Integer, nullable=False)
    percentage: Mapped[float] = mapped_column(Numeric(5, 2, asdecimal=False), nullable=False)
    answers: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime, default=now)

    quiz: Mapped['Quiz'] = relationship('Quiz', back_populates='quiz_results')
    user: Mapped['User'] = relationship('User', back_populates='quiz_results')


class LiveStream(Base):
    __tablename__ = 'live_stream'
    __table_args__ = (
        ForeignKeyConstraint(['course_id'], ['course.id'], ondelete='CASCADE', name='live_stream_course_id_fkey'),
        PrimaryKeyConstraint('id', name='live_stream_pkey'),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    course_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    meeting_url: Mapped[str] = mapped_column(Text, nullable=False)
    scheduled_at: Mapped[datetime.datetime] = mapped_column(DateTime, nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    duration_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=60)
    is_published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime, default=now)
    updated_at: Mapped[datetime.datetime] = mapped_column(DateTime, default=now, onupdate=now)

    course: Mapped['Course'] = relationship('Course', back_populates='live_streams')
    attendances: Mapped[list['LiveStreamAttendance']] = relationship('LiveStreamAttendance', back_populates='live_stream', cascade='all, delete-orphan')


class LiveStreamAttendance(Base):
    __tablename__ = 'live_stream_attendance'
    __table_args__ = (
        ForeignKeyConstraint(['live_stream_id'], ['live_stream.id'], ondelete='CASCADE', name='attendance_live_stream_id_fkey'),
        ForeignKeyConstraint(['user_id'], ['user.id'], ondelete='CASCADE', name='attendance_user_id_fkey'),
        PrimaryKeyConstraint('id', name='live_stream_attendance_pkey'),
        UniqueConstraint('user_id', 'live_stream_id', name='live_stream_attendance_unique'),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    live_stream_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    joined_at: Mapped[datetime.datetime] = mapped_column(DateTime, default=now)

    live_stream: Mapped['LiveStream'] = relationship('LiveStream', back_populates='attendances')
    user: Mapped['User'] = relationship('User', back_populates='live_stream_attendances')


class Purchase(Base):
    __tablename__ = 'purchase'
    __table_args__ = (
        ForeignKeyConstraint(['course_id'], ['course.id'], ondelete='CASCADE', name='purchase_course_id_fkey'),
        ForeignKeyConstraint(['user_id'], ['user.id'], ondelete='CASCADE', name='purchase_user_id_fkey'),
        PrimaryKeyConstraint('id', name='purchase_pkey'),
        UniqueConstraint('user_id', 'course_id', name='purchase_user_course_unique'),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    course_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    status: Mapped[PurchaseStatus] = mapped_column(Enum(PurchaseStatus, native_enum=False, length=20), nullable=False, default=PurchaseStatus.ACTIVE)
    price: Mapped[decimal.Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=decimal.Decimal('0'))
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime, default=now)
    updated_at: Mapped[datetime.datetime] = mapped_column(DateTime, default=now, onupdate=now)

    course: Mapped['Course'] = relationship('Course', back_populates='purchases')
    user: Mapped['User'] = relationship('User', back_populates='purchases')


class UserProgress(Base):
    __tablename__ = 'user_progress'
    __table_args__ = (
        ForeignKeyConstraint(['chapter_id'], ['chapter.id'], ondelete='CASCADE', name='user_progress_chapter_id_fkey'),
        ForeignKeyConstraint(['user_id'], ['user.id'], ondelete='CASCADE', name='user_progress_user_id_fkey'),
        PrimaryKeyConstraint('id', name='user_progress_pkey'),
        UniqueConstraint('user_id', 'chapter_id', name='user_progress_unique'),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    chapter_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    is_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime, default=now)
    updated_at: Mapped[datetime.datetime] = mapped_column(DateTime, default=now, onupdate=now)

    chapter: Mapped['Chapter'] = relationship('Chapter', back_populates='user_progress')
    user: Mapped['User'] = relationship('User', back_populates='user_progress')


class HomeworkSubmission(Base):
    __tablename__ = 'homework_submission'
    __table_args__ = (
        ForeignKeyConstraint(['chapter_id'], ['chapter.id'], ondelete='CASCADE', name='homework_chapter_id_fkey'),
        ForeignKeyConstraint(['student_id'], ['user.id'], ondelete='CASCADE', name='homework_student_id_fkey'),
        PrimaryKeyConstraint('id', name='homework_submission_pkey'),
        UniqueConstraint('student_id', 'chapter_id', name='homework_student_chapter_unique'),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    student_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    chapter_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    image_url: Mapped[str] = mapped_column(Text, nullable=False)
    corrected_image_url: Mapped[Optional[str]] = mapped_column(Text)
    feedback: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime, default=now)
    updated_at: Mapped[datetime.datetime] = mapped_column(DateTime, default=now)

    chapter: Mapped['Chapter'] = relationship('Chapter', back_populates='homework_submissions')
    student: Mapped['User'] = relationship('User', back_populates='homework_submissions')


class ActivitySubmission(Base):
    __tablename__ = 'activity_submission'
    __table_args__ = (
        ForeignKeyConstraint(['activity_id'], ['activity.id'], ondelete='CASCADE', name='activity_submission_activity_id_fkey'),
        ForeignKeyConstraint(['student_id'], ['user.id'], ondelete='CASCADE', name='activity_submission_student_id_fkey'),
        PrimaryKeyConstraint('id', name='activity_submission_pkey'),
        UniqueConstraint('student_id', 'activity_id', name='activity_submission_student_activity_unique'),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    student_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    activity_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    image_url: Mapped[str] = mapped_column(Text, nullable=False)
    corrected_image_url: Mapped[Optional[str]] = mapped_column(Text)
    feedback: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime, default=now)
    updated_at: Mapped[datetime.datetime] = mapped_column(DateTime, default=now)

    activity: Mapped['Activity'] = relationship('Activity', back_populates='submissions')
    student: Mapped['User'] = relationship('User', back_populates='activity_submissions')


class Certificate(Base):
    __tablename__ = 'certificate'
    __table_args__ = (
        ForeignKeyConstraint(['student_id'], ['user.id'], ondelete='CASCADE', name='certificate_student_id_fkey'),
        ForeignKeyConstraint(['assigned_by'], ['user.id'], ondelete='SET NULL', name='certificate_assigned_by_fkey'),
        PrimaryKeyConstraint('id', name='certificate_pkey'),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    student_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    image_url: Mapped[str] = mapped_column(Text, nullable=False)
    assigned_by: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid)
    title: Mapped[Optional[str]] = mapped_column(Text)
    description: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime, default=now)

    student: Mapped['User'] = relationship('User', foreign_keys=[student_id], back_populates='certificates')
    assigner: Mapped[Optional['User']] = relationship('User', foreign_keys=[assigned_by])


class Timetable(Base):
    __tablename__ = 'timetable'
    __table_args__ = (
        ForeignKeyConstraint(['course_id'], ['course.id'], ondelete='CASCADE', name='timetable_course_id_fkey'),
        ForeignKeyConstraint(['created_by'], ['user.id'], ondelete='SET NULL', name='timetable_created_by_fkey'),
        PrimaryKeyConstraint('id', name='timetable_pkey'),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    image_url: Mapped[str] = mapped_column(Text, nullable=False)
    title: Mapped[Optional[str]] = mapped_column(Text)
    description: Mapped[Optional[str]] = mapped_column(Text)
    course_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid)
    target_curriculum: Mapped[Optional[str]] = mapped_column(String)
    target_curriculum_type: Mapped[Optional[str]] = mapped_column(String)
    target_grade: Mapped[Optional[str]] = mapped_column(Text)
    target_section: Mapped[Optional[str]] = mapped_column(String)
    day_of_week: Mapped[Optional[int]] = mapped_column(SmallInteger)
    start_time: Mapped[Optional[str]] = mapped_column(String(5))
    end_time: Mapped[Optional[str]] = mapped_column(String(5))
    created_by: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid)
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime, default=now)
    updated_at: Mapped[datetime.datetime] = mapped_column(DateTime, default=now, onupdate=now)

    course: Mapped[Optional['Course']] = relationship('Course', back_populates='timetables')


class SubscriptionPlan(Base):
    __tablename__ = 'subscription_plan'
    __table_args__ = (
        PrimaryKeyConstraint('id', name='subscription_plan_pkey'),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    price: Mapped[decimal.Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=decimal.Decimal('0'))
    duration_days: Mapped[int] = mapped_column(Integer, nullable=False, default=30)
    curriculum: Mapped[str] = mapped_column(String, nullable=False)
    grade: Mapped[str] = mapped_column(String, nullable=False)
    level: Mapped[Optional[str]] = mapped_column(String)
    language: Mapped[Optional[str]] = mapped_column(String)
    description: Mapped[Optional[str]] = mapped_column(Text)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime, default=now)

    subscriptions: Mapped[list['Subscription']] = relationship('Subscription', back_populates='plan', cascade='all, delete-orphan')


class Subscription(Base):
    __tablename__ = 'subscription'
    __table_args__ = (
        ForeignKeyConstraint(['plan_id'], ['subscription_plan.id'], ondelete='CASCADE', name='subscription_plan_id_fkey'),
        ForeignKeyConstraint(['user_id'], ['user.id'], ondelete='CASCADE', name='subscription_user_id_fkey'),
        PrimaryKeyConstraint('id', name='subscription_pkey'),
        Index('idx_subscription_user_status', 'user_id', 'status'),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    plan_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    status: Mapped[SubscriptionStatus] = mapped_column(Enum(SubscriptionStatus, native_enum=False, length=20), nullable=False, default=SubscriptionStatus.PENDING)
    start_date: Mapped[Optional[datetime.datetime]] = mapped_column(DateTime)
    end_date: Mapped[Optional[datetime.datetime]] = mapped_column(DateTime)
    payment_image_url: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime, default=now)

    plan: Mapped['SubscriptionPlan'] = relationship('SubscriptionPlan', back_populates='subscriptions')
    user: Mapped['User'] = relationship('User', back_populates='subscriptions')
    requests: Mapped[list['SubscriptionRequest']] = relationship('SubscriptionRequest', back_populates='subscription', cascade='all, delete-orphan')


class SubscriptionRequest(Base):
    __tablename__ = 'subscription_request'
    __table_args__ = (
        ForeignKeyConstraint(['subscription_id'], ['subscription.id'], ondelete='CASCADE', name='subscription_request_subscription_id_fkey'),
        ForeignKeyConstraint(['reviewed_by'], ['user.id'], ondelete='SET NULL', name='subscription_request_reviewed_by_fkey'),
        PrimaryKeyConstraint('id', name='subscription_request_pkey'),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    subscription_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    status: Mapped[SubscriptionRequestStatus] = mapped_column(Enum(SubscriptionRequestStatus, native_enum=False, length=20), nullable=False, default=SubscriptionRequestStatus.PENDING)
    reviewed_by: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid)
    reviewed_at: Mapped[Optional[datetime.datetime]] = mapped_column(DateTime)
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime, default=now)

    subscription: Mapped['Subscription'] = relationship('Subscription', back_populates='requests')
    reviewer: Mapped[Optional['User']] = relationship('User', foreign_keys=[reviewed_by])


class StudentMessage(Base):
    __tablename__ = 'student_message'
    __table_args__ = (
        ForeignKeyConstraint(['created_by'], ['user.id'], ondelete='SET NULL', name='student_message_created_by_fkey'),
        PrimaryKeyConstraint('id', name='student_message_pkey'),
        Index('idx_student_message_active_created', 'is_active', 'created_at'),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    target_curriculum: Mapped[Optional[str]] = mapped_column(String)
    target_level: Mapped[Optional[str]] = mapped_column(String)
    target_language: Mapped[Optional[str]] = mapped_column(String)
    target_grade: Mapped[Optional[str]] = mapped_column(String)
    created_by: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid)
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime, default=now)
    updated_at: Mapped[datetime.datetime] = mapped_column(DateTime, default=now, onupdate=now)

    creator: Mapped[Optional['User']] = relationship('User', foreign_keys=[created_by])
