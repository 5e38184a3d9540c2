"""Plain-dict views of ORM rows, as returned by the JSON routes."""

from typing import Any

from academy.core.enum import ContentType
from academy.db.models.database import (
    Activity,
    ActivitySubmission,
    Attachment,
    Chapter,
    Course,
    HomeworkSubmission,
    LiveStream,
    Quiz,
    StudentMessage,
    SubscriptionPlan,
    Timetable,
    User,
)


def user_to_dict(user: User) -> dict[str, Any]:
    return {
        "id": user.id,
        "full_name": user.full_name,
        "email": user.email,
        "phone_number": user.phone_number,
        "parent_phone_number": user.parent_phone_number,
        "role": user.role,
        "curriculum": user.curriculum,
        "curriculum_type": user.curriculum_type,
        "level": user.level,
        "language": user.language,
        "grade": user.grade,
        "balance": user.balance,
        "points": user.points,
        "is_suspended": user.is_suspended,
        "created_at": user.created_at,
        "updated_at": user.updated_at,
    }


def course_to_dict(course: Course) -> dict[str, Any]:
    return {
        "id": course.id,
        "user_id": course.user_id,
        "title": course.title,
        "description": course.description,
        "image_url": course.image_url,
        "price": course.price,
        "is_free": course.is_free,
        "is_published": course.is_published,
        "target_curriculum": course.target_curriculum,
        "target_level": course.target_level,
        "target_language": course.target_language,
        "target_grade": course.target_grade,
        "created_at": course.created_at,
        "updated_at": course.updated_at,
    }


def attachment_to_dict(attachment: Attachment) -> dict[str, Any]:
    return {
        "id": attachment.id,
        "chapter_id": attachment.chapter_id,
        "name": attachment.name,
        "url": attachment.url,
        "created_at": attachment.created_at,
    }


def chapter_to_dict(chapter: Chapter) -> dict[str, Any]:
    return {
        "id": chapter.id,
        "course_id": chapter.course_id,
        "title": chapter.title,
        "description": chapter.description,
        "video_url": chapter.video_url,
        "position": chapter.position,
        "is_free": chapter.is_free,
        "is_published": chapter.is_published,
        "created_at": chapter.created_at,
        "updated_at": chapter.updated_at,
    }


def quiz_to_dict(quiz: Quiz, with_answers: bool = True) -> dict[str, Any]:
    questions = quiz.questions or []
    if not with_answers:
        questions = [
            {k: v for k, v in q.items() if k != "correct_answer"} for q in questions
        ]
    return {
        "id": quiz.id,
        "course_id": quiz.course_id,
        "title": quiz.title,
        "description": quiz.description,
        "position": quiz.position,
        "is_published": quiz.is_published,
        "questions": questions,
        "total_points": sum(int(q.get("points", 1)) for q in quiz.questions or []),
        "max_attempts": quiz.max_attempts,
        "timer": quiz.timer,
        "created_at": quiz.created_at,
    }


def livestream_to_dict(stream: LiveStream) -> dict[str, Any]:
    return {
        "id": stream.id,
        "course_id": stream.course_id,
        "title": stream.title,
        "description": stream.description,
        "meeting_url": stream.meeting_url,
        "scheduled_at": stream.scheduled_at,
        "duration_minutes": stream.duration_minutes,
        "position": stream.position,
        "is_published": stream.is_published,
        "created_at": stream.created_at,
    }


def content_item(row: Chapter | Quiz | LiveStream) -> dict[str, Any]:
    """One entry of a course content list, tagged with its ContentType."""
    if isinstance(row, Chapter):
        return {**chapter_to_dict(row), "type": ContentType.CHAPTER}
    if isinstance(row, Quiz):
        data = quiz_to_dict(row, with_answers=False)
        data.pop("questions")
        return {**data, "type": ContentType.QUIZ}
    return {**livestream_to_dict(row), "type": ContentType.LIVESTREAM}


def activity_to_dict(activity: Activity) -> dict[str, Any]:
    return {
        "id": activity.id,
        "chapter_id": activity.chapter_id,
        "title": activity.title,
        "description": activity.description,
        "created_at": activity.created_at,
    }


def submission_to_dict(submission: HomeworkSubmission | ActivitySubmission) -> dict[str, Any]:
    data = {
        "id": submission.id,
        "student_id": submission.student_id,
        "image_url": submission.image_url,
        "corrected_image_url": submission.corrected_image_url,
        "feedback": submission.feedback,
        "created_at": submission.created_at,
        "updated_at": submission.updated_at,
    }
    if isinstance(submission, HomeworkSubmission):
        data["chapter_id"] = submission.chapter_id
    else:
        data["activity_id"] = submission.activity_id
    return data


def message_to_dict(message: StudentMessage) -> dict[str, Any]:
    return {
        "id": message.id,
        "message": message.message,
        "is_active": message.is_active,
        "target_curriculum": message.target_curriculum,
        "target_level": message.target_level,
        "target_language": message.target_language,
        "target_grade": message.target_grade,
        "created_by": message.created_by,
        "created_at": message.created_at,
        "updated_at": message.updated_at,
    }


def plan_to_dict(plan: SubscriptionPlan) -> dict[str, Any]:
    return {
        "id": plan.id,
        "name": plan.name,
        "description": plan.description,
        "price": plan.price,
        "duration_days": plan.duration_days,
        "curriculum": plan.curriculum,
        "level": plan.level,
        "language": plan.language,
        "grade": plan.grade,
        "is_active": plan.is_active,
        "created_at": plan.created_at,
    }


def timetable_to_dict(timetable: Timetable) -> dict[str, Any]:
    return {
        "id": timetable.id,
        "image_url": timetable.image_url,
        "title": timetable.title,
        "description": timetable.description,
        "course_id": timetable.course_id,
        "target_curriculum": timetable.target_curriculum,
        "target_curriculum_type": timetable.target_curriculum_type,
        "target_grade": timetable.target_grade,
        "target_section": timetable.target_section,
        "day_of_week": timetable.day_of_week,
        "start_time": timetable.start_time,
        "end_time": timetable.end_time,
        "created_by": timetable.created_by,
        "created_at": timetable.created_at,
        "updated_at": timetable.updated_at,
    }
