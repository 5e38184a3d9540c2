from collections import defaultdict
from typing import Any

from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from academy.core.enum import Role
from academy.db.models.database import Course, LiveStream, Quiz, User
from academy.db.session import get_session


class TeacherOverviewService:
    def __init__(self, db: AsyncSession = Depends(get_session)):
        self.db = db

    async def get_teachers_async(self) -> list[dict[str, Any]]:
        """Teachers with their courses, quizzes and live streams, loaded in three batched queries."""
        teachers = (
            await self.db.scalars(
                select(User).where(User.role == Role.TEACHER).order_by(User.created_at.desc())
            )
        ).all()
        teacher_ids = [t.id for t in teachers]
        if not teacher_ids:
            return []

        courses = (
            await self.db.scalars(
                select(Course).where(Course.user_id.in_(teacher_ids)).order_by(Course.created_at.desc())
            )
        ).all()
        quizzes = (
            await self.db.execute(
                select(Quiz, Course.user_id, Course.title)
                .join(Course, Course.id == Quiz.course_id)
                .where(Course.user_id.in_(teacher_ids))
                .order_by(Quiz.created_at.desc())
            )
        ).all()
        streams = (
            await self.db.execute(
                select(LiveStream, Course.user_id, Course.title)
                .join(Course, Course.id == LiveStream.course_id)
                .where(Course.user_id.in_(teacher_ids))
                .order_by(LiveStream.created_at.desc())
            )
        ).all()

        courses_by_teacher: dict[Any, list[dict]] = defaultdict(list)
        for course in courses:
            courses_by_teacher[course.user_id].append(
                {
                    "id": course.id,
                    "title": course.title,
                    "is_published": course.is_published,
                    "price": course.price,
                    "created_at": course.created_at,
                }
            )

        quizzes_by_teacher: dict[Any, list[dict]] = defaultdict(list)
        for quiz, owner_id, course_title in quizzes:
            quizzes_by_teacher[owner_id].append(
                {
                    "id": quiz.id,
                    "title": quiz.title,
                    "is_published": quiz.is_published,
                    "position": quiz.position,
                    "questions_count": len(quiz.questions or []),
                    "course": {"id": quiz.course_id, "title": course_title},
                }
            )

        streams_by_teacher: dict[Any, list[dict]] = defaultdict(list)
        for stream, owner_id, course_title in streams:
            streams_by_teacher[owner_id].append(
                {
                    "id": stream.id,
                    "title": stream.title,
                    "is_published": stream.is_published,
                    "scheduled_at": stream.scheduled_at,
                    "course": {"id": stream.course_id, "title": course_title},
                }
            )

        result = []
        for teacher in teachers:
            own_courses = courses_by_teacher[teacher.id]
            own_quizzes = quizzes_by_teacher[teacher.id]
            own_streams = streams_by_teacher[teacher.id]
            result.append(
                {
                    "id": teacher.id,
                    "full_name": teacher.full_name,
                    "email": teacher.email,
                    "phone_number": teacher.phone_number,
                    "created_at": teacher.created_at,
                    "courses": own_courses,
                    "quizzes": own_quizzes,
                    "live_streams": own_streams,
                    "totals": {
                        "courses": len(own_courses),
                        "quizzes": len(own_quizzes),
                        "live_streams": len(own_streams),
                    },
                    "published": {
                        "courses": sum(1 for c in own_courses if c["is_published"]),
                        "quizzes": sum(1 for q in own_quizzes if q["is_published"]),
                        "live_streams": sum(1 for s in own_streams if s["is_published"]),
                    },
                }
            )
        return result
