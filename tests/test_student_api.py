from datetime import timedelta

from academy.core.enum import PurchaseStatus, Role
from academy.db.models.database import (
    Activity,
    ActivitySubmission,
    Certificate,
    HomeworkSubmission,
    Purchase,
    Quiz,
    QuizResult,
    UserProgress,
)
from academy.libs.formats.datetime import now as get_now


async def _buy(session_factory, student, *courses):
    async with session_factory() as session:
        for course in courses:
            session.add(Purchase(user_id=student.id, course_id=course.id, status=PurchaseStatus.ACTIVE))
        await session.commit()


async def test_new_content_lists_recent_items_from_purchased_courses(
    client, make_user, make_course, make_chapter, session_factory
):
    owner, teacher = await make_user(Role.TEACHER)
    student, headers = await make_user(Role.USER)
    bought = await make_course(owner, title="Bought")
    other = await make_course(owner, title="Other")
    fresh = await make_chapter(bought, 1, title="Fresh")
    await make_chapter(bought, 2, title="Stale", updated_at=get_now() - timedelta(days=2))
    await make_chapter(bought, 3, title="Draft", is_published=False)
    await make_chapter(other, 1, title="Not mine")
    await _buy(session_factory, student, bought)
    async with session_factory() as session:
        session.add(Certificate(student_id=student.id, image_url="https://cdn.mail.com/c.png", assigned_by=owner.id))
        await session.commit()

    items = (await client.get("/api/student/new-content", headers=headers)).json()["new_content"]
    assert {item["title"] for item in items} == {"Fresh", "New Certificate"}
    chapter = next(item for item in items if item["type"] == "chapter")
    assert chapter["link"] == f"/courses/{bought.id}/chapters/{fresh.id}"
    assert chapter["course_title"] == "Bought"

    assert (await client.get("/api/student/new-content", headers=teacher)).json() == {"new_content": []}


async def test_student_dashboard_stats(client, make_user, make_course, make_chapter, session_factory):
    owner, teacher = await make_user(Role.TEACHER)
    student, headers = await make_user(Role.USER)
    course = await make_course(owner)
    first = await make_chapter(course, 1)
    second = await make_chapter(course, 2)
    await _buy(session_factory, student, course)
    async with session_factory() as session:
        quiz = Quiz(course_id=course.id, title="Check", position=3, is_published=True, questions=[{"id": "q"}])
        session.add(quiz)
        await session.flush()
        for attempt, percentage in ((1, 50.0), (2, 100.0)):
            session.add(
                QuizResult(
                    quiz_id=quiz.id,
                    user_id=student.id,
                    attempt_number=attempt,
                    score=int(percentage),
                    total_points=100,
                    percentage=percentage,
                )
            )
        session.add(UserProgress(user_id=student.id, chapter_id=first.id, is_completed=True))
        session.add(UserProgress(user_id=student.id, chapter_id=second.id, is_completed=False))
        await session.commit()

    body = (await client.get("/api/dashboard/student", headers=headers)).json()
    assert body["student_stats"] == {
        "total_courses": 1,
        "total_chapters": 2,
        "completed_chapters": 1,
        "total_quizzes": 1,
        "completed_quizzes": 1,
        "average_score": 100,
    }
    assert body["last_watched_chapter"]["id"] == str(second.id)
    assert body["courses_with_progress"][0]["progress"] == 66.67

    assert (await client.get("/api/dashboard/student", headers=teacher)).status_code == 403


async def test_points(client, make_user):
    student, headers = await make_user(Role.USER, points=30)
    body = (await client.get("/api/user/points", headers=headers)).json()
    assert body["points"] == 30
    assert body["id"] == str(student.id)
    assert (await client.get("/api/user/points")).status_code == 401


async def test_teacher_creates_student_account(client, make_user):
    _, teacher = await make_user(Role.TEACHER)
    _, admin = await make_user(Role.ADMIN)
    payload = {
        "full_name": "Omar Adel",
        "email": "omar@mail.com",
        "phone_number": "01033334444",
        "password": "secret123",
        "confirm_password": "secret123",
        "curriculum": "egyptian",
        "level": "kg",
        "grade": "kg1",
    }

    res = await client.post("/api/teacher/create-account", json={**payload, "confirm_password": "nope"}, headers=teacher)
    assert res.status_code == 400
    assert res.json()["detail"] == "Passwords do not match"

    res = await client.post(
        "/api/teacher/create-account", json={**payload, "parent_phone_number": "01033334444"}, headers=teacher
    )
    assert res.status_code == 400

    assert (await client.post("/api/teacher/create-account", json=payload, headers=admin)).status_code == 403

    res = await client.post("/api/teacher/create-account", json=payload, headers=teacher)
    assert res.status_code == 201
    assert res.json()["user"]["role"] == "USER"

    res = await client.post("/api/auth/login", json={"email": "omar@mail.com", "password": "secret123"})
    assert res.status_code == 200


async def test_student_submissions_scoped_to_teacher_courses(
    client, make_user, make_course, make_chapter, session_factory
):
    owner, teacher = await make_user(Role.TEACHER)
    other_owner, _ = await make_user(Role.TEACHER)
    _, admin = await make_user(Role.ADMIN)
    _, supervisor = await make_user(Role.SUPERVISOR)
    student, _ = await make_user(Role.USER)
    mine = await make_chapter(await make_course(owner, title="Mine"), 1)
    theirs = await make_chapter(await make_course(other_owner, title="Theirs"), 1)
    async with session_factory() as session:
        for chapter in (mine, theirs):
            session.add(HomeworkSubmission(student_id=student.id, chapter_id=chapter.id, image_url="hw.png"))
            activity = Activity(chapter_id=chapter.id, title="Draw")
            session.add(activity)
            await session.flush()
            session.add(ActivitySubmission(student_id=student.id, activity_id=activity.id, image_url="act.png"))
        await session.commit()

    homework = (await client.get(f"/api/teacher/students/{student.id}/homework", headers=teacher)).json()
    assert [h["chapter"]["course"]["title"] for h in homework] == ["Mine"]
    activities = (await client.get(f"/api/teacher/students/{student.id}/activities", headers=teacher)).json()
    assert [a["activity"]["chapter"]["course"]["title"] for a in activities] == ["Mine"]

    homework = (await client.get(f"/api/teacher/students/{student.id}/homework", headers=admin)).json()
    assert [h["chapter"]["course"]["title"] for h in homework] == ["Mine", "Theirs"]

    res = await client.get(f"/api/teacher/students/{student.id}/homework", headers=supervisor)
    assert res.status_code == 403
