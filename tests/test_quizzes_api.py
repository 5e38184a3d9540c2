from academy.core.enum import Role
from academy.services.user.quizzes import score_quiz

QUESTIONS = [
    {"text": "Capital of Egypt?", "options": ["Cairo", "Giza"], "correct_answer": "Cairo", "points": 2},
    {"text": "3 x 3", "correct_answer": "9"},
]


def test_score_quiz_ignores_case_and_spacing():
    questions = [{"id": "a", "correct_answer": "Cairo", "points": 2}, {"id": "b", "correct_answer": "9"}]
    assert score_quiz(questions, {"a": "  cairo ", "b": 9}) == (3, 3)
    assert score_quiz(questions, {"a": "giza"}) == (0, 3)
    assert score_quiz([], {"a": "x"}) == (0, 0)


async def _published_quiz(client, teacher, course_id, **fields):
    quiz = (
        await client.post(
            f"/api/teacher/courses/{course_id}/quizzes",
            json={"title": "Warm up", "questions": QUESTIONS, **fields},
            headers=teacher,
        )
    ).json()
    await client.patch(f"/api/teacher/quizzes/{quiz['id']}/publish", json={"is_published": True}, headers=teacher)
    return quiz


async def test_empty_quiz_cannot_be_published(client, make_user, make_course):
    owner, teacher = await make_user(Role.TEACHER)
    course = await make_course(owner)
    quiz = (
        await client.post(f"/api/teacher/courses/{course.id}/quizzes", json={"title": "Empty"}, headers=teacher)
    ).json()
    res = await client.patch(f"/api/teacher/quizzes/{quiz['id']}/publish", json={"is_published": True}, headers=teacher)
    assert res.status_code == 400
    assert res.json()["detail"] == "Quiz has no questions"


async def test_student_view_hides_answers(client, make_user, make_course):
    owner, teacher = await make_user(Role.TEACHER)
    _, student = await make_user(Role.USER)
    course = await make_course(owner, is_free=True)
    quiz = await _published_quiz(client, teacher, course.id)

    body = (await client.get(f"/api/courses/{course.id}/quizzes/{quiz['id']}", headers=student)).json()
    assert body["total_points"] == 3
    assert all("correct_answer" not in q for q in body["questions"])

    teacher_view = (await client.get(f"/api/teacher/quizzes/{quiz['id']}", headers=teacher)).json()
    assert teacher_view["questions"][0]["correct_answer"] == "Cairo"


async def test_attempts_are_numbered_and_latest_returned(client, make_user, make_course):
    owner, teacher = await make_user(Role.TEACHER)
    _, student = await make_user(Role.USER)
    _, admin = await make_user(Role.ADMIN)
    course = await make_course(owner, is_free=True)
    quiz = await _published_quiz(client, teacher, course.id, max_attempts=2)
    first_id, second_id = (q["id"] for q in quiz["questions"])
    url = f"/api/courses/{course.id}/quizzes/{quiz['id']}/result"

    assert (await client.get(url, headers=student)).status_code == 404

    first = (await client.post(url, json={"answers": {first_id: "cairo"}}, headers=student)).json()
    assert (first["attempt_number"], first["score"], first["percentage"]) == (1, 2, 66.67)

    second = (await client.post(url, json={"answers": {first_id: "Cairo", second_id: "9"}}, headers=student)).json()
    assert (second["attempt_number"], second["score"], second["percentage"]) == (2, 3, 100.0)

    latest = (await client.get(url, headers=student)).json()
    assert latest["id"] == second["id"]

    results = (await client.get("/api/admin/quiz-results", params={"course_id": str(course.id)}, headers=admin)).json()
    assert len(results) == 2
    assert results[0]["quiz"]["course_title"] == course.title


async def test_attempt_limit_and_info(client, make_user, make_course):
    owner, teacher = await make_user(Role.TEACHER)
    _, student = await make_user(Role.USER)
    course = await make_course(owner, is_free=True)
    quiz = await _published_quiz(client, teacher, course.id, timer=15)
    assert (quiz["max_attempts"], quiz["timer"]) == (1, 15)
    base = f"/api/courses/{course.id}/quizzes/{quiz['id']}"

    info = (await client.get(f"{base}/info", headers=student)).json()
    assert (info["max_attempts"], info["timer"], info["current_attempt"], info["previous_attempts"]) == (1, 15, 1, 0)

    assert (await client.post(f"{base}/result", json={"answers": {}}, headers=student)).status_code == 200

    res = await client.post(f"{base}/result", json={"answers": {}}, headers=student)
    assert res.status_code == 400
    assert res.json()["detail"] == "Maximum attempts reached for this quiz"
    assert (await client.get(base, headers=student)).status_code == 400

    info = (await client.get(f"{base}/info", headers=student)).json()
    assert (info["current_attempt"], info["previous_attempts"]) == (2, 1)


async def test_paid_quiz_requires_access(client, make_user, make_course):
    owner, teacher = await make_user(Role.TEACHER)
    _, student = await make_user(Role.USER)
    course = await make_course(owner)
    quiz = await _published_quiz(client, teacher, course.id)

    res = await client.get(f"/api/courses/{course.id}/quizzes/{quiz['id']}", headers=student)
    assert res.status_code == 403


async def test_livestream_attendance_is_recorded_once(client, make_user, make_course):
    owner, teacher = await make_user(Role.TEACHER)
    _, student = await make_user(Role.USER)
    course = await make_course(owner, is_free=True)

    res = await client.post(
        "/api/teacher/livestreams",
        json={
            "course_id": str(course.id),
            "title": "Revision",
            "meeting_url": "https://meet.mail.com/rev",
            "scheduled_at": "2026-11-01T18:00:00",
        },
        headers=teacher,
    )
    assert res.status_code == 201
    stream = res.json()
    assert stream["position"] == 1

    # unpublished streams are hidden from students
    url = f"/api/courses/{course.id}/livestreams/{stream['id']}"
    assert (await client.get(url, headers=student)).status_code == 404
    await client.patch(f"/api/teacher/livestreams/{stream['id']}/publish", json={"is_published": True}, headers=teacher)

    assert (await client.get(url, headers=student)).json()["has_attended"] is False
    first = (await client.post(f"{url}/attend", headers=student)).json()
    again = (await client.post(f"{url}/attend", headers=student)).json()
    assert first["id"] == again["id"]
    assert first["meeting_url"] == "https://meet.mail.com/rev"
    assert (await client.get(url, headers=student)).json()["has_attended"] is True
