from academy.core.enum import PurchaseStatus, Role
from academy.db.models.database import Purchase


def _timetable(**fields):
    return {"image_url": "https://cdn.mail.com/tt.png", "title": "Week 1", **fields}


async def test_only_admin_writes_and_times_are_checked(client, make_user):
    _, admin = await make_user(Role.ADMIN)
    _, supervisor = await make_user(Role.SUPERVISOR)

    assert (await client.post("/api/timetables", json=_timetable(), headers=supervisor)).status_code == 403

    res = await client.post("/api/timetables", json=_timetable(start_time="10:00", end_time="09:30"), headers=admin)
    assert res.status_code == 400
    assert res.json()["detail"] == "End time must be after start time"

    res = await client.post("/api/timetables", json=_timetable(start_time="25:00"), headers=admin)
    assert res.status_code == 422

    created = (
        await client.post("/api/timetables", json=_timetable(start_time="09:00", end_time="10:00"), headers=admin)
    ).json()
    res = await client.patch(f"/api/timetables/{created['id']}", json={"end_time": "08:00"}, headers=admin)
    assert res.status_code == 400
    res = await client.patch(f"/api/timetables/{created['id']}", json={"title": "Week 2"}, headers=admin)
    assert res.json()["title"] == "Week 2"

    assert (await client.delete(f"/api/timetables/{created['id']}", headers=admin)).status_code == 204
    assert (await client.get(f"/api/timetables/{created['id']}", headers=admin)).status_code == 404


async def test_students_see_targeted_and_purchased_timetables(
    client, make_user, make_course, session_factory
):
    _, admin = await make_user(Role.ADMIN)
    owner, teacher = await make_user(Role.TEACHER, full_name="Mr Hany")
    _, other_teacher = await make_user(Role.TEACHER)
    buyer, student = await make_user(Role.USER, curriculum_type="morning", grade="kg1")
    _, stranger = await make_user(Role.USER, curriculum="saudi", grade="kg1_saudi")
    course = await make_course(owner)

    async with session_factory() as session:
        session.add(Purchase(user_id=buyer.id, course_id=course.id, status=PurchaseStatus.ACTIVE))
        await session.commit()

    course_tt = (
        await client.post("/api/timetables", json=_timetable(title="Course", course_id=str(course.id)), headers=admin)
    ).json()
    assert course_tt["course"]["teacher_name"] == "Mr Hany"
    await client.post(
        "/api/timetables",
        json=_timetable(title="Morning KG", target_curriculum="egyptian", target_curriculum_type="morning",
                        target_grade="kg1, kg2"),
        headers=admin,
    )
    await client.post("/api/timetables", json=_timetable(title="Saudi", target_curriculum="saudi"), headers=admin)

    titles = sorted(t["title"] for t in (await client.get("/api/timetables", headers=student)).json())
    assert titles == ["Course", "Morning KG"]
    titles = [t["title"] for t in (await client.get("/api/timetables", headers=stranger)).json()]
    assert titles == ["Saudi"]

    assert (await client.get(f"/api/timetables/{course_tt['id']}", headers=stranger)).status_code == 403
    res = await client.get("/api/timetables", params={"course_id": str(course.id)}, headers=stranger)
    assert res.status_code == 403
    res = await client.get(f"/api/timetables/course/{course.id}", headers=student)
    assert [t["title"] for t in res.json()] == ["Course"]

    # teachers see their own course timetables plus the general ones
    titles = sorted(t["title"] for t in (await client.get("/api/timetables", headers=teacher)).json())
    assert titles == ["Course", "Morning KG", "Saudi"]
    titles = sorted(t["title"] for t in (await client.get("/api/timetables", headers=other_teacher)).json())
    assert titles == ["Morning KG", "Saudi"]
    assert (await client.get(f"/api/timetables/course/{course.id}", headers=other_teacher)).status_code == 403
