from sqlalchemy import select

from academy.core.enum import Role
from academy.db.models.database import Activity, Attachment, User


async def test_chapter_under_wrong_course_is_404(client, make_user, make_course, make_chapter):
    owner, _ = await make_user(Role.TEACHER)
    _, student = await make_user(Role.USER)
    course = await make_course(owner, is_free=True)
    other = await make_course(owner, title="Other", is_free=True)
    chapter = await make_chapter(course, 1)

    res = await client.get(f"/api/courses/{other.id}/chapters/{chapter.id}", headers=student)
    assert res.status_code == 404
    res = await client.get(f"/api/courses/{course.id}/chapters/{chapter.id}", headers=student)
    assert res.status_code == 200


async def test_locked_chapter_hides_video_and_attachments(
    client, make_user, make_course, make_chapter, session_factory
):
    owner, _ = await make_user(Role.TEACHER)
    _, student = await make_user(Role.USER)
    course = await make_course(owner)
    locked = await make_chapter(course, 1)
    preview = await make_chapter(course, 2, is_free=True)
    async with session_factory() as session:
        session.add(Attachment(chapter_id=locked.id, name="Sheet", url="https://cdn.mail.com/sheet.pdf"))
        await session.commit()

    body = (await client.get(f"/api/courses/{course.id}/chapters/{locked.id}", headers=student)).json()
    assert body["is_locked"] is True
    assert body["video_url"] is None
    assert body["attachments"] == []
    assert body["next_content_id"] == str(preview.id)
    assert body["next_content_type"] == "chapter"

    body = (await client.get(f"/api/courses/{course.id}/chapters/{preview.id}", headers=student)).json()
    assert body["is_locked"] is False
    assert body["video_url"] == preview.video_url
    assert body["next_content_id"] is None


async def test_toggle_completion_awards_points_once(client, make_user, make_course, make_chapter, session_factory):
    owner, _ = await make_user(Role.TEACHER)
    student, headers = await make_user(Role.USER)
    course = await make_course(owner, is_free=True)
    chapter = await make_chapter(course, 1)
    url = f"/api/courses/{course.id}/chapters/{chapter.id}/progress"

    assert (await client.get(url, headers=headers)).json() == {"is_completed": False}

    res = await client.put(url, headers=headers)
    assert res.status_code == 200
    assert res.json()["points"] == 10
    # completing again keeps the award at one
    assert (await client.put(url, headers=headers)).json()["points"] == 10

    progress = (await client.get(f"/api/courses/{course.id}/progress", headers=headers)).json()
    assert progress == {"progress": 100.0}

    assert (await client.delete(url, headers=headers)).status_code == 204
    assert (await client.get(url, headers=headers)).json() == {"is_completed": False}
    assert (await client.delete(url, headers=headers)).status_code == 404

    async with session_factory() as session:
        points = await session.scalar(select(User.points).where(User.id == student.id))
    assert points == 0


async def test_homework_requires_image_and_access(client, make_user, make_course, make_chapter):
    owner, _ = await make_user(Role.TEACHER)
    _, headers = await make_user(Role.USER)
    course = await make_course(owner)
    chapter = await make_chapter(course, 1)
    url = f"/api/courses/{course.id}/chapters/{chapter.id}/homework"

    res = await client.post(url, json={"image_url": "  "}, headers=headers)
    assert res.status_code == 400
    assert res.json()["detail"] == "Image URL is required"

    res = await client.post(url, json={"image_url": "https://cdn.mail.com/hw.png"}, headers=headers)
    assert res.status_code == 403


async def test_homework_submit_grade_and_resubmit(client, make_user, make_course, make_chapter):
    owner, teacher = await make_user(Role.TEACHER)
    _, headers = await make_user(Role.USER)
    course = await make_course(owner, is_free=True)
    chapter = await make_chapter(course, 1)
    url = f"/api/courses/{course.id}/chapters/{chapter.id}/homework"

    assert (await client.get(url, headers=headers)).json() is None

    first = (await client.post(url, json={"image_url": "https://cdn.mail.com/a.png"}, headers=headers)).json()
    second = (await client.post(url, json={"image_url": "https://cdn.mail.com/b.png"}, headers=headers)).json()
    assert first["id"] == second["id"]
    assert second["image_url"] == "https://cdn.mail.com/b.png"

    listed = (await client.get(f"/api/teacher/homework/{chapter.id}", headers=teacher)).json()
    assert len(listed) == 1

    res = await client.patch(
        f"/api/teacher/homework/submissions/{first['id']}",
        json={"corrected_image_url": "https://cdn.mail.com/fixed.png", "feedback": "Good"},
        headers=teacher,
    )
    assert res.status_code == 200

    mine = (await client.get(url, headers=headers)).json()
    assert mine["corrected_image_url"] == "https://cdn.mail.com/fixed.png"
    assert mine["feedback"] == "Good"


async def test_activity_flow(client, make_user, make_course, make_chapter, session_factory):
    owner, teacher = await make_user(Role.TEACHER)
    _, outsider = await make_user(Role.TEACHER)
    _, headers = await make_user(Role.USER)
    course = await make_course(owner, is_free=True)
    chapter = await make_chapter(course, 1)

    res = await client.post(
        f"/api/teacher/chapters/{chapter.id}/activities", json={"title": "Draw a map"}, headers=outsider
    )
    assert res.status_code == 403

    res = await client.post(
        f"/api/teacher/chapters/{chapter.id}/activities", json={"title": "Draw a map"}, headers=teacher
    )
    assert res.status_code == 201
    activity = res.json()

    base = f"/api/courses/{course.id}/chapters/{chapter.id}/activities"
    assert [a["title"] for a in (await client.get(base, headers=headers)).json()] == ["Draw a map"]

    sub_url = f"{base}/{activity['id']}/submission"
    assert (await client.get(sub_url, headers=headers)).json() is None
    res = await client.post(sub_url, json={"image_url": "https://cdn.mail.com/map.png"}, headers=headers)
    assert res.status_code == 200
    assert res.json()["activity_id"] == activity["id"]

    submissions = (
        await client.get(f"/api/teacher/activities/{activity['id']}/submissions", headers=teacher)
    ).json()
    assert len(submissions) == 1

    assert (await client.delete(f"/api/teacher/activities/{activity['id']}", headers=teacher)).status_code == 204
    async with session_factory() as session:
        assert (await session.scalars(select(Activity))).all() == []


async def test_supervisor_grades_but_cannot_list_homework(client, make_user, make_course, make_chapter):
    owner, _ = await make_user(Role.TEACHER)
    _, supervisor = await make_user(Role.SUPERVISOR)
    _, headers = await make_user(Role.USER)
    course = await make_course(owner, is_free=True)
    chapter = await make_chapter(course, 1)
    url = f"/api/courses/{course.id}/chapters/{chapter.id}/homework"
    submission = (await client.post(url, json={"image_url": "https://cdn.mail.com/a.png"}, headers=headers)).json()

    assert (await client.get(f"/api/teacher/homework/{chapter.id}", headers=supervisor)).status_code == 403

    res = await client.patch(
        f"/api/teacher/homework/submissions/{submission['id']}",
        json={"corrected_image_url": "https://cdn.mail.com/fixed.png"},
        headers=supervisor,
    )
    assert res.status_code == 200
    assert res.json()["corrected_image_url"] == "https://cdn.mail.com/fixed.png"
