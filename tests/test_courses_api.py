from decimal import Decimal

from sqlalchemy import select

from academy.core.enum import Role
from academy.db.models.database import Chapter, Purchase, Quiz


async def test_teacher_creates_and_publishes_course(client, make_user):
    _, teacher = await make_user(Role.TEACHER)

    res = await client.post("/api/courses", json={"title": "Physics"}, headers=teacher)
    assert res.status_code == 201
    course = res.json()
    assert course["is_published"] is False

    # no description, image or published chapter yet
    res = await client.patch(f"/api/courses/{course['id']}/publish", json={"is_published": True}, headers=teacher)
    assert res.status_code == 400
    assert res.json()["detail"] == "Missing required fields"

    await client.patch(
        f"/api/courses/{course['id']}",
        json={"description": "Motion", "image_url": "https://cdn.mail.com/p.png"},
        headers=teacher,
    )
    res = await client.post(f"/api/courses/{course['id']}/chapters", json={"title": "Intro"}, headers=teacher)
    assert res.status_code == 201
    chapter = res.json()
    assert chapter["position"] == 1
    await client.patch(
        f"/api/courses/{course['id']}/chapters/{chapter['id']}/publish",
        json={"is_published": True},
        headers=teacher,
    )

    res = await client.patch(f"/api/courses/{course['id']}/publish", json={"is_published": True}, headers=teacher)
    assert res.status_code == 200
    assert res.json()["is_published"] is True

    listed = (await client.get("/api/courses")).json()
    assert [c["title"] for c in listed] == ["Physics"]
    assert listed[0]["chapters_count"] == 1


async def test_other_teacher_cannot_edit(client, make_user, make_course):
    owner, _ = await make_user(Role.TEACHER)
    _, intruder = await make_user(Role.TEACHER)
    _, admin = await make_user(Role.ADMIN)
    course = await make_course(owner)

    res = await client.patch(f"/api/courses/{course.id}", json={"title": "Hijack"}, headers=intruder)
    assert res.status_code == 403
    res = await client.patch(f"/api/courses/{course.id}", json={"title": "Renamed"}, headers=admin)
    assert res.status_code == 200
    assert res.json()["title"] == "Renamed"


async def test_list_filters_by_target(client, make_user, make_course):
    owner, _ = await make_user(Role.TEACHER)
    await make_course(owner, title="Arabic KG", target_curriculum="egyptian", target_grade="kg1")
    await make_course(owner, title="Saudi Math", target_curriculum="saudi", target_grade="p1_saudi")
    await make_course(owner, title="Draft", is_published=False, target_curriculum="egyptian")

    res = await client.get("/api/courses", params={"curriculum": "egyptian"})
    assert [c["title"] for c in res.json()] == ["Arabic KG"]
    res = await client.get("/api/courses", params={"search": "math"})
    assert [c["title"] for c in res.json()] == ["Saudi Math"]


async def test_unpublished_course_hidden_from_students(client, make_user, make_course):
    owner, owner_headers = await make_user(Role.TEACHER)
    _, student = await make_user(Role.USER)
    course = await make_course(owner, is_published=False)

    assert (await client.get(f"/api/courses/{course.id}", headers=student)).status_code == 404
    assert (await client.get(f"/api/courses/{course.id}", headers=owner_headers)).status_code == 200


async def test_content_is_ordered_and_reorder_applies(client, make_user, make_course, make_chapter, session_factory):
    owner, teacher = await make_user(Role.TEACHER)
    course = await make_course(owner)
    first = await make_chapter(course, 1)
    second = await make_chapter(course, 2)

    res = await client.post(
        f"/api/teacher/courses/{course.id}/quizzes",
        json={"title": "Check", "questions": [{"text": "2+2", "correct_answer": "4"}]},
        headers=teacher,
    )
    quiz = res.json()
    assert quiz["position"] == 3

    content = (await client.get(f"/api/courses/{course.id}/content", headers=teacher)).json()
    assert [item["id"] for item in content] == [str(first.id), str(second.id), quiz["id"]]
    assert [item["type"] for item in content] == ["chapter", "chapter", "quiz"]

    payload = {
        "list": [
            {"id": quiz["id"], "position": 1, "type": "quiz"},
            {"id": str(first.id), "position": 2, "type": "chapter"},
            {"id": str(second.id), "position": 3, "type": "chapter"},
        ]
    }
    res = await client.put(f"/api/courses/{course.id}/reorder", json=payload, headers=teacher)
    assert res.status_code == 200
    assert res.json() == {"message": "Success"}

    async with session_factory() as session:
        positions = dict((await session.execute(select(Chapter.id, Chapter.position))).all())
        quiz_position = await session.scalar(select(Quiz.position))
    assert positions == {first.id: 2, second.id: 3}
    assert quiz_position == 1


async def test_reorder_rejects_foreign_and_duplicate_items(client, make_user, make_course, make_chapter):
    owner, teacher = await make_user(Role.TEACHER)
    course = await make_course(owner)
    other = await make_course(owner, title="Other")
    own = await make_chapter(course, 1)
    foreign = await make_chapter(other, 1)

    res = await client.put(
        f"/api/courses/{course.id}/reorder",
        json={"list": [{"id": str(own.id), "position": 1, "type": "chapter"},
                       {"id": str(foreign.id), "position": 2, "type": "chapter"}]},
        headers=teacher,
    )
    assert res.status_code == 400

    res = await client.put(
        f"/api/courses/{course.id}/reorder",
        json={"list": [{"id": str(own.id), "position": 1, "type": "chapter"},
                       {"id": str(own.id), "position": 1, "type": "chapter"}]},
        headers=teacher,
    )
    assert res.status_code == 400
    assert res.json()["detail"] == "Duplicate positions"


async def test_purchase_with_balance(client, make_user, make_course, session_factory):
    owner, _ = await make_user(Role.TEACHER)
    buyer, student = await make_user(Role.USER, balance=Decimal("150"))
    _, poor = await make_user(Role.USER)
    course = await make_course(owner, price=Decimal("100"))

    assert (await client.get(f"/api/courses/{course.id}/access", headers=student)).json()["has_access"] is False

    res = await client.post(f"/api/courses/{course.id}/purchase", headers=poor)
    assert res.status_code == 400
    assert res.json()["detail"] == "Insufficient balance"

    res = await client.post(f"/api/courses/{course.id}/purchase", headers=student)
    assert res.status_code == 200
    assert Decimal(str(res.json()["balance"])) == Decimal("50")

    res = await client.post(f"/api/courses/{course.id}/purchase", headers=student)
    assert res.status_code == 400
    assert res.json()["detail"] == "Course already purchased"

    access = (await client.get(f"/api/courses/{course.id}/access", headers=student)).json()
    assert access == {"has_access": True, "subscription_expired": False}

    async with session_factory() as session:
        purchases = (await session.scalars(select(Purchase).where(Purchase.user_id == buyer.id))).all()
    assert len(purchases) == 1


async def test_free_course_cannot_be_bought(client, make_user, make_course):
    owner, _ = await make_user(Role.TEACHER)
    _, student = await make_user(Role.USER)
    course = await make_course(owner, is_free=True)

    assert (await client.get(f"/api/courses/{course.id}/access", headers=student)).json()["has_access"] is True
    res = await client.post(f"/api/courses/{course.id}/purchase", headers=student)
    assert res.status_code == 400
    assert res.json()["detail"] == "Course is free"
