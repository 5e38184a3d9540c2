import uuid
from datetime import timedelta

from sqlalchemy import select

from academy.core.enum import PurchaseStatus, Role, SubscriptionStatus
from academy.core.scheduler import expire_subscriptions_job
from academy.db.models.database import Course, Purchase, Subscription, SubscriptionPlan
from academy.libs.formats.datetime import now as get_now
from academy.services.shares.access import AccessService, course_matches_plan

PLAN = {"name": "KG1 monthly", "price": "200", "duration_days": 30, "curriculum": "egyptian", "grade": "kg1"}


async def _create_plan(client, admin, **overrides):
    res = await client.post("/api/admin/subscription-plans", json={**PLAN, **overrides}, headers=admin)
    assert res.status_code == 201
    return res.json()


async def _subscribe_and_approve(client, admin, student, plan_id):
    res = await client.post("/api/subscriptions", json={"plan_id": plan_id}, headers=student)
    assert res.status_code == 201
    requests = (await client.get("/api/admin/subscription-requests", params={"status": "PENDING"}, headers=admin)).json()
    request_id = requests[0]["id"]
    res = await client.patch(f"/api/admin/subscription-requests/{request_id}", json={"action": "approve"}, headers=admin)
    assert res.status_code == 200
    return request_id, res.json()


async def test_plan_management(client, make_user):
    _, admin = await make_user(Role.ADMIN)
    _, supervisor = await make_user(Role.SUPERVISOR)

    res = await client.post("/api/admin/subscription-plans", json={**PLAN, "grade": "kg1_saudi"}, headers=admin)
    assert res.status_code == 400
    assert (await client.post("/api/admin/subscription-plans", json=PLAN, headers=supervisor)).status_code == 403

    plan = await _create_plan(client, admin)
    await _create_plan(client, admin, name="Hidden", is_active=False)

    public = (await client.get("/api/subscription-plans")).json()
    assert [p["name"] for p in public] == ["KG1 monthly"]
    assert len((await client.get("/api/admin/subscription-plans", headers=supervisor)).json()) == 2

    res = await client.patch(f"/api/admin/subscription-plans/{plan['id']}", json={"duration_days": 60}, headers=admin)
    assert res.json()["duration_days"] == 60
    assert (await client.delete(f"/api/admin/subscription-plans/{plan['id']}", headers=admin)).status_code == 204


async def test_duplicate_pending_subscription_rejected(client, make_user):
    _, admin = await make_user(Role.ADMIN)
    _, student = await make_user(Role.USER)
    plan = await _create_plan(client, admin)

    assert (await client.post("/api/subscriptions", json={"plan_id": plan["id"]}, headers=student)).status_code == 201
    assert (await client.post("/api/subscriptions", json={"plan_id": plan["id"]}, headers=student)).status_code == 400

    mine = (await client.get("/api/subscriptions", headers=student)).json()
    assert len(mine) == 1
    assert mine[0]["status"] == "PENDING"


async def test_approval_grants_matching_courses(client, make_user, make_course):
    owner, teacher = await make_user(Role.TEACHER)
    _, admin = await make_user(Role.ADMIN)
    _, student = await make_user(Role.USER)
    matching = await make_course(owner, title="KG1 Arabic", target_curriculum="egyptian", target_grade="kg1")
    other = await make_course(owner, title="KG2 Arabic", target_curriculum="egyptian", target_grade="kg2")
    plan = await _create_plan(client, admin)

    request_id, body = await _subscribe_and_approve(client, admin, student, plan["id"])
    assert body == {"success": True, "status": "APPROVED", "courses_granted": 1}

    res = await client.patch(f"/api/admin/subscription-requests/{request_id}", json={"action": "deny"}, headers=admin)
    assert res.status_code == 400
    assert res.json()["detail"] == "Request already processed"

    assert (await client.get(f"/api/courses/{matching.id}/access", headers=student)).json()["has_access"] is True
    assert (await client.get(f"/api/courses/{other.id}/access", headers=student)).json()["has_access"] is False

    # a course published later under the same targets is granted too
    res = await client.post(
        "/api/courses",
        json={
            "title": "KG1 Math",
            "description": "Counting",
            "image_url": "https://cdn.mail.com/m.png",
            "target_curriculum": "egyptian",
            "target_grade": "kg1",
        },
        headers=teacher,
    )
    late = res.json()
    chapter = (await client.post(f"/api/courses/{late['id']}/chapters", json={"title": "One"}, headers=teacher)).json()
    await client.patch(
        f"/api/courses/{late['id']}/chapters/{chapter['id']}/publish", json={"is_published": True}, headers=teacher
    )
    await client.patch(f"/api/courses/{late['id']}/publish", json={"is_published": True}, headers=teacher)
    assert (await client.get(f"/api/courses/{late['id']}/access", headers=student)).json()["has_access"] is True


async def test_denied_request(client, make_user):
    _, admin = await make_user(Role.ADMIN)
    _, student = await make_user(Role.USER)
    plan = await _create_plan(client, admin)
    await client.post("/api/subscriptions", json={"plan_id": plan["id"]}, headers=student)
    request_id = (await client.get("/api/admin/subscription-requests", headers=admin)).json()[0]["id"]

    res = await client.patch(f"/api/admin/subscription-requests/{request_id}", json={"action": "deny"}, headers=admin)
    assert res.json()["status"] == "DENIED"
    assert (await client.get("/api/subscriptions", headers=student)).json()[0]["status"] == "DENIED"


async def test_expiry_job_revokes_access(client, make_user, make_course, session_factory):
    owner, _ = await make_user(Role.TEACHER)
    _, admin = await make_user(Role.ADMIN)
    student, headers = await make_user(Role.USER)
    course = await make_course(owner, target_curriculum="egyptian", target_grade="kg1")
    plan = await _create_plan(client, admin)
    await _subscribe_and_approve(client, admin, headers, plan["id"])

    async with session_factory() as session:
        subscription = await session.scalar(select(Subscription).where(Subscription.user_id == student.id))
        subscription.end_date = get_now() - timedelta(days=1)
        await session.commit()

    assert await expire_subscriptions_job(session_factory) == 1
    assert await expire_subscriptions_job(session_factory) == 0

    async with session_factory() as session:
        subscription = await session.scalar(select(Subscription).where(Subscription.user_id == student.id))
        purchase = await session.scalar(select(Purchase).where(Purchase.user_id == student.id))
    assert subscription.status == SubscriptionStatus.EXPIRED
    assert purchase.status == PurchaseStatus.INACTIVE

    access = (await client.get(f"/api/courses/{course.id}/access", headers=headers)).json()
    assert access["has_access"] is False
    assert access["subscription_expired"] is True


async def test_grant_access_regrants_deactivated_purchases(client, make_user, make_course, session_factory):
    owner, _ = await make_user(Role.TEACHER)
    _, admin = await make_user(Role.ADMIN)
    student, headers = await make_user(Role.USER)
    await make_course(owner, target_curriculum="egyptian", target_grade="kg1")
    plan = await _create_plan(client, admin)
    await _subscribe_and_approve(client, admin, headers, plan["id"])

    async with session_factory() as session:
        purchase = await session.scalar(select(Purchase).where(Purchase.user_id == student.id))
        purchase.status = PurchaseStatus.INACTIVE
        await session.commit()

    res = await client.post("/api/admin/subscriptions/grant-access", headers=admin)
    assert res.json() == {"success": True, "users_processed": 1, "courses_granted": 1}
    res = await client.post("/api/admin/subscriptions/grant-access", json={"user_id": str(student.id)}, headers=admin)
    assert res.json()["courses_granted"] == 0


async def test_publishing_grants_open_level_course_to_levelled_plan(client, make_user, make_course, session_factory):
    owner, _ = await make_user(Role.TEACHER)
    _, admin = await make_user(Role.ADMIN)
    student, headers = await make_user(Role.USER)
    plan = await _create_plan(client, admin, level="kg")
    await _subscribe_and_approve(client, admin, headers, plan["id"])
    course = await make_course(owner, target_curriculum="egyptian", target_grade="kg1", target_level=None)

    async with session_factory() as session:
        course = await session.get(Course, course.id)
        levelled = await session.get(SubscriptionPlan, uuid.UUID(plan["id"]))
        assert course_matches_plan(course, levelled) is False
        granted = await AccessService(session).grant_course_to_subscriptions(course)
        await session.commit()
        purchase = await session.scalar(
            select(Purchase).where(Purchase.user_id == student.id, Purchase.course_id == course.id)
        )
    assert granted == 1
    assert purchase.status == PurchaseStatus.ACTIVE


async def test_expiry_leaves_unpublished_course_purchases(client, make_user, make_course, session_factory):
    owner, _ = await make_user(Role.TEACHER)
    _, admin = await make_user(Role.ADMIN)
    student, headers = await make_user(Role.USER)
    plan = await _create_plan(client, admin)
    await _subscribe_and_approve(client, admin, headers, plan["id"])
    draft = await make_course(owner, target_curriculum="egyptian", target_grade="kg1", is_published=False)

    async with session_factory() as session:
        session.add(Purchase(user_id=student.id, course_id=draft.id, status=PurchaseStatus.ACTIVE))
        subscription = await session.scalar(select(Subscription).where(Subscription.user_id == student.id))
        subscription.end_date = get_now() - timedelta(days=1)
        await session.commit()

    assert await expire_subscriptions_job(session_factory) == 1

    async with session_factory() as session:
        purchase = await session.scalar(
            select(Purchase).where(Purchase.user_id == student.id, Purchase.course_id == draft.id)
        )
    assert purchase.status == PurchaseStatus.ACTIVE
