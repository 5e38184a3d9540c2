from academy.core.enum import Role


async def test_certificate_lifecycle(client, make_user):
    teacher, teacher_headers = await make_user(Role.TEACHER, full_name="Ms Noha")
    _, other_teacher = await make_user(Role.TEACHER)
    _, admin = await make_user(Role.ADMIN)
    student, student_headers = await make_user(Role.USER, full_name="Top Student")

    res = await client.post(
        "/api/certificates",
        json={"student_id": str(teacher.id), "image_url": "https://cdn.mail.com/c.png"},
        headers=teacher_headers,
    )
    assert res.status_code == 404

    res = await client.post(
        "/api/certificates",
        json={"student_id": str(student.id), "image_url": "https://cdn.mail.com/c.png", "title": "Best reader"},
        headers=teacher_headers,
    )
    assert res.status_code == 201
    certificate = res.json()
    assert certificate["student_name"] == "Top Student"
    assert certificate["assigned_by_name"] == "Ms Noha"

    page = (await client.get("/api/certificates", headers=teacher_headers)).json()
    assert (page["total"], page["page"], page["size"]) == (1, 1, 50)
    assert page["items"][0]["title"] == "Best reader"
    assert (await client.get("/api/certificates", headers=other_teacher)).json()["total"] == 0
    assert (await client.get("/api/certificates", headers=admin)).json()["total"] == 1

    mine = (await client.get("/api/certificates/my-certificates", headers=student_headers)).json()
    assert [c["id"] for c in mine] == [certificate["id"]]
    assert (await client.get("/api/certificates", headers=student_headers)).status_code == 403

    assert (await client.delete(f"/api/certificates/{certificate['id']}", headers=other_teacher)).status_code == 403
    assert (await client.delete(f"/api/certificates/{certificate['id']}", headers=teacher_headers)).status_code == 204
    assert (await client.delete(f"/api/certificates/{certificate['id']}", headers=admin)).status_code == 404
