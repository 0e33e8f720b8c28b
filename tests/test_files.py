from gigboard.models.schemas import MAX_FILE_SIZE, Project

def seed_project(store, project_id="p1"):
    store.add_project(Project(
        id=project_id,
        name="Logo redesign",
        description="New logo and brand colours.",
        budget=200,
        timeline=7,
        skills=["Figma"],
    ))

def file_payload(name="draft.png", uploaded_by="developer", size=34567):
    return {
        "name": name,
        "size": size,
        "type": "image/png",
        "url": "blob:http://localhost:3000/f00d",
        "uploaded_by": uploaded_by,
    }

def test_upload_file(client, store):
    seed_project(store)

    response = client.post("/projects/p1/files/", json=file_payload())

    assert response.status_code == 201
    data = response.json()
    assert data["id"]
    assert data["uploaded_by"] == "developer"
    assert [f.id for f in store.get_project_by_id("p1").project_files] == [data["id"]]

def test_list_files_and_updates(client, store):
    seed_project(store)
    client.post("/projects/p1/files/", json=file_payload("a.png", "client"))
    client.post("/projects/p1/files/", json=file_payload("b.png", "developer"))

    files = client.get("/projects/p1/files/").json()
    updates = client.get("/projects/p1/files/updates").json()

    assert [f["name"] for f in files] == ["a.png", "b.png"]
    assert [u["message"] for u in updates] == ["Client uploaded a.png", "Developer uploaded b.png"]

def test_delete_file_appends_log_entry(client, store):
    seed_project(store)
    uploaded = client.post("/projects/p1/files/", json=file_payload("draft.png", "developer")).json()

    response = client.delete(f"/projects/p1/files/{uploaded['id']}", params={"deleted_by": "client"})

    assert response.status_code == 204
    project = store.get_project_by_id("p1")
    assert project.project_files == []
    assert [(u.action, u.file_id) for u in project.file_updates] == [
        ("upload", uploaded["id"]),
        ("delete", uploaded["id"]),
    ]
    assert project.file_updates[-1].message == "Client deleted draft.png"

def test_delete_file_not_found(client, store):
    seed_project(store)
    response = client.delete("/projects/p1/files/missing", params={"deleted_by": "client"})
    assert response.status_code == 404
    assert response.json()["detail"] == "File not found"
    assert store.get_project_by_id("p1").file_updates == []

def test_delete_file_requires_valid_actor_role(client, store):
    seed_project(store)
    uploaded = client.post("/projects/p1/files/", json=file_payload()).json()
    response = client.delete(f"/projects/p1/files/{uploaded['id']}", params={"deleted_by": "admin"})
    assert response.status_code == 422

def test_files_for_unknown_project(client):
    assert client.get("/projects/missing/files/").status_code == 404
    assert client.post("/projects/missing/files/", json=file_payload()).status_code == 404

def test_upload_file_size_limit(client, store):
    seed_project(store)

    at_limit = client.post("/projects/p1/files/", json=file_payload("big.zip", size=MAX_FILE_SIZE))
    too_big = client.post("/projects/p1/files/", json=file_payload("huge.zip", size=MAX_FILE_SIZE + 1))
    negative = client.post("/projects/p1/files/", json=file_payload("odd.zip", size=-1))

    assert at_limit.status_code == 201
    assert too_big.status_code == 422
    assert negative.status_code == 422
    assert [f.name for f in store.get_project_by_id("p1").project_files] == ["big.zip"]
