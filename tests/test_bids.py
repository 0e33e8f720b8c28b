from gigboard.models.schemas import Bid, Project

from conftest import CLIENT_ID, FREELANCER_ID

def seed_project(store, project_id="p1", status="open"):
    store.add_project(Project(
        id=project_id,
        name="API integration",
        description="Hook the shop up to a shipping API.",
        budget=500,
        timeline=10,
        skills=["Python"],
        status=status,
        client_id=CLIENT_ID,
    ))

def seed_bid(store, bid_id="b1", project_id="p1", freelancer_id=FREELANCER_ID, status="pending", amount=450):
    bid = Bid(
        id=bid_id,
        project_id=project_id,
        freelancer_id=freelancer_id,
        amount=amount,
        timeline=8,
        proposal="I have done this before.",
        status=status,
    )
    store.add_bid(bid)
    return bid

# --- Tests for POST /bids/ ---

def test_place_bid_success(client, store, freelancer_headers):
    seed_project(store)

    response = client.post("/bids/", json={
        "project_id": "p1",
        "amount": 450,
        "timeline": 8,
        "proposal": "Can start today.",
    }, headers=freelancer_headers)

    assert response.status_code == 201
    data = response.json()
    assert data["freelancer_id"] == FREELANCER_ID
    assert data["status"] == "pending"
    assert [b.id for b in store.get_bids_for_project("p1")] == [data["id"]]

def test_place_bid_project_not_found(client, freelancer_headers):
    response = client.post("/bids/", json={
        "project_id": "missing", "amount": 1, "timeline": 1, "proposal": "x",
    }, headers=freelancer_headers)
    assert response.status_code == 404
    assert response.json()["detail"] == "Project not found"

def test_place_bid_project_not_open(client, store, freelancer_headers):
    seed_project(store, status="in_progress")
    response = client.post("/bids/", json={
        "project_id": "p1", "amount": 1, "timeline": 1, "proposal": "x",
    }, headers=freelancer_headers)
    assert response.status_code == 400
    assert response.json()["detail"] == "Project is not open for bidding"

# --- Tests for listing bids ---

def test_list_bids_for_project_in_insertion_order(client, store):
    seed_project(store)
    seed_bid(store, "b2")
    seed_bid(store, "b1", freelancer_id="f2")

    response = client.get("/bids/project/p1")

    assert response.status_code == 200
    assert [b["id"] for b in response.json()] == ["b2", "b1"]

def test_list_my_bids(client, store, freelancer_headers):
    seed_project(store)
    seed_bid(store, "b1")
    seed_bid(store, "b2", freelancer_id="f2")

    response = client.get("/bids/mine", headers=freelancer_headers)

    assert [b["id"] for b in response.json()] == ["b1"]

def test_get_bid_not_found(client):
    response = client.get("/bids/missing")
    assert response.status_code == 404
    assert response.json()["detail"] == "Bid not found"

# --- Tests for updates ---

def test_update_bid(client, store):
    seed_bid(store)
    response = client.patch("/bids/b1", json={"amount": 400, "proposal": "Discounted"})
    assert response.status_code == 200
    assert response.json()["amount"] == 400
    assert store.get_bid_by_id("b1").proposal == "Discounted"

def test_update_bid_null_fields_are_ignored(client, store):
    seed_bid(store)

    response = client.patch("/bids/b1", json={"status": None})
    assert response.status_code == 400
    assert response.json()["detail"] == "No update data provided"

    response = client.patch("/bids/b1", json={"status": None, "amount": 420})
    assert response.status_code == 200
    assert response.json()["status"] == "pending"
    assert store.get_bid_by_id("b1").amount == 420

def test_update_bid_status_twice_is_idempotent(client, store):
    seed_bid(store)
    first = client.put("/bids/b1/status", json={"status": "rejected"})
    second = client.put("/bids/b1/status", json={"status": "rejected"})
    assert first.status_code == second.status_code == 200
    assert first.json() == second.json()
    assert store.get_bid_by_id("b1").status == "rejected"

# --- Tests for POST /bids/{bid_id}/accept ---

def test_accept_bid_moves_project_in_progress(client, store):
    seed_project(store)
    seed_bid(store, "b1")

    response = client.post("/bids/b1/accept")

    assert response.status_code == 200
    assert response.json()["status"] == "accepted"
    assert store.get_project_by_id("p1").status == "in_progress"

def test_accept_second_bid_conflicts(client, store):
    seed_project(store)
    seed_bid(store, "b1", status="accepted")
    seed_bid(store, "b2", freelancer_id="f2")

    response = client.post("/bids/b2/accept")

    assert response.status_code == 409
    assert store.get_bid_by_id("b2").status == "pending"

def test_accept_already_accepted_bid_is_allowed(client, store):
    seed_project(store)
    seed_bid(store, "b1", status="accepted")
    response = client.post("/bids/b1/accept")
    assert response.status_code == 200

# --- Tests for DELETE /bids/{bid_id} ---

def test_delete_bid(client, store):
    seed_bid(store, "b1")
    seed_bid(store, "b2")
    response = client.delete("/bids/b1")
    assert response.status_code == 204
    assert [b.id for b in store.state.bids] == ["b2"]

def test_delete_bid_not_found(client):
    assert client.delete("/bids/missing").status_code == 404
