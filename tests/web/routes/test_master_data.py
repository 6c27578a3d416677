from tests.web.conftest import DELETE_PASSWORD, as_user


class TestProjects:
    def test_crud(self, api):
        created = api.post(
            "/projects",
            json={"project_name": "Tower A", "estimated_budget": "2500000"},
            headers=as_user("pm@paygo"),
        )
        assert created.status_code == 201
        uuid = created.json()["uuid"]
        assert created.json()["estimated_budget"] == "2500000.00"

        updated = api.put(
            f"/projects/{uuid}",
            json={"project_name": "Tower A", "status": "On Hold"},
            headers=as_user("pm@paygo"),
        )
        assert updated.json()["status"] == "On Hold"

        assert len(api.get("/projects", headers=as_user("viewer@paygo")).json()) == 1
        deleted = api.request(
            "DELETE", f"/projects/{uuid}", json={"password": DELETE_PASSWORD}, headers=as_user("admin@paygo")
        )
        assert deleted.status_code == 204
        assert api.get(f"/projects/{uuid}", headers=as_user("viewer@paygo")).status_code == 404

    def test_viewer_cannot_create(self, api):
        response = api.post("/projects", json={"project_name": "X"}, headers=as_user("viewer@paygo"))
        assert response.status_code == 403

    def test_bad_status(self, api):
        response = api.post(
            "/projects", json={"project_name": "X", "status": "Lost"}, headers=as_user("admin@paygo")
        )
        assert response.status_code == 400


class TestContractors:
    def test_crud(self, api):
        created = api.post(
            "/contractors",
            json={"contractor_name": "Sharma Constructions", "unit_price": "45.5", "estimated_qty": "200"},
            headers=as_user("site@paygo"),
        )
        assert created.status_code == 201
        assert created.json()["estimated_amount"] == "9100.00"
        uuid = created.json()["uuid"]

        updated = api.put(
            f"/contractors/{uuid}",
            json={"contractor_name": "Sharma Constructions", "unit_price": "50", "estimated_qty": "200"},
            headers=as_user("site@paygo"),
        )
        assert updated.json()["estimated_amount"] == "10000.00"
        assert api.put("/contractors/missing", json={"contractor_name": "X"}, headers=as_user("admin@paygo")).status_code == 404


class TestDashboard:
    def test_summary(self, api):
        from tests.web.conftest import approve_bill, create_bill

        bill = create_bill(api)
        approve_bill(api, bill["uuid"])
        create_bill(api)
        api.post(
            "/payments",
            json={"bill_number": bill["number"], "paid_amount": "600"},
            headers=as_user("billing@paygo"),
        )
        data = api.get("/dashboard", headers=as_user("viewer@paygo")).json()
        assert data["total_bills"] == 2
        assert data["bills_by_status"]["Approved"] == 1
        assert data["approved_value"] == "950.00"
        assert data["total_paid"] == "600.00"
        assert data["outstanding"] == "350.00"
        assert data["bills_by_settlement"]["Partial"] == 1
