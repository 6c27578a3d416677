from tests.web.conftest import DELETE_PASSWORD, approve_bill, as_user, create_bill


def _pay(api, bill_number, amount, principal="billing@paygo"):
    return api.post(
        "/payments",
        json={"bill_number": bill_number, "payment_date": "2025-03-08", "paid_amount": amount},
        headers=as_user(principal),
    )


class TestPayments:
    def test_scenario_b(self, api):
        bill = create_bill(api)
        approve_bill(api, bill["uuid"])

        first = _pay(api, bill["number"], "600")
        assert first.status_code == 201
        assert first.json()["status"] == "Partial"
        assert first.json()["balance"] == "350.00"

        over = _pay(api, bill["number"], "400")
        assert over.status_code == 409
        assert over.json()["error"] == "OverpaymentRejected"

        last = _pay(api, bill["number"], "350")
        assert last.json()["status"] == "Completed"
        assert last.json()["balance"] == "0.00"

    def test_scenario_e_unapproved_bill(self, api):
        bill = create_bill(api)
        response = _pay(api, bill["number"], "100")
        assert response.status_code == 409
        assert response.json()["error"] == "NotApproved"

    def test_unknown_bill(self, api):
        assert _pay(api, "BILL-NOPE", "100").status_code == 404

    def test_zero_amount(self, api):
        bill = create_bill(api)
        approve_bill(api, bill["uuid"])
        assert _pay(api, bill["number"], "0").status_code == 422

    def test_role(self, api):
        bill = create_bill(api)
        approve_bill(api, bill["uuid"])
        assert _pay(api, bill["number"], "100", principal="qc@paygo").status_code == 403

    def test_list_detail_delete(self, api):
        bill = create_bill(api)
        approve_bill(api, bill["uuid"])
        created = _pay(api, bill["number"], "950").json()

        listed = api.get("/payments", headers=as_user("viewer@paygo")).json()
        assert [p["payment_id"] for p in listed] == [created["payment_id"]]

        detail = api.get(f"/payments/{created['uuid']}", headers=as_user("viewer@paygo"))
        assert detail.json()["paid_amount"] == "950.00"

        deleted = api.request(
            "DELETE",
            f"/payments/{created['uuid']}",
            json={"password": DELETE_PASSWORD},
            headers=as_user("admin@paygo"),
        )
        assert deleted.status_code == 204
        balance = api.get(f"/bills/{bill['uuid']}/balance", headers=as_user("viewer@paygo")).json()
        assert balance["balance"] == "950.00"
        assert balance["status"] == "Pending"

    def test_detail_not_found(self, api):
        assert api.get("/payments/missing", headers=as_user("viewer@paygo")).status_code == 404
