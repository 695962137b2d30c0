import pytest
from sqlalchemy.exc import OperationalError

from roomierules.core.exceptions import ValidationException
from roomierules.models.bill_payment import BillPayment
from roomierules.models.role import PaymentStatus
from roomierules.repositories.bill_payment_repository import BillPaymentRepository
from roomierules.storage.receipts import ReceiptStorage
from tests.conftest import headers_for

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 256
RENT = {"title": "Rent", "amount": 900, "type": "housing"}


@pytest.fixture
def rent_bill(client, host_headers, roommate, second_roommate):
    """Rent split between host, roommate and second_roommate"""
    response = client.post("/api/bills", headers=host_headers, json=RENT)
    return response.json()["data"]["bill"]


def payment_of(db_session, bill_id: int, user_id: int) -> BillPayment:
    return (
        db_session.query(BillPayment)
        .filter(BillPayment.bill_id == bill_id, BillPayment.user_id == user_id)
        .one()
    )


def upload(client, payment_id, headers, data=PNG_BYTES, filename="receipt.png", content_type="image/png"):
    return client.put(
        f"/api/payments/{payment_id}",
        headers=headers,
        files={"receipt": (filename, data, content_type)},
    )


class TestSubmitReceipt:
    """Tests for PUT /api/payments/{payment_id}"""

    def test_owner_marks_payment_paid(
        self, client, db_session, rent_bill, roommate, roommate_headers, receipt_storage
    ):
        payment = payment_of(db_session, rent_bill["id"], roommate.id)

        response = upload(client, payment.id, roommate_headers)

        assert response.status_code == 200
        data = response.json()["data"]["payment"]
        assert data["status"] == "paid"
        assert data["paid_at"] is not None
        assert data["receipt_url"].startswith("/uploads/receipts/")
        assert data["receipt_url"].endswith(".png")

        stored = receipt_storage.receipts_dir / data["receipt_url"].rsplit("/", 1)[-1]
        assert stored.read_bytes() == PNG_BYTES

        db_session.refresh(payment)
        assert payment.status == PaymentStatus.PAID
        assert payment.paid_at is not None

    def test_other_payments_untouched(self, client, db_session, rent_bill, roommate, host, roommate_headers):
        payment = payment_of(db_session, rent_bill["id"], roommate.id)

        upload(client, payment.id, roommate_headers)

        assert payment_of(db_session, rent_bill["id"], host.id).status == PaymentStatus.PENDING

    def test_cannot_pay_for_someone_else(
        self, client, db_session, rent_bill, roommate, second_roommate, receipt_storage
    ):
        """Another member of the same house is rejected and nothing is stored"""
        payment = payment_of(db_session, rent_bill["id"], roommate.id)

        response = upload(client, payment.id, headers_for(second_roommate))

        assert response.status_code == 403
        assert response.json()["error"] == "You can only mark your own payments as paid"
        db_session.refresh(payment)
        assert payment.status == PaymentStatus.PENDING
        assert payment.receipt_url is None
        assert not receipt_storage.receipts_dir.exists() or not any(receipt_storage.receipts_dir.iterdir())

    def test_host_cannot_settle_roommate_payment(self, client, db_session, rent_bill, roommate, host_headers):
        payment = payment_of(db_session, rent_bill["id"], roommate.id)

        response = upload(client, payment.id, host_headers)

        assert response.status_code == 403

    def test_second_upload_rejected(self, client, db_session, rent_bill, roommate, roommate_headers):
        """A paid obligation keeps its first receipt"""
        payment = payment_of(db_session, rent_bill["id"], roommate.id)
        first = upload(client, payment.id, roommate_headers).json()["data"]["payment"]

        response = upload(client, payment.id, roommate_headers)

        assert response.status_code == 400
        assert response.json()["error"] == "Payment has already been marked as paid"
        db_session.refresh(payment)
        assert payment.receipt_url == first["receipt_url"]

    def test_unknown_payment(self, client, roommate_headers):
        response = upload(client, 999, roommate_headers)

        assert response.status_code == 404
        assert response.json()["error"] == "Payment not found"

    @pytest.mark.parametrize(
        "filename,content_type",
        [("receipt.pdf", "application/pdf"), ("receipt.gif", "image/gif"), ("notes.txt", "text/plain")],
    )
    def test_wrong_file_type(self, client, db_session, rent_bill, roommate, roommate_headers, filename, content_type):
        payment = payment_of(db_session, rent_bill["id"], roommate.id)

        response = upload(client, payment.id, roommate_headers, filename=filename, content_type=content_type)

        assert response.status_code == 400
        assert response.json()["error"] == "Only image files (JPEG, PNG, WebP) are allowed"
        db_session.refresh(payment)
        assert payment.status == PaymentStatus.PENDING

    def test_oversized_file(
        self, client, db_session, rent_bill, roommate, roommate_headers, receipt_storage
    ):
        receipt_storage.max_size = 1024 * 1024
        payment = payment_of(db_session, rent_bill["id"], roommate.id)

        response = upload(client, payment.id, roommate_headers, data=b"\x00" * (1024 * 1024 + 1))

        assert response.status_code == 400
        assert response.json()["error"] == "File size must be less than 1MB"
        db_session.refresh(payment)
        assert payment.status == PaymentStatus.PENDING

    def test_missing_file(self, client, db_session, rent_bill, roommate, roommate_headers):
        payment = payment_of(db_session, rent_bill["id"], roommate.id)

        response = client.put(f"/api/payments/{payment.id}", headers=roommate_headers)

        assert response.status_code == 400
        assert response.json()["error"].startswith("receipt:")

    def test_database_failure_removes_stored_file(
        self, client, db_session, rent_bill, roommate, roommate_headers, receipt_storage, monkeypatch
    ):
        """The receipt is cleaned up and the obligation stays pending"""
        payment = payment_of(db_session, rent_bill["id"], roommate.id)

        def fail(self, payment):
            raise OperationalError("UPDATE bill_payments", {}, Exception("database is locked"))

        monkeypatch.setattr(BillPaymentRepository, "update", fail)

        response = upload(client, payment.id, roommate_headers)

        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "Failed to record payment"}
        assert list(receipt_storage.receipts_dir.iterdir()) == []
        db_session.refresh(payment)
        assert payment.status == PaymentStatus.PENDING
        assert payment.receipt_url is None


class TestListPayments:
    """Tests for GET /api/payments"""

    def test_lists_own_payments_with_bill_info(self, client, rent_bill, roommate, roommate_headers):
        response = client.get("/api/payments", headers=roommate_headers)

        assert response.status_code == 200
        data = response.json()["data"]
        assert len(data["payments"]) == 1
        row = data["payments"][0]
        assert row["user_id"] == roommate.id
        assert row["bill_title"] == "Rent"
        assert row["bill_type"] == "housing"
        assert row["bill_amount"] == 900.0
        assert data["totals"] == {"pending": 300.0, "paid": 0.0, "total": 300.0}

    def test_status_filter_and_totals(self, client, db_session, host, host_headers, roommate, roommate_headers):
        first = client.post("/api/bills", headers=host_headers, json=RENT).json()["data"]["bill"]
        client.post("/api/bills", headers=host_headers, json={**RENT, "title": "Internet", "amount": 60})
        upload(client, payment_of(db_session, first["id"], roommate.id).id, roommate_headers)

        paid = client.get("/api/payments?status=paid", headers=roommate_headers).json()["data"]
        pending = client.get("/api/payments?status=pending", headers=roommate_headers).json()["data"]
        everything = client.get("/api/payments", headers=roommate_headers).json()["data"]

        assert [p["bill_title"] for p in paid["payments"]] == ["Rent"]
        assert paid["totals"] == {"pending": 0.0, "paid": 450.0, "total": 450.0}
        assert [p["bill_title"] for p in pending["payments"]] == ["Internet"]
        assert everything["totals"] == {"pending": 30.0, "paid": 450.0, "total": 480.0}

    def test_limit(self, client, host_headers, roommate, roommate_headers):
        for title in ["Rent", "Internet", "Water"]:
            client.post("/api/bills", headers=host_headers, json={**RENT, "title": title})

        response = client.get("/api/payments?limit=2", headers=roommate_headers)

        assert [p["bill_title"] for p in response.json()["data"]["payments"]] == ["Water", "Internet"]

    def test_invalid_status(self, client, roommate_headers):
        response = client.get("/api/payments?status=overdue", headers=roommate_headers)

        assert response.status_code == 400


class TestGetPayment:
    """Tests for GET /api/payments/{payment_id}"""

    def test_house_member_can_view(self, client, db_session, rent_bill, roommate, host_headers):
        payment = payment_of(db_session, rent_bill["id"], roommate.id)

        response = client.get(f"/api/payments/{payment.id}", headers=host_headers)

        assert response.status_code == 200
        assert response.json()["data"]["payment"]["amount_owed"] == 300.0

    def test_outsider_denied(self, client, db_session, rent_bill, roommate, outsider):
        payment = payment_of(db_session, rent_bill["id"], roommate.id)

        response = client.get(f"/api/payments/{payment.id}", headers=headers_for(outsider))

        assert response.status_code == 403


class TestReceiptStorage:
    """Unit tests for receipt validation and storage"""

    @pytest.mark.parametrize("content_type", ["image/jpeg", "image/jpg", "image/png", "image/webp", "IMAGE/PNG"])
    def test_accepts_images(self, tmp_path, content_type):
        ReceiptStorage(tmp_path, 5 * 1024 * 1024).validate(content_type, 100)

    def test_rejects_missing_content_type(self, tmp_path):
        with pytest.raises(ValidationException):
            ReceiptStorage(tmp_path, 5 * 1024 * 1024).validate(None, 100)

    def test_rejects_empty(self, tmp_path):
        with pytest.raises(ValidationException, match="Receipt file is empty"):
            ReceiptStorage(tmp_path, 5 * 1024 * 1024).validate("image/png", 0)

    def test_size_limit_is_inclusive(self, tmp_path):
        storage = ReceiptStorage(tmp_path, 5 * 1024 * 1024)
        storage.validate("image/png", 5 * 1024 * 1024)
        with pytest.raises(ValidationException, match="File size must be less than 5MB"):
            storage.validate("image/png", 5 * 1024 * 1024 + 1)

    def test_save_uses_random_name_and_content_type_extension(self, tmp_path):
        storage = ReceiptStorage(tmp_path, 5 * 1024 * 1024)

        first = storage.save(PNG_BYTES, None, "image/webp")
        second = storage.save(PNG_BYTES, "photo.JPEG", "image/jpeg")

        assert first.url.endswith(".webp")
        assert second.url.endswith(".jpeg")
        assert first.path != second.path
        assert first.path.read_bytes() == PNG_BYTES
        # no temporary files left behind
        assert sorted(p.name for p in storage.receipts_dir.iterdir()) == sorted(
            [first.path.name, second.path.name]
        )

    def test_remove_is_idempotent(self, tmp_path):
        storage = ReceiptStorage(tmp_path, 5 * 1024 * 1024)
        receipt = storage.save(PNG_BYTES, "r.png", "image/png")

        storage.remove(receipt)
        storage.remove(receipt)

        assert not receipt.path.exists()
