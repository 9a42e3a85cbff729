import pytest

from petite_treats import storage
from petite_treats.errors import (
    CONTACT_SUCCESS,
    DUPLICATE_FEEDBACK_ERR,
    INVALID_EMAIL_ERR,
    MISSING_FORM_PARAMS_ERR,
    DuplicateFeedback,
)
from petite_treats.models import ContactRequest

FORM = {"name": "Ada", "email": "ada@example.com", "message": "Do you bake gluten-free?"}


class TestContactEndpoint:
    def test_form_submission(self, client, app):
        response = client.post("/contact-us", data=FORM)
        assert response.status_code == 200
        assert response.text == CONTACT_SUCCESS

        with app.state.database.session() as session:
            saved = storage.list_feedback(session)
        assert saved == [ContactRequest(**FORM)]

    def test_json_submission(self, client):
        response = client.post("/contact-us", json=FORM)
        assert response.status_code == 200

    def test_duplicate_email_is_a_conflict(self, client):
        client.post("/contact-us", data=FORM)
        response = client.post("/contact-us", data={**FORM, "message": "Second thoughts"})
        assert response.status_code == 409
        assert response.text == DUPLICATE_FEEDBACK_ERR

    @pytest.mark.parametrize("missing", ["name", "email", "message"])
    def test_missing_field(self, client, missing):
        body = {k: v for k, v in FORM.items() if k != missing}
        response = client.post("/contact-us", data=body)
        assert response.status_code == 400
        assert response.text == MISSING_FORM_PARAMS_ERR

    def test_email_without_at_sign(self, client):
        response = client.post("/contact-us", data={**FORM, "email": "ada.example.com"})
        assert response.status_code == 400
        assert response.text == INVALID_EMAIL_ERR

    def test_malformed_json_reports_missing_fields(self, client):
        response = client.post(
            "/contact-us",
            content=b"{not json",
            headers={"content-type": "application/json"},
        )
        assert response.status_code == 400
        assert response.text == MISSING_FORM_PARAMS_ERR


class TestRecordFeedback:
    def test_second_submission_from_same_email_is_refused(self, database):
        with database.session() as session:
            storage.record_feedback(session, ContactRequest(**FORM))
        with database.session() as session:
            with pytest.raises(DuplicateFeedback) as exc_info:
                storage.record_feedback(session, ContactRequest(**{**FORM, "name": "Other"}))
        assert exc_info.value.email == FORM["email"]

        with database.session() as session:
            assert [f.name for f in storage.list_feedback(session)] == ["Ada"]
