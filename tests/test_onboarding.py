import asyncio

import pytest
from pydantic import ValidationError as SchemaValidationError

from app.core.exceptions import ValidationError
from app.flow.onboarding import OnboardingFlow, empty_draft
from app.models.user import Role, User
from app.schemas.profile import EmployerDraft, JobSeekerDraft
from app.services.auth_service import AuthService
from app.services.profile_service import ProfileService
from app.services.session_store import SessionStore

JOB_SEEKER_FORM = {
    "fullName": "Ama Mensah",
    "phone": "024 123 4567",
    "countryCode": "+233",
    "location": "Accra",
    "bio": "Backend developer",
    "experience": "3 years at a fintech",
    "skills": ["Python", " FastAPI ", "Python", ""],
    "education": "BSc Computer Science",
    "imageUrl": "https://cdn.example.com/ama.png",
}

EMPLOYER_FORM = {
    "companyName": "Acme Ghana",
    "title": "Head of People",
    "companySize": "11-50",
    "industry": "Technology",
    "website": "https://acme.example",
    "phone": "0201234567",
    "countryCode": "+233",
    "location": "Kumasi",
    "description": "We build things",
    "founded": "2015",
    "imageUrl": "https://cdn.example.com/acme.png",
}


def run(backend, email, scenario):
    """Signs `email` in and runs scenario(flow, user, store)."""
    async def main():
        client = backend.client()
        store = SessionStore()
        auth = AuthService(client, store)
        try:
            await auth.login(email, "secret123")
            return await scenario(OnboardingFlow(auth, ProfileService(client)), store.user, store)
        finally:
            await client.close()

    return asyncio.run(main())


# ============================================================
# DRAFTS
# ============================================================

def test_job_seeker_payload():
    payload = JobSeekerDraft.model_validate(JOB_SEEKER_FORM).to_payload()
    assert payload["skills"] == ["Python", "FastAPI"]
    assert payload["imageUrl"] == "https://cdn.example.com/ama.png"
    assert "cvUrl" not in payload


def test_skills_accept_comma_separated_text():
    draft = JobSeekerDraft.model_validate({**JOB_SEEKER_FORM, "skills": "SQL, Docker,,SQL"})
    assert draft.skills == ["SQL", "Docker"]


@pytest.mark.parametrize("skills", [[1, 2], ["Python", None], {"Python": 1}, 42])
def test_skills_must_be_text(skills):
    with pytest.raises(SchemaValidationError):
        JobSeekerDraft.model_validate({**JOB_SEEKER_FORM, "skills": skills})


def test_employer_payload_sends_logo():
    payload = EmployerDraft.model_validate(EMPLOYER_FORM).to_payload()
    assert payload["logoUrl"] == "https://cdn.example.com/acme.png"
    assert "imageUrl" not in payload
    assert payload["founded"] == 2015


@pytest.mark.parametrize("field", ["fullName", "location", "bio", "experience", "education"])
def test_job_seeker_required_fields(field):
    with pytest.raises(SchemaValidationError):
        JobSeekerDraft.model_validate({**JOB_SEEKER_FORM, field: "   "})


def test_job_seeker_missing_fields_are_required():
    with pytest.raises(SchemaValidationError):
        JobSeekerDraft.model_validate({"phone": "0241234567"})


@pytest.mark.parametrize("changes", [
    {"industry": "Basket Weaving"},
    {"companySize": "10000+"},
    {"website": "acme.example"},
    {"phone": "12"},
    {"countryCode": "233"},
    {"founded": "3000"},
])
def test_employer_invalid_fields(changes):
    with pytest.raises(SchemaValidationError):
        EmployerDraft.model_validate({**EMPLOYER_FORM, **changes})


def test_founded_is_optional():
    assert EmployerDraft.model_validate({**EMPLOYER_FORM, "founded": ""}).founded == 0


def test_empty_draft_prefills_job_seeker_name():
    user = User(id="1", email="ama@example.com", firstName="Ama", lastName="Mensah", role=Role.JOB_SEEKER)
    draft = empty_draft(user)
    assert draft["fullName"] == "Ama Mensah"
    assert draft["countryCode"] == "+233"


def test_empty_draft_for_employer():
    user = User(id="1", email="hr@acme.example", role=Role.EMPLOYER)
    assert "companyName" in empty_draft(user)


# ============================================================
# SUBMISSION
# ============================================================

def test_job_seeker_onboarding_completes(backend):
    backend.add_user("ama@example.com")

    async def scenario(flow, user, store):
        result = await flow.submit(user, JOB_SEEKER_FORM)
        return result, store.user

    result, user = run(backend, "ama@example.com", scenario)
    assert result.redirect == "/job-seeker/dashboard"
    assert result.notice == "Job Seeker profile created successfully! Redirecting to your dashboard..."
    assert user.has_profile
    method, path, body = [call for call in backend.calls if call[1].startswith("/users/profile")][0]
    assert path == "/users/profile/job-seeker"
    assert body["role"] == "JOB_SEEKER"


def test_employer_onboarding_completes(backend):
    backend.add_user("hr@acme.example", role="EMPLOYER")

    async def scenario(flow, user, store):
        return await flow.submit(user, EMPLOYER_FORM)

    result = run(backend, "hr@acme.example", scenario)
    assert result.redirect == "/employer/dashboard"
    assert "/users/profile/employer" in backend.paths()


def test_invalid_draft_is_not_sent(backend):
    backend.add_user("ama@example.com")

    async def scenario(flow, user, store):
        return await flow.submit(user, {**JOB_SEEKER_FORM, "location": ""})

    result = run(backend, "ama@example.com", scenario)
    assert result.redirect is None
    assert result.error == "Location is required"
    assert result.draft["location"] == ""
    assert not any(path.startswith("/users/profile") for path in backend.paths())


def test_non_text_skills_are_shown_inline(backend):
    backend.add_user("ama@example.com")

    async def scenario(flow, user, store):
        return await flow.submit(user, {**JOB_SEEKER_FORM, "skills": [1, 2]})

    result = run(backend, "ama@example.com", scenario)
    assert result.redirect is None
    assert result.error == "Skills must be text"
    assert not any(path.startswith("/users/profile") for path in backend.paths())


def test_backend_rejection_is_shown_inline(backend):
    backend.add_user("ama@example.com")

    async def scenario(flow, user, store):
        backend.tokens.clear()
        return await flow.submit(user, JOB_SEEKER_FORM)

    result = run(backend, "ama@example.com", scenario)
    assert result.redirect is None
    assert result.error == "Not authenticated"


def test_admin_has_no_self_service_profile(backend):
    backend.add_user("root@example.com", role="ADMIN")

    async def scenario(flow, user, store):
        return await flow.submit(user, {})

    result = run(backend, "root@example.com", scenario)
    assert result.redirect is None
    assert "ADMIN" in result.error


def test_profile_service_rejects_admin(backend):
    async def scenario():
        client = backend.client()
        try:
            with pytest.raises(ValidationError):
                await ProfileService(client).create_profile(Role.ADMIN, {})
        finally:
            await client.close()

    asyncio.run(scenario())
    assert backend.calls == []
