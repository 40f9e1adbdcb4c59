"""Client for the external resume extraction service.

The service receives the uploaded document and answers with structured
fields. Parsing internals live on the other side of the wire; this module
only validates uploads, calls the service and maps its failures onto typed
errors with user-facing messages.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import requests
from django.conf import settings

from jobs.scoring import clean_skills

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES = {
    "application/pdf",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/msword",
}
ALLOWED_EXTENSIONS = {".pdf", ".docx", ".doc"}
_GENERIC_CONTENT_TYPES = {"", "application/octet-stream"}


class ResumeParseError(Exception):
    code = "parse_error"
    user_message = "We could not read your resume. Please enter your details manually."

    def __init__(self, detail: str | None = None):
        super().__init__(detail or self.user_message)
        self.detail = detail


class CorruptedResume(ResumeParseError):
    code = "corrupted"
    user_message = (
        "We had trouble reading this file. This is common with some PDF formats and does not "
        "mean your resume is broken. Please enter your details manually or upload a DOCX."
    )


class InvalidResumeType(ResumeParseError):
    code = "invalid_type"
    user_message = "Invalid file type. Please upload a PDF or DOCX file."


class PasswordProtectedResume(ResumeParseError):
    code = "password_protected"
    user_message = "Password-protected files are not supported. Please remove the password and try again."


class ResumeTooLarge(ResumeParseError):
    code = "too_large"
    user_message = "Resume file too large. Maximum size is 10MB."


class ResumeServiceUnavailable(ResumeParseError):
    code = "unavailable"
    user_message = "Resume parsing is currently unavailable. Please enter your details manually."


ERRORS_BY_CODE = {
    cls.code: cls
    for cls in (CorruptedResume, InvalidResumeType, PasswordProtectedResume, ResumeTooLarge, ResumeServiceUnavailable)
}


@dataclass
class ParsedResume:
    name: str = ""
    email: str = ""
    phone: str = ""
    skills: list[str] = field(default_factory=list)
    experience: list[dict[str, Any]] = field(default_factory=list)
    education: list[dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "ParsedResume":
        def _text(key):
            return str(data.get(key) or "").strip()

        def _entries(key):
            value = data.get(key) or []
            return [entry for entry in value if isinstance(entry, dict)] if isinstance(value, list) else []

        return cls(
            name=_text("name"),
            email=_text("email").lower(),
            phone=_text("phone"),
            skills=clean_skills(data.get("skills")),
            experience=_entries("experience"),
            education=_entries("education"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "skills": list(self.skills),
            "experience": list(self.experience),
            "education": list(self.education),
        }


def validate_resume_upload(upload, max_bytes: int | None = None) -> None:
    """Reject files the extraction service cannot handle before sending them."""
    if max_bytes is None:
        max_bytes = settings.RESUME_MAX_UPLOAD_BYTES
    name = getattr(upload, "name", "") or ""
    content_type = (getattr(upload, "content_type", "") or "").lower()
    extension = Path(name).suffix.lower()

    type_ok = content_type in ALLOWED_CONTENT_TYPES or any(
        token in content_type for token in ("pdf", "wordprocessingml.document", "msword")
    )
    if not type_ok and content_type in _GENERIC_CONTENT_TYPES:
        type_ok = extension in ALLOWED_EXTENSIONS
    if not type_ok:
        raise InvalidResumeType(f"Unsupported resume type: {content_type or extension or 'unknown'}")

    size = getattr(upload, "size", None)
    if size is not None and size > max_bytes:
        raise ResumeTooLarge(f"Resume is {size} bytes; limit is {max_bytes}")


def error_from_payload(payload: Any) -> ResumeParseError:
    """Map an error body from the service to a typed error."""
    if not isinstance(payload, dict):
        return ResumeParseError()
    message = str(payload.get("error") or "")
    cls = ERRORS_BY_CODE.get(payload.get("code"))
    if cls is None:
        lowered = message.lower()
        if "password" in lowered:
            cls = PasswordProtectedResume
        elif "corrupt" in lowered or "invalid pdf structure" in lowered:
            cls = CorruptedResume
        elif "invalid" in lowered:
            cls = InvalidResumeType
        else:
            cls = ResumeParseError
    return cls(message or None)


class ResumeExtractionClient:
    def __init__(self, url: str | None = None, timeout: float | None = None, session: requests.Session | None = None):
        self.url = url or settings.RESUME_PARSER_URL
        self.timeout = timeout if timeout is not None else settings.RESUME_PARSER_TIMEOUT
        self.session = session or requests.Session()

    def extract(self, upload) -> ParsedResume:
        validate_resume_upload(upload)
        content_type = getattr(upload, "content_type", None) or "application/octet-stream"
        upload.seek(0)
        files = {"resume": (upload.name, upload.read(), content_type)}
        upload.seek(0)

        try:
            response = self.session.post(self.url, files=files, timeout=self.timeout)
        except requests.exceptions.RequestException as exc:
            logger.exception("Resume service request failed: url=%s", self.url)
            raise ResumeServiceUnavailable(str(exc)) from exc

        if response.status_code >= 500:
            logger.error("Resume service error: status=%s", response.status_code)
            raise ResumeServiceUnavailable(f"Resume service answered {response.status_code}")

        try:
            payload = response.json()
        except ValueError as exc:
            raise ResumeServiceUnavailable("Resume service returned a non-JSON body") from exc

        if not response.ok:
            error = error_from_payload(payload)
            logger.info("Resume parse rejected: code=%s file=%s", error.code, upload.name)
            raise error

        parsed = ParsedResume.from_payload(payload if isinstance(payload, dict) else {})
        logger.info("Resume parsed: file=%s skills=%s", upload.name, len(parsed.skills))
        return parsed


def extract_resume(upload) -> ParsedResume:
    return ResumeExtractionClient().extract(upload)
