import json
import logging
from typing import Any, Optional, Tuple

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import ValidationError

from app.core.errors import PayloadError
from app.core.security import AdminSession, require_admin, require_csrf
from app.schemas import (
    InspectionResponse,
    MigrationResponse,
    PreviewDiffRequest,
    PreviewDiffResponse,
    SaveContentRequest,
    SaveContentResponse,
)
from app.services import content as content_service

logger = logging.getLogger(__name__)

router = APIRouter()

CSRF_HEADER = "X-CSRF-Token"


def _reject_constant(name: str):
    raise ValueError(f"{name} is not valid JSON")


async def _read_json_object(request: Request, error_message: str) -> dict:
    raw = await request.body()
    try:
        body = json.loads(raw, parse_constant=_reject_constant) if raw else None
    except ValueError:
        body = None
    if not isinstance(body, dict):
        raise PayloadError(error_message)
    return body


async def _parse_save_request(request: Request) -> Tuple[str, Any, Optional[str]]:
    """Return (section, payload, csrf_token) from a JSON or legacy form body."""
    content_type = request.headers.get("content-type", "").lower()
    header_token = request.headers.get(CSRF_HEADER)

    if "application/json" in content_type:
        body = await _read_json_object(request, "Invalid JSON payload")
        try:
            parsed = SaveContentRequest.model_validate(body)
        except ValidationError:
            raise PayloadError("Invalid JSON payload")
        if parsed.content is not None:
            payload = parsed.content
        elif parsed.data is not None:
            payload = parsed.data
        else:
            payload = body
        return parsed.section or "", payload, parsed.csrf_token or header_token

    form = await request.form()
    fields = {key: value for key, value in form.items() if isinstance(value, str)}
    section = fields.pop("section", "")
    token = fields.pop("csrf_token", None) or header_token
    return section, fields, token


@router.api_route(
    "/admin/save-content",
    methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    response_model=SaveContentResponse,
)
async def save_content(request: Request, session: AdminSession = Depends(require_admin)):
    """
    Persist one section of the site content.

    Accepts JSON `{csrf_token, section, content}` or a legacy form post.
    Menu payloads replace the stored menu after normalization; other
    sections are merged. Errors come back as `{success: false, message}`.
    """
    if request.method != "POST":
        raise HTTPException(status_code=status.HTTP_405_METHOD_NOT_ALLOWED, detail="Method not allowed")

    section, payload, token = await _parse_save_request(request)
    require_csrf(session, token)

    timestamp = content_service.save_section(section, payload)
    return SaveContentResponse(success=True, message="Content saved successfully!", timestamp=timestamp)


@router.get("/admin/content")
async def get_content(session: AdminSession = Depends(require_admin)):
    """Current content document, as the admin editor loads it"""
    return content_service.get_document()


@router.get("/admin/content/{section}")
async def get_content_section(section: str, session: AdminSession = Depends(require_admin)):
    document = content_service.get_document()
    if section not in document:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown section: {section}")
    return {section: document[section]}


@router.post("/admin/preview-diff", response_model=PreviewDiffResponse)
async def preview_diff(request: Request, session: AdminSession = Depends(require_admin)):
    """Show what saving the proposed menu would add, remove and change"""
    error = "Invalid payload; expected { menu: [...] }"
    body = await _read_json_object(request, error)
    try:
        parsed = PreviewDiffRequest.model_validate(body)
    except ValidationError:
        raise PayloadError(error)
    return PreviewDiffResponse(success=True, diff=content_service.preview_menu_diff(parsed.menu))


@router.post("/admin/migrate-content", response_model=MigrationResponse)
async def migrate_content(request: Request, session: AdminSession = Depends(require_admin)):
    """One-off normalization of legacy menu data already on disk"""
    body = await _read_json_object(request, "Invalid JSON payload") if await request.body() else {}
    require_csrf(session, body.get("csrf_token") or request.headers.get(CSRF_HEADER))
    return MigrationResponse(**content_service.migrate_content())


@router.get("/admin/inspect-content", response_model=InspectionResponse)
async def inspect_content(session: AdminSession = Depends(require_admin)):
    problems = content_service.inspect_content()
    message = "Validation found issues" if problems else "Content validation passed. All menu items normalized."
    return InspectionResponse(success=not problems, problems=problems, message=message)


@router.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "Site Content Admin"}
