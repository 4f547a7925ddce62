"""Findings category and template endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Header, Query, status
from sqlalchemy.orm import Session

from survey_tracker.api.v1._authz import authorize_or_raise, raise_http
from survey_tracker.core.dependencies import get_db_session
from survey_tracker.core.exceptions import SurveyTrackerError
from survey_tracker.schemas.findings import (
    FindingCategoryCreateRequest,
    FindingCategoryResponse,
    FindingCategoryUpdateRequest,
    FindingTemplateCreateRequest,
    FindingTemplateResponse,
    FindingTemplateUpdateRequest,
    ReorderRequest,
    ReorderResponse,
)
from survey_tracker.services.finding_service import FindingService

router = APIRouter(prefix="/findings", tags=["findings"])


@router.get("/categories", response_model=list[FindingCategoryResponse])
def list_categories(
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> list[FindingCategoryResponse]:
    authorize_or_raise(authorization, scopes=["findings.read"])
    return [FindingCategoryResponse.model_validate(item) for item in FindingService(db).list_categories()]


@router.post("/categories", response_model=FindingCategoryResponse, status_code=status.HTTP_201_CREATED)
def create_category(
    payload: FindingCategoryCreateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> FindingCategoryResponse:
    authorize_or_raise(authorization, scopes=["findings.write"])
    try:
        category = FindingService(db).create_category(payload.display_name, payload.name, payload.description)
    except SurveyTrackerError as exc:
        raise_http(exc)
    return FindingCategoryResponse.model_validate(category)


@router.patch("/categories/{category_id}", response_model=FindingCategoryResponse)
def update_category(
    category_id: int,
    payload: FindingCategoryUpdateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> FindingCategoryResponse:
    authorize_or_raise(authorization, scopes=["findings.write"])
    try:
        category = FindingService(db).update_category(category_id, payload.display_name, payload.description)
    except SurveyTrackerError as exc:
        raise_http(exc)
    return FindingCategoryResponse.model_validate(category)


@router.delete("/categories/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(
    category_id: int,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> None:
    authorize_or_raise(authorization, scopes=["findings.write"])
    try:
        FindingService(db).delete_category(category_id)
    except SurveyTrackerError as exc:
        raise_http(exc)


@router.post("/categories/reorder", response_model=ReorderResponse)
def reorder_categories(
    payload: ReorderRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> ReorderResponse:
    user = authorize_or_raise(authorization, scopes=["findings.write"])
    try:
        result = FindingService(db).reorder_categories(user.as_requesting_user(), payload.moved_id, payload.target_index)
    except SurveyTrackerError as exc:
        raise_http(exc)
    return ReorderResponse(ordered_ids=result.ordered_ids, changed=result.changed)


@router.get("/templates", response_model=list[FindingTemplateResponse])
def list_templates(
    category_id: int | None = Query(default=None),
    search: str | None = Query(default=None),
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> list[FindingTemplateResponse]:
    authorize_or_raise(authorization, scopes=["findings.read"])
    templates = FindingService(db).list_templates(category_id=category_id, search=search)
    return [FindingTemplateResponse.model_validate(item) for item in templates]


@router.post("/templates", response_model=FindingTemplateResponse, status_code=status.HTTP_201_CREATED)
def create_template(
    payload: FindingTemplateCreateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> FindingTemplateResponse:
    user = authorize_or_raise(authorization, scopes=["findings.write"])
    try:
        template = FindingService(db).create_template(user.as_requesting_user(), payload.model_dump())
    except SurveyTrackerError as exc:
        raise_http(exc)
    return FindingTemplateResponse.model_validate(template)


@router.patch("/templates/{template_id}", response_model=FindingTemplateResponse)
def update_template(
    template_id: int,
    payload: FindingTemplateUpdateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> FindingTemplateResponse:
    authorize_or_raise(authorization, scopes=["findings.write"])
    try:
        template = FindingService(db).update_template(template_id, payload.model_dump(exclude_unset=True))
    except SurveyTrackerError as exc:
        raise_http(exc)
    return FindingTemplateResponse.model_validate(template)


@router.delete("/templates/{template_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_template(
    template_id: int,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> None:
    authorize_or_raise(authorization, scopes=["findings.write"])
    try:
        FindingService(db).delete_template(template_id)
    except SurveyTrackerError as exc:
        raise_http(exc)


@router.post("/categories/{category_id}/templates/reorder", response_model=ReorderResponse)
def reorder_templates(
    category_id: int,
    payload: ReorderRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> ReorderResponse:
    authorize_or_raise(authorization, scopes=["findings.write"])
    try:
        result = FindingService(db).reorder_templates(category_id, payload.moved_id, payload.target_index)
    except SurveyTrackerError as exc:
        raise_http(exc)
    return ReorderResponse(ordered_ids=result.ordered_ids, changed=result.changed)
