"""CVE reference link endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Header, Query, status
from sqlalchemy.orm import Session

from survey_tracker.api.v1._authz import authorize_or_raise, raise_http
from survey_tracker.core.dependencies import get_db_session
from survey_tracker.core.exceptions import SurveyTrackerError
from survey_tracker.schemas.cve import (
    CVECategoryCreateRequest,
    CVECategoryResponse,
    CVESystemCreateRequest,
    CVESystemResponse,
    CVESystemUpdateRequest,
)
from survey_tracker.services.cve_service import CVEService

router = APIRouter(prefix="/cve", tags=["cve"])


@router.get("/categories", response_model=list[CVECategoryResponse])
def list_categories(
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> list[CVECategoryResponse]:
    authorize_or_raise(authorization, scopes=["cve.read"])
    return [CVECategoryResponse.model_validate(item) for item in CVEService(db).list_categories()]


@router.post("/categories", response_model=CVECategoryResponse, status_code=status.HTTP_201_CREATED)
def create_category(
    payload: CVECategoryCreateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> CVECategoryResponse:
    authorize_or_raise(authorization, scopes=["cve.write"])
    try:
        category = CVEService(db).create_category(payload.display_name, payload.name, payload.description)
    except SurveyTrackerError as exc:
        raise_http(exc)
    return CVECategoryResponse.model_validate(category)


@router.delete("/categories/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(
    category_id: int,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> None:
    authorize_or_raise(authorization, scopes=["cve.write"])
    try:
        CVEService(db).delete_category(category_id)
    except SurveyTrackerError as exc:
        raise_http(exc)


@router.get("/systems", response_model=list[CVESystemResponse])
def list_systems(
    category_id: int | None = Query(default=None),
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> list[CVESystemResponse]:
    authorize_or_raise(authorization, scopes=["cve.read"])
    return [CVESystemResponse.model_validate(item) for item in CVEService(db).list_systems(category_id)]


@router.post("/systems", response_model=CVESystemResponse, status_code=status.HTTP_201_CREATED)
def create_system(
    payload: CVESystemCreateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> CVESystemResponse:
    authorize_or_raise(authorization, scopes=["cve.write"])
    try:
        system = CVEService(db).create_system(payload.name, payload.url, payload.category_id)
    except SurveyTrackerError as exc:
        raise_http(exc)
    return CVESystemResponse.model_validate(system)


@router.patch("/systems/{system_id}", response_model=CVESystemResponse)
def update_system(
    system_id: int,
    payload: CVESystemUpdateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> CVESystemResponse:
    authorize_or_raise(authorization, scopes=["cve.write"])
    try:
        system = CVEService(db).update_system(system_id, **payload.model_dump())
    except SurveyTrackerError as exc:
        raise_http(exc)
    return CVESystemResponse.model_validate(system)


@router.delete("/systems/{system_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_system(
    system_id: int,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> None:
    authorize_or_raise(authorization, scopes=["cve.write"])
    try:
        CVEService(db).delete_system(system_id)
    except SurveyTrackerError as exc:
        raise_http(exc)
