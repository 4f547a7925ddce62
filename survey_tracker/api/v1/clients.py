"""Client endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Header, status
from sqlalchemy.orm import Session

from survey_tracker.api.v1._authz import authorize_or_raise, raise_http
from survey_tracker.core.dependencies import get_db_session
from survey_tracker.core.exceptions import SurveyTrackerError
from survey_tracker.schemas.clients import ClientCreateRequest, ClientResponse, ClientUpdateRequest
from survey_tracker.services.client_service import ClientService

router = APIRouter(prefix="/clients", tags=["clients"])


@router.get("", response_model=list[ClientResponse])
def list_clients(
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> list[ClientResponse]:
    authorize_or_raise(authorization, scopes=["clients.read"])
    return [ClientResponse.model_validate(client) for client in ClientService(db).list_clients()]


@router.post("", response_model=ClientResponse, status_code=status.HTTP_201_CREATED)
def create_client(
    payload: ClientCreateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> ClientResponse:
    user = authorize_or_raise(authorization, scopes=["clients.write"])
    try:
        client = ClientService(db).create_client(user.as_requesting_user(), payload.name, payload.logo_url)
    except SurveyTrackerError as exc:
        raise_http(exc)
    return ClientResponse.model_validate(client)


@router.patch("/{client_id}", response_model=ClientResponse)
def update_client(
    client_id: int,
    payload: ClientUpdateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> ClientResponse:
    user = authorize_or_raise(authorization, scopes=["clients.write"])
    try:
        client = ClientService(db).update_client(
            user.as_requesting_user(), client_id, name=payload.name, logo_url=payload.logo_url
        )
    except SurveyTrackerError as exc:
        raise_http(exc)
    return ClientResponse.model_validate(client)


@router.delete("/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_client(
    client_id: int,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> None:
    user = authorize_or_raise(authorization, scopes=["clients.write"])
    try:
        ClientService(db).delete_client(user.as_requesting_user(), client_id)
    except SurveyTrackerError as exc:
        raise_http(exc)
