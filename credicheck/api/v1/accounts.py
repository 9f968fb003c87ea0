"""Account registration and management endpoints"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, Response

from credicheck.api.v1.schemas import (
    AccountResponse,
    ProfileSchema,
    ProfileUpdateRequest,
    RegisterConsumerRequest,
    RoleUpdateRequest,
)
from credicheck.api.dependencies import get_account_service, get_request_id
from credicheck.domain.exceptions import AccountExistsError, AccountNotFoundError
from credicheck.domain.models import Account, ConsumerProfile
from credicheck.services.accounts import AccountService

router = APIRouter()


def to_profile(body: ProfileSchema) -> ConsumerProfile:
    return ConsumerProfile(
        full_name=body.full_name,
        pan=body.pan,
        mobile=body.mobile,
        email=body.email,
        dob=body.dob,
        gender=body.gender or "",
        addresses=tuple(body.addresses),
        occupation=body.occupation or "",
        income=body.income or "",
        id_type=body.id_type or "",
        id_number=body.id_number or "",
    )


def to_account_response(account: Account) -> AccountResponse:
    profile = account.profile
    return AccountResponse(
        id=account.id,
        role=account.role,
        full_name=profile.full_name,
        pan=profile.pan,
        mobile=profile.mobile,
        email=profile.email,
        dob=profile.dob,
        gender=profile.gender,
        addresses=list(profile.addresses),
        occupation=profile.occupation,
        income=profile.income,
        id_type=profile.id_type,
        id_number=profile.id_number,
        franchise_id=account.franchise_id,
        referred_by=account.referred_by,
        wallet_balance=account.wallet_balance,
        created_at=account.created_at,
    )


@router.post("/accounts/consumers", response_model=AccountResponse)
def register_consumer(
    request_body: RegisterConsumerRequest,
    service: AccountService = Depends(get_account_service),
):
    """
    Register a consumer.

    Registration is idempotent on mobile number and PAN: a repeat
    submission returns the existing account.
    """
    account = service.register_consumer(to_profile(request_body), referred_by=request_body.referred_by)
    return to_account_response(account)


@router.post("/accounts/partners", response_model=AccountResponse, status_code=201)
def create_partner(
    request_body: ProfileSchema,
    request: Request,
    service: AccountService = Depends(get_account_service),
):
    """Create a reseller account with an empty wallet"""
    try:
        account = service.create_partner(to_profile(request_body))
    except AccountExistsError as e:
        logging.warning(f"Duplicate partner: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=409, detail=str(e))
    return to_account_response(account)


@router.get("/accounts", response_model=List[AccountResponse])
def list_accounts(service: AccountService = Depends(get_account_service)):
    return [to_account_response(a) for a in service.list_all()]


@router.get("/accounts/{account_id}", response_model=AccountResponse)
def get_account(account_id: str, service: AccountService = Depends(get_account_service)):
    try:
        return to_account_response(service.get(account_id))
    except AccountNotFoundError:
        raise HTTPException(status_code=404, detail="Account not found")


@router.patch("/accounts/{account_id}", response_model=AccountResponse)
def update_account(
    account_id: str,
    request_body: ProfileUpdateRequest,
    service: AccountService = Depends(get_account_service),
):
    """Edit profile fields; reports already generated are unaffected"""
    try:
        account = service.update_profile(account_id, request_body.model_dump(exclude_unset=True))
    except AccountNotFoundError:
        raise HTTPException(status_code=404, detail="Account not found")
    except AccountExistsError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return to_account_response(account)


@router.put("/accounts/{account_id}/role", response_model=AccountResponse)
def change_role(
    account_id: str,
    request_body: RoleUpdateRequest,
    service: AccountService = Depends(get_account_service),
):
    try:
        account = service.change_role(account_id, request_body.role)
    except AccountNotFoundError:
        raise HTTPException(status_code=404, detail="Account not found")
    return to_account_response(account)


@router.delete("/accounts/{account_id}", status_code=204)
def delete_account(
    account_id: str,
    request: Request,
    service: AccountService = Depends(get_account_service),
):
    """Remove an account; reports and ledger history are retained"""
    try:
        service.delete(account_id)
    except AccountNotFoundError:
        raise HTTPException(status_code=404, detail="Account not found")
    logging.info("Account deleted", extra={"request_id": get_request_id(request), "account_id": account_id})
    return Response(status_code=204)
