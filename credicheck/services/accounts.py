"""Account management - consumer registration, partners and role changes"""

import logging
import random
import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from credicheck.domain.exceptions import AccountExistsError, AccountNotFoundError
from credicheck.domain.models import Account, AccountRole, ConsumerProfile
from credicheck.domain.stores import AccountStore, UnitOfWork

logger = logging.getLogger(__name__)

MISSING_ADDRESS = "Address Not Provided"

PROFILE_FIELDS = {
    "full_name",
    "pan",
    "mobile",
    "email",
    "dob",
    "gender",
    "addresses",
    "occupation",
    "income",
    "id_type",
    "id_number",
}


def new_account_id() -> str:
    return f"USR-{uuid.uuid4().hex[:12].upper()}"


def new_franchise_id() -> str:
    return f"FR-{random.randint(1000, 9999)}"


def normalize_profile(profile: ConsumerProfile) -> ConsumerProfile:
    """Fill registration defaults and drop blank addresses"""
    addresses = tuple(a.strip() for a in profile.addresses if a and a.strip()) or (MISSING_ADDRESS,)
    return replace(
        profile,
        addresses=addresses,
        gender=profile.gender or "Unknown",
        occupation=profile.occupation or "Salaried",
        income=profile.income or "5-10 Lakhs",
        id_type=profile.id_type or "PAN",
        id_number=profile.id_number or profile.pan or "N/A",
    )


class AccountService:
    def __init__(self, accounts: AccountStore, uow: UnitOfWork):
        self.accounts = accounts
        self.uow = uow

    def register_consumer(self, profile: ConsumerProfile, referred_by: Optional[str] = None) -> Account:
        """Create a USER account, or return the one already holding this mobile/PAN"""
        existing = self.accounts.find_by_mobile_or_pan(profile.mobile, profile.pan)
        if existing is not None:
            return existing

        account = Account(
            id=new_account_id(),
            role=AccountRole.USER,
            profile=normalize_profile(profile),
            created_at=datetime.now(timezone.utc),
            referred_by=referred_by,
        )
        with self.uow.transaction():
            self.accounts.add(account)
        logger.info("Consumer registered", extra={"account_id": account.id, "referred_by": referred_by})
        return account

    def create_partner(self, profile: ConsumerProfile) -> Account:
        """
        Raises:
            AccountExistsError: mobile or PAN already registered
        """
        if self.accounts.find_by_mobile_or_pan(profile.mobile, profile.pan) is not None:
            raise AccountExistsError("An account with this mobile number or PAN already exists")

        account = Account(
            id=new_account_id(),
            role=AccountRole.PARTNER_ADMIN,
            profile=normalize_profile(profile),
            created_at=datetime.now(timezone.utc),
            franchise_id=new_franchise_id(),
            wallet_balance=0,
        )
        with self.uow.transaction():
            self.accounts.add(account)
        logger.info("Partner created", extra={"account_id": account.id, "franchise_id": account.franchise_id})
        return account

    def get(self, account_id: str) -> Account:
        account = self.accounts.get(account_id)
        if account is None:
            raise AccountNotFoundError(f"Account {account_id} not found")
        return account

    def list_all(self) -> List[Account]:
        return self.accounts.list_all()

    def update_profile(self, account_id: str, changes: Dict[str, Any]) -> Account:
        """
        Edit identity fields. Reports already generated keep their snapshot.

        Raises:
            AccountExistsError: new mobile or PAN belongs to another account
        """
        account = self.get(account_id)
        updates = {k: v for k, v in changes.items() if k in PROFILE_FIELDS and v is not None}
        for key in ("mobile", "pan"):
            if key in updates and updates[key] != getattr(account.profile, key):
                self._require_unclaimed(account_id, **{key: updates[key]})
        if "addresses" in updates:
            updates["addresses"] = tuple(updates["addresses"])
        account.profile = normalize_profile(replace(account.profile, **updates))
        with self.uow.transaction():
            self.accounts.save(account)
        return account

    def change_role(self, account_id: str, role: AccountRole) -> Account:
        """Promotion to partner assigns a franchise id and an empty wallet"""
        account = self.get(account_id)
        account.role = role
        if role == AccountRole.PARTNER_ADMIN:
            if not account.franchise_id:
                account.franchise_id = new_franchise_id()
            if account.wallet_balance is None:
                account.wallet_balance = 0
        with self.uow.transaction():
            self.accounts.save(account)
        logger.info("Account role changed", extra={"account_id": account_id, "role": role.value})
        return account

    def delete(self, account_id: str) -> None:
        """Remove an account. Its reports and transactions stay on record."""
        account = self.get(account_id)
        with self.uow.transaction():
            self.accounts.delete(account_id)
        logger.info("Account deleted", extra={"account_id": account_id, "role": account.role.value})

    def _require_unclaimed(self, account_id: str, mobile: str = "", pan: str = "") -> None:
        holder = self.accounts.find_by_mobile_or_pan(mobile, pan)
        if holder is not None and holder.id != account_id:
            raise AccountExistsError("An account with this mobile number or PAN already exists")
