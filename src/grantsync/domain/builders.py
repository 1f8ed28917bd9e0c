"""Pure transforms from one source row to a domain value object."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Final

from grantsync.config.errors import MissingConfigurationError
from grantsync.domain import columns as c
from grantsync.domain.model import (
    EMPLOYEE_ID_TYPE,
    AwardStatus,
    Funder,
    Grant,
    Identifier,
    InvestigatorRole,
    User,
    UserRole,
)
from grantsync.domain.watermark import parse_optional_timestamp

if TYPE_CHECKING:
    from grantsync.domain.ports import Row

log = getLogger(__name__)

AWARD_STATUS_BY_CODE: Final[dict[str, AwardStatus]] = {
    "Active": AwardStatus.ACTIVE,
    "Pre-Award": AwardStatus.PRE_AWARD,
    "Terminated": AwardStatus.TERMINATED,
}

INVESTIGATOR_ROLE_BY_CODE: Final[dict[str, InvestigatorRole]] = {
    "P": InvestigatorRole.PI,
    "C": InvestigatorRole.CO_PI,
    "K": InvestigatorRole.KEY_PERSON,
}


def award_status_for(code: str | None) -> AwardStatus | None:
    if code is None:
        return None
    status = AWARD_STATUS_BY_CODE.get(code)
    if status is None:
        log.warning("Unrecognized award status %r, recording as unknown", code)
        return AwardStatus.UNKNOWN
    return status


def investigator_role_for(code: str | None) -> InvestigatorRole:
    if code is None:
        return InvestigatorRole.OTHER
    return INVESTIGATOR_ROLE_BY_CODE.get(code, InvestigatorRole.OTHER)


def policy_reference(base_url: str | None, policy_path: str) -> str:
    if base_url is None:
        raise MissingConfigurationError(
            "Missing configuration for: GRANTSYNC_POLICY_BASE_URL (needed to resolve funder policies)",
            settings=("GRANTSYNC_POLICY_BASE_URL",),
        )
    base = base_url if base_url.endswith("/") else base_url + "/"
    return base + policy_path.lstrip("/")


def display_name_for(first_name: str | None, last_name: str | None) -> str | None:
    """Join whichever name parts are present; ``None`` when neither is."""

    parts = [part.strip() for part in (first_name, last_name) if part and part.strip()]
    return " ".join(parts) or None


def build_user(row: Row, *, domain: str) -> User:
    first_name = row.get(c.C_USER_FIRST_NAME)
    last_name = row.get(c.C_USER_LAST_NAME)
    user = User(
        first_name=first_name,
        last_name=last_name,
        display_name=display_name_for(first_name, last_name),
        email=row.get(c.C_USER_EMAIL),
    )
    if c.C_USER_MIDDLE_NAME in row:
        user.middle_name = row[c.C_USER_MIDDLE_NAME]

    employee_id = row.get(c.C_USER_EMPLOYEE_ID)
    if employee_id is not None:
        user.locator_ids.insert(0, Identifier(domain, EMPLOYEE_ID_TYPE, employee_id).serialize())
    user.roles.add(UserRole.SUBMITTER)
    log.debug("Built user with employee id %s", employee_id)
    return user


def _build_funder(
    row: Row,
    *,
    key_column: str,
    name_column: str,
    policy_column: str,
    policy_base_url: str | None,
) -> Funder:
    funder = Funder(local_key=row.get(key_column))
    # an absent column must not blank a name the store already knows
    if name_column in row:
        funder.name = row[name_column]
    policy = row.get(policy_column)
    if policy is not None:
        funder.policy = policy_reference(policy_base_url, policy)
        log.info("Processing funder with local key %s and policy %s", funder.local_key, policy)
    log.debug("Built funder with local key %s", funder.local_key)
    return funder


def build_direct_funder(row: Row, *, policy_base_url: str | None) -> Funder:
    return _build_funder(
        row,
        key_column=c.C_DIRECT_FUNDER_LOCAL_KEY,
        name_column=c.C_DIRECT_FUNDER_NAME,
        policy_column=c.C_DIRECT_FUNDER_POLICY,
        policy_base_url=policy_base_url,
    )


def build_primary_funder(row: Row, *, policy_base_url: str | None) -> Funder:
    """Build the prime sponsor; used in grant mode and for every funder-mode row."""

    return _build_funder(
        row,
        key_column=c.C_PRIMARY_FUNDER_LOCAL_KEY,
        name_column=c.C_PRIMARY_FUNDER_NAME,
        policy_column=c.C_PRIMARY_FUNDER_POLICY,
        policy_base_url=policy_base_url,
    )


def build_grant(row: Row) -> Grant:
    """Build the scalar grant fields shared by every row of one grant.

    Funder references, the PI and co-PIs are filled in by the aggregator.
    """

    return Grant(
        local_key=row.get(c.C_GRANT_LOCAL_KEY),
        award_number=row.get(c.C_GRANT_AWARD_NUMBER),
        award_status=award_status_for(row.get(c.C_GRANT_AWARD_STATUS)),
        project_name=row.get(c.C_GRANT_PROJECT_NAME),
        award_date=parse_optional_timestamp(row.get(c.C_GRANT_AWARD_DATE)),
        start_date=parse_optional_timestamp(row.get(c.C_GRANT_START_DATE)),
        end_date=parse_optional_timestamp(row.get(c.C_GRANT_END_DATE)),
    )


__all__ = [
    "AWARD_STATUS_BY_CODE",
    "INVESTIGATOR_ROLE_BY_CODE",
    "award_status_for",
    "build_direct_funder",
    "build_grant",
    "build_primary_funder",
    "build_user",
    "display_name_for",
    "investigator_role_for",
    "policy_reference",
]
