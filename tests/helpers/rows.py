"""Row factories mirroring the grants database views."""

from __future__ import annotations

from grantsync.domain import columns as c


def grant_row(
    grant_key: str | None = "G1",
    *,
    employee_id: str | None = "E1",
    role: str | None = "P",
    timestamp: str | None = "2020-01-01 00:00:00.0",
    direct_funder: str | None = "F1",
    direct_funder_name: str | None = "National Science Foundation",
    primary_funder: str | None = None,
    primary_funder_name: str | None = None,
    status: str | None = "Active",
    **overrides: str | None,
) -> dict[str, str | None]:
    row: dict[str, str | None] = {
        c.C_GRANT_LOCAL_KEY: grant_key,
        c.C_GRANT_AWARD_NUMBER: f"A-{grant_key}",
        c.C_GRANT_AWARD_STATUS: status,
        c.C_GRANT_PROJECT_NAME: f"Project {grant_key}",
        c.C_GRANT_AWARD_DATE: "2019-06-01 00:00:00.0",
        c.C_GRANT_START_DATE: "2019-07-01 00:00:00.0",
        c.C_GRANT_END_DATE: "2022-06-30 00:00:00.0",
        c.C_DIRECT_FUNDER_LOCAL_KEY: direct_funder,
        c.C_DIRECT_FUNDER_NAME: direct_funder_name,
        c.C_DIRECT_FUNDER_POLICY: None,
        c.C_PRIMARY_FUNDER_LOCAL_KEY: primary_funder,
        c.C_PRIMARY_FUNDER_NAME: primary_funder_name,
        c.C_PRIMARY_FUNDER_POLICY: None,
        c.C_USER_FIRST_NAME: f"First{employee_id}",
        c.C_USER_MIDDLE_NAME: None,
        c.C_USER_LAST_NAME: f"Last{employee_id}",
        c.C_USER_EMAIL: f"{employee_id}@example.edu".lower(),
        c.C_USER_EMPLOYEE_ID: employee_id,
        c.C_ABBREVIATED_ROLE: role,
        c.C_UPDATE_TIMESTAMP: timestamp,
    }
    row.update(overrides)
    return row


def user_row(
    employee_id: str | None = "E1",
    *,
    first_name: str = "Ada",
    last_name: str = "Lovelace",
    email: str | None = "ada@example.edu",
    timestamp: str | None = "2020-01-01 00:00:00.0",
    **overrides: str | None,
) -> dict[str, str | None]:
    row: dict[str, str | None] = {
        c.C_USER_EMPLOYEE_ID: employee_id,
        c.C_USER_FIRST_NAME: first_name,
        c.C_USER_MIDDLE_NAME: None,
        c.C_USER_LAST_NAME: last_name,
        c.C_USER_EMAIL: email,
        c.C_UPDATE_TIMESTAMP: timestamp,
    }
    row.update(overrides)
    return row


def funder_row(
    funder_key: str = "F1",
    *,
    name: str | None = "National Institutes of Health",
    policy: str | None = "policies/5e/2e/nih",
    timestamp: str | None = "2020-01-01 00:00:00.0",
    **overrides: str | None,
) -> dict[str, str | None]:
    row: dict[str, str | None] = {
        c.C_PRIMARY_FUNDER_LOCAL_KEY: funder_key,
        c.C_PRIMARY_FUNDER_NAME: name,
        c.C_PRIMARY_FUNDER_POLICY: policy,
        c.C_UPDATE_TIMESTAMP: timestamp,
    }
    row.update(overrides)
    return row
