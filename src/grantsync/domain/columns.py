"""Column names of the grants database views consumed by the synchronizer."""

from __future__ import annotations

from typing import Final

C_GRANT_AWARD_NUMBER: Final = "AWARD_ID"
C_GRANT_AWARD_STATUS: Final = "AWARD_STATUS"
C_GRANT_LOCAL_KEY: Final = "GRANT_NUMBER"
C_GRANT_PROJECT_NAME: Final = "TITLE"
C_GRANT_AWARD_DATE: Final = "AWARD_DATE"
C_GRANT_START_DATE: Final = "AWARD_START"
C_GRANT_END_DATE: Final = "AWARD_END"

C_DIRECT_FUNDER_LOCAL_KEY: Final = "SPONSOR_CODE"
C_DIRECT_FUNDER_NAME: Final = "SPONSOR"
C_DIRECT_FUNDER_POLICY: Final = "SPONSOR_POLICY"

C_PRIMARY_FUNDER_LOCAL_KEY: Final = "PRIME_SPONSOR_CODE"
C_PRIMARY_FUNDER_NAME: Final = "PRIME_SPONSOR"
C_PRIMARY_FUNDER_POLICY: Final = "PRIME_SPONSOR_POLICY"

C_USER_FIRST_NAME: Final = "FIRST_NAME"
C_USER_MIDDLE_NAME: Final = "MIDDLE_NAME"
C_USER_LAST_NAME: Final = "LAST_NAME"
C_USER_EMAIL: Final = "EMAIL"
C_USER_EMPLOYEE_ID: Final = "EMPLOYEE_ID"

C_ABBREVIATED_ROLE: Final = "ABBREVIATED_ROLE"
C_UPDATE_TIMESTAMP: Final = "UPDATE_TIMESTAMP"

# One column each mode's rows always carry.
GRANT_MODE_MARKER: Final = C_GRANT_LOCAL_KEY
USER_MODE_MARKER: Final = C_USER_EMPLOYEE_ID
FUNDER_MODE_MARKER: Final = C_PRIMARY_FUNDER_POLICY
