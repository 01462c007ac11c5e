"""OCM account client operations."""

from typing import TYPE_CHECKING

from rosa_mcp.domains.accounts.models import Account

if TYPE_CHECKING:
    from rosa_mcp.clients.ocm import OCMSession

CURRENT_ACCOUNT_PATH = "/api/accounts_mgmt/v1/current_account"


class AccountClient:
    """Client for OCM account operations."""

    def __init__(self, session: "OCMSession") -> None:
        self._session = session

    def get_current_account(self) -> Account:
        """Get the account the session's credential belongs to.

        Raises:
            OCMError: If OCM rejects the request.
        """
        return Account.from_api(self._session.get(CURRENT_ACCOUNT_PATH))
