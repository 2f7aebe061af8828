# =============================================================================
# core/ad_client.py - Active Directory account source
# =============================================================================

import logging
from typing import Any, Dict, List, Optional

from ldap3 import ALL, BASE, SUBTREE, Connection, Server
from ldap3.core.exceptions import LDAPException

from core.account_source import AccountSource, AccountSourceError
from core.models import AccountRecord, LookupResult, ManagerDetails

# userAccountControl / msDS-User-Account-Control-Computed flags
ACCOUNTDISABLE = 0x2
UF_LOCKOUT = 0x10

EVER_LOCKED_FILTER = "(&(objectCategory=person)(objectClass=user)(lockoutTime>=1))"

ACCOUNT_ATTRIBUTES = [
    'givenName', 'sn', 'mail', 'manager', 'userAccountControl',
    'msDS-User-Account-Control-Computed', 'lockoutTime'
]
MANAGER_ATTRIBUTES = ['givenName', 'sn', 'displayName']


class ActiveDirectoryClient(AccountSource):
    """Active Directory account source backed by ldap3"""

    def __init__(self, server_url: str, username: str, password: str, base_dn: str,
                 page_size: int = 500):
        self.server_url = server_url
        self.username = username
        self.password = password
        self.base_dn = base_dn
        self.page_size = page_size
        self.connection: Optional[Connection] = None
        self.logger = logging.getLogger(__name__)

    def __enter__(self):
        """Context manager entry"""
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit"""
        self.disconnect()

    def connect(self) -> bool:
        """Establish connection to Active Directory"""
        try:
            server = Server(self.server_url, get_info=ALL)
            self.connection = Connection(
                server,
                user=self.username,
                password=self.password,
                auto_bind=True
            )
            self.logger.info("Successfully connected to Active Directory")
            return True
        except LDAPException as e:
            self.logger.error(f"Failed to connect to AD: {e}")
            return False

    def disconnect(self) -> None:
        """Close Active Directory connection"""
        if self.connection:
            self.connection.unbind()
            self.connection = None
            self.logger.info("Disconnected from Active Directory")

    def query_locked_accounts(self) -> List[AccountRecord]:
        """Accounts whose computed lockout flag is currently set"""
        accounts = [account for account in self._search_accounts(EVER_LOCKED_FILTER)
                    if account.currently_locked]
        self.logger.info(f"Found {len(accounts)} currently locked accounts")
        return accounts

    def query_ever_locked_accounts(self) -> List[AccountRecord]:
        """Accounts with a non-zero lockoutTime"""
        accounts = self._search_accounts(EVER_LOCKED_FILTER)
        self.logger.info(f"Found {len(accounts)} accounts with a recorded lockout")
        return accounts

    def lookup_manager(self, identity_key: str) -> LookupResult:
        """Read name attributes of the manager entry at the given DN"""
        if not self.connection:
            return LookupResult.error("Not connected to Active Directory")

        try:
            found = self.connection.search(
                search_base=identity_key,
                search_filter="(objectClass=*)",
                search_scope=BASE,
                attributes=MANAGER_ATTRIBUTES
            )
        except LDAPException as e:
            return LookupResult.error(str(e))

        entries = [item for item in (self.connection.response or [])
                   if item.get('type') == 'searchResEntry']
        if not found or not entries:
            description = (self.connection.result or {}).get('description', 'not found')
            return LookupResult.not_found(description)

        attributes = entries[0].get('raw_attributes', {})
        return LookupResult.found(ManagerDetails(
            given_name=self._text(attributes, 'givenName'),
            surname=self._text(attributes, 'sn'),
            display_name=self._text(attributes, 'displayName')
        ))

    def _search_accounts(self, search_filter: str) -> List[AccountRecord]:
        """Paged subtree search converted to account records"""
        if not self.connection:
            raise AccountSourceError("Not connected to Active Directory")

        try:
            results = self.connection.extend.standard.paged_search(
                search_base=self.base_dn,
                search_filter=search_filter,
                search_scope=SUBTREE,
                attributes=ACCOUNT_ATTRIBUTES,
                paged_size=self.page_size,
                generator=True
            )
            return [self._to_account(item) for item in results
                    if item.get('type') == 'searchResEntry']
        except LDAPException as e:
            self.logger.error(f"Error querying accounts with {search_filter}: {e}")
            raise AccountSourceError(str(e)) from e

    def _to_account(self, item: Dict[str, Any]) -> AccountRecord:
        attributes = item.get('raw_attributes', {})
        manager = self._text(attributes, 'manager')
        return AccountRecord(
            identity_key=item.get('dn', ''),
            given_name=self._text(attributes, 'givenName'),
            surname=self._text(attributes, 'sn'),
            email=self._text(attributes, 'mail'),
            manager=manager or None,
            enabled=self._is_account_active(self._integer(attributes, 'userAccountControl')),
            currently_locked=bool(
                self._integer(attributes, 'msDS-User-Account-Control-Computed') & UF_LOCKOUT
            ),
            lockout_time_raw=self._integer(attributes, 'lockoutTime')
        )

    @staticmethod
    def _raw_value(attributes: Dict[str, Any], name: str) -> Optional[bytes]:
        """First raw value of an attribute, matched case-insensitively"""
        for key, values in attributes.items():
            if key.lower() == name.lower():
                if isinstance(values, (list, tuple)):
                    return values[0] if values else None
                return values
        return None

    def _text(self, attributes: Dict[str, Any], name: str) -> str:
        value = self._raw_value(attributes, name)
        if value is None:
            return ""
        if isinstance(value, bytes):
            return value.decode('utf-8', errors='replace')
        return str(value)

    def _integer(self, attributes: Dict[str, Any], name: str) -> int:
        text = self._text(attributes, name).strip()
        try:
            return int(text) if text else 0
        except ValueError:
            self.logger.warning(f"Ignoring non-numeric {name} value: {text!r}")
            return 0

    def _is_account_active(self, user_account_control: int) -> bool:
        """Check if user account is active based on userAccountControl flags"""
        return not bool(user_account_control & ACCOUNTDISABLE)
