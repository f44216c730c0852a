"""Client credentials and concert access scopes.

Client accounts are a static table of email -> (password, concert ids),
loaded from a JSON file or a mapping and handed to the caller that performs
the login. The resulting Identity is passed explicitly to report generation,
which restricts the report to the identity's concerts.

JSON format::

    {
        "mazzika@zeko.com": {"password": "...", "concert_ids": [6]},
        "ops@zeko.com": {"password": "...", "concert_ids": []}
    }

An empty ``concert_ids`` list grants access to every concert.
"""

from __future__ import annotations

import hmac
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Mapping

from ticket_sales.exceptions import AuthenticationError, ConfigError
from ticket_sales.parsing import canonical_id

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    """An authenticated client and the concerts it may see.

    Attributes:
        email: Normalised (lower-case) login email.
        concert_ids: Canonical concert ids in scope; empty means all concerts.
    """

    email: str
    concert_ids: frozenset[str] = field(default_factory=frozenset)

    @property
    def unrestricted(self) -> bool:
        return not self.concert_ids

    def allows(self, concert_id: Any) -> bool:
        """Return True if the identity may see data for concert_id."""
        return self.unrestricted or canonical_id(concert_id) in self.concert_ids


@dataclass(frozen=True)
class _Account:
    password: str
    concert_ids: frozenset[str]


def _normalise_email(email: str) -> str:
    return email.strip().lower()


class CredentialStore:
    """Lookup of client credentials and their concert scopes.

    Example:
        >>> store = CredentialStore.from_mapping(
        ...     {"mazzika@zeko.com": {"password": "secret", "concert_ids": [6]}}
        ... )
        >>> store.authenticate("Mazzika@zeko.com", "secret").concert_ids
        frozenset({'6'})

    """

    def __init__(self, accounts: Mapping[str, _Account]) -> None:
        self._accounts = dict(accounts)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> CredentialStore:
        """Build a store from an email -> {"password", "concert_ids"} mapping.

        Raises:
            ConfigError: If an entry has no password or a malformed scope.
        """
        accounts: dict[str, _Account] = {}
        for email, rec in data.items():
            if not isinstance(rec, Mapping) or not rec.get("password"):
                raise ConfigError(f"Credential entry for '{email}' needs a password")
            raw_ids = rec.get("concert_ids") or []
            if not isinstance(raw_ids, Iterable) or isinstance(raw_ids, (str, bytes)):
                raise ConfigError(f"concert_ids for '{email}' must be a list")
            concert_ids = frozenset(
                cid for cid in (canonical_id(v) for v in raw_ids) if cid is not None
            )
            accounts[_normalise_email(email)] = _Account(
                password=str(rec["password"]), concert_ids=concert_ids
            )
        return cls(accounts)

    @classmethod
    def from_json(cls, path: str | Path) -> CredentialStore:
        """Load a store from a JSON credentials file.

        Raises:
            ConfigError: If the file cannot be read or parsed.
        """
        path = Path(path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise ConfigError(f"Cannot load credentials from {path}: {e}") from e
        if not isinstance(data, Mapping):
            raise ConfigError(f"Credentials file {path} must contain a JSON object")
        return cls.from_mapping(data)

    def list_emails(self) -> list[str]:
        return sorted(self._accounts)

    def authenticate(self, email: str, password: str) -> Identity:
        """Check an email/password pair and return the matching Identity.

        Raises:
            AuthenticationError: If the email is unknown or the password is wrong.
        """
        key = _normalise_email(email)
        account = self._accounts.get(key)
        expected = account.password if account else ""
        if not hmac.compare_digest(expected.encode(), password.encode()) or account is None:
            logger.info("Rejected login for %s", key)
            raise AuthenticationError("Invalid email or password")

        logger.info("Authenticated %s", key)
        return Identity(email=key, concert_ids=account.concert_ids)
