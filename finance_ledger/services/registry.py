"""
In-Memory User Registry

The registry is the single owner of every User object while the program
runs. It is created by the entry point and passed explicitly to the
services that need it; there is no global instance.

Concurrency: the command loop handles one command at a time, so the
registry holds no locks. Any future multi-session use must keep writes
to one user's ledger mutually exclusive.
"""

from typing import Iterable, Mapping, Optional

from finance_ledger.models.ledger import User


class UserRegistry:
    """Mapping of login -> User with snapshot/restore hooks for storage."""

    def __init__(self, users: Optional[Mapping[str, User]] = None):
        self._users: dict[str, User] = {}
        if users:
            self.replace_all(users)

    def exists(self, login: str) -> bool:
        return login in self._users

    def get(self, login: str) -> Optional[User]:
        return self._users.get(login)

    def put(self, user: User) -> None:
        self._users[user.login] = user

    def all_users(self) -> Iterable[User]:
        return list(self._users.values())

    def __len__(self) -> int:
        return len(self._users)

    def replace_all(self, users: Mapping[str, User]) -> None:
        """
        Restore hook: replace the whole registry with loaded users.

        Keys must match each user's login.
        """
        for login, user in users.items():
            if login != user.login:
                raise ValueError(f"Registry key {login!r} does not match login {user.login!r}")
        self._users = dict(users)

    def snapshot(self) -> dict[str, User]:
        """
        Snapshot hook: deep copy of every user for persistence.

        Ledger entries keep their append order. Later writes to the
        live registry do not show up in the snapshot.
        """
        return {
            login: user.model_copy(deep=True)
            for login, user in self._users.items()
        }
