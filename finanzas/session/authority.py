"""
Session Authority

The Session Authority owns the roster (every registered user) and the
single active session slot. All reads and writes of user data go
through it.

CORE GUARANTEE: after any successful update_user call, the roster entry
and the session (when it is the same user) are equal, both in memory
and in the store.

DESIGN DECISIONS:
1. One explicit object per process, built with an injected store.
   There is no module-level singleton.
2. The whole roster is persisted on every mutation. Two processes
   sharing a store race at roster granularity: the last writer wins.
3. Users handed out are copies. A caller mutating one must pass it
   back through update_user for the change to take effect.
4. A persisted session is trusted on startup; credentials are not
   re-checked.
5. Roster records that cannot be rebuilt are left out of the roster
   but written back unchanged on every save. Their emails and ids stay
   reserved.
"""

from typing import Any, Optional

from finanzas.audit import AuditLogger
from finanzas.models.errors import ErrorKind
from finanzas.models.results import AuthResult
from finanzas.models.transaction import generate_record_id
from finanzas.models.user import InvalidUserRecord, User, UserRole
from finanzas.services.storage import KeyValueStore


USERS_KEY = "finanzas_users"
SESSION_KEY = "finanzas_session"

# Seeded when the store holds no roster yet
SEED_ADMIN = {
    "id": 1,
    "name": "Admin",
    "email": "admin@finanzas.com",
    "password": "admin123",
    "role": UserRole.ADMIN.value,
}

MSG_REGISTERED = "Registro exitoso."
MSG_DUPLICATE_EMAIL = "El correo ya está registrado."
MSG_LOGGED_IN = "Inicio de sesión exitoso."
MSG_INVALID_CREDENTIALS = "Credenciales inválidas."


class SessionAuthority:
    """
    Owner of the roster and the active session.

    State machine for the session slot:
        Anonymous --login--> Authenticated --logout--> Anonymous
    register never changes it; update_user only refreshes it.
    """

    def __init__(
        self,
        store: KeyValueStore,
        audit_logger: Optional[AuditLogger] = None,
    ):
        """
        Load the roster and any persisted session from the store.

        Args:
            store: Persistent key-value store.
            audit_logger: Audit sink. Defaults to local-only logging.
        """
        self._store = store
        self._audit = audit_logger or AuditLogger()
        self._roster: dict[int, User] = {}
        # Stored records that could not be rebuilt, written back untouched
        self._unreadable: list[Any] = []
        self._session: Optional[User] = None
        self._initialize()

    # -------------------------------------------------------------------------
    # Startup
    # -------------------------------------------------------------------------

    def _initialize(self) -> None:
        roster_data = self._store.get(USERS_KEY)
        if isinstance(roster_data, list):
            users, self._unreadable = self._rehydrate_roster(roster_data)
            self._roster = {u.id: u for u in users}
        else:
            admin = User.from_data(SEED_ADMIN)
            self._roster = {admin.id: admin}
            self._save_roster()
            self._audit.log_roster_seeded(admin.id, admin.email)

        session_data = self._store.get(SESSION_KEY)
        if session_data is None:
            return

        try:
            user = User.from_data(session_data)
        except InvalidUserRecord as e:
            self._audit.log_session_discarded(e.message)
            return

        self._session = user
        self._audit.log_session_restored(user.id, self._roster.get(user.id) == user)

    def _rehydrate_roster(self, records: list[Any]) -> tuple[list[User], list[Any]]:
        """
        Rebuild users from stored records.

        Returns the users and, separately, the raw records that were
        skipped (malformed or a repeated id).
        """
        users: list[User] = []
        skipped: list[Any] = []
        seen_ids: set[int] = set()

        for index, record in enumerate(records):
            try:
                user = User.from_data(record)
            except InvalidUserRecord as e:
                self._audit.log_roster_entry_skipped(index, e.message)
                skipped.append(record)
                continue

            if user.id in seen_ids:
                self._audit.log_roster_entry_skipped(index, f"duplicate id {user.id}")
                skipped.append(record)
                continue

            seen_ids.add(user.id)
            users.append(user)

        return users, skipped

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def _save_roster(self) -> bool:
        records = [u.to_data() for u in self._roster.values()]
        return self._store.save(USERS_KEY, records + self._unreadable)

    def _unreadable_values(self, field: str) -> list[Any]:
        return [r.get(field) for r in self._unreadable if isinstance(r, dict)]

    def _reserved_ids(self) -> list[int]:
        """Ids in use, including those of records that could not be rebuilt."""
        kept = [
            i for i in self._unreadable_values("id")
            if isinstance(i, int) and not isinstance(i, bool)
        ]
        return list(self._roster.keys()) + kept

    def _save_session(self) -> bool:
        return self._store.save(SESSION_KEY, self._session.to_data())

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    def register(self, name: str, email: str, password: str) -> AuthResult:
        """
        Add a new user to the roster.

        Fails with DUPLICATE_EMAIL (roster untouched) when any user
        already has this exact email. Does not open a session.
        """
        taken = [u.email for u in self._roster.values()] + self._unreadable_values("email")
        if email in taken:
            self._audit.log_registration_rejected(email)
            return AuthResult(
                success=False,
                message=MSG_DUPLICATE_EMAIL,
                error=ErrorKind.DUPLICATE_EMAIL,
            )

        user = User(
            id=generate_record_id(self._reserved_ids()),
            name=name,
            email=email,
            password=password,
        )
        self._roster[user.id] = user
        self._save_roster()
        self._audit.log_user_registered(user.id, user.email)

        return AuthResult(success=True, message=MSG_REGISTERED, user=user.summary())

    def login(self, email: str, password: str) -> AuthResult:
        """
        Open a session for the single user matching both email and password.

        On failure the session slot is left exactly as it was.
        """
        matches = [
            u for u in self._roster.values()
            if u.email == email and u.password == password
        ]
        if len(matches) != 1:
            self._audit.log_login_failed(email)
            return AuthResult(
                success=False,
                message=MSG_INVALID_CREDENTIALS,
                error=ErrorKind.INVALID_CREDENTIALS,
            )

        user = matches[0]
        self._session = user.model_copy(deep=True)
        self._save_session()
        self._audit.log_login_succeeded(user.id)

        return AuthResult(success=True, message=MSG_LOGGED_IN, user=user.summary())

    def logout(self) -> None:
        """Close the session. Safe to call when nobody is logged in."""
        user_id = self._session.id if self._session else None
        self._session = None
        self._store.remove(SESSION_KEY)
        self._audit.log_logout(user_id)

    def update_user(self, user: User) -> bool:
        """
        Replace a roster entry with a complete, already-mutated user.

        The roster is persisted; if the user is the active session, the
        session copy is replaced and persisted too.

        Returns:
            True if a roster entry was replaced. An unknown id is a
            no-op and returns False.
        """
        if user.id not in self._roster:
            self._audit.log_update_ignored(user.id)
            return False

        self._roster[user.id] = user.model_copy(deep=True)
        self._save_roster()

        session_refreshed = self._session is not None and self._session.id == user.id
        if session_refreshed:
            self._session = user.model_copy(deep=True)
            self._save_session()

        self._audit.log_user_updated(user.id, session_refreshed)
        return True

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def current_user(self) -> Optional[User]:
        """A copy of the session user, or None when logged out."""
        return self._session.model_copy(deep=True) if self._session else None

    def is_authenticated(self) -> bool:
        return self._session is not None

    def is_admin(self) -> bool:
        return self._session is not None and self._session.role == UserRole.ADMIN

    def get_user(self, user_id: int) -> Optional[User]:
        """A copy of an in-memory roster entry, or None."""
        user = self._roster.get(user_id)
        return user.model_copy(deep=True) if user else None

    def users(self) -> list[User]:
        """Copies of the in-memory roster, in registration order."""
        return [u.model_copy(deep=True) for u in self._roster.values()]

    def list_all_users(self) -> list[User]:
        """
        Re-read the full roster from the store.

        Admin views use this instead of the in-memory roster so they see
        changes made by other processes since startup. Access is not
        checked here; callers gate on is_admin().
        """
        roster_data = self._store.get(USERS_KEY)
        if not isinstance(roster_data, list):
            return []
        users, _ = self._rehydrate_roster(roster_data)
        return users
