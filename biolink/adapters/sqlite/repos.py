import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from typing import Any
from uuid import UUID

from biolink.domain.entities import Link, Profile, User
from biolink.domain.errors import DuplicateKeyError, OrderMismatchError, StorageError

DEFAULT_BUSY_TIMEOUT = 30.0
MAX_ROWID = 2**63 - 1


def _is_rowid(value: int) -> bool:
    # Ids outside SQLite's INTEGER range cannot name a row
    return 0 < value <= MAX_ROWID


# Helper to convert sqlite rows to dicts
def dict_factory(cursor: sqlite3.Cursor, row: Any) -> dict[str, Any]:
    d = {}
    for idx, col in enumerate(cursor.description):
        d[col[0]] = row[idx]
    return d


def connect(db_path: str, timeout: float = DEFAULT_BUSY_TIMEOUT) -> sqlite3.Connection:
    # Autocommit mode: transactions are opened explicitly by write_transaction
    conn = sqlite3.connect(db_path, timeout=timeout, isolation_level=None)
    conn.row_factory = dict_factory
    conn.execute("PRAGMA foreign_keys = ON;")
    return conn


@contextmanager
def write_transaction(conn: sqlite3.Connection) -> Iterator[sqlite3.Connection]:
    """
    Run a block inside BEGIN IMMEDIATE.

    The write lock is taken before the first read, so read-then-write
    sequences for the same database are serialized across connections.
    """
    conn.execute("BEGIN IMMEDIATE")
    try:
        yield conn
    except BaseException:
        conn.rollback()
        raise
    conn.commit()


def translate_integrity_error(table: str, e: sqlite3.IntegrityError) -> StorageError:
    """Map a sqlite IntegrityError to a storage error naming the offending column."""
    message = str(e)
    if message.startswith("UNIQUE constraint failed:"):
        first = message.split(":", 1)[1].split(",")[0].strip()
        field = first.split(".")[-1]
        return DuplicateKeyError(table, field)
    return StorageError(message)


class SQLiteUserRepo:
    def __init__(self, db_path: str):
        self.db_path = db_path

    def _get_conn(self) -> sqlite3.Connection:
        return connect(self.db_path)

    def save(self, user: User) -> User:
        conn = self._get_conn()
        try:
            with write_transaction(conn):
                conn.execute(
                    """
                    INSERT INTO users (id, email, password_hash, created_at)
                    VALUES (?, ?, ?, ?)
                    ON CONFLICT(id) DO UPDATE SET
                        email=excluded.email,
                        password_hash=excluded.password_hash
                """,
                    (
                        str(user.id),
                        user.email,
                        user.password_hash,
                        user.created_at.isoformat(),
                    ),
                )
            return user
        except sqlite3.IntegrityError as e:
            raise translate_integrity_error("users", e) from e
        finally:
            conn.close()

    def get_by_email(self, email: str) -> User | None:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT * FROM users WHERE email = ?", (email,)).fetchone()
            return self._map_row(row) if row else None
        finally:
            conn.close()

    def get_by_id(self, user_id: UUID) -> User | None:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT * FROM users WHERE id = ?", (str(user_id),)).fetchone()
            return self._map_row(row) if row else None
        finally:
            conn.close()

    def _map_row(self, row: dict[str, Any]) -> User:
        return User(
            id=UUID(row["id"]),
            email=row["email"],
            password_hash=row["password_hash"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )


class SQLiteProfileRepo:
    _COLUMNS = (
        "username",
        "display_name",
        "avatar_url",
        "show_username",
        "bio",
        "theme",
        "background_color",
        "text_color",
        "button_color",
        "button_text_color",
        "font",
    )

    def __init__(self, db_path: str):
        self.db_path = db_path

    def _get_conn(self) -> sqlite3.Connection:
        return connect(self.db_path)

    def _values(self, profile: Profile) -> tuple[Any, ...]:
        return (
            profile.username,
            profile.display_name,
            profile.avatar_url,
            int(profile.show_username),
            profile.bio,
            profile.theme,
            profile.background_color,
            profile.text_color,
            profile.button_color,
            profile.button_text_color,
            profile.font,
        )

    def create(self, profile: Profile) -> Profile:
        """Insert a profile. Raises DuplicateKeyError on username or user clash."""
        columns = ", ".join(("user_id",) + self._COLUMNS)
        placeholders = ", ".join("?" for _ in range(len(self._COLUMNS) + 1))
        conn = self._get_conn()
        try:
            with write_transaction(conn):
                cursor = conn.execute(
                    f"INSERT INTO profiles ({columns}) VALUES ({placeholders})",
                    (str(profile.user_id),) + self._values(profile),
                )
                profile_id = cursor.lastrowid
            return profile.model_copy(update={"id": profile_id})
        except sqlite3.IntegrityError as e:
            raise translate_integrity_error("profiles", e) from e
        finally:
            conn.close()

    def update(self, profile: Profile) -> Profile | None:
        """Overwrite the mutable columns of the profile owned by profile.user_id."""
        assignments = ", ".join(f"{col} = ?" for col in self._COLUMNS)
        conn = self._get_conn()
        try:
            with write_transaction(conn):
                cursor = conn.execute(
                    f"UPDATE profiles SET {assignments} WHERE user_id = ?",
                    self._values(profile) + (str(profile.user_id),),
                )
                if cursor.rowcount == 0:
                    return None
            return self._get_one(conn, "user_id", str(profile.user_id))
        except sqlite3.IntegrityError as e:
            raise translate_integrity_error("profiles", e) from e
        finally:
            conn.close()

    def get_by_user(self, user_id: UUID) -> Profile | None:
        conn = self._get_conn()
        try:
            return self._get_one(conn, "user_id", str(user_id))
        finally:
            conn.close()

    def get_by_username(self, username: str) -> Profile | None:
        conn = self._get_conn()
        try:
            return self._get_one(conn, "username", username)
        finally:
            conn.close()

    def _get_one(self, conn: sqlite3.Connection, column: str, value: Any) -> Profile | None:
        row = conn.execute(f"SELECT * FROM profiles WHERE {column} = ?", (value,)).fetchone()
        if not row:
            return None
        return Profile(
            id=row["id"],
            user_id=UUID(row["user_id"]),
            username=row["username"],
            display_name=row["display_name"],
            avatar_url=row["avatar_url"],
            show_username=bool(row["show_username"]),
            bio=row["bio"],
            theme=row["theme"],
            background_color=row["background_color"],
            text_color=row["text_color"],
            button_color=row["button_color"],
            button_text_color=row["button_text_color"],
            font=row["font"],
        )


class SQLiteLinkRepo:
    """
    Links of each profile, kept in a contiguous zero-based position sequence.

    Every call is scoped by profile_id; a link id that belongs to another
    profile behaves exactly like a missing one. Mutations of a profile's
    link set run under BEGIN IMMEDIATE, which serializes them, and the
    UNIQUE(profile_id, position) constraint rejects any duplicate slot.
    """

    def __init__(self, db_path: str, timeout: float = DEFAULT_BUSY_TIMEOUT):
        self.db_path = db_path
        self.timeout = timeout

    def _get_conn(self) -> sqlite3.Connection:
        return connect(self.db_path, self.timeout)

    def list_for_profile(self, profile_id: int) -> list[Link]:
        conn = self._get_conn()
        try:
            return self._list(conn, profile_id)
        finally:
            conn.close()

    def get(self, profile_id: int, link_id: int) -> Link | None:
        if not _is_rowid(link_id):
            return None
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT * FROM links WHERE id = ? AND profile_id = ?",
                (link_id, profile_id),
            ).fetchone()
            return self._map_row(row) if row else None
        finally:
            conn.close()

    def count_for_profile(self, profile_id: int) -> int:
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT COUNT(*) AS n FROM links WHERE profile_id = ?", (profile_id,)
            ).fetchone()
            return int(row["n"])
        finally:
            conn.close()

    def create(self, link: Link) -> Link:
        """Append a link; its position is the profile's link count at insert time."""
        conn = self._get_conn()
        try:
            with write_transaction(conn):
                row = conn.execute(
                    "SELECT COUNT(*) AS n FROM links WHERE profile_id = ?",
                    (link.profile_id,),
                ).fetchone()
                position = int(row["n"])
                cursor = conn.execute(
                    """
                    INSERT INTO links (profile_id, title, url, icon, position, is_visible)
                    VALUES (?, ?, ?, ?, ?, ?)
                """,
                    (
                        link.profile_id,
                        link.title,
                        link.url,
                        link.icon,
                        position,
                        int(link.is_visible),
                    ),
                )
                link_id = cursor.lastrowid
            return link.model_copy(update={"id": link_id, "position": position})
        except sqlite3.IntegrityError as e:
            raise translate_integrity_error("links", e) from e
        finally:
            conn.close()

    _UPDATABLE_COLUMNS = ("title", "url", "icon", "is_visible")

    def update(self, profile_id: int, link_id: int, changes: dict[str, Any]) -> Link | None:
        """
        Write only the given columns of one link. Position is never touched.

        Returns None if the link does not exist or belongs to another profile.
        """
        if not _is_rowid(link_id):
            return None
        columns = [col for col in self._UPDATABLE_COLUMNS if col in changes]
        values = [
            int(changes[col]) if col == "is_visible" else changes[col] for col in columns
        ]
        conn = self._get_conn()
        try:
            with write_transaction(conn):
                if columns:
                    assignments = ", ".join(f"{col} = ?" for col in columns)
                    conn.execute(
                        f"UPDATE links SET {assignments} WHERE id = ? AND profile_id = ?",
                        (*values, link_id, profile_id),
                    )
                row = conn.execute(
                    "SELECT * FROM links WHERE id = ? AND profile_id = ?",
                    (link_id, profile_id),
                ).fetchone()
            return self._map_row(row) if row else None
        finally:
            conn.close()

    def delete(self, profile_id: int, link_id: int) -> bool:
        """Delete a link and close the gap it leaves. Returns False if not found."""
        if not _is_rowid(link_id):
            return False
        conn = self._get_conn()
        try:
            with write_transaction(conn):
                cursor = conn.execute(
                    "DELETE FROM links WHERE id = ? AND profile_id = ?",
                    (link_id, profile_id),
                )
                if cursor.rowcount == 0:
                    return False
                remaining = [link.id for link in self._list(conn, profile_id)]
                self._renumber(conn, profile_id, remaining)
            return True
        except sqlite3.IntegrityError as e:
            raise translate_integrity_error("links", e) from e
        finally:
            conn.close()

    def reorder(self, profile_id: int, ordered_ids: list[int]) -> list[Link]:
        """
        Give ordered_ids[i] position i, all in one transaction.

        Raises OrderMismatchError, writing nothing, unless ordered_ids is
        exactly the profile's current link ids without repeats.
        """
        conn = self._get_conn()
        try:
            with write_transaction(conn):
                rows = conn.execute(
                    "SELECT id FROM links WHERE profile_id = ?", (profile_id,)
                ).fetchall()
                current = {row["id"] for row in rows}
                requested = set(ordered_ids)
                if requested != current or len(requested) != len(ordered_ids):
                    raise OrderMismatchError(
                        missing=current - requested,
                        unexpected=requested - current,
                    )
                self._renumber(conn, profile_id, ordered_ids)
            return self._list(conn, profile_id)
        except sqlite3.IntegrityError as e:
            raise translate_integrity_error("links", e) from e
        finally:
            conn.close()

    def _renumber(self, conn: sqlite3.Connection, profile_id: int, ordered_ids: list[int]) -> None:
        # Park every row on a distinct negative slot first so no intermediate
        # assignment collides with UNIQUE(profile_id, position).
        conn.execute(
            "UPDATE links SET position = -1 - position WHERE profile_id = ?",
            (profile_id,),
        )
        for index, link_id in enumerate(ordered_ids):
            conn.execute(
                "UPDATE links SET position = ? WHERE id = ? AND profile_id = ?",
                (index, link_id, profile_id),
            )

    def _list(self, conn: sqlite3.Connection, profile_id: int) -> list[Link]:
        rows = conn.execute(
            "SELECT * FROM links WHERE profile_id = ? ORDER BY position ASC",
            (profile_id,),
        ).fetchall()
        return [self._map_row(row) for row in rows]

    def _map_row(self, row: dict[str, Any]) -> Link:
        return Link(
            id=row["id"],
            profile_id=row["profile_id"],
            title=row["title"],
            url=row["url"],
            icon=row["icon"],
            position=row["position"],
            is_visible=bool(row["is_visible"]),
        )
