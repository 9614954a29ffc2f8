"""
Owner-scoped record access over the MySQL connection pool.

Every query filters on ``user_id`` so a record owned by someone else is
indistinguishable from a missing one: both raise ``NotFound``.
"""

from datetime import date
from decimal import Decimal

from errors import NotFound


def serialize(record):
    """Make a row JSON friendly: ISO dates and two-decimal amount strings."""
    out = {}
    for key, value in record.items():
        if isinstance(value, date):
            value = value.isoformat()
        elif isinstance(value, Decimal):
            value = f"{value:.2f}"
        out[key] = value
    return out


class _Store:
    def __init__(self, pool):
        self.pool = pool

    def _fetch(self, query, params, one=False):
        conn = self.pool.get_connection()
        try:
            with conn.cursor(dictionary=True) as cur:
                cur.execute(query, params)
                return cur.fetchone() if one else cur.fetchall()
        finally:
            conn.close()

    def _insert(self, query, params):
        conn = self.pool.get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(query, params)
                conn.commit()
                return cur.lastrowid
        finally:
            conn.close()

    def _delete(self, query, params, message):
        conn = self.pool.get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(query, params)
                if cur.rowcount == 0:
                    raise NotFound(message)
                conn.commit()
        finally:
            conn.close()


class UserStore(_Store):
    def find_by_email(self, email):
        return self._fetch(
            "SELECT id, name, email, password_hash FROM users WHERE email=%s",
            (email,), one=True
        )

    def create(self, name, email, password_hash):
        user_id = self._insert(
            "INSERT INTO users (name, email, password_hash) VALUES (%s, %s, %s)",
            (name, email, password_hash)
        )
        return {'id': user_id, 'name': name, 'email': email}


class TransactionStore(_Store):
    COLUMNS = "id, user_id, type, description, amount, category, date"
    NOT_FOUND = 'Transação não encontrada.'

    def list(self, owner_id):
        return self._fetch(
            f"SELECT {self.COLUMNS} FROM transactions WHERE user_id=%s ORDER BY date DESC, id DESC",
            (owner_id,)
        )

    def get(self, owner_id, id):
        row = self._fetch(
            f"SELECT {self.COLUMNS} FROM transactions WHERE id=%s AND user_id=%s",
            (id, owner_id), one=True
        )
        if not row:
            raise NotFound(self.NOT_FOUND)
        return row

    def create(self, owner_id, fields):
        tx_id = self._insert(
            "INSERT INTO transactions (user_id, type, description, amount, category, date) "
            "VALUES (%s, %s, %s, %s, %s, %s)",
            (owner_id, fields['type'], fields['description'], fields['amount'], fields['category'], fields['date'])
        )
        return {'id': tx_id, 'user_id': owner_id, **fields}

    def update(self, owner_id, id, fields):
        """Rewrite the editable fields; type and owner never change."""
        conn = self.pool.get_connection()
        try:
            with conn.cursor(dictionary=True) as cur:
                cur.execute(
                    f"SELECT {self.COLUMNS} FROM transactions WHERE id=%s AND user_id=%s",
                    (id, owner_id)
                )
                row = cur.fetchone()
                if not row:
                    raise NotFound(self.NOT_FOUND)
                cur.execute(
                    "UPDATE transactions SET description=%s, amount=%s, date=%s, category=%s "
                    "WHERE id=%s AND user_id=%s",
                    (fields['description'], fields['amount'], fields['date'], fields['category'], id, owner_id)
                )
                conn.commit()
        finally:
            conn.close()

        row.update({key: fields[key] for key in ('description', 'amount', 'date', 'category')})
        return row

    def delete(self, owner_id, id):
        self._delete("DELETE FROM transactions WHERE id=%s AND user_id=%s", (id, owner_id), self.NOT_FOUND)


class GoalStore(_Store):
    COLUMNS = "id, user_id, description, amount"
    NOT_FOUND = 'Meta não encontrada.'

    def list(self, owner_id):
        return self._fetch(
            f"SELECT {self.COLUMNS} FROM goals WHERE user_id=%s ORDER BY id",
            (owner_id,)
        )

    def create(self, owner_id, fields):
        goal_id = self._insert(
            "INSERT INTO goals (user_id, description, amount) VALUES (%s, %s, %s)",
            (owner_id, fields['description'], fields['amount'])
        )
        return {'id': goal_id, 'user_id': owner_id, **fields}

    def delete(self, owner_id, id):
        self._delete("DELETE FROM goals WHERE id=%s AND user_id=%s", (id, owner_id), self.NOT_FOUND)
