"""
Test suite for transaction routes.
Tests cover transaction CRUD, owner scoping, validation and CSV export.
"""

import pytest
import os
import sys
from unittest.mock import MagicMock
from decimal import Decimal
from datetime import date

# Ensure the project root is on sys.path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from errors import NotFound


def make_mock_connection():
    """Create a mock MySQL connection with cursor context manager."""
    conn = MagicMock()
    cursor = MagicMock()
    cursor.__enter__ = MagicMock(return_value=cursor)
    cursor.__exit__ = MagicMock(return_value=False)
    conn.cursor.return_value = cursor
    return conn, cursor


def expense_row(**overrides):
    row = {
        'id': 3, 'user_id': 1, 'type': 'expense', 'description': 'Ônibus',
        'amount': Decimal('300.00'), 'category': 'Transporte', 'date': date(2024, 1, 15),
    }
    row.update(overrides)
    return row


VALID_EXPENSE = {
    'description': 'Mercado',
    'amount': 120.5,
    'date': '2024-03-02',
    'category': 'Alimentação',
    'type': 'expense',
}


class FakeTransactionStore:
    """In-memory store honouring the owner-scoped store contract."""

    def __init__(self):
        self.records = {}
        self.next_id = 1

    def list(self, owner_id):
        return [dict(r) for r in self.records.values() if r['user_id'] == owner_id]

    def get(self, owner_id, id):
        record = self.records.get(id)
        if not record or record['user_id'] != owner_id:
            raise NotFound('Transação não encontrada.')
        return dict(record)

    def create(self, owner_id, fields):
        record = {'id': self.next_id, 'user_id': owner_id, **fields}
        self.records[self.next_id] = record
        self.next_id += 1
        return dict(record)

    def update(self, owner_id, id, fields):
        self.get(owner_id, id)
        self.records[id].update(fields)
        return dict(self.records[id])

    def delete(self, owner_id, id):
        self.get(owner_id, id)
        del self.records[id]


@pytest.fixture
def fake_store(monkeypatch):
    store = FakeTransactionStore()
    monkeypatch.setattr('routes.transactions.TransactionStore', lambda pool: store)
    return store


class TestListTransactions:
    """Test listing transactions."""

    def test_list_serializes_rows(self, client, app, auth_headers):
        """Amounts should be two-decimal strings and dates ISO dates."""
        conn, cursor = make_mock_connection()
        cursor.fetchall.return_value = [expense_row()]
        app.db_pool.get_connection.return_value = conn

        response = client.get('/api/transactions', headers=auth_headers)

        assert response.status_code == 200
        assert response.get_json() == [{
            'id': 3, 'user_id': 1, 'type': 'expense', 'description': 'Ônibus',
            'amount': '300.00', 'category': 'Transporte', 'date': '2024-01-15',
        }]
        conn.close.assert_called_once()

    def test_list_is_scoped_to_owner(self, client, app, auth_headers):
        """The query should filter on the authenticated user id."""
        conn, cursor = make_mock_connection()
        cursor.fetchall.return_value = []
        app.db_pool.get_connection.return_value = conn

        client.get('/api/transactions', headers=auth_headers)

        query, params = cursor.execute.call_args[0]
        assert 'WHERE user_id=%s' in query
        assert params == (1,)


class TestAddTransaction:
    """Test creating transactions."""

    def test_add_transaction_valid(self, client, app, auth_headers):
        """Valid transaction should be inserted and echoed back with its id."""
        conn, cursor = make_mock_connection()
        cursor.lastrowid = 42
        app.db_pool.get_connection.return_value = conn

        response = client.post('/api/transactions', json=VALID_EXPENSE, headers=auth_headers)

        assert response.status_code == 201
        assert response.get_json() == {
            'id': 42, 'user_id': 1, 'type': 'expense', 'description': 'Mercado',
            'amount': '120.50', 'category': 'Alimentação', 'date': '2024-03-02',
        }
        params = cursor.execute.call_args[0][1]
        assert params == (1, 'expense', 'Mercado', Decimal('120.50'), 'Alimentação', date(2024, 3, 2))
        conn.commit.assert_called_once()

    @pytest.mark.parametrize('overrides', [
        {'amount': 'abc'},
        {'amount': '12,50'},
        {'amount': 0},
        {'amount': -10},
        {'amount': None},
        {'description': '   '},
        {'date': '02/03/2024'},
        {'category': 'Salário'},
        {'category': 'Inexistente'},
        {'type': 'transfer'},
    ])
    def test_add_transaction_invalid_rejected(self, client, app, auth_headers, overrides):
        """Invalid fields should be rejected before touching the database."""
        payload = dict(VALID_EXPENSE, **overrides)

        response = client.post('/api/transactions', json=payload, headers=auth_headers)

        assert response.status_code == 400
        assert response.get_json()['message']
        app.db_pool.get_connection.assert_not_called()

    @pytest.mark.parametrize('amount', ['0.001', '0.004', '1e30', '100000000'])
    def test_amount_out_of_range_after_rounding_rejected(self, client, app, auth_headers, amount):
        """Amounts that round to zero or overflow NUMERIC(10, 2) should be rejected with a message."""
        response = client.post('/api/transactions', json=dict(VALID_EXPENSE, amount=amount), headers=auth_headers)

        assert response.status_code == 400
        assert response.get_json()['message']
        app.db_pool.get_connection.assert_not_called()

    def test_income_category_vocabulary(self, client, app, auth_headers):
        """Income transactions accept income categories only."""
        conn, cursor = make_mock_connection()
        cursor.lastrowid = 1
        app.db_pool.get_connection.return_value = conn

        ok = client.post('/api/transactions', headers=auth_headers, json=dict(
            VALID_EXPENSE, type='income', category='Salário'))
        bad = client.post('/api/transactions', headers=auth_headers, json=dict(
            VALID_EXPENSE, type='income', category='Lazer'))

        assert ok.status_code == 201
        assert bad.status_code == 400


class TestEditTransaction:
    """Test editing transactions."""

    def test_edit_transaction_valid(self, client, app, auth_headers):
        """Valid edit should update fields but keep the type."""
        conn, cursor = make_mock_connection()
        cursor.fetchone.return_value = expense_row()
        app.db_pool.get_connection.return_value = conn

        response = client.put('/api/transactions/3', headers=auth_headers, json={
            'description': 'Metrô',
            'amount': '450',
            'date': '2024-01-20',
            'category': 'Transporte',
            'type': 'income',
        })

        assert response.status_code == 200
        data = response.get_json()
        assert data['amount'] == '450.00'
        assert data['description'] == 'Metrô'
        assert data['date'] == '2024-01-20'
        assert data['type'] == 'expense'

    def test_edit_transaction_not_found(self, client, app, auth_headers):
        """Editing a missing or foreign transaction should return 404."""
        conn, cursor = make_mock_connection()
        cursor.fetchone.return_value = None
        app.db_pool.get_connection.return_value = conn

        response = client.put('/api/transactions/999', headers=auth_headers, json={
            'description': 'X', 'amount': 1, 'date': '2024-01-01', 'category': 'Lazer',
        })

        assert response.status_code == 404
        assert response.get_json()['message'] == 'Transação não encontrada.'

    def test_edit_category_checked_against_stored_type(self, client, app, auth_headers):
        """An expense cannot be moved into an income category."""
        conn, cursor = make_mock_connection()
        cursor.fetchone.return_value = expense_row()
        app.db_pool.get_connection.return_value = conn

        response = client.put('/api/transactions/3', headers=auth_headers, json={
            'description': 'X', 'amount': 1, 'date': '2024-01-01', 'category': 'Salário',
        })

        assert response.status_code == 400


class TestDeleteTransaction:
    """Test deleting transactions."""

    def test_delete_transaction(self, client, app, auth_headers):
        """Delete should answer 204 with no body."""
        conn, cursor = make_mock_connection()
        cursor.rowcount = 1
        app.db_pool.get_connection.return_value = conn

        response = client.delete('/api/transactions/5', headers=auth_headers)

        assert response.status_code == 204
        assert response.data == b''
        assert cursor.execute.call_args[0][1] == (5, 1)

    def test_delete_transaction_not_found(self, client, app, auth_headers):
        """Deleting a nonexistent id should return 404."""
        conn, cursor = make_mock_connection()
        cursor.rowcount = 0
        app.db_pool.get_connection.return_value = conn

        response = client.delete('/api/transactions/999', headers=auth_headers)

        assert response.status_code == 404
        conn.commit.assert_not_called()


class TestTransactionRoundTrip:
    """Test the create/list/update/delete contract end to end."""

    def test_created_transaction_is_listed(self, client, auth_headers, fake_store):
        created = client.post('/api/transactions', json=VALID_EXPENSE, headers=auth_headers).get_json()

        listed = client.get('/api/transactions', headers=auth_headers).get_json()

        assert created['id'] == 1
        assert listed == [created]
        for field in ('description', 'date', 'category', 'type'):
            assert listed[0][field] == VALID_EXPENSE[field]
        assert Decimal(listed[0]['amount']) == Decimal('120.50')

    def test_deleted_transaction_disappears(self, client, auth_headers, fake_store):
        created = client.post('/api/transactions', json=VALID_EXPENSE, headers=auth_headers).get_json()

        first = client.delete(f"/api/transactions/{created['id']}", headers=auth_headers)
        second = client.delete(f"/api/transactions/{created['id']}", headers=auth_headers)

        assert first.status_code == 204
        assert second.status_code == 404
        assert client.get('/api/transactions', headers=auth_headers).get_json() == []

    def test_other_users_records_are_invisible(self, client, app, auth_headers, fake_store):
        from tests.conftest import bearer
        other = bearer(app, user_id=2)
        created = client.post('/api/transactions', json=VALID_EXPENSE, headers=other).get_json()

        assert client.get('/api/transactions', headers=auth_headers).get_json() == []
        assert client.delete(f"/api/transactions/{created['id']}", headers=auth_headers).status_code == 404
        assert client.put(f"/api/transactions/{created['id']}", headers=auth_headers, json={
            'description': 'X', 'amount': 1, 'date': '2024-01-01', 'category': 'Lazer',
        }).status_code == 404


class TestExportTransactions:
    """Test CSV export."""

    def test_export_csv(self, client, app, auth_headers):
        conn, cursor = make_mock_connection()
        cursor.fetchall.return_value = [expense_row(description='Táxi, aeroporto')]
        app.db_pool.get_connection.return_value = conn

        response = client.get('/api/transactions/export', headers=auth_headers)

        assert response.status_code == 200
        assert response.mimetype == 'text/csv'
        assert 'controle_financeiro_export.csv' in response.headers['Content-Disposition']
        lines = response.get_data(as_text=True).splitlines()
        assert lines == [
            'ID,Tipo,Descrição,Valor,Categoria,Data',
            '3,expense,"Táxi, aeroporto",300.00,Transporte,2024-01-15',
        ]
