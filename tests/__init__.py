"""
Finance Tracker Test Suite

This package contains the tests for the Finance Tracker application:

- test_auth.py: Registration and login tests (JSON + bearer tokens)
- test_transactions.py: Transaction CRUD, ownership and CSV export tests
- test_goals.py: Goal CRUD tests
- test_dashboard.py: Server-side dashboard aggregation tests
- test_aggregation.py: Balance, monthly/category series and goal progress
- test_validators.py: Field validation tests
- test_export.py: CSV export format tests
- test_models.py: Schema creation tests
- test_client_api.py: HTTP client error mapping tests
- test_client_session.py: Persisted session tests
- test_client_pages.py: Page component tests

Run all tests:
    pytest tests/

Run specific test file:
    pytest tests/test_auth.py

Run with verbose output:
    pytest tests/ -v

Run with coverage:
    pytest tests/ --cov=. --cov-report=html
"""
