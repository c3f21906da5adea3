"""
API tests for the Ledger API.
Tests users, accounts, transfers, and error handling over HTTP.
"""

from decimal import Decimal

from sqlalchemy import event
from sqlalchemy.exc import SQLAlchemyError

from tests.helpers import API, balance_of, create_user, open_account


# ==================== HEALTH CHECK TESTS ====================

def test_root_endpoint(client):
    """Test root endpoint returns correct response."""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "running"
    assert data["endpoints"]["transactions"] == f"{API}/transactions"


def test_health_check(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["database"] == "connected"


# ==================== USER TESTS ====================

def test_create_user(client):
    """Test creating a user with a profile."""
    response = client.post(
        f"{API}/users",
        json={
            "name": "Bob Stone",
            "email": "bob@example.com",
            "password": "hunter22",
            "profile": {
                "age": 42,
                "identityType": "national_id",
                "identityNumber": "998877",
                "address": "2 Side Road"
            }
        }
    )
    assert response.status_code == 201
    data = response.json()
    assert data["name"] == "Bob Stone"
    assert data["email"] == "bob@example.com"
    assert data["profile"]["identityType"] == "national_id"
    assert data["profile"]["bio"] is None
    assert "password" not in data
    assert "passwordHash" not in data


def test_create_user_validation_errors(client):
    """Test that every failing field is reported."""
    response = client.post(
        f"{API}/users",
        json={
            "name": "Al",
            "email": "not-an-email",
            "password": "123",
            "profile": {"age": 17, "identityType": "passport", "address": "x"}
        }
    )
    assert response.status_code == 400
    data = response.json()
    assert data["error"] == "ValidationFailed"
    fields = {error["field"] for error in data["errors"]}
    assert fields == {
        "name", "email", "password", "profile.age", "profile.identityNumber"
    }


def test_create_user_missing_profile(client):
    """Test that the profile object is required."""
    response = client.post(
        f"{API}/users",
        json={"name": "Carol", "email": "carol@example.com", "password": "secret1"}
    )
    assert response.status_code == 400
    assert response.json()["errors"] == [{"field": "profile", "message": "is required"}]


def test_create_duplicate_user(client):
    """Test that an email can only be registered once."""
    create_user(client, email="dup@example.com")

    response = client.post(
        f"{API}/users",
        json={
            "name": "Someone Else",
            "email": "dup@example.com",
            "password": "another1",
            "profile": {
                "age": 20,
                "identityType": "passport",
                "identityNumber": "1",
                "address": "Elsewhere"
            }
        }
    )
    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "email"


def test_list_users(client):
    """Test listing users with their profiles."""
    create_user(client, email="one@example.com")
    create_user(client, email="two@example.com")

    response = client.get(f"{API}/users")
    assert response.status_code == 200
    data = response.json()
    assert [user["email"] for user in data] == ["one@example.com", "two@example.com"]
    assert all(user["profile"]["age"] == 30 for user in data)


# ==================== ACCOUNT TESTS ====================

def test_create_account(client):
    """Test opening a new account."""
    user_id = create_user(client)
    response = client.post(
        f"{API}/accounts",
        json={"userId": user_id, "accountName": "Savings Account", "balance": "1000.00"}
    )
    assert response.status_code == 201
    data = response.json()
    assert data["userId"] == user_id
    assert data["accountName"] == "Savings Account"
    assert Decimal(data["balance"]) == Decimal("1000.00")


def test_create_account_unknown_user(client):
    """Test that an account needs an existing owner."""
    response = client.post(
        f"{API}/accounts",
        json={"userId": 424242, "accountName": "Orphan", "balance": 10}
    )
    assert response.status_code == 404
    assert response.json()["error"] == "UserNotFound"


def test_create_account_negative_balance(client):
    """Test that negative initial balance is rejected."""
    user_id = create_user(client)
    response = client.post(
        f"{API}/accounts",
        json={"userId": user_id, "accountName": "Overdrawn", "balance": "-100.00"}
    )
    assert response.status_code == 400
    assert response.json()["error"] == "InvalidAmount"


def test_create_account_sub_cent_balance(client):
    """Test that balances finer than a cent are rejected."""
    user_id = create_user(client)
    for balance in ("10.005", "10.0000000000000000000000000001"):
        response = client.post(
            f"{API}/accounts",
            json={"userId": user_id, "accountName": "Fractional", "balance": balance}
        )
        assert response.status_code == 400
        assert response.json()["error"] == "InvalidAmount"
    assert client.get(f"{API}/accounts").json() == []


def test_create_account_missing_fields(client):
    """Test that malformed bodies become InvalidArgument errors."""
    response = client.post(f"{API}/accounts", json={"balance": 10})
    assert response.status_code == 400
    data = response.json()
    assert data["error"] == "InvalidArgument"
    fields = {error["field"] for error in data["errors"]}
    assert {"userId", "accountName"} <= fields


def test_get_account(client):
    """Test retrieving account details."""
    user_id = create_user(client)
    account_id = open_account(client, user_id, "1000.00")

    response = client.get(f"{API}/accounts/{account_id}")
    assert response.status_code == 200
    data = response.json()
    assert data["id"] == account_id
    assert Decimal(data["balance"]) == Decimal("1000.00")


def test_get_nonexistent_account(client):
    """Test that getting non-existent account returns 404."""
    response = client.get(f"{API}/accounts/999999")
    assert response.status_code == 404
    assert response.json()["error"] == "AccountNotFound"


def test_get_account_invalid_id(client):
    """Test that non-integer ids are rejected before reaching the ledger."""
    response = client.get(f"{API}/accounts/abc")
    assert response.status_code == 400
    data = response.json()
    assert data["error"] == "InvalidArgument"
    assert data["errors"][0]["field"] == "account_id"


def test_list_accounts(client):
    """Test listing accounts in creation order across several batches."""
    user_id = create_user(client)
    created = [open_account(client, user_id, 100, name=f"Account {i}") for i in range(5)]

    response = client.get(f"{API}/accounts")
    assert response.status_code == 200
    assert [account["id"] for account in response.json()] == created

    response = client.get(f"{API}/accounts", params={"skip": 1, "limit": 3})
    assert [account["id"] for account in response.json()] == created[1:4]


# ==================== TRANSACTION TESTS ====================

def test_create_transaction(client):
    """Test successful transfer between accounts."""
    user_id = create_user(client)
    account_a = open_account(client, user_id, "1000.00")
    account_b = open_account(client, user_id, "500.00")

    response = client.post(
        f"{API}/transactions",
        json={
            "senderAccountId": account_a,
            "receiverAccountId": account_b,
            "amount": "100.50"
        }
    )

    assert response.status_code == 201
    data = response.json()
    assert Decimal(data["amount"]) == Decimal("100.50")
    assert data["senderAccountId"] == account_a
    assert data["receiverAccountId"] == account_b
    assert data["sender"]["id"] == account_a
    assert data["receiver"]["id"] == account_b
    assert data["createdAt"]

    assert balance_of(client, account_a) == Decimal("899.50")
    assert balance_of(client, account_b) == Decimal("600.50")


def test_transfer_insufficient_funds(client):
    """Test transfer with insufficient funds fails without side effects."""
    user_id = create_user(client)
    account_a = open_account(client, user_id, "100.00")
    account_b = open_account(client, user_id, "500.00")

    response = client.post(
        f"{API}/transactions",
        json={"senderAccountId": account_a, "receiverAccountId": account_b, "amount": 200}
    )

    assert response.status_code == 409
    data = response.json()
    assert data["error"] == "InsufficientFunds"
    assert "Insufficient funds" in data["detail"]
    assert balance_of(client, account_a) == Decimal("100.00")
    assert balance_of(client, account_b) == Decimal("500.00")
    assert client.get(f"{API}/transactions").json() == []


def test_transfer_to_same_account(client):
    """Test that transfer to same account fails."""
    user_id = create_user(client)
    account_a = open_account(client, user_id, "1000.00")

    response = client.post(
        f"{API}/transactions",
        json={"senderAccountId": account_a, "receiverAccountId": account_a, "amount": 50}
    )

    assert response.status_code == 400
    data = response.json()
    assert data["error"] == "InvalidOperation"
    assert "same account" in data["detail"]
    assert balance_of(client, account_a) == Decimal("1000.00")


def test_transfer_to_nonexistent_account(client):
    """Test transfer to non-existent account fails."""
    user_id = create_user(client)
    account_a = open_account(client, user_id, "1000.00")

    response = client.post(
        f"{API}/transactions",
        json={"senderAccountId": account_a, "receiverAccountId": 999999, "amount": 100}
    )

    assert response.status_code == 404
    assert response.json()["error"] == "AccountNotFound"
    assert balance_of(client, account_a) == Decimal("1000.00")


def test_transfer_invalid_amounts(client):
    """Test that zero, negative and sub-cent amounts are rejected."""
    user_id = create_user(client)
    account_a = open_account(client, user_id, "1000.00")
    account_b = open_account(client, user_id, "0.00")

    for amount in (0, "-5.00", "0.001", "1.0000000000000000000000000001"):
        response = client.post(
            f"{API}/transactions",
            json={"senderAccountId": account_a, "receiverAccountId": account_b, "amount": amount}
        )
        assert response.status_code == 400
        assert response.json()["error"] == "InvalidAmount"

    assert balance_of(client, account_a) == Decimal("1000.00")
    assert balance_of(client, account_b) == Decimal("0.00")
    assert client.get(f"{API}/transactions").json() == []


def test_transfer_invalid_account_id(client):
    """Test that non-integer account ids are rejected."""
    response = client.post(
        f"{API}/transactions",
        json={"senderAccountId": "first", "receiverAccountId": 2, "amount": 1}
    )
    assert response.status_code == 400
    data = response.json()
    assert data["error"] == "InvalidArgument"
    assert data["errors"][0]["field"] == "senderAccountId"


def test_get_transaction(client):
    """Test retrieving transaction details."""
    user_id = create_user(client)
    account_a = open_account(client, user_id, "1000.00", name="Main")
    account_b = open_account(client, user_id, "500.00", name="Spare")

    created = client.post(
        f"{API}/transactions",
        json={"senderAccountId": account_a, "receiverAccountId": account_b, "amount": "250.00"}
    ).json()

    response = client.get(f"{API}/transactions/{created['id']}")
    assert response.status_code == 200
    data = response.json()
    assert data["id"] == created["id"]
    assert Decimal(data["amount"]) == Decimal("250.00")
    assert data["sender"] == {"id": account_a, "userId": user_id, "accountName": "Main"}
    assert data["receiver"] == {"id": account_b, "userId": user_id, "accountName": "Spare"}

    # Reads with no write in between are identical
    assert client.get(f"{API}/transactions/{created['id']}").json() == data


def test_get_nonexistent_transaction(client):
    """Test that getting non-existent transaction returns 404."""
    response = client.get(f"{API}/transactions/12345")
    assert response.status_code == 404
    assert response.json()["error"] == "TransactionNotFound"


def test_list_transactions(client):
    """Test listing all transactions in creation order."""
    user_id = create_user(client)
    account_a = open_account(client, user_id, "1000.00")
    account_b = open_account(client, user_id, "500.00")

    created = []
    for amount in ("10.00", "20.00", "30.00"):
        response = client.post(
            f"{API}/transactions",
            json={"senderAccountId": account_a, "receiverAccountId": account_b, "amount": amount}
        )
        created.append(response.json()["id"])

    response = client.get(f"{API}/transactions")
    assert response.status_code == 200
    data = response.json()
    assert [transaction["id"] for transaction in data] == created
    assert created == sorted(created)
    assert all(transaction["sender"]["id"] == account_a for transaction in data)
    assert all(transaction["receiver"]["id"] == account_b for transaction in data)


# ==================== STORAGE FAILURE TESTS ====================

def test_storage_failure_returns_generic_500(client):
    """Test that database errors are reported without leaking details."""
    user_id = create_user(client)
    account_a = open_account(client, user_id, "1000.00")
    account_b = open_account(client, user_id, "500.00")
    session_factory = client.app.state.database.session_factory

    def fail(*args):
        raise SQLAlchemyError("database is locked: /var/lib/ledger.db")

    event.listen(session_factory, "after_flush", fail)
    try:
        response = client.post(
            f"{API}/transactions",
            json={"senderAccountId": account_a, "receiverAccountId": account_b, "amount": "100.00"}
        )
    finally:
        event.remove(session_factory, "after_flush", fail)

    assert response.status_code == 500
    assert response.json() == {"detail": "Internal server error", "error": "StorageFailure"}
    assert "ledger.db" not in response.text
    assert balance_of(client, account_a) == Decimal("1000.00")
    assert balance_of(client, account_b) == Decimal("500.00")
    assert client.get(f"{API}/transactions").json() == []
