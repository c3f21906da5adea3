"""
HTTP helpers shared by the API test modules.
"""

from decimal import Decimal

API = "/api/v1"


def create_user(client, email="alice@example.com", name="Alice Doe"):
    response = client.post(
        f"{API}/users",
        json={
            "name": name,
            "email": email,
            "password": "s3cret-pass",
            "profile": {
                "age": 30,
                "identityType": "passport",
                "identityNumber": "X1234567",
                "address": "1 Main Street",
                "bio": "Early adopter"
            }
        }
    )
    assert response.status_code == 201
    return response.json()["id"]


def open_account(client, user_id, balance, name="Checking"):
    response = client.post(
        f"{API}/accounts",
        json={"userId": user_id, "accountName": name, "balance": balance}
    )
    assert response.status_code == 201
    return response.json()["id"]


def balance_of(client, account_id):
    return Decimal(client.get(f"{API}/accounts/{account_id}").json()["balance"])


def transfer(client, sender, receiver, amount):
    return client.post(
        f"{API}/transactions",
        json={"senderAccountId": sender, "receiverAccountId": receiver, "amount": amount}
    )
