import asyncio
import copy

import pytest
from botocore.exceptions import ClientError
from fastapi.testclient import TestClient

from app.api.deps import get_user_repository
from app.db.repositories.users import UserRepository
from app.main import app


def client_error(code: str, operation: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


class FakeUsersTable:
    """In-memory stand-in for the boto3 Table calls made on the users table.

    Items keep insertion order so scans page deterministically. Like DynamoDB,
    a scan that fills its Limit returns a LastEvaluatedKey even when no items
    remain, so the last page can be empty.
    """

    def __init__(self, items=None):
        self.items = {}
        self.calls = []
        self.failures = {}
        for item in items or []:
            self.items[item["email"]] = dict(item)

    def fail(self, operation: str, code: str = "InternalServerError"):
        self.failures[operation] = client_error(code, operation)

    def calls_to(self, operation: str):
        return [kwargs for name, kwargs in self.calls if name == operation]

    def _record(self, operation: str, kwargs: dict):
        self.calls.append((operation, kwargs))
        if operation in self.failures:
            raise self.failures[operation]

    def _check(self, operation: str, email: str, condition):
        exists = email in self.items
        if condition == "attribute_not_exists(email)" and exists:
            raise client_error("ConditionalCheckFailedException", operation)
        if condition == "attribute_exists(email)" and not exists:
            raise client_error("ConditionalCheckFailedException", operation)

    def get_item(self, **kwargs):
        self._record("GetItem", kwargs)
        item = self.items.get(kwargs["Key"]["email"])
        return {} if item is None else {"Item": copy.deepcopy(item)}

    def scan(self, **kwargs):
        self._record("Scan", kwargs)
        emails = list(self.items)
        start = 0
        if "ExclusiveStartKey" in kwargs:
            start = emails.index(kwargs["ExclusiveStartKey"]["email"]) + 1
        limit = kwargs.get("Limit")
        page = emails[start:] if limit is None else emails[start:start + limit]

        response = {"Items": [copy.deepcopy(self.items[email]) for email in page], "Count": len(page)}
        if limit is not None and page and len(page) == limit:
            response["LastEvaluatedKey"] = {"email": page[-1]}
        return response

    def put_item(self, **kwargs):
        self._record("PutItem", kwargs)
        item = kwargs["Item"]
        self._check("PutItem", item["email"], kwargs.get("ConditionExpression"))
        self.items[item["email"]] = dict(item)
        return {}

    def update_item(self, **kwargs):
        self._record("UpdateItem", kwargs)
        email = kwargs["Key"]["email"]
        self._check("UpdateItem", email, kwargs.get("ConditionExpression"))

        expression = kwargs["UpdateExpression"]
        assert expression.startswith("SET ")
        names = kwargs.get("ExpressionAttributeNames", {})
        values = kwargs["ExpressionAttributeValues"]

        item = self.items.setdefault(email, {"email": email})
        for assignment in expression[len("SET "):].split(","):
            name, value = (part.strip() for part in assignment.split("="))
            item[names.get(name, name)] = values[value]

        if kwargs.get("ReturnValues") == "ALL_NEW":
            return {"Attributes": copy.deepcopy(item)}
        return {}

    def delete_item(self, **kwargs):
        self._record("DeleteItem", kwargs)
        email = kwargs["Key"]["email"]
        self._check("DeleteItem", email, kwargs.get("ConditionExpression"))
        self.items.pop(email, None)
        return {}


@pytest.fixture
def table():
    return FakeUsersTable()


@pytest.fixture
def repository(table):
    return UserRepository(table)


@pytest.fixture
def run():
    return asyncio.run


@pytest.fixture
def client(repository):
    app.dependency_overrides[get_user_repository] = lambda: repository
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
