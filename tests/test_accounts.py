from __future__ import annotations

from pathlib import Path

import pytest

from safedrive._hashing import hash_password, verify_password
from safedrive.accounts.operations import OperationRequest, UserOperations
from safedrive.accounts.store import UserStore
from safedrive.exceptions import UserOperationError


def _ops(tmp_path: Path) -> UserOperations:
    return UserOperations(UserStore(tmp_path))


async def _create(ops: UserOperations, email: str = "ana@example.com", **extra) -> dict:
    data = {"name": "Ana", "email": email, "password": "secret", **extra}
    return await ops.dispatch(OperationRequest.model_validate({"action": "create", "data": data}))


def test_password_hash_round_trip() -> None:
    encoded = hash_password("secret", iterations=1000)
    assert verify_password("secret", encoded)
    assert not verify_password("other", encoded)
    assert not verify_password("secret", "garbage")


@pytest.mark.asyncio
async def test_create_and_login(tmp_path: Path) -> None:
    ops = _ops(tmp_path)
    created = await _create(ops, phone="555-0100")

    assert created["data"]["userType"] == "rider"
    assert "password" not in created["data"]
    assert "isActive" not in created["data"]

    login = await ops.dispatch(
        OperationRequest.model_validate({"action": "login", "data": {"email": "ANA@example.com", "password": "secret"}})
    )
    assert login["type"] == "login_success"
    assert login["data"]["_id"] == created["data"]["_id"]
    assert login["data"]["isActive"] is True


@pytest.mark.asyncio
async def test_create_requires_fields_and_unique_email(tmp_path: Path) -> None:
    ops = _ops(tmp_path)
    with pytest.raises(UserOperationError) as excinfo:
        await ops.dispatch(OperationRequest.model_validate({"action": "create", "data": {"name": "Ana"}}))
    assert excinfo.value.status == 400

    await _create(ops)
    with pytest.raises(UserOperationError) as excinfo:
        await _create(ops)
    assert excinfo.value.status == 409


@pytest.mark.asyncio
async def test_update_only_changes_provided_fields(tmp_path: Path) -> None:
    ops = _ops(tmp_path)
    user_id = (await _create(ops, phone="555-0100"))["data"]["_id"]

    updated = await ops.dispatch(
        OperationRequest.model_validate({"action": "update", "userId": user_id, "data": {"userType": "driver"}})
    )

    assert updated["data"]["userType"] == "driver"
    assert updated["data"]["phone"] == "555-0100"
    assert updated["data"]["name"] == "Ana"


@pytest.mark.asyncio
async def test_soft_deleted_user_cannot_log_in(tmp_path: Path) -> None:
    ops = _ops(tmp_path)
    user_id = (await _create(ops))["data"]["_id"]

    deleted = await ops.dispatch(OperationRequest.model_validate({"action": "delete", "userId": user_id}))
    assert deleted["type"] == "user_deleted"

    details = await ops.dispatch(OperationRequest.model_validate({"action": "getById", "userId": user_id}))
    assert details["data"]["isActive"] is False

    with pytest.raises(UserOperationError) as excinfo:
        await ops.dispatch(
            OperationRequest.model_validate({"action": "login", "data": {"email": "ana@example.com", "password": "secret"}})
        )
    assert str(excinfo.value) == "Account is deactivated"


@pytest.mark.asyncio
async def test_get_all_filters_by_user_type(tmp_path: Path) -> None:
    ops = _ops(tmp_path)
    await _create(ops, "a@example.com")
    await _create(ops, "b@example.com", userType="admin")

    everyone = await ops.dispatch(OperationRequest.model_validate({"action": "getAll"}))
    admins = await ops.dispatch(OperationRequest.model_validate({"action": "getAll", "userType": "admin"}))

    assert len(everyone["data"]) == 2
    assert [user["email"] for user in admins["data"]] == ["b@example.com"]


@pytest.mark.asyncio
async def test_unknown_user_is_not_found(tmp_path: Path) -> None:
    with pytest.raises(UserOperationError) as excinfo:
        await _ops(tmp_path).dispatch(OperationRequest.model_validate({"action": "getById", "userId": "missing"}))
    assert excinfo.value.status == 404
