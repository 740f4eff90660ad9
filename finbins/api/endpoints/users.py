from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, HTTPException

from finbins.api.endpoints.auth import UserRecord, UserRegistry, get_users
from finbins.api.endpoints.finance import parse_id

router = APIRouter(prefix="/users", tags=["Users"])


def _field(payload: Dict[str, Any], name: str) -> Optional[str]:
    # camelCase or PascalCase keys
    value = payload.get(name)
    if value is None:
        value = payload.get(name[0].upper() + name[1:])
    return str(value) if value not in (None, "") else None


def _load(users: UserRegistry, user_id: str) -> UserRecord:
    user = users.get(parse_id(user_id))
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.put("/{user_id}")
async def update_user(user_id: str, payload: Dict[str, Any] = Body(...), users: UserRegistry = Depends(get_users)):
    user = _load(users, user_id)
    name = (_field(payload, "name") or "").strip()
    email = (_field(payload, "email") or "").strip()
    if not name or not email:
        raise HTTPException(status_code=400, detail="Missing required fields")

    other = users.find_by_email(email)
    if other is not None and other.id != user.id:
        raise HTTPException(status_code=409, detail="User with this email already exists")

    user.name = name
    user.email = email
    return {"id": user.id, "name": user.name, "email": user.email}


@router.post("/{user_id}/change-password")
async def change_password(user_id: str, payload: Dict[str, Any] = Body(...), users: UserRegistry = Depends(get_users)):
    user = _load(users, user_id)
    current = _field(payload, "currentPassword")
    new = _field(payload, "newPassword")
    if not current or not new:
        raise HTTPException(status_code=400, detail="Missing required fields")
    if not user.verify(current):
        raise HTTPException(status_code=401, detail="Current password is incorrect")

    users.set_password(user, new)
    return {"success": True}


@router.delete("/{user_id}")
async def delete_user(user_id: str, users: UserRegistry = Depends(get_users)):
    users.remove(_load(users, user_id))
    return {"success": True}
