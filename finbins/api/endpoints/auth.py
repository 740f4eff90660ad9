import hashlib
import secrets
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Request

router = APIRouter(prefix="/auth", tags=["Auth"])

PBKDF2_ITERATIONS = 1000


def hash_password(password: str, salt: str) -> str:
    return hashlib.pbkdf2_hmac("sha512", password.encode(), salt.encode(), PBKDF2_ITERATIONS, dklen=64).hex()


def issue_token(user_id: int) -> str:
    return f"demo-token-{user_id}-{int(time.time() * 1000)}"


@dataclass
class UserRecord:
    id: int
    name: str
    email: str
    password_hash: str
    password_salt: str

    def verify(self, password: str) -> bool:
        return secrets.compare_digest(hash_password(password, self.password_salt), self.password_hash)


class UserRegistry:
    """In-memory user table for the demo backend."""

    def __init__(self, seed: bool = True) -> None:
        self._users: List[UserRecord] = []
        self._next_id = 1
        if seed:
            self.add("John Doe", "john@example.com", "password")

    def find_by_email(self, email: str) -> Optional[UserRecord]:
        wanted = email.strip().lower()
        return next((u for u in self._users if u.email.lower() == wanted), None)

    def add(self, name: str, email: str, password: str) -> UserRecord:
        salt = secrets.token_hex(16)
        user = UserRecord(
            id=self._next_id,
            name=name,
            email=email,
            password_hash=hash_password(password, salt),
            password_salt=salt,
        )
        self._next_id += 1
        self._users.append(user)
        return user

    def get(self, user_id: int) -> Optional[UserRecord]:
        return next((u for u in self._users if u.id == user_id), None)

    def set_password(self, user: UserRecord, password: str) -> None:
        user.password_salt = secrets.token_hex(16)
        user.password_hash = hash_password(password, user.password_salt)

    def remove(self, user: UserRecord) -> None:
        self._users.remove(user)


def get_users(request: Request) -> UserRegistry:
    return request.app.state.users


def _auth_response(user: UserRecord) -> Dict[str, Any]:
    return {"id": user.id, "name": user.name, "email": user.email, "token": issue_token(user.id)}


@router.post("/login")
async def login(payload: Dict[str, Any] = Body(...), users: UserRegistry = Depends(get_users)):
    email = payload.get("email")
    password = payload.get("password")
    if not email or not password:
        raise HTTPException(status_code=400, detail="Email and password are required")

    user = users.find_by_email(str(email))
    if user is None or not user.verify(str(password)):
        raise HTTPException(status_code=401, detail="Invalid email or password")
    return _auth_response(user)


@router.post("/register")
async def register(payload: Dict[str, Any] = Body(...), users: UserRegistry = Depends(get_users)):
    name = payload.get("name")
    email = payload.get("email")
    password = payload.get("password")
    if not name or not email or not password:
        raise HTTPException(status_code=400, detail="Missing required fields")

    if users.find_by_email(str(email)) is not None:
        raise HTTPException(status_code=409, detail="User with this email already exists")

    user = users.add(str(name), str(email), str(password))
    return _auth_response(user)
