"""Session-cookie authentication shared by the HTTP layer of every domain.

The identity domain writes the signed-in user into the Starlette session;
other domains only read it through the dependencies below.
"""

from fastapi import Depends, HTTPException, Request

SESSION_USER_KEY = "user"
ADMIN_ROLE = "admin"


def login_session(request: Request, user) -> dict:
    """Store the public profile of ``user`` in the session and return it."""
    profile = {
        "id": str(user.id),
        "name": user.name,
        "email": user.email,
        "role": user.role,
    }
    request.session[SESSION_USER_KEY] = profile
    return profile


def logout_session(request: Request) -> None:
    request.session.clear()


def optional_user(request: Request) -> dict | None:
    return request.session.get(SESSION_USER_KEY)


def current_user(request: Request) -> dict:
    user = request.session.get(SESSION_USER_KEY)
    if not user:
        raise HTTPException(status_code=401, detail="Not logged in")
    return user


def admin_user(user: dict = Depends(current_user)) -> dict:
    if user.get("role") != ADMIN_ROLE:
        raise HTTPException(status_code=403, detail="Admin access required")
    return user
