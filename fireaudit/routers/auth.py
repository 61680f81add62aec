# fireaudit/routers/auth.py
from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.orm import Session

from ..auth import ROLE_ORDER, Principal, get_principal, issue_token, require_admin
from ..db import get_db
from ..domain.audit import audit_write
from ..models import AppUser
from ..schemas import PrincipalOut, TokenIn, TokenOut

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/me", response_model=PrincipalOut)
def me(p: Principal = Depends(get_principal)):
    return PrincipalOut(user_id=p.user_id, email=p.email, role=p.role)


@router.post("/token", response_model=TokenOut)
def issue_user_token(
    payload: TokenIn,
    db: Session = Depends(get_db),
    p: Principal = Depends(require_admin),
):
    """
    Admin-issued bearer token for an inspector or viewer account.
    Creates the account on first use; `role` updates an existing one.
    """
    email = payload.email.strip().lower()
    if not email:
        raise HTTPException(status_code=400, detail="email is required")

    role = (payload.role or "").strip().lower() or None
    if role is not None and role not in ROLE_ORDER:
        raise HTTPException(status_code=400, detail=f"unknown role: {role}")

    user = db.scalar(select(AppUser).where(AppUser.email == email))
    if user is None:
        user = AppUser(
            email=email,
            display_name=email.split("@")[0],
            role=role or "inspector",
            created_at=datetime.utcnow(),
        )
        db.add(user)
        db.flush()
        audit_write(
            db,
            actor_user_id=p.user_id,
            action="user.create",
            entity_type="AppUser",
            entity_id=str(user.id),
            after={"email": user.email, "role": user.role},
        )
    elif role is not None and role != user.role:
        audit_write(
            db,
            actor_user_id=p.user_id,
            action="user.role",
            entity_type="AppUser",
            entity_id=str(user.id),
            before={"role": user.role},
            after={"role": role},
        )
        user.role = role

    db.commit()
    db.refresh(user)
    return TokenOut(access_token=issue_token(int(user.id)), user_id=int(user.id), role=str(user.role))
