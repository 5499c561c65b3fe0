import hmac

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from app.core.config import ACCESS_TOKEN_EXPIRE_MINUTES, ADMIN_SIGNUP_CODE, AUTH_COOKIE_NAME
from app.core.dependencies import get_current_user, get_db
from app.core.jwt import token_for_user
from app.core.logging_config import get_logger
from app.core.security import hash_password, verify_password
from app.models.enums import UserRole
from app.models.user import User
from app.schemas.user import AdminCreate, AuthOut, UserCreate, UserEnvelope, UserLogin, UserOut

router = APIRouter(prefix="/auth", tags=["Authentication"])
logger = get_logger()


def issue_token(response: Response, user: User) -> dict:
    token = token_for_user(user)
    response.set_cookie(
        AUTH_COOKIE_NAME,
        token,
        httponly=True,
        samesite="lax",
        max_age=ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )
    return {"user": UserOut.model_validate(user), "token": token}


def create_user(db: Session, data: UserCreate, role: UserRole) -> User:
    if db.query(User).filter(User.email == data.email).first():
        raise HTTPException(status_code=400, detail="User already exists")

    user = User(
        name=data.name,
        email=data.email,
        phone=data.phone,
        password_hash=hash_password(data.password),
        role=role,
    )

    db.add(user)
    db.commit()
    db.refresh(user)
    return user


# =====================================================================
#                           USER REGISTER
# =====================================================================
@router.post("/register", response_model=AuthOut, status_code=201)
def register(data: UserCreate, response: Response, db: Session = Depends(get_db)):
    user = create_user(db, data, UserRole.CUSTOMER)
    logger.info(f"User registered | User={user.id}")
    return issue_token(response, user)


# =====================================================================
#                           ADMIN REGISTER
# =====================================================================
@router.post("/admin/register", response_model=AuthOut, status_code=201)
def admin_register(data: AdminCreate, response: Response, db: Session = Depends(get_db)):
    if not ADMIN_SIGNUP_CODE or not hmac.compare_digest(data.signup_code.encode(), ADMIN_SIGNUP_CODE.encode()):
        raise HTTPException(status_code=403, detail="Admin registration is not allowed")

    admin = create_user(db, data, UserRole.ADMIN)
    logger.bind(log_type="admin").info(f"Admin registered | Admin={admin.id}")
    return issue_token(response, admin)


# =====================================================================
#                           LOGIN
# =====================================================================
@router.post("/login", response_model=AuthOut)
def login(data: UserLogin, response: Response, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == data.email).first()

    if not user or not verify_password(data.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    return issue_token(response, user)


# =====================================================================
#                           LOGOUT / ME
# =====================================================================
@router.post("/logout")
def logout(response: Response):
    response.delete_cookie(AUTH_COOKIE_NAME)
    return {"message": "User logged out!"}


@router.get("/me", response_model=UserEnvelope)
def me(user: User = Depends(get_current_user)):
    return {"user": UserOut.model_validate(user)}
