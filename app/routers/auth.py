import logging
from fastapi import APIRouter, Depends, HTTPException
from app.core.dependencies import get_current_admin
from app.core.security import create_access_token, verify_admin_credentials
from app.db.schemas.auth import AdminInfo, LoginRequest, LoginResponse, VerifyResponse

logger = logging.getLogger(__name__)
router = APIRouter()

@router.post("/login", response_model=LoginResponse)
async def login(request: LoginRequest):
    if not request.username or not request.password:
        raise HTTPException(status_code=400, detail="Username and password required")

    if not verify_admin_credentials(request.username, request.password):
        logger.warning(f"Failed login attempt for '{request.username}'")
        raise HTTPException(status_code=401, detail="Invalid credentials")

    logger.info(f"Staff login: {request.username}")
    return LoginResponse(
        token=create_access_token(request.username),
        admin=AdminInfo(username=request.username),
    )

@router.get("/verify", response_model=VerifyResponse)
async def verify(admin: str = Depends(get_current_admin)):
    return VerifyResponse(admin=AdminInfo(username=admin))
