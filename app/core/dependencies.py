from fastapi import Request, HTTPException, Depends, BackgroundTasks
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import decode_access_token
from app.db.session import get_db
from app.services.content_service import ContentStore
from app.services.notifier import Notifier, NullNotifier
from app.services.order_service import OrderService
from app.services.order_store import OrderStore
from app.services.revenue_ledger import RevenueLedger

bearer_scheme = HTTPBearer(auto_error=False)

async def get_notifier(request: Request) -> Notifier:
    notifier = getattr(request.app.state, "notifier", None)
    return notifier or NullNotifier()

async def get_order_store(db: AsyncSession = Depends(get_db)) -> OrderStore:
    return OrderStore(db)

async def get_content_store(db: AsyncSession = Depends(get_db)) -> ContentStore:
    return ContentStore(db)

async def get_revenue_ledger(
        content_store: ContentStore = Depends(get_content_store)
) -> RevenueLedger:
    return RevenueLedger(content_store)

async def get_order_service(
        background_tasks: BackgroundTasks,
        order_store: OrderStore = Depends(get_order_store),
        revenue_ledger: RevenueLedger = Depends(get_revenue_ledger),
        notifier: Notifier = Depends(get_notifier),
) -> OrderService:
    return OrderService(order_store, revenue_ledger, notifier, background_tasks)

async def get_current_admin(
        credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str:
    if credentials is None:
        raise HTTPException(status_code=401, detail="Authentication required")

    claims = decode_access_token(credentials.credentials)
    if not claims or not claims.get("username"):
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    return claims["username"]
