from fastapi import APIRouter

from app.modules.audit_logs import router as audit_logs_router
from app.modules.auth import router as auth_router
from app.modules.students import router as students_router

api_router = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["Authentication"])

api_router.include_router(students_router, tags=["Students"])

api_router.include_router(audit_logs_router, prefix="/audit-logs", tags=["Audit Logs"])
