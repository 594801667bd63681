from fastapi import APIRouter

from .admin_pages import router as admin_pages_router
from .admin_projects import router as admin_projects_router
from .admin_services import router as admin_services_router
from .admin_settings import router as admin_settings_router
from .admin_team import router as admin_team_router
from .auth import router as auth_router
from .files import router as files_router
from .public import router as public_router
from .uploads import router as uploads_router

api_router = APIRouter()
api_router.include_router(public_router, tags=["public"])
api_router.include_router(files_router, prefix="/files", tags=["files"])
api_router.include_router(auth_router, prefix="/auth", tags=["auth"])
api_router.include_router(admin_pages_router, prefix="/admin/pages", tags=["admin"])
api_router.include_router(admin_projects_router, prefix="/admin/projects", tags=["admin"])
api_router.include_router(admin_services_router, prefix="/admin/services", tags=["admin"])
api_router.include_router(admin_team_router, prefix="/admin/team", tags=["admin"])
api_router.include_router(admin_settings_router, prefix="/admin/settings", tags=["admin"])
api_router.include_router(uploads_router, prefix="/admin/uploads", tags=["admin"])
