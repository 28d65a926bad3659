"""Navigation routes"""

import logging

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from ...api.dependencies import get_current_admin
from ...application.services.navigation_service import NavigationService
from ...core.errors import not_found, ok
from ...db.database import get_db
from ...domain.entities.profile import Profile

logger = logging.getLogger(__name__)

router = APIRouter()
nav_router = APIRouter()

TREE_CACHE_CONTROL = "public, s-maxage=3600, stale-while-revalidate=86400"


@router.get("/tree")
async def get_navigation_tree(response: Response, db: Session = Depends(get_db)):
    """Cached navigation tree"""
    response.headers["Cache-Control"] = TREE_CACHE_CONTROL
    return ok(NavigationService(db).get_tree())


@router.post("/tree")
async def revalidate_navigation_tree(
    admin: Profile = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """Drop the cached tree so the next read rebuilds it"""
    NavigationService(db).revalidate()
    logger.info("Navigation cache revalidated by %s", admin.id)
    return ok({"revalidated": True})


@router.get("/nodes/{key}")
async def get_navigation_node(key: str, db: Session = Depends(get_db)):
    node = NavigationService(db).get_node(key)
    if node is None:
        raise not_found("Navigation node not found")
    return ok(node)


@router.get("/breadcrumbs/{key}")
async def get_breadcrumbs(key: str, db: Session = Depends(get_db)):
    return ok(NavigationService(db).get_breadcrumbs(key))


@nav_router.get("")
async def get_category_nav(db: Session = Depends(get_db)):
    """Category-only tree for menus"""
    return ok(NavigationService(db).category_tree())
