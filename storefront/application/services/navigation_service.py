"""Navigation tree assembly: categories, collections and static pages"""

import copy
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...domain.enums import NavNodeType
from ...domain.services.category_tree import build_tree, build_category_tree, find_node, find_path
from ...infrastructure.cache.navigation_cache import NavigationCache, navigation_cache
from ...infrastructure.orm.catalog_model import CategoryModel, CollectionModel

logger = logging.getLogger(__name__)

TREE_CACHE_KEY = "navigation-tree"
TREE_VERSION = "1.0"

STATIC_PAGES: List[Dict[str, Any]] = [
    {
        "id": "static-home",
        "key": "home",
        "label": "Home",
        "href": "/",
        "type": NavNodeType.STATIC.value,
        "route_type": "real",
        "anchor_id": "home",
        "position": -1,
        "is_active": True,
        "children": [],
    },
    {
        "id": "static-about",
        "key": "about",
        "label": "About Us",
        "href": "#about",
        "type": NavNodeType.STATIC.value,
        "route_type": "hash",
        "anchor_id": "about",
        "back_key": "home",
        "back_label": "Back to Home",
        "position": 1000,
        "is_active": True,
        "children": [],
    },
    {
        "id": "static-terms",
        "key": "terms",
        "label": "Terms & Conditions",
        "href": "#terms",
        "type": NavNodeType.STATIC.value,
        "route_type": "hash",
        "anchor_id": "terms",
        "back_key": "home",
        "back_label": "Back to Home",
        "position": 1001,
        "is_active": True,
        "children": [],
    },
    {
        "id": "static-privacy",
        "key": "privacy",
        "label": "Privacy Policy",
        "href": "#privacy",
        "type": NavNodeType.STATIC.value,
        "route_type": "hash",
        "anchor_id": "privacy",
        "back_key": "home",
        "back_label": "Back to Home",
        "position": 1002,
        "is_active": True,
        "children": [],
    },
]


def static_pages() -> List[Dict[str, Any]]:
    return copy.deepcopy(STATIC_PAGES)


class NavigationService:

    def __init__(self, db: Session, cache: Optional[NavigationCache] = None):
        self.db = db
        self.cache = cache if cache is not None else navigation_cache

    def _category_nodes(self) -> List[Dict[str, Any]]:
        categories = self.db.query(CategoryModel).filter(
            CategoryModel.is_active.is_(True)
        ).order_by(CategoryModel.position).all()

        rows = [
            {
                "id": str(category.id),
                "key": category.slug,
                "label": category.name,
                "href": f"/{category.slug}",
                "type": NavNodeType.CATEGORY.value,
                "route_type": "real",
                "category_id": str(category.id),
                "parent_id": str(category.parent_id) if category.parent_id else None,
                "slug": category.slug,
                "description": category.description,
                "position": category.position or 0,
                "is_active": category.is_active,
            }
            for category in categories
        ]
        return build_tree(rows)

    def _collection_nodes(self) -> List[Dict[str, Any]]:
        collections = self.db.query(CollectionModel).filter(
            CollectionModel.is_active.is_(True)
        ).order_by(CollectionModel.name).all()

        return [
            {
                "id": str(collection.id),
                "key": collection.slug,
                "label": collection.name,
                "href": f"/collections/{collection.slug}",
                "type": NavNodeType.COLLECTION.value,
                "route_type": "real",
                "collection_id": str(collection.id),
                "slug": collection.slug,
                "description": collection.description,
                "position": collection.position or 0,
                "is_active": True,
                "children": [],
            }
            for collection in collections
        ]

    def build_tree(self) -> Dict[str, Any]:
        """Assemble the full tree from the database.

        Falls back to the static pages alone when the database is unreachable.
        """
        try:
            nodes = self._category_nodes() + self._collection_nodes() + static_pages()
        except SQLAlchemyError as e:
            logger.error("Error building navigation tree: %s", e)
            self.db.rollback()
            nodes = static_pages()

        nodes = [node for node in nodes if node.get("is_active") is not False]
        nodes.sort(key=lambda node: node.get("position") or 0)
        return {
            "nodes": nodes,
            "last_updated": datetime.utcnow().isoformat(),
            "version": TREE_VERSION,
        }

    def get_tree(self) -> Dict[str, Any]:
        return self.cache.get_or_load(TREE_CACHE_KEY, self.build_tree)

    def revalidate(self) -> None:
        self.cache.revalidate()

    def get_node(self, key: str) -> Optional[Dict[str, Any]]:
        return find_node(self.get_tree()["nodes"], key)

    def get_breadcrumbs(self, key: str) -> List[Dict[str, Any]]:
        """Trail from Home down to the node; just Home when the key is unknown"""
        trail = [{"label": "Home", "href": "/", "route_type": "real"}]
        for node in find_path(self.get_tree()["nodes"], key):
            if node.get("key") == "home":
                continue
            trail.append({
                "label": node["label"],
                "href": node["href"],
                "route_type": node.get("route_type", "real"),
            })
        return trail

    def category_tree(self) -> List[Dict[str, Any]]:
        """Every category as id/slug/name/parent_id/position nested by parent"""
        categories = self.db.query(CategoryModel).order_by(CategoryModel.position).all()
        return build_category_tree(
            {
                "id": str(category.id),
                "slug": category.slug,
                "name": category.name,
                "parent_id": str(category.parent_id) if category.parent_id else None,
                "position": category.position or 0,
            }
            for category in categories
        )


def revalidate_navigation() -> None:
    """Clear cached navigation after a catalog mutation"""
    navigation_cache.revalidate()
