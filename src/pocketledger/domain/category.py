"""Category domain service."""

from typing import Optional

from pocketledger.database.base import Database
from pocketledger.domain import errors
from pocketledger.domain.entities import Category, CategoryKind, CategoryTreeNode

DEFAULT_CATEGORY_COLOR = "#6366f1"
DEFAULT_CATEGORY_ICON = "FiTag"


class CategoryService:
    """Service for managing categories.

    Categories nest one level deep: a subcategory's parent must be a
    top-level category, and the subcategory always has its parent's kind.
    """

    def __init__(self, db: Database):
        """Initialize category service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_category(
        self,
        user_id: int,
        name: str,
        kind: CategoryKind = CategoryKind.EXPENSE,
        color: Optional[str] = None,
        icon: Optional[str] = None,
        parent_id: Optional[int] = None,
    ) -> int:
        """Create a category or subcategory.

        Args:
            user_id: Owning user ID
            name: Category name
            kind: Category kind; ignored for subcategories, which take the parent's
            color: Optional display color
            icon: Optional icon name
            parent_id: Optional parent category ID

        Returns:
            Category ID

        Raises:
            ValidationError: If name is blank or the parent is itself a subcategory
            NotFoundError: If the parent does not exist, is inactive or belongs to another user
        """
        name = name.strip()
        if not name:
            raise errors.ValidationError("Category name is required")

        if parent_id is not None:
            parent = self.db.get_category(user_id, parent_id)
            if parent is None or not parent.active:
                raise errors.NotFoundError(f"Parent category {parent_id} not found")
            if parent.parent_id is not None:
                raise errors.ValidationError(
                    f"Category '{parent.name}' is already a subcategory; "
                    "only one level of nesting is allowed"
                )
            kind = parent.kind

        return self.db.create_category(
            user_id=user_id,
            name=name,
            kind=CategoryKind(kind),
            color=color or DEFAULT_CATEGORY_COLOR,
            icon=icon or DEFAULT_CATEGORY_ICON,
            parent_id=parent_id,
        )

    def get_category(self, user_id: int, category_id: int) -> Optional[Category]:
        """Get category by ID.

        Returns:
            Category entity or None if not found
        """
        return self.db.get_category(user_id, category_id)

    def require_category(self, user_id: int, category_id: int) -> Category:
        """Get category by ID or raise NotFoundError."""
        category = self.db.get_category(user_id, category_id)
        if category is None:
            raise errors.NotFoundError(errors.category_not_found(category_id))
        return category

    def list_categories(self, user_id: int) -> list[Category]:
        """List active categories as a flat list."""
        return self.db.list_categories(user_id)

    def get_category_tree(self, user_id: int) -> list[CategoryTreeNode]:
        """Get active top-level categories with their active subcategories."""
        categories = self.db.list_categories(user_id)
        children: dict[int, list[Category]] = {}
        for cat in categories:
            if cat.parent_id is not None:
                children.setdefault(cat.parent_id, []).append(cat)

        return [
            CategoryTreeNode(
                id=cat.id,
                name=cat.name,
                kind=cat.kind,
                color=cat.color,
                icon=cat.icon,
                parent_id=None,
                children=tuple(
                    CategoryTreeNode(
                        id=child.id,
                        name=child.name,
                        kind=child.kind,
                        color=child.color,
                        icon=child.icon,
                        parent_id=child.parent_id,
                    )
                    for child in children.get(cat.id, [])
                ),
            )
            for cat in categories
            if cat.parent_id is None
        ]

    def update_category(
        self,
        user_id: int,
        category_id: int,
        name: Optional[str] = None,
        kind: Optional[CategoryKind] = None,
        color: Optional[str] = None,
        icon: Optional[str] = None,
    ) -> None:
        """Update a category.

        Changing the kind of a top-level category changes its subcategories
        too; a subcategory's kind cannot be changed on its own.

        Raises:
            NotFoundError: If category not found
            ValidationError: If name is blank or kind is set on a subcategory
        """
        category = self.require_category(user_id, category_id)
        if name is not None:
            name = name.strip()
            if not name:
                raise errors.ValidationError("Category name is required")
        if kind is not None:
            kind = CategoryKind(kind)
            if category.parent_id is not None and kind != category.kind:
                raise errors.ValidationError(
                    "A subcategory always has its parent's kind"
                )

        self.db.update_category(
            user_id, category_id, name=name, kind=kind, color=color, icon=icon
        )

    def delete_category(self, user_id: int, category_id: int) -> None:
        """Soft-delete a category.

        Raises:
            NotFoundError: If category not found
        """
        self.require_category(user_id, category_id)
        self.db.deactivate_category(user_id, category_id)
