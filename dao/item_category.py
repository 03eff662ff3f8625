from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError

from configs import db
from db.models.item import Item, ItemCategory
from utils.errors import ConflictError, NotFoundError


def _active_items_using(category_id: int) -> int:
    return Item.query.filter_by(category_id=category_id, is_active=True).count()


def ensure_unique_name(name: str, exclude_id: int | None = None) -> None:
    qry = ItemCategory.query.filter(
        ItemCategory.name == name, ItemCategory.is_active.is_(True)
    )
    if exclude_id:
        qry = qry.filter(ItemCategory.id != exclude_id)
    if db.session.query(qry.exists()).scalar():
        raise ConflictError("Nama jenis barang sudah ada")


def list_categories(search: str = "") -> List[ItemCategory]:
    qry = ItemCategory.query.filter_by(is_active=True)
    if search:
        qry = qry.filter(ItemCategory.name.icontains(search, autoescape=True))
    return qry.order_by(ItemCategory.name.asc()).all()


def get_category(category_id: int) -> Optional[ItemCategory]:
    return ItemCategory.query.filter_by(id=category_id, is_active=True).first()


def get_category_or_404(category_id: int) -> ItemCategory:
    c = get_category(category_id)
    if not c:
        raise NotFoundError("Jenis barang tidak ditemukan")
    return c


def create_category(name: str, description: str | None) -> ItemCategory:
    ensure_unique_name(name)
    c = ItemCategory(name=name, description=description or None)
    db.session.add(c)
    _commit()
    return c


def update_category(category_id: int, name: str, description: str | None) -> ItemCategory:
    c = get_category_or_404(category_id)
    ensure_unique_name(name, exclude_id=c.id)
    c.name = name
    c.description = description or None
    _commit()
    return c


def delete_category(category_id: int) -> None:
    """Soft delete; ditolak selama masih ada barang aktif yang memakai jenis ini."""
    c = get_category_or_404(category_id)
    if _active_items_using(c.id) > 0:
        raise ConflictError(
            "Jenis barang tidak dapat dihapus karena masih digunakan oleh barang lain"
        )
    c.is_active = False
    _commit()


def _commit():
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise
