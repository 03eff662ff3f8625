# dao/item.py
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError

from configs import db
from db.models.incoming import IncomingShipmentLine
from db.models.item import Item
from db.models.outgoing import OutgoingShipmentLine
from dao import item_category as category_dao
from utils.errors import ConflictError, NotFoundError


def _ensure_unique_code(code: str, exclude_id: int | None = None) -> None:
    qry = Item.query.filter(Item.code == code)
    if exclude_id:
        qry = qry.filter(Item.id != exclude_id)
    if db.session.query(qry.exists()).scalar():
        raise ConflictError("Kode barang sudah ada")


def _is_item_in_use(item_id: int) -> bool:
    used_in = (
        db.session.query(IncomingShipmentLine.id).filter_by(item_id=item_id).first()
        or db.session.query(OutgoingShipmentLine.id).filter_by(item_id=item_id).first()
    )
    return used_in is not None


def _resolve_category_id(category_id: int | None) -> int | None:
    if category_id is None:
        return None
    return category_dao.get_category_or_404(category_id).id


def list_items(page: int, limit: int, search: str = ""):
    stmt = db.select(Item).where(Item.is_active.is_(True))
    if search:
        stmt = stmt.where(
            or_(
                Item.code.icontains(search, autoescape=True),
                Item.name.icontains(search, autoescape=True),
            )
        )
    stmt = stmt.order_by(Item.created_at.desc(), Item.id.desc())
    return db.paginate(stmt, page=page, per_page=limit, error_out=False)


def get_item(item_id: int) -> Optional[Item]:
    return Item.query.filter_by(id=item_id, is_active=True).first()


def get_item_or_404(item_id: int) -> Item:
    it = get_item(item_id)
    if not it:
        raise NotFoundError("Barang tidak ditemukan")
    return it


def create_item(created_by_id: int, **fields) -> Item:
    _ensure_unique_code(fields["code"])
    fields["category_id"] = _resolve_category_id(fields.get("category_id"))
    it = Item(created_by_id=created_by_id, **fields)
    db.session.add(it)
    _commit()
    return it


def update_item(item_id: int, **fields) -> Item:
    it = get_item_or_404(item_id)
    _ensure_unique_code(fields["code"], exclude_id=it.id)
    fields["category_id"] = _resolve_category_id(fields.get("category_id"))
    for k, v in fields.items():
        setattr(it, k, v)
    _commit()
    return it


def assign_category(item_id: int, category_id: int) -> Item:
    it = get_item_or_404(item_id)
    it.category_id = _resolve_category_id(category_id)
    _commit()
    return it


def delete_item(item_id: int) -> None:
    it = get_item_or_404(item_id)
    if _is_item_in_use(it.id):
        raise ConflictError(
            "Barang tidak dapat dihapus karena masih digunakan dalam transaksi"
        )
    it.is_active = False
    _commit()


def search_items(q: str, limit: int = 10) -> List[Item]:
    """Autocomplete kode/nama; butuh minimal 2 karakter."""
    if not q or len(q) < 2:
        return []
    return (
        Item.query.filter(
            Item.is_active.is_(True),
            or_(
                Item.code.icontains(q, autoescape=True),
                Item.name.icontains(q, autoescape=True),
            ),
        )
        .order_by(Item.code.asc(), Item.name.asc())
        .limit(limit)
        .all()
    )


def _commit():
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise
