# dao/goods_in.py
import logging
from collections import defaultdict
from datetime import datetime, time
from typing import Dict, List, Optional

from sqlalchemy import or_, update
from sqlalchemy.exc import SQLAlchemyError

from configs import db
from db.models.incoming import IncomingShipment, IncomingShipmentLine, SerializedUnit
from db.models.item import Item
from db.models.outgoing import OutgoingShipmentLine
from dao import serial_unit as unit_dao
from utils.errors import ConflictError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def list_shipments(page: int, limit: int, search: str = "", start_date=None, end_date=None):
    stmt = db.select(IncomingShipment).where(IncomingShipment.is_active.is_(True))
    if search:
        stmt = stmt.where(
            or_(
                IncomingShipment.arrival_code.icontains(search, autoescape=True),
                IncomingShipment.supplier_name.icontains(search, autoescape=True),
                IncomingShipment.form_no.icontains(search, autoescape=True),
                IncomingShipment.status.icontains(search, autoescape=True),
            )
        )
    if start_date and end_date:
        stmt = stmt.where(
            IncomingShipment.date >= datetime.combine(start_date, time.min),
            IncomingShipment.date <= datetime.combine(end_date, time.max),
        )
    stmt = stmt.order_by(IncomingShipment.created_at.desc(), IncomingShipment.id.desc())
    return db.paginate(stmt, page=page, per_page=limit, error_out=False)


def get_shipment(shipment_id: int) -> Optional[IncomingShipment]:
    return IncomingShipment.query.filter_by(id=shipment_id, is_active=True).first()


def get_shipment_or_404(shipment_id: int) -> IncomingShipment:
    s = get_shipment(shipment_id)
    if not s:
        raise NotFoundError("Barang masuk tidak ditemukan")
    return s


def _ensure_unique(arrival_code: str, form_no: str, exclude_id: int | None = None) -> None:
    others = IncomingShipment.query
    if exclude_id:
        others = others.filter(IncomingShipment.id != exclude_id)
    if others.filter(IncomingShipment.arrival_code == arrival_code).first():
        raise ConflictError("Kode Kedatangan sudah ada")
    if others.filter(IncomingShipment.form_no == form_no).first():
        raise ConflictError("No Form sudah ada")


def _active_item(item_id: int) -> Item:
    it = Item.query.filter_by(id=item_id, is_active=True).first()
    if not it:
        raise ValidationError(
            f"Barang dengan ID {item_id} tidak ditemukan. "
            "Silakan tambahkan barang terlebih dahulu di Master Barang."
        )
    return it


def _has_consumed_units(shipment_id: int) -> bool:
    consumed = (
        db.session.query(OutgoingShipmentLine.id)
        .join(SerializedUnit, SerializedUnit.id == OutgoingShipmentLine.serial_unit_id)
        .join(IncomingShipmentLine, IncomingShipmentLine.id == SerializedUnit.line_id)
        .filter(IncomingShipmentLine.shipment_id == shipment_id)
        .first()
    )
    return consumed is not None


def _bump_stock(item_id: int, delta: int) -> None:
    db.session.execute(
        update(Item).where(Item.id == item_id).values(stock=Item.stock + delta)
    )


def _add_lines(shipment: IncomingShipment, details: List[dict], items: Dict[int, Item]) -> None:
    """Buat detail + no seri; no seri kosong diisi otomatis."""
    blanks = sum(1 for d in details for u in d["units"] if not u.get("serial_no"))
    auto_serials = iter(unit_dao.next_serial_numbers(blanks))
    planned = [
        [(u.get("serial_no") or next(auto_serials), u) for u in d["units"]]
        for d in details
    ]
    unit_dao.ensure_serials_free(s for units in planned for s, _ in units)

    for d, units in zip(details, planned):
        line = IncomingShipmentLine(item=items[d["item_id"]], quantity=d["quantity"])
        shipment.lines.append(line)
        for serial_no, u in units:
            line.units.append(
                SerializedUnit(
                    serial_no=serial_no,
                    location=u.get("location") or None,
                    notes=u.get("notes") or None,
                )
            )


def create_shipment(
    created_by_id: int,
    date,
    arrival_code: str,
    supplier_name: str,
    form_no: str,
    status: str,
    details: List[dict],
) -> IncomingShipment:
    """
    Simpan barang masuk + detail + no seri dan tambah stok barang,
    semuanya dalam satu transaksi.
    """
    _ensure_unique(arrival_code, form_no)
    items = {d["item_id"]: _active_item(d["item_id"]) for d in details}

    try:
        shipment = IncomingShipment(
            date=date,
            arrival_code=arrival_code,
            supplier_name=supplier_name,
            form_no=form_no,
            status=status,
            created_by_id=created_by_id,
        )
        db.session.add(shipment)
        _add_lines(shipment, details, items)
        db.session.flush()
        for d in details:
            _bump_stock(d["item_id"], d["quantity"])
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    logger.info("Goods-in %s created with %d line(s)", arrival_code, len(details))
    return shipment


def update_shipment(
    shipment_id: int,
    date,
    arrival_code: str,
    supplier_name: str,
    form_no: str,
    status: str,
    details: List[dict],
) -> IncomingShipment:
    """
    Ganti header, detail dan no seri barang masuk. Stok disesuaikan dengan
    selisih jumlah lama dan baru per barang, dalam satu transaksi.
    """
    s = get_shipment_or_404(shipment_id)
    _ensure_unique(arrival_code, form_no, exclude_id=s.id)
    if _has_consumed_units(s.id):
        raise ConflictError(
            "Barang masuk tidak dapat diubah karena no seri sudah digunakan di barang keluar"
        )
    items = {d["item_id"]: _active_item(d["item_id"]) for d in details}

    delta = defaultdict(int)
    for line in s.lines:
        delta[line.item_id] -= line.quantity
    for d in details:
        delta[d["item_id"]] += d["quantity"]
    for item_id, qty in delta.items():
        it = db.session.get(Item, item_id)
        if it.stock + qty < 0:
            raise ConflictError(
                f"Stok barang {it.name} tidak mencukupi untuk mengubah barang masuk"
            )

    try:
        for line in list(s.lines):
            s.lines.remove(line)
        db.session.flush()

        s.date = date
        s.arrival_code = arrival_code
        s.supplier_name = supplier_name
        s.form_no = form_no
        s.status = status
        _add_lines(s, details, items)
        db.session.flush()
        for item_id, qty in delta.items():
            if qty:
                _bump_stock(item_id, qty)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    logger.info("Goods-in %s updated", s.arrival_code)
    return s


def delete_shipment(shipment_id: int) -> None:
    """
    Soft delete barang masuk: stok dikembalikan. Ditolak kalau ada no seri
    yang sudah dipakai barang keluar.
    """
    s = get_shipment_or_404(shipment_id)
    if _has_consumed_units(s.id):
        raise ConflictError(
            "Barang masuk tidak dapat dihapus karena no seri sudah digunakan di barang keluar"
        )

    needed = defaultdict(int)
    for line in s.lines:
        needed[line.item] += line.quantity
    for item, qty in needed.items():
        if item.stock < qty:
            raise ConflictError(
                f"Stok barang {item.name} tidak mencukupi untuk membatalkan barang masuk"
            )

    try:
        for line in s.lines:
            _bump_stock(line.item_id, -line.quantity)
        s.is_active = False
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise
    logger.info("Goods-in %s deleted, stock reverted", s.arrival_code)
