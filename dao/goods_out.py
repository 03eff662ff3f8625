# dao/goods_out.py
import logging
from collections import defaultdict
from datetime import datetime, time
from typing import List, Optional

from sqlalchemy import or_, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from configs import db
from db.models.incoming import SerializedUnit
from db.models.item import Item
from db.models.outgoing import OutgoingShipment, OutgoingShipmentLine, OutgoingStatus
from dao import serial_unit as unit_dao
from utils.errors import ConflictError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

APPROVE = "approve"
REJECT = "reject"
_ACTION_STATUS = {
    APPROVE: OutgoingStatus.APPROVED,
    REJECT: OutgoingStatus.REJECTED,
}


# ---------- queries ----------
def list_shipments(page: int, limit: int, search: str = "", status=None):
    stmt = db.select(OutgoingShipment).where(OutgoingShipment.is_active.is_(True))
    if search:
        by_serial = OutgoingShipment.lines.any(
            OutgoingShipmentLine.serial_unit.has(
                SerializedUnit.serial_no.icontains(search, autoescape=True)
            )
        )
        stmt = stmt.where(
            or_(
                OutgoingShipment.transaction_no.icontains(search, autoescape=True),
                OutgoingShipment.destination.icontains(search, autoescape=True),
                OutgoingShipment.notes.icontains(search, autoescape=True),
                by_serial,
            )
        )
    if status:
        stmt = stmt.where(OutgoingShipment.status == status)
    stmt = stmt.order_by(OutgoingShipment.created_at.desc(), OutgoingShipment.id.desc())
    return db.paginate(stmt, page=page, per_page=limit, error_out=False)


def get_shipment(shipment_id: int) -> Optional[OutgoingShipment]:
    return OutgoingShipment.query.filter_by(id=shipment_id, is_active=True).first()


def get_shipment_or_404(shipment_id: int) -> OutgoingShipment:
    s = get_shipment(shipment_id)
    if not s:
        raise NotFoundError("Barang keluar tidak ditemukan")
    return s


# ---------- helpers ----------
def _next_transaction_no(now: datetime) -> str:
    """BK<yyyymmdd><nnn>, nnn = urutan barang keluar hari ini."""
    start_of_day = datetime.combine(now.date(), time.min)
    count = OutgoingShipment.query.filter(
        OutgoingShipment.created_at >= start_of_day
    ).count()
    return f"BK{now:%Y%m%d}{count + 1:03d}"


def _check_lines(lines: List[dict]) -> dict:
    """
    - barang harus ada, aktif, dan stok >= total qty yang diminta
    - no seri (kalau ada) harus milik barang tsb dan belum dipakai
    """
    items = {}
    wanted = defaultdict(int)
    for ln in lines:
        item_id = ln["item_id"]
        if item_id not in items:
            it = Item.query.filter_by(id=item_id, is_active=True).first()
            if not it:
                raise ValidationError(f"Barang dengan ID {item_id} tidak ditemukan")
            items[item_id] = it
        wanted[item_id] += ln["qty"]

    for item_id, qty in wanted.items():
        it = items[item_id]
        if it.stock < qty:
            raise ConflictError(
                f"Stok barang {it.name} tidak mencukupi. "
                f"Tersedia: {it.stock}, Dibutuhkan: {qty}"
            )

    seen_units = set()
    for ln in lines:
        unit_id = ln.get("serial_unit_id")
        if unit_id is None:
            continue
        if unit_id in seen_units:
            raise ConflictError("No seri yang sama dipilih lebih dari sekali")
        seen_units.add(unit_id)

        unit = unit_dao.get_unit(unit_id)
        if not unit or unit.line.item_id != ln["item_id"]:
            raise ValidationError(f"No seri dengan ID {unit_id} tidak valid untuk barang ini")
        if not unit_dao.is_available(unit_id):
            raise ConflictError(f"No seri {unit.serial_no} sudah digunakan")
    return items


# ---------- mutations ----------
def create_shipment(
    created_by_id: int,
    lines: List[dict],
    date=None,
    delivery_no: str | None = None,
    ship_via: str | None = None,
    destination: str | None = None,
    notes: str | None = None,
) -> OutgoingShipment:
    items = _check_lines(lines)
    now = datetime.utcnow()

    try:
        shipment = OutgoingShipment(
            transaction_no=_next_transaction_no(now),
            date=date or now,
            delivery_no=delivery_no or None,
            ship_via=ship_via or None,
            destination=destination or None,
            notes=notes or None,
            status=OutgoingStatus.PENDING,
            created_by_id=created_by_id,
        )
        db.session.add(shipment)
        _add_lines(shipment, lines, items)
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        raise _integrity_conflict(e)
    except SQLAlchemyError:
        db.session.rollback()
        raise

    logger.info(
        "Goods-out %s created (%d line(s)) by user %s",
        shipment.transaction_no,
        len(lines),
        created_by_id,
    )
    return shipment


def update_shipment(
    shipment_id: int,
    lines: List[dict],
    date=None,
    delivery_no: str | None = None,
    ship_via: str | None = None,
    destination: str | None = None,
    notes: str | None = None,
) -> OutgoingShipment:
    """
    Ubah barang keluar yang belum disetujui: header diganti, detail lama
    dihapus lalu dibuat ulang. No seri milik barang keluar ini boleh dipilih lagi.
    """
    s = get_shipment_or_404(shipment_id)
    if s.status == OutgoingStatus.APPROVED:
        raise ConflictError("Tidak dapat mengubah barang keluar yang sudah disetujui")

    try:
        for line in list(s.lines):
            s.lines.remove(line)
        db.session.flush()

        items = _check_lines(lines)
        s.date = date or s.date
        s.delivery_no = delivery_no or None
        s.ship_via = ship_via or None
        s.destination = destination or None
        s.notes = notes or None
        _add_lines(s, lines, items)
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        raise _integrity_conflict(e)
    except Exception:
        db.session.rollback()
        raise

    logger.info("Goods-out %s updated (%d line(s))", s.transaction_no, len(lines))
    return s


def _add_lines(shipment: OutgoingShipment, lines: List[dict], items: dict) -> None:
    for ln in lines:
        shipment.lines.append(
            OutgoingShipmentLine(
                item=items[ln["item_id"]],
                serial_unit_id=ln.get("serial_unit_id"),
                quantity=ln["qty"],
            )
        )


def _integrity_conflict(e: IntegrityError) -> Exception:
    """Petakan pelanggaran UNIQUE dari insert bersamaan ke pesan yang tepat."""
    detail = str(e.orig)
    if "serial_unit_id" in detail:
        return ConflictError("No seri sudah digunakan oleh barang keluar lain")
    if "transaction_no" in detail:
        return ConflictError("No transaksi bentrok dengan transaksi lain, silakan coba lagi")
    return e


def approve_shipment(shipment_id: int, action: str, approver_id: int) -> OutgoingShipment:
    """
    Approve / reject barang keluar.

    Status dan pengurangan stok ditulis dalam satu transaksi: baris shipment
    dikunci (SELECT ... FOR UPDATE) sebelum status dicek, dan stok tiap
    barang dikurangi dengan UPDATE bersyarat stock >= qty. Kalau satu baris
    gagal, seluruh transaksi di-rollback.
    """
    if action not in _ACTION_STATUS:
        raise ValidationError("Action harus approve atau reject")

    try:
        shipment = (
            OutgoingShipment.query.filter_by(id=shipment_id, is_active=True)
            .with_for_update()
            .first()
        )
        if not shipment:
            raise NotFoundError("Barang keluar tidak ditemukan")
        if shipment.status != OutgoingStatus.PENDING:
            raise ConflictError("Barang keluar sudah diproses")

        shipment.status = _ACTION_STATUS[action]
        shipment.approved_by_id = approver_id

        if action == APPROVE:
            for line in shipment.lines:
                _decrement_stock(line)

        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    logger.info(
        "Goods-out %s %s by user %s",
        shipment.transaction_no,
        shipment.status.value,
        approver_id,
    )
    return shipment


def _decrement_stock(line: OutgoingShipmentLine) -> None:
    result = db.session.execute(
        update(Item)
        .where(Item.id == line.item_id, Item.stock >= line.quantity)
        .values(stock=Item.stock - line.quantity)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        raise ConflictError(
            f"Stok barang {line.item.name} tidak mencukupi untuk disetujui"
        )


def delete_shipment(shipment_id: int) -> None:
    """Soft delete; no seri dilepas supaya bisa dipakai lagi."""
    s = get_shipment_or_404(shipment_id)
    if s.status == OutgoingStatus.APPROVED:
        raise ConflictError("Tidak dapat menghapus barang keluar yang sudah disetujui")
    try:
        for line in list(s.lines):
            line.serial_unit_id = None
        s.is_active = False
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise
