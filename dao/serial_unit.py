from typing import Iterable, List, Optional

from sqlalchemy import exists, func, or_
from sqlalchemy.exc import SQLAlchemyError

from configs import db
from db.models.incoming import IncomingShipment, IncomingShipmentLine, SerializedUnit
from db.models.item import Item
from db.models.outgoing import OutgoingShipmentLine
from utils.errors import ConflictError, NotFoundError

NUMERIC_SERIAL = "^[0-9]+$"


def _not_allocated():
    """Unit belum dipakai baris barang keluar mana pun."""
    return ~exists().where(OutgoingShipmentLine.serial_unit_id == SerializedUnit.id)


def _available_units_query():
    return (
        db.session.query(SerializedUnit)
        .join(IncomingShipmentLine, IncomingShipmentLine.id == SerializedUnit.line_id)
        .join(IncomingShipment, IncomingShipment.id == IncomingShipmentLine.shipment_id)
        .filter(IncomingShipment.is_active.is_(True), _not_allocated())
    )


def available_units_for_item(item_id: int, search: str = "") -> List[SerializedUnit]:
    qry = _available_units_query().filter(IncomingShipmentLine.item_id == item_id)
    if search:
        qry = qry.filter(SerializedUnit.serial_no.icontains(search, autoescape=True))
    return qry.order_by(SerializedUnit.serial_no.asc()).all()


def search_available_units(search: str, limit: int = 10) -> List[SerializedUnit]:
    if len(search or "") < 2:
        return []
    return (
        _available_units_query()
        .join(Item, Item.id == IncomingShipmentLine.item_id)
        .filter(
            or_(
                SerializedUnit.serial_no.icontains(search, autoescape=True),
                Item.code.icontains(search, autoescape=True),
            )
        )
        .order_by(SerializedUnit.id.desc())
        .limit(limit)
        .all()
    )


def is_available(unit_id: int) -> bool:
    return (
        db.session.query(
            _available_units_query().filter(SerializedUnit.id == unit_id).exists()
        ).scalar()
    )


def is_allocated(unit_id: int) -> bool:
    return (
        db.session.query(OutgoingShipmentLine.id)
        .filter(OutgoingShipmentLine.serial_unit_id == unit_id)
        .first()
        is not None
    )


def get_unit(unit_id: int):
    return db.session.get(SerializedUnit, unit_id)


def next_serial_numbers(count: int) -> List[str]:
    """
    No seri otomatis: 7 digit, melanjutkan no seri numerik tertinggi.
    """
    highest = (
        db.session.query(func.max(db.cast(SerializedUnit.serial_no, db.Numeric)))
        .filter(SerializedUnit.serial_no.regexp_match(NUMERIC_SERIAL))
        .scalar()
    )
    highest = int(highest or 0)
    return [str(highest + i).zfill(7) for i in range(1, count + 1)]


def ensure_serials_free(serials: Iterable[str], exclude_id: int | None = None) -> None:
    """No seri unik di seluruh barang masuk (termasuk duplikat di input)."""
    seen = set()
    for serial_no in serials:
        if serial_no in seen:
            raise ConflictError(f"No Seri {serial_no} sudah digunakan")
        seen.add(serial_no)
    if not seen:
        return
    qry = SerializedUnit.query.filter(SerializedUnit.serial_no.in_(seen))
    if exclude_id:
        qry = qry.filter(SerializedUnit.id != exclude_id)
    taken = qry.first()
    if taken:
        raise ConflictError(f"No Seri {taken.serial_no} sudah digunakan")


# ---------- pemeliharaan no seri per detail barang masuk ----------
def get_line_or_404(line_id: int) -> IncomingShipmentLine:
    line = (
        IncomingShipmentLine.query.join(IncomingShipment)
        .filter(IncomingShipmentLine.id == line_id, IncomingShipment.is_active.is_(True))
        .first()
    )
    if not line:
        raise NotFoundError("Detail barang tidak ditemukan")
    return line


def get_unit_or_404(unit_id: int) -> SerializedUnit:
    unit = get_unit(unit_id)
    if not unit or not unit.line.shipment.is_active:
        raise NotFoundError("No seri tidak ditemukan")
    return unit


def list_units(line_id: int) -> List[SerializedUnit]:
    line = get_line_or_404(line_id)
    return (
        SerializedUnit.query.filter_by(line_id=line.id)
        .order_by(SerializedUnit.created_at.asc(), SerializedUnit.id.asc())
        .all()
    )


def add_unit(
    line_id: int, serial_no: str, location: Optional[str], notes: Optional[str]
) -> SerializedUnit:
    line = get_line_or_404(line_id)
    ensure_serials_free([serial_no])
    current = SerializedUnit.query.filter_by(line_id=line.id).count()
    if current >= line.quantity:
        raise ConflictError(f"Jumlah No Seri sudah mencapai maksimum ({line.quantity})")

    unit = SerializedUnit(
        line_id=line.id, serial_no=serial_no, location=location or None, notes=notes or None
    )
    db.session.add(unit)
    _commit()
    return unit


def update_unit(unit_id: int, **fields) -> SerializedUnit:
    """Hanya field yang dikirim yang diubah (serial_no, location, notes)."""
    unit = get_unit_or_404(unit_id)
    if "serial_no" in fields:
        ensure_serials_free([fields["serial_no"]], exclude_id=unit.id)
    for k, v in fields.items():
        setattr(unit, k, v if k == "serial_no" else (v or None))
    _commit()
    return unit


def delete_unit(unit_id: int) -> None:
    unit = get_unit_or_404(unit_id)
    if is_allocated(unit.id):
        raise ConflictError("No seri tidak dapat dihapus karena sudah digunakan di barang keluar")
    db.session.delete(unit)
    _commit()


def _commit():
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise
