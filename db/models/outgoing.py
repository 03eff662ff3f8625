# db/models/outgoing.py
import enum
from datetime import datetime

from configs import db


class OutgoingStatus(enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class OutgoingShipment(db.Model):
    """Barang keluar."""

    __tablename__ = "outgoing_shipment"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    transaction_no = db.Column(db.String(40), unique=True, nullable=False)
    delivery_no = db.Column(db.String(60))
    ship_via = db.Column(db.String(100))
    date = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    destination = db.Column(db.String(255))
    notes = db.Column(db.Text)
    status = db.Column(
        db.Enum(OutgoingStatus, name="outgoingstatus"),
        default=OutgoingStatus.PENDING,
        nullable=False,
    )

    created_by_id = db.Column(db.Integer, db.ForeignKey("user_account.id"))
    created_by = db.relationship("User", foreign_keys=[created_by_id])
    approved_by_id = db.Column(db.Integer, db.ForeignKey("user_account.id"))
    approved_by = db.relationship("User", foreign_keys=[approved_by_id])

    is_active = db.Column(db.Boolean, default=True, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(
        db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    def __str__(self):
        return self.transaction_no


class OutgoingShipmentLine(db.Model):
    __tablename__ = "outgoing_shipment_line"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    shipment_id = db.Column(
        db.Integer,
        db.ForeignKey("outgoing_shipment.id", ondelete="CASCADE"),
        nullable=False,
    )
    item_id = db.Column(db.Integer, db.ForeignKey("item.id"), nullable=False)
    # satu unit fisik hanya boleh keluar sekali
    serial_unit_id = db.Column(
        db.Integer, db.ForeignKey("serialized_unit.id"), unique=True
    )
    quantity = db.Column(db.Integer, nullable=False)

    shipment = db.relationship(
        "OutgoingShipment",
        backref=db.backref(
            "lines", cascade="all, delete-orphan", order_by="OutgoingShipmentLine.id"
        ),
    )
    item = db.relationship("Item")
    serial_unit = db.relationship(
        "SerializedUnit", backref=db.backref("outgoing_line", uselist=False)
    )
