# db/models/incoming.py
from datetime import datetime

from configs import db


class IncomingShipment(db.Model):
    """Barang masuk."""

    __tablename__ = "incoming_shipment"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    arrival_code = db.Column(db.String(60), unique=True, nullable=False)
    date = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    supplier_name = db.Column(db.String(255), nullable=False)
    form_no = db.Column(db.String(60), unique=True, nullable=False)
    status = db.Column(db.String(30), default="pending", nullable=False)

    created_by_id = db.Column(db.Integer, db.ForeignKey("user_account.id"))
    created_by = db.relationship("User")

    is_active = db.Column(db.Boolean, default=True, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(
        db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    def __str__(self):
        return self.arrival_code


class IncomingShipmentLine(db.Model):
    __tablename__ = "incoming_shipment_line"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    shipment_id = db.Column(
        db.Integer,
        db.ForeignKey("incoming_shipment.id", ondelete="CASCADE"),
        nullable=False,
    )
    item_id = db.Column(db.Integer, db.ForeignKey("item.id"), nullable=False)
    quantity = db.Column(db.Integer, nullable=False)

    shipment = db.relationship(
        "IncomingShipment",
        backref=db.backref(
            "lines", cascade="all, delete-orphan", order_by="IncomingShipmentLine.id"
        ),
    )
    item = db.relationship("Item")


class SerializedUnit(db.Model):
    """Satu baris per unit fisik (no seri) yang diterima."""

    __tablename__ = "serialized_unit"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    line_id = db.Column(
        db.Integer,
        db.ForeignKey("incoming_shipment_line.id", ondelete="CASCADE"),
        nullable=False,
    )
    serial_no = db.Column(db.String(60), nullable=False, index=True)
    location = db.Column(db.String(100))
    notes = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    line = db.relationship(
        "IncomingShipmentLine",
        backref=db.backref(
            "units", cascade="all, delete-orphan", order_by="SerializedUnit.id"
        ),
    )

    def __str__(self):
        return self.serial_no
