# db/models/item.py
from datetime import datetime

from configs import db


class ItemCategory(db.Model):
    """Jenis barang."""

    __tablename__ = "item_category"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    name = db.Column(db.String(100), nullable=False, index=True)
    description = db.Column(db.Text)
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(
        db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    def __str__(self):
        return self.name


class Item(db.Model):
    """Master barang."""

    __tablename__ = "item"
    __table_args__ = (db.CheckConstraint("stock >= 0", name="ck_item_stock_nonneg"),)

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    code = db.Column(db.String(60), unique=True, nullable=False)
    name = db.Column(db.String(255), nullable=False)
    unit = db.Column(db.String(30))
    stock = db.Column(db.Integer, default=0, nullable=False)
    min_stock = db.Column(db.Integer, default=0, nullable=False)
    location = db.Column(db.String(100))
    description = db.Column(db.Text)

    category_id = db.Column(db.Integer, db.ForeignKey("item_category.id"))
    category = db.relationship("ItemCategory", backref="items")

    created_by_id = db.Column(db.Integer, db.ForeignKey("user_account.id"))
    created_by = db.relationship("User")

    is_active = db.Column(db.Boolean, default=True, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(
        db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    def __str__(self):
        return f"{self.code} - {self.name}"
