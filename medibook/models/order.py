import uuid
from datetime import datetime, timezone

from medibook.extensions import db
from medibook.domain import Order as OrderRecord, OrderItem as OrderItemRecord
from medibook.models.order_status import OrderStatus

def _utcnow():
    return datetime.now(timezone.utc)

class MedicineOrder(db.Model):
    __tablename__ = "medicine_orders"

    order_id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = db.Column(db.String(36), db.ForeignKey("users.user_id"), nullable=False)
    status = db.Column(db.String(20), nullable=False, default=OrderStatus.PENDING.value)
    total_amount = db.Column(db.Numeric(10, 2, asdecimal=False), nullable=False)
    shipping_address = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=_utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=_utcnow)

    user = db.relationship("User", back_populates="orders")
    items = db.relationship(
        "MedicineOrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="MedicineOrderItem.position",
    )

    def to_record(self, include_customer=False):
        return OrderRecord(
            id=self.order_id,
            user_id=self.user_id,
            status=OrderStatus(self.status),
            total_amount=float(self.total_amount),
            shipping_address=self.shipping_address,
            created_at=self.created_at,
            updated_at=self.updated_at,
            items=[item.to_record() for item in self.items],
            customer_name=self.user.name if include_customer and self.user else None,
        )

    def __repr__(self):
        return f"<MedicineOrder {self.order_id} {self.status}>"


class MedicineOrderItem(db.Model):
    __tablename__ = "medicine_order_items"

    item_id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    order_id = db.Column(db.String(36), db.ForeignKey("medicine_orders.order_id"), nullable=False)
    medicine_id = db.Column(db.String(36), db.ForeignKey("medicines.medicine_id", ondelete="SET NULL"), nullable=True)
    medicine_name = db.Column(db.String(200), nullable=True)
    position = db.Column(db.Integer, nullable=False, default=0)
    quantity = db.Column(db.Integer, nullable=False)
    price_per_unit = db.Column(db.Numeric(10, 2, asdecimal=False), nullable=False)
    total_price = db.Column(db.Numeric(10, 2, asdecimal=False), nullable=False)
    stock_applied = db.Column(db.Boolean, nullable=False, default=False)

    order = db.relationship("MedicineOrder", back_populates="items")
    def to_record(self):
        return OrderItemRecord(
            id=self.item_id,
            order_id=self.order_id,
            medicine_id=self.medicine_id,
            medicine_name=self.medicine_name,
            quantity=self.quantity,
            price_per_unit=float(self.price_per_unit),
            total_price=float(self.total_price),
            stock_applied=self.stock_applied,
        )
