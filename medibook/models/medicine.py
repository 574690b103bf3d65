import uuid
from datetime import datetime, timezone

from medibook.extensions import db
from medibook.domain import Medicine as MedicineRecord

class Medicine(db.Model):
    __tablename__ = "medicines"
    __table_args__ = (
        db.CheckConstraint("stock >= 0", name="ck_medicines_stock_non_negative"),
    )

    medicine_id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    price = db.Column(db.Numeric(10, 2, asdecimal=False), nullable=False)
    stock = db.Column(db.Integer, nullable=False, default=0)
    image = db.Column(db.String(255), nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))

    def to_record(self):
        return MedicineRecord(
            id=self.medicine_id,
            name=self.name,
            description=self.description,
            price=float(self.price),
            stock=self.stock,
            image=self.image,
            created_at=self.created_at,
        )

    def __repr__(self):
        return f"<Medicine {self.name} stock={self.stock}>"
