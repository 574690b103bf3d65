"""
Record shapes shared by the stores, services, contexts and views.
"""
from dataclasses import dataclass, field, asdict
from datetime import date, datetime
from typing import Dict, List, Optional

from medibook.models.appointment_status import AppointmentStatus
from medibook.models.order_status import OrderStatus

WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


def weekday_name(day: date) -> str:
    return WEEKDAYS[day.weekday()]


@dataclass
class DayAvailability:
    start: str
    end: str
    available: bool


@dataclass
class Doctor:
    id: str
    name: str
    specialty: str
    image: str
    bio: str
    availability: Dict[str, DayAvailability]

    @staticmethod
    def template_from_dict(raw) -> Dict[str, DayAvailability]:
        return {
            day: DayAvailability(start=v["start"], end=v["end"], available=bool(v["available"]))
            for day, v in (raw or {}).items()
        }


@dataclass
class Appointment:
    id: str
    doctor_id: str
    patient_id: str
    doctor_name: str
    patient_name: str
    date: date
    time: str
    status: AppointmentStatus = AppointmentStatus.SCHEDULED

    @property
    def is_active(self):
        return self.status != AppointmentStatus.CANCELLED


@dataclass
class TimeSlot:
    time: str
    available: bool


@dataclass
class Medicine:
    id: str
    name: str
    price: float
    stock: int
    description: Optional[str] = None
    image: Optional[str] = None
    created_at: Optional[datetime] = None

    def to_dict(self):
        data = asdict(self)
        data["created_at"] = self.created_at.isoformat() if self.created_at else None
        return data

    @classmethod
    def from_dict(cls, data):
        created_at = data.get("created_at")
        return cls(
            id=str(data["id"]),
            name=data["name"],
            price=float(data["price"]),
            stock=int(data["stock"]),
            description=data.get("description"),
            image=data.get("image"),
            created_at=datetime.fromisoformat(created_at) if created_at else None,
        )


@dataclass
class CartItem:
    medicine: Medicine
    quantity: int

    @property
    def line_total(self):
        return self.medicine.price * self.quantity


@dataclass
class OrderItem:
    id: str
    order_id: str
    medicine_id: Optional[str]
    quantity: int
    price_per_unit: float
    total_price: float
    medicine_name: Optional[str] = None
    stock_applied: bool = True


@dataclass
class Order:
    id: str
    user_id: str
    status: OrderStatus
    total_amount: float
    shipping_address: str
    created_at: datetime
    updated_at: datetime
    items: List[OrderItem] = field(default_factory=list)
    customer_name: Optional[str] = None

    @property
    def needs_reconciliation(self):
        return any(not item.stock_applied for item in self.items)


@dataclass
class Profile:
    id: str
    name: str
    email: str
    role: Optional[str] = None


@dataclass
class OrderLine:
    """One cart entry as submitted at checkout, with its price snapshot."""
    medicine_id: str
    medicine_name: str
    quantity: int
    price_per_unit: float
    total_price: float
