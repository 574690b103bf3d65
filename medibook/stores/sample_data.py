"""Fixed sample records the in-memory store starts with and the seed script loads."""
from datetime import date

SAMPLE_PASSWORD = "password123"

USERS = [
    {"id": "1", "email": "admin@medibook.com", "name": "Admin User", "role": "admin"},
    {"id": "2", "email": "patient@medibook.com", "name": "Patient User", "role": "patient"},
]


def _week(weekdays, saturday, saturday_open, closed_days=()):
    template = {}
    for day in ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday"):
        start, end = weekdays.get(day, weekdays["default"])
        template[day] = {"start": start, "end": end, "available": day not in closed_days}
    template["Saturday"] = {
        "start": saturday[0],
        "end": saturday[1],
        "available": saturday_open,
    }
    template["Sunday"] = {"start": "00:00", "end": "00:00", "available": False}
    return template


DOCTORS = [
    {
        "id": "1",
        "name": "Dr. Jane Smith",
        "specialty": "Cardiologist",
        "image": "/placeholder.svg",
        "bio": "Dr. Smith is a board-certified cardiologist with over 15 years of experience in treating heart conditions.",
        "availability": _week(
            {"default": ("09:00", "17:00"), "Friday": ("09:00", "15:00")},
            ("10:00", "14:00"),
            saturday_open=False,
        ),
    },
    {
        "id": "2",
        "name": "Dr. Robert Chen",
        "specialty": "Dermatologist",
        "image": "/placeholder.svg",
        "bio": "Dr. Chen specializes in treating skin conditions and has a special interest in pediatric dermatology.",
        "availability": _week(
            {"default": ("08:00", "16:00")},
            ("09:00", "13:00"),
            saturday_open=True,
            closed_days=("Wednesday",),
        ),
    },
    {
        "id": "3",
        "name": "Dr. Maria Garcia",
        "specialty": "Pediatrician",
        "image": "/placeholder.svg",
        "bio": "Dr. Garcia has been practicing pediatric medicine for 10 years and is passionate about child healthcare.",
        "availability": _week(
            {"default": ("09:00", "17:00")},
            ("09:00", "13:00"),
            saturday_open=False,
            closed_days=("Thursday",),
        ),
    },
]

APPOINTMENTS = [
    {
        "id": "1",
        "doctor_id": "1",
        "patient_id": "2",
        "patient_name": "Patient User",
        "doctor_name": "Dr. Jane Smith",
        "date": date(2025, 5, 5),
        "time": "10:00",
    },
]

MEDICINES = [
    {
        "id": "1",
        "name": "Amoxicillin 500mg",
        "description": "Broad-spectrum antibiotic capsules. Prescription required.",
        "price": 12.50,
        "stock": 40,
        "image": None,
    },
    {
        "id": "2",
        "name": "Cetirizine 10mg",
        "description": "Antihistamine tablets for hay fever and allergy relief.",
        "price": 4.99,
        "stock": 120,
        "image": None,
    },
    {
        "id": "3",
        "name": "Ibuprofen 200mg",
        "description": "Pain relief and anti-inflammatory tablets.",
        "price": 5.75,
        "stock": 200,
        "image": None,
    },
    {
        "id": "4",
        "name": "Paracetamol 500mg",
        "description": "Pain relief and fever reducer tablets.",
        "price": 3.25,
        "stock": 150,
        "image": None,
    },
    {
        "id": "5",
        "name": "Vitamin D3 1000 IU",
        "description": None,
        "price": 8.00,
        "stock": 3,
        "image": None,
    },
]
