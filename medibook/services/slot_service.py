from datetime import date, datetime

from medibook.domain import TimeSlot, weekday_name


def parse_slot_date(value):
    """Accept a date or an ISO "YYYY-MM-DD" string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.strptime(value, "%Y-%m-%d").date()


def _whole_hour(hhmm):
    # minutes are dropped: a 09:30 start still opens the 09:00 slot
    return int(hhmm.split(":")[0])


def compute_time_slots(doctor, day, appointments):
    """
    Hourly slots for `doctor` on `day`, flagged unavailable where a
    non-cancelled appointment already holds the same doctor, date and time.
    An unknown doctor or a day off yields an empty list.
    """
    if doctor is None:
        return []

    day = parse_slot_date(day)
    template = doctor.availability.get(weekday_name(day))
    if template is None or not template.available:
        return []

    taken = {
        a.time
        for a in appointments
        if a.doctor_id == doctor.id and a.date == day and a.is_active
    }

    slots = []
    for hour in range(_whole_hour(template.start), _whole_hour(template.end)):
        label = f"{hour:02d}:00"
        slots.append(TimeSlot(time=label, available=label not in taken))
    return slots
