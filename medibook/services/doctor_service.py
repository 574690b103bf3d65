from datetime import datetime

from medibook.domain import WEEKDAYS

DEFAULT_IMAGE = "/placeholder.svg"

# initial values of the add-doctor form
DEFAULT_AVAILABILITY = {
    day: {"start": "09:00", "end": "17:00", "available": True}
    for day in WEEKDAYS[:5]
}
DEFAULT_AVAILABILITY.update({
    "Saturday": {"start": "09:00", "end": "13:00", "available": False},
    "Sunday": {"start": "09:00", "end": "13:00", "available": False},
})


def _parse_hhmm(value):
    return datetime.strptime(value, "%H:%M").time()


def parse_availability(form):
    """
    Read `<Day>-start`, `<Day>-end` and `<Day>-available` fields for all
    seven days. Returns (template, error_message).
    """
    template = {}
    for day in WEEKDAYS:
        default = DEFAULT_AVAILABILITY[day]
        start = form.get(f"{day}-start") or default["start"]
        end = form.get(f"{day}-end") or default["end"]
        available = form.get(f"{day}-available") in ("on", "true", "1", "yes")

        try:
            start_time, end_time = _parse_hhmm(start), _parse_hhmm(end)
        except ValueError:
            return None, f"{day}: times must be in HH:MM format."

        if available and start_time >= end_time:
            return None, f"{day}: start time must be before end time."

        template[day] = {"start": start, "end": end, "available": available}
    return template, None


def parse_doctor_form(form):
    """Validate the add-doctor form. Returns (fields, error_message)."""
    fields = {
        "name": (form.get("name") or "").strip(),
        "specialty": (form.get("specialty") or "").strip(),
        "bio": (form.get("bio") or "").strip(),
        "image": (form.get("image") or "").strip() or DEFAULT_IMAGE,
    }
    for key, label in (("name", "Name"), ("specialty", "Specialty"), ("bio", "Biography")):
        if not fields[key]:
            return None, f"{label} is required."

    availability, error = parse_availability(form)
    if error:
        return None, error
    fields["availability"] = availability
    return fields, None
