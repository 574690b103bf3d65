import re

from werkzeug.security import generate_password_hash, check_password_hash

from medibook.models.roles import RoleEnum

EMAIL_REGEX = r"^[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}$"
MIN_PASSWORD_LENGTH = 6

def is_valid_email(email):
    return re.match(EMAIL_REGEX, email or "") is not None

def register_user(store, email, name, password, role):
    email = (email or "").strip()
    name = (name or "").strip()

    if not is_valid_email(email):
        return None, "Please enter a valid email address."

    if not name:
        return None, "Name is required."

    if len(password or "") < MIN_PASSWORD_LENGTH:
        return None, f"Password must be at least {MIN_PASSWORD_LENGTH} characters."

    parsed_role = RoleEnum.parse(role)
    if parsed_role == RoleEnum.NONE:
        return None, "Role must be 'patient' or 'admin'."

    if store.get_credentials(email):
        return None, "Email already exists."

    profile = store.create_user(
        email=email,
        name=name,
        password_hash=generate_password_hash(password),
        role=parsed_role.value,
    )
    return profile, None


def authenticate_user(store, email, password):
    credentials = store.get_credentials((email or "").strip())
    if not credentials:
        return None, "Email not found."

    profile, password_hash = credentials
    if not check_password_hash(password_hash, password or ""):
        return None, "Incorrect password."

    return profile, None
