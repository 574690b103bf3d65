from enum import Enum

class RoleEnum(Enum):
    PATIENT = "patient"
    ADMIN = "admin"
    NONE = "none"

    @classmethod
    def parse(cls, value):
        """Map a stored role field to a role; missing or unknown values are NONE."""
        if isinstance(value, cls):
            return value
        for role in (cls.PATIENT, cls.ADMIN):
            if value == role.value:
                return role
        return cls.NONE
