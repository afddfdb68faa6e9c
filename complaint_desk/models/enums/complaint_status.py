import enum


class ComplaintStatus(str, enum.Enum):
    OPEN = "Open"
    CLOSED = "Closed"


class MachineType(str, enum.Enum):
    WASHING_MACHINE = "WM"
    REFRIGERATOR = "Fridge"
    AIR_CONDITIONER = "AC"
    TELEVISION = "TV"
    OTHER = "Other"
