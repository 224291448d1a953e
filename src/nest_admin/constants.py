from enum import Enum


DEFAULT_ACCOUNT_PAGE_LIMIT = 20
DEFAULT_CHARACTER_PAGE_LIMIT = 20
DEFAULT_LOG_PAGE_LIMIT = 50

# CharacterID is a signed BIGINT
MAX_CHARACTER_ID = 2**63 - 1

UNKNOWN_CLASS_NAME = "Unknown"

CHARACTER_CLASS_NAMES = {
    1: "Warrior",
    2: "Archer",
    3: "Sorceress",
    4: "Cleric",
    5: "Academic",
    6: "Kali",
    7: "Assassin",
    8: "Lencea",
    9: "Machina",
    10: "Vandar",
}


class LogType(str, Enum):
    LOGIN = "Login"
    LOGOUT = "Logout"
    TRADE = "Trade"
    ENHANCEMENT = "Enhancement"
    DEATH = "Death"
    LEVEL_UP = "LevelUp"
    ADMIN = "Admin"


class ServerStatus(str, Enum):
    RUNNING = "running"
    DATABASE_UNREACHABLE = "database_unreachable"


def class_name(class_id: int | None) -> str:
    return CHARACTER_CLASS_NAMES.get(class_id, UNKNOWN_CLASS_NAME)
