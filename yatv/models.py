# yatv/models.py
from dataclasses import dataclass, field
from typing import List, Optional


# --- Command parameters (one per interactive command) ---

@dataclass
class RegisterUserParams:
    first_name: str
    last_name: str
    country: str
    email: str
    password: str = field(repr=False)

@dataclass
class SubscribeUserParams:
    user_id: int
    app_id: int
    months: int

@dataclass
class AddToMyListParams:
    user_id: int
    show_id: int

@dataclass
class UpdatePlatformVersionParams:
    app_id: int
    platform_id: int
    version: float

@dataclass
class AddLatestVideoParams:
    show_id: int
    title: str
    description: str
    duration: int  # seconds
    sub_needed: bool
    release_date: str  # YYYY-MM-DD

@dataclass
class PlatformParams:
    platform_id: int

@dataclass
class CountryParams:
    country: str

@dataclass
class ShowParams:
    show_id: int

@dataclass
class NoParams:
    pass


@dataclass
class CommandResult:
    """Outcome of one command: printed lines on success, error description otherwise."""
    ok: bool
    lines: List[str] = field(default_factory=list)
    error: Optional[str] = None
