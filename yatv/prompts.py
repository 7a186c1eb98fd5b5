# yatv/prompts.py
import re
import sys
from datetime import date
from typing import Dict, Iterable, Optional, TextIO

from yatv import formatter
from yatv.models import (AddLatestVideoParams, AddToMyListParams, CountryParams, NoParams,
                         PlatformParams, RegisterUserParams, ShowParams, SubscribeUserParams,
                         UpdatePlatformVersionParams)
from yatv.service import YatvService

DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")

# Exceptions
class InputError(ValueError):
    """Raised when an interactive answer cannot be parsed into the expected type."""
    pass


class Prompter:
    """Typed prompts over a pair of text streams (stdin/stdout by default)."""

    def __init__(self, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None):
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout

    def say(self, text: str) -> None:
        self.stdout.write(text + "\n")

    def _read(self, question: str) -> str:
        self.stdout.write(question)
        self.stdout.flush()
        line = self.stdin.readline()
        if not line:
            raise InputError("no input available for prompt: %s" % question.strip())
        return line.rstrip("\r\n")

    def ask_str(self, question: str) -> str:
        return self._read(question)

    def ask_int(self, question: str) -> int:
        raw = self._read(question)
        try:
            return int(raw.strip())
        except ValueError:
            raise InputError("expected an integer, got %r" % raw) from None

    def ask_float(self, question: str) -> float:
        raw = self._read(question)
        try:
            return float(raw.strip())
        except ValueError:
            raise InputError("expected a number, got %r" % raw) from None

    def ask_bool(self, question: str) -> bool:
        raw = self._read(question).strip().lower()
        if raw == "true":
            return True
        if raw == "false":
            return False
        raise InputError("expected true or false, got %r" % raw)

    def ask_date(self, question: str) -> str:
        """Ask for a YYYY-MM-DD date; the validated text is returned unchanged."""
        raw = self._read(question).strip()
        if not DATE_RE.fullmatch(raw):
            raise InputError("expected a date as YYYY-MM-DD, got %r" % raw)
        try:
            date.fromisoformat(raw)
        except ValueError:
            raise InputError("expected a date as YYYY-MM-DD, got %r" % raw) from None
        return raw

    def show_options(self, title: str, template: str, rows: Iterable[Dict]) -> None:
        """Print a reference list so the operator can pick a valid value."""
        self.say(title)
        for line in formatter.format_rows(template, rows):
            self.say(line)


# ---- Per-command collectors ----
# Each one reads the command's prompts in order, showing reference lists fetched
# through the service right before the prompt that needs them.

def collect_nothing(svc: YatvService, pr: Prompter) -> NoParams:
    return NoParams()

def collect_register_user(svc: YatvService, pr: Prompter) -> RegisterUserParams:
    return RegisterUserParams(
        first_name=pr.ask_str("Enter Your First Name: "),
        last_name=pr.ask_str("Enter Your Last Name: "),
        country=pr.ask_str("Enter Your Country: "),
        email=pr.ask_str("Enter Your Email: "),
        password=pr.ask_str("Enter Your Password: "),
    )

def collect_subscribe_user(svc: YatvService, pr: Prompter) -> SubscribeUserParams:
    user_id = pr.ask_int("Enter Your UserID: ")
    pr.show_options("Available Apps: ", formatter.APP_OPTION, svc.list_apps())
    app_id = pr.ask_int("Enter the AppID that you would like to subscribe to: ")
    months = pr.ask_int("How many months would you like to uphold this subscription? ")
    return SubscribeUserParams(user_id=user_id, app_id=app_id, months=months)

def collect_add_to_my_list(svc: YatvService, pr: Prompter) -> AddToMyListParams:
    user_id = pr.ask_int("Enter your UserID: ")
    pr.show_options("Available Shows: ", formatter.SHOW_OPTION, svc.list_shows())
    show_id = pr.ask_int("Enter the ShowID that you would like to add to your list: ")
    return AddToMyListParams(user_id=user_id, show_id=show_id)

def collect_update_platform_version(svc: YatvService, pr: Prompter) -> UpdatePlatformVersionParams:
    pr.show_options("Available Apps: ", formatter.APP_OPTION, svc.list_apps())
    app_id = pr.ask_int("Enter the AppID of the App that you are Updating: ")
    pr.show_options("This App is available on Platform(s): ", formatter.APP_PLATFORM_OPTION,
                    svc.list_platforms_for_app(app_id))
    platform_id = pr.ask_int("Enter the PlatformID of the Platform on which you want to perform the update: ")
    version = pr.ask_float("Enter the updated Version Number: ")
    return UpdatePlatformVersionParams(app_id=app_id, platform_id=platform_id, version=version)

def collect_add_latest_video(svc: YatvService, pr: Prompter) -> AddLatestVideoParams:
    pr.show_options("Available Shows: ", formatter.SHOW_OPTION, svc.list_shows())
    return AddLatestVideoParams(
        show_id=pr.ask_int("Enter the ShowID: "),
        title=pr.ask_str("Enter the Title of the Video: "),
        description=pr.ask_str("Enter the Description of the Video: "),
        duration=pr.ask_int("Enter the Duration of the Video (in seconds): "),
        sub_needed=pr.ask_bool("Is a Subscription Required for this Video? (True or False): "),
        release_date=pr.ask_date("Enter the Release Date as YYYY-MM-DD: "),
    )

def collect_platform(svc: YatvService, pr: Prompter) -> PlatformParams:
    pr.show_options("Available Platforms: ", formatter.PLATFORM_OPTION, svc.list_platforms())
    return PlatformParams(platform_id=pr.ask_int("Enter the PlatformID: "))

def collect_country(svc: YatvService, pr: Prompter) -> CountryParams:
    pr.show_options("Available Countries: ", formatter.COUNTRY_OPTION, svc.list_countries())
    return CountryParams(country=pr.ask_str("Enter the Country: "))

def collect_mobile_country(svc: YatvService, pr: Prompter) -> CountryParams:
    pr.show_options("Available Countries with Apps that Have Mobile Platforms: ",
                    formatter.COUNTRY_OPTION, svc.list_mobile_countries())
    return CountryParams(country=pr.ask_str("Enter the Country: "))

def collect_show(svc: YatvService, pr: Prompter) -> ShowParams:
    pr.show_options("Available Shows: ", formatter.SHOW_OPTION, svc.list_shows())
    return ShowParams(show_id=pr.ask_int("Enter the ShowID: "))
