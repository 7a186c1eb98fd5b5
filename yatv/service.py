# yatv/service.py
import calendar
import logging
from datetime import date
from typing import Callable, List, Tuple

import bcrypt

from yatv.models import (AddLatestVideoParams, AddToMyListParams, RegisterUserParams,
                         SubscribeUserParams, UpdatePlatformVersionParams)
from yatv.repo import Row

logger = logging.getLogger(__name__)

DEFAULT_BCRYPT_ROUNDS = 9

def add_months(start: date, months: int) -> date:
    """Shift start by whole calendar months, clamping the day to the end of the target month."""
    total = start.month - 1 + months
    year = start.year + total // 12
    month = total % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)

def subscription_cost(monthly_cost: float, months: int) -> float:
    return monthly_cost * months

def next_episode(current_season, max_episode) -> Tuple[int, int]:
    """
    Season and episode number for a new video of a show.
    The video stays in the current (maximum) season; the episode number is the
    show's highest episode number plus one. A show without seasons yields (0, 1).
    """
    return (current_season or 0), (max_episode or 0) + 1


class YatvService:
    """
    Executes the YaTV commands against an injected repository (SqliteRepo from
    yatv.repo, or any object exposing the same methods).
    Mutating commands return the rows of their confirmatory read.
    """

    def __init__(self, repo, bcrypt_rounds: int = DEFAULT_BCRYPT_ROUNDS,
                 today: Callable[[], date] = date.today):
        self.repo = repo
        self.bcrypt_rounds = bcrypt_rounds
        self.today = today
        logger.debug("YatvService initialized with repo %s", type(repo).__name__)

    # ---- Reference lists ----
    def list_countries(self) -> List[Row]:
        return self.repo.list_countries()

    def list_mobile_countries(self) -> List[Row]:
        return self.repo.list_mobile_countries()

    def list_apps(self) -> List[Row]:
        return self.repo.list_apps()

    def list_platforms(self) -> List[Row]:
        return self.repo.list_platforms()

    def list_platforms_for_app(self, app_id: int) -> List[Row]:
        return self.repo.list_platforms_for_app(app_id)

    def list_shows(self) -> List[Row]:
        return self.repo.list_shows()

    # ---- Passwords ----
    def hash_password(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self.bcrypt_rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    @staticmethod
    def verify_password(password: str, hashed: str) -> bool:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))

    # ---- Mutating commands ----
    def register_user(self, p: RegisterUserParams) -> List[Row]:
        """Insert a user with a bcrypt-hashed password, then re-read it by email."""
        hashed = self.hash_password(p.password)
        self.repo.create_user(p.first_name, p.last_name, p.country, p.email, hashed)
        logger.info("Registered user email=%s", p.email)
        return self.repo.get_users_by_email(p.email)

    def subscribe_user(self, p: SubscribeUserParams) -> List[Row]:
        """Subscribe a user to an app for a number of months, then list the user's subscriptions."""
        monthly = self.repo.get_app_monthly_cost(p.app_id)
        cost = subscription_cost(monthly or 0, p.months)
        expires = add_months(self.today(), p.months)
        self.repo.create_subscription(p.user_id, cost, expires.isoformat(), p.app_id)
        logger.info("Subscribed user=%s app=%s months=%s cost=%s expires=%s",
                    p.user_id, p.app_id, p.months, cost, expires)
        return self.repo.list_subscriptions_for_user(p.user_id)

    def add_to_my_list(self, p: AddToMyListParams) -> List[Row]:
        self.repo.add_show_to_list(p.user_id, p.show_id)
        logger.info("Added show=%s to list of user=%s", p.show_id, p.user_id)
        return self.repo.list_my_shows(p.user_id)

    def update_platform_version(self, p: UpdatePlatformVersionParams) -> List[Row]:
        changed = self.repo.update_app_platform_version(p.app_id, p.platform_id, p.version)
        logger.info("Updated version app=%s platform=%s version=%s (rows=%s)",
                    p.app_id, p.platform_id, p.version, changed)
        return self.repo.get_app_platform(p.app_id, p.platform_id)

    def add_latest_video(self, p: AddLatestVideoParams) -> List[Row]:
        """
        Add a video as the latest episode of a show's current season.
        The app id comes from the show's existing videos; the new row in Seasons
        keeps the current maximum season and takes the next episode number.
        """
        app_id = self.repo.get_show_app_id(p.show_id)
        logger.debug("add_latest_video: show %s belongs to app %s", p.show_id, app_id)
        self.repo.create_video(p.title, p.description, p.duration, app_id,
                               p.sub_needed, p.release_date, p.show_id)
        video_id = self.repo.get_video_id_by_title(p.title)
        season, episode = next_episode(*self.repo.get_current_season(p.show_id))
        self.repo.create_season(p.show_id, video_id, season, episode)
        logger.info("Added video id=%s to show=%s as season %s episode %s",
                    video_id, p.show_id, season, episode)
        return self.repo.list_show_episodes(p.show_id)

    # ---- Reports ----
    def most_watched_shows(self) -> List[Row]:
        return self.repo.most_watched_shows()

    def free_videos_on_platform(self, platform_id: int) -> List[Row]:
        return self.repo.free_videos_on_platform(platform_id)

    def long_videos_without_show(self) -> List[Row]:
        return self.repo.long_videos_without_show()

    def app_revenue_by_country(self, country: str) -> List[Row]:
        return self.repo.app_revenue_by_country(country)

    def top_watched_tags(self) -> List[Row]:
        return self.repo.top_watched_tags()

    def highest_customer(self, country: str) -> List[Row]:
        return self.repo.highest_customer(country)

    def lowest_app(self, country: str) -> List[Row]:
        return self.repo.lowest_app(country)

    def most_profitable_app_videos(self, country: str) -> List[Row]:
        return self.repo.most_profitable_app_videos(country)

    def most_watched_episodes(self, show_id: int) -> List[Row]:
        return self.repo.most_watched_episodes(show_id)

    def mobile_app_revenue(self, country: str) -> List[Row]:
        return self.repo.mobile_app_revenue(country)
