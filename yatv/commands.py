# yatv/commands.py
import logging
import re
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Callable, Dict, List, Optional

from yatv import formatter, prompts
from yatv.models import CommandResult
from yatv.prompts import Prompter
from yatv.service import YatvService

logger = logging.getLogger(__name__)


class QueryType(IntEnum):
    RegisterUser = 1
    SubscribeUser = 2
    AddToMyList = 3
    UpdatePlatformVersion = 4
    AddLatestVideo = 5
    MostWatchedShowsByApp = 6
    FindFreeVideosByPlatform = 7
    FindLongVideosNoShow = 8
    AppRevenueByCountry = 9
    TopThreeWatchedTags = 10
    HighestCustomer = 11
    LowestApp = 12
    MostProfitableVideos = 13
    MostWatchedEpisodes = 14
    MobileAppsRevenueRanked = 15


USAGE = """Usage: yatv <query #> [parameter values]

1) Register a new user [parameter values]
2) Subscribe a user [parameter value] to an app [parameter value]
3) Add a show to a user's [parameter value] "My List"
4) Update an app's [parameter value] version on a platform
5) Add a new video [parameter value] (with all associated meta data), which is the latest in a show's current season
6) Produce a ranked list of the top-10 most watched shows, each with the corresponding app
7) Find all free videos on a particular platform [parameter value]
8) Find all long videos that were released this year and aren't part of any show
9) Produce a ranked list of revenue generated by apps in a country [parameter value]
10) Produce a ranked list of watch counts from the top-3 video tags
REPORT 1- Find the customer with the highest revenue for a certain country [parameter value]
REPORT 2- Find the app with the LOWEST revenue (by subscription) for a certain country [parameter value]
REPORT 3- Find the Top 3 most watched videos for the most profitable app in a certain country [parameter value]
REPORT 4- What is the most watched episode from [parameter value] a show
REPORT 5- Produce an ordered list of apps revenue (rounded to the nearest tenth) by country for mobile users
"""


SELECTOR_RE = re.compile(r"[0-9]+")


def parse_selector(raw: Optional[str]) -> Optional[QueryType]:
    """Map a command-line token to a QueryType; None for anything that is not 1..15."""
    if raw is None or not SELECTOR_RE.fullmatch(raw.strip()):
        return None
    try:
        return QueryType(int(raw.strip()))
    except ValueError:
        return None


@dataclass(frozen=True)
class Command:
    """
    Descriptor for one query: how its parameters are collected, which service
    call runs it, and how its rows are printed.
    """
    query_type: QueryType
    collect: Callable[[YatvService, Prompter], Any]
    execute: Callable[[YatvService, Any], List[Dict]]
    template: str
    header: Optional[str] = None

    def run(self, svc: YatvService, pr: Prompter) -> List[str]:
        params = self.collect(svc, pr)
        logger.debug("Running %s with %s", self.query_type.name, params)
        rows = self.execute(svc, params)
        return formatter.format_rows(self.template, rows, header=self.header)


CATALOG: Dict[QueryType, Command] = {c.query_type: c for c in [
    Command(QueryType.RegisterUser, prompts.collect_register_user,
            lambda s, p: s.register_user(p),
            formatter.REGISTERED_USER, header="REGISTERED! "),
    Command(QueryType.SubscribeUser, prompts.collect_subscribe_user,
            lambda s, p: s.subscribe_user(p),
            formatter.SUBSCRIPTION, header="Success! Current Subscriptions: "),
    Command(QueryType.AddToMyList, prompts.collect_add_to_my_list,
            lambda s, p: s.add_to_my_list(p),
            formatter.MY_LIST_SHOW, header="Success! Current Show(s) on Your List: "),
    Command(QueryType.UpdatePlatformVersion, prompts.collect_update_platform_version,
            lambda s, p: s.update_platform_version(p),
            formatter.APP_PLATFORM_VERSION,
            header="Success! Current Version of this App on this Platform: "),
    Command(QueryType.AddLatestVideo, prompts.collect_add_latest_video,
            lambda s, p: s.add_latest_video(p),
            formatter.SEASON_EPISODE, header="Success! Episodes in the Current Season: "),
    Command(QueryType.MostWatchedShowsByApp, prompts.collect_nothing,
            lambda s, p: s.most_watched_shows(),
            formatter.WATCHED_SHOW),
    Command(QueryType.FindFreeVideosByPlatform, prompts.collect_platform,
            lambda s, p: s.free_videos_on_platform(p.platform_id),
            formatter.FREE_VIDEO),
    Command(QueryType.FindLongVideosNoShow, prompts.collect_nothing,
            lambda s, p: s.long_videos_without_show(),
            formatter.LONG_VIDEO),
    Command(QueryType.AppRevenueByCountry, prompts.collect_country,
            lambda s, p: s.app_revenue_by_country(p.country),
            formatter.APP_REVENUE),
    Command(QueryType.TopThreeWatchedTags, prompts.collect_nothing,
            lambda s, p: s.top_watched_tags(),
            formatter.WATCHED_TAG),
    Command(QueryType.HighestCustomer, prompts.collect_country,
            lambda s, p: s.highest_customer(p.country),
            formatter.HIGHEST_CUSTOMER),
    Command(QueryType.LowestApp, prompts.collect_country,
            lambda s, p: s.lowest_app(p.country),
            formatter.LOWEST_APP),
    Command(QueryType.MostProfitableVideos, prompts.collect_country,
            lambda s, p: s.most_profitable_app_videos(p.country),
            formatter.PROFITABLE_VIDEO),
    Command(QueryType.MostWatchedEpisodes, prompts.collect_show,
            lambda s, p: s.most_watched_episodes(p.show_id),
            formatter.WATCHED_EPISODE),
    Command(QueryType.MobileAppsRevenueRanked, prompts.collect_mobile_country,
            lambda s, p: s.mobile_app_revenue(p.country),
            formatter.MOBILE_REVENUE),
]}

_missing = set(QueryType) - set(CATALOG)
if _missing:
    raise RuntimeError("no command registered for %s" % sorted(q.name for q in _missing))


def run_command(query_type: QueryType, svc: YatvService, pr: Prompter) -> CommandResult:
    """
    Collect, execute and format one command.
    Any failure after selector validation becomes CommandResult(ok=False) carrying
    the error description; nothing is retried or rolled back.
    """
    try:
        lines = CATALOG[query_type].run(svc, pr)
    except Exception as e:
        logger.debug("%s failed", query_type.name, exc_info=True)
        return CommandResult(ok=False, error="%s: %s" % (type(e).__name__, e))
    logger.info("%s produced %d line(s)", query_type.name, len(lines))
    return CommandResult(ok=True, lines=lines)
