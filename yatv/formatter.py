# yatv/formatter.py
from typing import Dict, Iterable, List, Optional

# Reference lists shown before a prompt
APP_OPTION = "ID: {AppID} Name: {Name} "
PLATFORM_OPTION = "ID: {platID} Name: {Name} "
APP_PLATFORM_OPTION = "PlatformID: {platID}, Platform: {platName} "
SHOW_OPTION = "ID: {ShowID} Name: {Title} "
COUNTRY_OPTION = "COUNTRY: {Country} "

# Command output, one template per row
REGISTERED_USER = "USER ID: {UserID}, FIRST NAME: {FirstName}, LAST NAME: {LastName}, COUNTRY: {Country}, EMAIL: {Email}"
SUBSCRIPTION = "User ID: {UserID}, App: {Name}, Cost: {Cost:.2f}. ExpDate: {ExpDate} "
MY_LIST_SHOW = "USER ID: {UserID} SHOW: {Title} "
APP_PLATFORM_VERSION = "APP: {appName}, PLATFORM: {platName}, Version Number: {verNum:.2f} "
SEASON_EPISODE = "SHOW: {showName}, VIDEO: {vidName}, SEASON: {seasonNum}, EPISODE: {epNum} "
WATCHED_SHOW = "WATCH COUNT: {watchCount} SHOW: {showName} APP: {appName} "
FREE_VIDEO = "PLATFORM: {PlatformName}, VIDEO NAME: {VideoTitle} "
LONG_VIDEO = "VIDEO ID: {videoID}, TITLE: {videoTitle}, DURATION: {duration} "
APP_REVENUE = "COUNTRY: {Country}, APP: {AppName}, REVENUE: {Revenue:.2f} "
WATCHED_TAG = "VIEW COUNT: {viewCount}, TAG NAME: {tagName} "
HIGHEST_CUSTOMER = "UserID: {UserID} \nFirstName: {firstName} \nLastName: {lastName} \nRevenue: {Revenue:.2f}"
LOWEST_APP = "App ID: {AppID} \nApp Name: {AppName} \nRevenue: {Revenue:.2f} "
PROFITABLE_VIDEO = "APP: {AppName}, VIDEO: {VideoName}, WATCH COUNT: {WatchCount} "
WATCHED_EPISODE = "SHOW: {showName}, EPISODE: {videoName}, VIEW COUNT: {watchCount} "
MOBILE_REVENUE = "APP: {AppName}, REVENUE: {Revenue:.0f} "


def format_row(template: str, row: Dict) -> str:
    return template.format(**row)

def format_rows(template: str, rows: Iterable[Dict], header: Optional[str] = None) -> List[str]:
    """
    Render rows in store order, one entry per row.
    header, when given, comes first and is emitted even if rows is empty.
    """
    lines = [header] if header is not None else []
    lines.extend(format_row(template, r) for r in rows)
    return lines
