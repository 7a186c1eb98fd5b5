# yatv/repo.py
import logging
import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

Row = Dict[str, Any]

# --- Exceptions ---
class RepoError(Exception):
    pass

# --- SQLite repo ---
class SqliteRepo:
    """
    Schema access for the YaTV database.
    A single connection is held between open() and close(); every statement
    binds its parameters positionally and every write is committed on its own.
    """

    def __init__(self, db_path: str, create: bool = True):
        self.db_path = db_path
        self.create = create
        self._con: Optional[sqlite3.Connection] = None
        parent = os.path.dirname(db_path)
        if create and parent:
            os.makedirs(parent, exist_ok=True)

    def open(self) -> "SqliteRepo":
        if self._con is None:
            try:
                if self.create:
                    con = sqlite3.connect(self.db_path)
                else:
                    # read-write only, a missing file is an error
                    con = sqlite3.connect(Path(self.db_path).resolve().as_uri() + "?mode=rw", uri=True)
            except sqlite3.Error as e:
                raise RepoError(str(e)) from e
            con.row_factory = sqlite3.Row
            con.execute("PRAGMA foreign_keys = ON")
            self._con = con
            logger.debug("Opened database %s", self.db_path)
        return self

    def close(self) -> None:
        if self._con is not None:
            self._con.close()
            self._con = None
            logger.debug("Closed database %s", self.db_path)

    def __enter__(self):
        return self.open()

    def __exit__(self, exc_type, exc, tb):
        self.close()

    @contextmanager
    def conn(self):
        """Yield the open connection, translating driver errors into RepoError."""
        if self._con is None:
            raise RepoError("database is not open")
        try:
            yield self._con
        except sqlite3.Error as e:
            self._con.rollback()
            raise RepoError(str(e)) from e

    def _query(self, sql: str, params: Sequence = ()) -> List[Row]:
        with self.conn() as c:
            rows = c.execute(sql, tuple(params)).fetchall()
            return [dict(r) for r in rows]

    def _execute(self, sql: str, params: Sequence = ()) -> int:
        with self.conn() as c:
            cur = c.execute(sql, tuple(params))
            c.commit()
            return cur.rowcount

    # -- Reference lists --
    def list_countries(self) -> List[Row]:
        return self._query("SELECT DISTINCT Country FROM User")

    def list_mobile_countries(self) -> List[Row]:
        return self._query(
            "SELECT DISTINCT u.Country AS Country"
            " FROM User u JOIN Subscription s ON s.UserID = u.UserID"
            " JOIN AppPlatform ap ON ap.AppID = s.AppID"
            " JOIN Platform p ON p.PlatformID = ap.PlatformID"
            " WHERE p.Mobile = 1")

    def list_apps(self) -> List[Row]:
        return self._query("SELECT a.AppID AS AppID, a.Name AS Name FROM App a")

    def list_platforms(self) -> List[Row]:
        return self._query("SELECT p.PlatformID AS platID, p.Name AS Name FROM Platform p")

    def list_platforms_for_app(self, app_id: int) -> List[Row]:
        return self._query(
            "SELECT p.Name AS platName, p.PlatformID AS platID"
            " FROM AppPlatform ap JOIN App a ON ap.AppID = a.AppID"
            " JOIN Platform p ON ap.PlatformID = p.PlatformID"
            " WHERE ap.AppID = ?", (app_id,))

    def list_shows(self) -> List[Row]:
        return self._query("SELECT ShowID, Title FROM Shows")

    # -- Users --
    def create_user(self, first_name: str, last_name: str, country: str,
                    email: str, password_hash: str) -> None:
        self._execute(
            "INSERT INTO User (FirstName, LastName, Country, Email, Password) VALUES (?, ?, ?, ?, ?)",
            (first_name, last_name, country, email, password_hash))

    def get_users_by_email(self, email: str) -> List[Row]:
        return self._query("SELECT * FROM User u WHERE u.Email = ?", (email,))

    # -- Subscriptions --
    def get_app_monthly_cost(self, app_id: int) -> Optional[float]:
        rows = self._query("SELECT a.MonthlyCost AS monthlyCost FROM App a WHERE a.AppID = ?", (app_id,))
        return rows[-1]["monthlyCost"] if rows else None

    def create_subscription(self, user_id: int, cost: float, exp_date: str, app_id: int) -> None:
        self._execute(
            "INSERT INTO Subscription (UserID, Cost, ExpDate, AppID) VALUES (?, ?, ?, ?)",
            (user_id, cost, exp_date, app_id))

    def list_subscriptions_for_user(self, user_id: int) -> List[Row]:
        return self._query(
            "SELECT u.UserID AS UserID, a.Name AS Name, s.Cost AS Cost, s.ExpDate AS ExpDate"
            " FROM Subscription s JOIN User u ON u.UserID = s.UserID"
            " JOIN App a ON s.AppID = a.AppID"
            " WHERE s.UserID = ?", (user_id,))

    # -- My list --
    def add_show_to_list(self, user_id: int, show_id: int) -> None:
        self._execute("INSERT INTO MyListShow (UserID, ShowID) VALUES (?, ?)", (user_id, show_id))

    def list_my_shows(self, user_id: int) -> List[Row]:
        return self._query(
            "SELECT m.UserID AS UserID, s.Title AS Title"
            " FROM MyListShow m JOIN Shows s ON m.ShowID = s.ShowID"
            " WHERE m.UserID = ?", (user_id,))

    # -- App platforms --
    def update_app_platform_version(self, app_id: int, platform_id: int, version: float) -> int:
        return self._execute(
            "UPDATE AppPlatform SET VersionNum = ? WHERE AppID = ? AND PlatformID = ?",
            (version, app_id, platform_id))

    def get_app_platform(self, app_id: int, platform_id: int) -> List[Row]:
        return self._query(
            "SELECT a.Name AS appName, p.Name AS platName, COALESCE(ap.VersionNum, 0) AS verNum"
            " FROM AppPlatform ap JOIN App a ON ap.AppID = a.AppID"
            " JOIN Platform p ON ap.PlatformID = p.PlatformID"
            " WHERE ap.AppID = ? AND ap.PlatformID = ?", (app_id, platform_id))

    # -- Videos and seasons --
    def get_show_app_id(self, show_id: int) -> Optional[int]:
        rows = self._query(
            "SELECT v.AppID AS appID"
            " FROM Seasons s JOIN Video v ON v.VideoID = s.VideoID"
            " WHERE s.ShowID = ?"
            " GROUP BY v.AppID", (show_id,))
        return rows[-1]["appID"] if rows else None

    def create_video(self, title: str, description: str, duration: int, app_id: Optional[int],
                     sub_needed: bool, release_date: str, show_id: int) -> None:
        self._execute(
            "INSERT INTO Video (Title, Description, Duration, AppID, SubNeeded, ReleaseDate, ShowID)"
            " VALUES (?, ?, ?, ?, ?, ?, ?)",
            (title, description, duration, app_id, int(sub_needed), release_date, show_id))

    def get_video_id_by_title(self, title: str) -> Optional[int]:
        rows = self._query("SELECT v.VideoID AS vidId FROM Video v WHERE v.Title = ? ORDER BY v.VideoID", (title,))
        return rows[-1]["vidId"] if rows else None

    def get_current_season(self, show_id: int) -> Tuple[Optional[int], Optional[int]]:
        """Return (max season number, max episode number) for a show; both None when it has no rows."""
        rows = self._query(
            "SELECT MAX(s.SeasonNum) AS currSeason, MAX(s.EpisodeNum) AS maxEp"
            " FROM Seasons s WHERE s.ShowID = ?", (show_id,))
        r = rows[0]
        return r["currSeason"], r["maxEp"]

    def create_season(self, show_id: int, video_id: Optional[int], season_num: int, episode_num: int) -> None:
        self._execute(
            "INSERT INTO Seasons (ShowID, VideoID, SeasonNum, EpisodeNum) VALUES (?, ?, ?, ?)",
            (show_id, video_id, season_num, episode_num))

    def list_show_episodes(self, show_id: int) -> List[Row]:
        return self._query(
            "SELECT sh.Title AS showName, v.Title AS vidName,"
            " s.SeasonNum AS seasonNum, s.EpisodeNum AS epNum"
            " FROM Seasons s JOIN Shows sh ON s.ShowID = sh.ShowID"
            " JOIN Video v ON v.VideoID = s.VideoID"
            " WHERE sh.ShowID = ?", (show_id,))

    # -- Reports --
    def most_watched_shows(self) -> List[Row]:
        return self._query(
            "SELECT q1.countWatch AS watchCount, q1.showName AS showName, a.Name AS appName"
            " FROM App a"
            " JOIN (SELECT COUNT(sh.ShowID) AS countWatch, sh.Title AS showName, v.AppID AS AppID"
            " FROM UserVideoWatched uw JOIN Video v ON v.VideoID = uw.VideoID"
            " JOIN Seasons se ON se.VideoID = v.VideoID"
            " JOIN Shows sh ON sh.ShowID = se.ShowID"
            " GROUP BY sh.ShowID) q1 ON a.AppID = q1.AppID"
            " ORDER BY q1.countWatch DESC LIMIT 10")

    def free_videos_on_platform(self, platform_id: int) -> List[Row]:
        return self._query(
            "SELECT p.Name AS PlatformName, v.Title AS VideoTitle"
            " FROM AppPlatform ap JOIN Platform p ON p.PlatformID = ap.PlatformID"
            " JOIN App a ON a.AppID = ap.AppID"
            " JOIN Video v ON v.AppID = a.AppID"
            " WHERE v.SubNeeded = 0 AND p.PlatformID = ?", (platform_id,))

    def long_videos_without_show(self) -> List[Row]:
        return self._query(
            "SELECT v.VideoID AS videoID, v.Title AS videoTitle, v.Duration AS duration"
            " FROM Video v"
            " WHERE v.VideoID NOT IN (SELECT s.VideoID FROM Seasons s WHERE s.VideoID IS NOT NULL)"
            " AND substr(v.ReleaseDate, 1, 4) = '2020'"
            " AND v.Duration > 1000")

    def app_revenue_by_country(self, country: str) -> List[Row]:
        return self._query(
            "SELECT u.Country AS Country, SUM(s.Cost) AS Revenue, a.Name AS AppName"
            " FROM Subscription s JOIN User u ON s.UserID = u.UserID"
            " JOIN App a ON a.AppID = s.AppID"
            " WHERE u.Country = ?"
            " GROUP BY a.AppID"
            " ORDER BY Revenue DESC", (country,))

    def top_watched_tags(self) -> List[Row]:
        return self._query(
            "SELECT COUNT(uw.VideoID) AS viewCount, t.Tag AS tagName"
            " FROM Tag t JOIN Video v ON v.VideoID = t.VideoID"
            " JOIN UserVideoWatched uw ON v.VideoID = uw.VideoID"
            " GROUP BY t.Tag"
            " ORDER BY viewCount DESC LIMIT 3")

    def highest_customer(self, country: str) -> List[Row]:
        return self._query(
            "SELECT q1.ID AS UserID, q1.FirstName AS firstName, q1.LastName AS lastName, q1.Revenue AS Revenue"
            " FROM (SELECT u.UserID AS ID, u.FirstName AS FirstName, u.LastName AS LastName,"
            " ROUND(SUM(s.Cost), 2) AS Revenue, u.Country AS Country"
            " FROM User u JOIN Subscription s ON u.UserID = s.UserID"
            " GROUP BY u.UserID) q1"
            " WHERE q1.Country = ?"
            " ORDER BY q1.Revenue DESC LIMIT 1", (country,))

    def lowest_app(self, country: str) -> List[Row]:
        return self._query(
            "SELECT q1.Revenue AS Revenue, q1.AppID AS AppID, q1.AppName AS AppName, q1.Country AS Country"
            " FROM (SELECT ROUND(SUM(s.Cost), 2) AS Revenue, a.AppID AS AppID, a.Name AS AppName,"
            " u.Country AS Country"
            " FROM Subscription s JOIN App a ON a.AppID = s.AppID"
            " JOIN User u ON s.UserID = u.UserID"
            " WHERE u.Country = ?"
            " GROUP BY s.AppID) q1"
            " ORDER BY q1.Revenue LIMIT 1", (country,))

    def most_profitable_app_videos(self, country: str) -> List[Row]:
        return self._query(
            "SELECT COUNT(uw.VideoID) AS WatchCount, v.Title AS VideoName, a.Name AS AppName"
            " FROM (SELECT SUM(s.Cost) AS Revenue, s.AppID AS AppID"
            " FROM Subscription s JOIN User u ON u.UserID = s.UserID"
            " WHERE u.Country = ?"
            " GROUP BY s.AppID"
            " ORDER BY Revenue DESC LIMIT 1) q1"
            " JOIN Video v ON v.AppID = q1.AppID"
            " JOIN App a ON a.AppID = q1.AppID"
            " JOIN UserVideoWatched uw ON v.VideoID = uw.VideoID"
            " GROUP BY uw.VideoID"
            " ORDER BY WatchCount DESC, VideoName LIMIT 3", (country,))

    def most_watched_episodes(self, show_id: int) -> List[Row]:
        return self._query(
            "SELECT q1.showName AS showName, v.Title AS videoName, q1.watchCount AS watchCount"
            " FROM (SELECT sh.ShowID AS ShowID, sh.Title AS showName, s.VideoID AS VideoID,"
            " COUNT(uw.VideoID) AS watchCount"
            " FROM UserVideoWatched uw JOIN Seasons s ON s.VideoID = uw.VideoID"
            " JOIN Shows sh ON sh.ShowID = s.ShowID"
            " GROUP BY uw.VideoID) q1"
            " JOIN Shows sh ON sh.ShowID = q1.ShowID"
            " JOIN Video v ON v.VideoID = q1.VideoID"
            " WHERE sh.ShowID = ?"
            " ORDER BY watchCount DESC, showName LIMIT 3", (show_id,))

    def mobile_app_revenue(self, country: str) -> List[Row]:
        return self._query(
            "SELECT a.Name AS AppName, a.AppID AS AppID, ROUND(SUM(s.Cost), 0) AS Revenue"
            " FROM Platform p JOIN AppPlatform ap ON p.PlatformID = ap.PlatformID"
            " JOIN App a ON a.AppID = ap.AppID"
            " JOIN Subscription s ON s.AppID = a.AppID"
            " JOIN User u ON s.UserID = u.UserID"
            " WHERE u.Country = ? AND p.Mobile = 1"
            " GROUP BY ap.AppID"
            " ORDER BY Revenue DESC, AppName", (country,))
