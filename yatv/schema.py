# yatv/schema.py
import sqlite3

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS User (
    UserID INTEGER PRIMARY KEY AUTOINCREMENT,
    FirstName TEXT NOT NULL,
    LastName TEXT NOT NULL,
    Country TEXT NOT NULL,
    Email TEXT NOT NULL UNIQUE,
    Password TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS App (
    AppID INTEGER PRIMARY KEY AUTOINCREMENT,
    Name TEXT NOT NULL,
    MonthlyCost REAL NOT NULL
);

CREATE TABLE IF NOT EXISTS Platform (
    PlatformID INTEGER PRIMARY KEY AUTOINCREMENT,
    Name TEXT NOT NULL,
    Mobile INTEGER NOT NULL DEFAULT 0
);

CREATE TABLE IF NOT EXISTS AppPlatform (
    AppID INTEGER NOT NULL,
    PlatformID INTEGER NOT NULL,
    VersionNum REAL,
    PRIMARY KEY (AppID, PlatformID),
    FOREIGN KEY (AppID) REFERENCES App(AppID),
    FOREIGN KEY (PlatformID) REFERENCES Platform(PlatformID)
);

CREATE TABLE IF NOT EXISTS Subscription (
    SubscriptionID INTEGER PRIMARY KEY AUTOINCREMENT,
    UserID INTEGER NOT NULL,
    AppID INTEGER NOT NULL,
    Cost REAL NOT NULL,
    ExpDate TEXT NOT NULL,
    FOREIGN KEY (UserID) REFERENCES User(UserID),
    FOREIGN KEY (AppID) REFERENCES App(AppID)
);

CREATE TABLE IF NOT EXISTS Shows (
    ShowID INTEGER PRIMARY KEY AUTOINCREMENT,
    Title TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS Video (
    VideoID INTEGER PRIMARY KEY AUTOINCREMENT,
    Title TEXT NOT NULL,
    Description TEXT,
    Duration INTEGER NOT NULL,
    AppID INTEGER,
    SubNeeded INTEGER NOT NULL DEFAULT 0,
    ReleaseDate TEXT,
    ShowID INTEGER,
    FOREIGN KEY (AppID) REFERENCES App(AppID),
    FOREIGN KEY (ShowID) REFERENCES Shows(ShowID)
);

CREATE TABLE IF NOT EXISTS Seasons (
    SeasonID INTEGER PRIMARY KEY AUTOINCREMENT,
    ShowID INTEGER NOT NULL,
    VideoID INTEGER,
    SeasonNum INTEGER NOT NULL,
    EpisodeNum INTEGER NOT NULL,
    FOREIGN KEY (ShowID) REFERENCES Shows(ShowID),
    FOREIGN KEY (VideoID) REFERENCES Video(VideoID)
);

CREATE TABLE IF NOT EXISTS Tag (
    VideoID INTEGER NOT NULL,
    Tag TEXT NOT NULL,
    PRIMARY KEY (VideoID, Tag),
    FOREIGN KEY (VideoID) REFERENCES Video(VideoID)
);

CREATE TABLE IF NOT EXISTS MyListShow (
    UserID INTEGER NOT NULL,
    ShowID INTEGER NOT NULL,
    PRIMARY KEY (UserID, ShowID),
    FOREIGN KEY (UserID) REFERENCES User(UserID),
    FOREIGN KEY (ShowID) REFERENCES Shows(ShowID)
);

CREATE TABLE IF NOT EXISTS UserVideoWatched (
    UserID INTEGER NOT NULL,
    VideoID INTEGER NOT NULL,
    FOREIGN KEY (UserID) REFERENCES User(UserID),
    FOREIGN KEY (VideoID) REFERENCES Video(VideoID)
);
"""


def init_schema(db_path: str) -> None:
    """Create every table in db_path if it does not exist yet."""
    con = sqlite3.connect(db_path)
    try:
        con.executescript(SCHEMA_SQL)
        con.commit()
    finally:
        con.close()
