import sqlite3
from datetime import date
import pytest

from yatv.models import (AddLatestVideoParams, AddToMyListParams, RegisterUserParams,
                         SubscribeUserParams, UpdatePlatformVersionParams)
from yatv.repo import RepoError, SqliteRepo
from yatv.schema import init_schema
from yatv.service import YatvService

# --- Sample data loaded on top of the schema ---
SEED_SQL = """
INSERT INTO App (AppID, Name, MonthlyCost) VALUES
    (1, 'Netflix', 9.99), (2, 'Hulu', 5.99), (3, 'Disney', 7.99);
INSERT INTO Platform (PlatformID, Name, Mobile) VALUES
    (1, 'iOS', 1), (2, 'Roku', 0), (3, 'Android', 1);
INSERT INTO AppPlatform (AppID, PlatformID, VersionNum) VALUES
    (1, 1, 1.0), (1, 2, 2.5), (2, 2, 3.0), (3, 3, 1.2);
INSERT INTO Shows (ShowID, Title) VALUES (1, 'Dark'), (2, 'Bluey'), (3, 'Ozark');
INSERT INTO Video (VideoID, Title, Description, Duration, AppID, SubNeeded, ReleaseDate, ShowID) VALUES
    (1, 'Dark S1E1', '', 3000, 1, 1, '2019-12-01', 1),
    (2, 'Dark S1E2', '', 3000, 1, 1, '2019-12-01', 1),
    (3, 'Dark S2E1', '', 3100, 1, 1, '2020-06-27', 1),
    (4, 'Bluey Ep1', '', 420, 2, 0, '2020-01-01', 2),
    (5, 'Doc Long', '', 1200, 2, 0, '2020-03-03', NULL),
    (6, 'Doc Short', '', 900, 1, 0, '2020-04-04', NULL),
    (7, 'Doc Old', '', 1500, 3, 0, '2019-05-05', NULL),
    (8, 'Ozark 1', '', 3000, 3, 1, '2017-07-21', 3),
    (9, 'Ozark 2', '', 3000, 3, 1, '2017-07-21', 3),
    (10, 'Ozark 3', '', 3000, 3, 1, '2018-08-31', 3),
    (11, 'Ozark 4', '', 3000, 3, 1, '2018-08-31', 3),
    (12, 'Ozark 5', '', 3000, 3, 1, '2018-08-31', 3);
INSERT INTO Seasons (ShowID, VideoID, SeasonNum, EpisodeNum) VALUES
    (1, 1, 1, 1), (1, 2, 1, 2), (1, 3, 2, 1), (2, 4, 1, 1),
    (3, 8, 1, 1), (3, 9, 1, 2), (3, 10, 2, 3), (3, 11, 2, 4), (3, 12, 2, 5);
INSERT INTO User (UserID, FirstName, LastName, Country, Email, Password) VALUES
    (1, 'Ann', 'Lee', 'US', 'ann@x.com', 'x'),
    (2, 'Bob', 'Ray', 'US', 'bob@x.com', 'x'),
    (3, 'Cam', 'Poe', 'CA', 'cam@x.com', 'x');
INSERT INTO Subscription (UserID, AppID, Cost, ExpDate) VALUES
    (1, 1, 29.97, '2021-01-01'), (1, 2, 5.99, '2021-01-01'), (2, 1, 9.99, '2021-01-01'),
    (3, 3, 7.99, '2021-01-01'), (2, 2, 11.98, '2021-01-01');
INSERT INTO Tag (VideoID, Tag) VALUES
    (1, 'thriller'), (2, 'thriller'), (3, 'scifi'), (1, 'scifi'), (4, 'kids'), (5, 'doc');
INSERT INTO UserVideoWatched (UserID, VideoID) VALUES
    (1, 1), (2, 1), (3, 1), (1, 2), (2, 2), (1, 3),
    (1, 4), (2, 4), (3, 4), (1, 4), (2, 5);
"""

# --- Fixtures ------------------------------------------------------------

@pytest.fixture
def db_path(tmp_path):
    """Temporary SQLite database with schema and sample rows"""
    p = str(tmp_path / "test_db.sqlite")
    init_schema(p)
    conn = sqlite3.connect(p)
    conn.executescript(SEED_SQL)
    conn.commit()
    conn.close()
    return p

@pytest.fixture
def repo_and_service(db_path):
    with SqliteRepo(db_path) as repo:
        yield repo, YatvService(repo, today=lambda: date(2024, 1, 15))

# --- Mutating commands ---------------------------------------------------

def test_register_user_persists_hash(repo_and_service):
    repo, svc = repo_and_service
    rows = svc.register_user(RegisterUserParams("Ann", "Lee", "US", "a@x.com", "pw"))
    assert len(rows) == 1
    assert rows[0]["FirstName"] == "Ann" and rows[0]["Country"] == "US"
    assert rows[0]["Password"] != "pw"
    assert YatvService.verify_password("pw", rows[0]["Password"])

def test_register_duplicate_email_fails_without_duplicate(repo_and_service):
    repo, svc = repo_and_service
    p = RegisterUserParams("Ann", "Lee", "US", "a@x.com", "pw")
    svc.register_user(p)
    with pytest.raises(RepoError, match="UNIQUE"):
        svc.register_user(p)
    assert len(repo.get_users_by_email("a@x.com")) == 1

def test_subscribe_user_stores_cost_and_expiration(repo_and_service):
    repo, svc = repo_and_service
    rows = svc.subscribe_user(SubscribeUserParams(user_id=3, app_id=1, months=3))
    new = [r for r in rows if r["Name"] == "Netflix"]
    assert len(new) == 1
    assert new[0]["Cost"] == pytest.approx(9.99 * 3)
    assert new[0]["ExpDate"] == "2024-04-15"
    assert all(r["UserID"] == 3 for r in rows)

def test_subscribe_unknown_user_fails(repo_and_service):
    repo, svc = repo_and_service
    with pytest.raises(RepoError):
        svc.subscribe_user(SubscribeUserParams(user_id=999, app_id=1, months=1))

def test_add_to_my_list(repo_and_service):
    repo, svc = repo_and_service
    svc.add_to_my_list(AddToMyListParams(user_id=1, show_id=2))
    rows = svc.add_to_my_list(AddToMyListParams(user_id=1, show_id=1))
    assert {r["Title"] for r in rows} == {"Bluey", "Dark"}
    assert all(r["UserID"] == 1 for r in rows)

def test_update_platform_version(repo_and_service):
    repo, svc = repo_and_service
    rows = svc.update_platform_version(UpdatePlatformVersionParams(app_id=1, platform_id=2, version=3.25))
    assert rows == [{"appName": "Netflix", "platName": "Roku", "verNum": 3.25}]

def test_add_latest_video_appends_to_current_season(repo_and_service):
    repo, svc = repo_and_service
    p = AddLatestVideoParams(show_id=3, title="Ozark 6", description="new", duration=3200,
                             sub_needed=True, release_date="2020-01-24")
    rows = svc.add_latest_video(p)
    new = [r for r in rows if r["vidName"] == "Ozark 6"]
    assert new == [{"showName": "Ozark", "vidName": "Ozark 6", "seasonNum": 2, "epNum": 6}]
    vid = repo.get_video_id_by_title("Ozark 6")
    with repo.conn() as c:
        app_id = c.execute("SELECT AppID FROM Video WHERE VideoID = ?", (vid,)).fetchone()[0]
    assert app_id == 3

# --- Reports -------------------------------------------------------------

def test_most_watched_shows(repo_and_service):
    repo, svc = repo_and_service
    rows = svc.most_watched_shows()
    assert [(r["showName"], r["appName"], r["watchCount"]) for r in rows] == [
        ("Dark", "Netflix", 6), ("Bluey", "Hulu", 4)]

def test_free_videos_on_platform(repo_and_service):
    repo, svc = repo_and_service
    rows = svc.free_videos_on_platform(2)
    assert {r["VideoTitle"] for r in rows} == {"Doc Short", "Bluey Ep1", "Doc Long"}
    assert all(r["PlatformName"] == "Roku" for r in rows)
    assert [r["VideoTitle"] for r in svc.free_videos_on_platform(1)] == ["Doc Short"]

def test_long_videos_without_show(repo_and_service):
    repo, svc = repo_and_service
    rows = svc.long_videos_without_show()
    # Dark S2E1 is long and from 2020 but linked to a season; Doc Short is too short
    assert rows == [{"videoID": 5, "videoTitle": "Doc Long", "duration": 1200}]

def test_app_revenue_by_country(repo_and_service):
    repo, svc = repo_and_service
    rows = svc.app_revenue_by_country("US")
    assert [r["AppName"] for r in rows] == ["Netflix", "Hulu"]
    assert rows[0]["Revenue"] == pytest.approx(39.96)
    assert rows[1]["Revenue"] == pytest.approx(17.97)
    assert svc.app_revenue_by_country("FR") == []

def test_top_watched_tags(repo_and_service):
    repo, svc = repo_and_service
    rows = svc.top_watched_tags()
    assert len(rows) == 3
    assert (rows[0]["tagName"], rows[0]["viewCount"]) == ("thriller", 5)
    assert {r["tagName"] for r in rows} == {"thriller", "scifi", "kids"}

def test_highest_customer(repo_and_service):
    repo, svc = repo_and_service
    rows = svc.highest_customer("US")
    assert len(rows) == 1
    assert (rows[0]["UserID"], rows[0]["firstName"]) == (1, "Ann")
    assert rows[0]["Revenue"] == pytest.approx(35.96)
    assert svc.highest_customer("FR") == []

def test_lowest_app(repo_and_service):
    repo, svc = repo_and_service
    rows = svc.lowest_app("US")
    assert len(rows) == 1
    assert (rows[0]["AppID"], rows[0]["AppName"]) == (2, "Hulu")
    assert rows[0]["Revenue"] == pytest.approx(17.97)

def test_most_profitable_app_videos(repo_and_service):
    repo, svc = repo_and_service
    rows = svc.most_profitable_app_videos("US")
    assert [(r["AppName"], r["VideoName"], r["WatchCount"]) for r in rows] == [
        ("Netflix", "Dark S1E1", 3), ("Netflix", "Dark S1E2", 2), ("Netflix", "Dark S2E1", 1)]

def test_most_watched_episodes(repo_and_service):
    repo, svc = repo_and_service
    rows = svc.most_watched_episodes(1)
    assert len(rows) <= 3
    counts = [r["watchCount"] for r in rows]
    assert counts == sorted(counts, reverse=True)
    assert [r["videoName"] for r in rows] == ["Dark S1E1", "Dark S1E2", "Dark S2E1"]
    assert svc.most_watched_episodes(3) == []

def test_mobile_app_revenue(repo_and_service):
    repo, svc = repo_and_service
    rows = svc.mobile_app_revenue("US")
    assert [(r["AppName"], r["Revenue"]) for r in rows] == [("Netflix", 40.0)]

# --- Reference lists -----------------------------------------------------

def test_reference_lists_match_tables(repo_and_service):
    repo, svc = repo_and_service
    assert sorted(r["Country"] for r in svc.list_countries()) == ["CA", "US"]
    assert sorted(r["Name"] for r in svc.list_apps()) == ["Disney", "Hulu", "Netflix"]
    assert sorted(r["platID"] for r in svc.list_platforms()) == [1, 2, 3]
    assert sorted(r["Title"] for r in svc.list_shows()) == ["Bluey", "Dark", "Ozark"]
    assert sorted(r["platName"] for r in svc.list_platforms_for_app(1)) == ["Roku", "iOS"]
    assert sorted(r["Country"] for r in svc.list_mobile_countries()) == ["CA", "US"]

def test_persistence_across_connections(db_path):
    with SqliteRepo(db_path) as repo:
        YatvService(repo).register_user(RegisterUserParams("Dee", "Fox", "UK", "dee@x.com", "pw"))
    with SqliteRepo(db_path) as repo:
        assert [r["FirstName"] for r in repo.get_users_by_email("dee@x.com")] == ["Dee"]
        assert "UK" in {r["Country"] for r in repo.list_countries()}
