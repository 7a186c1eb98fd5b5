# yatv/cli.py
import json
import os
import sys
import logging
from yatv.commands import USAGE, parse_selector, run_command
from yatv.prompts import Prompter
from yatv.repo import SqliteRepo
from yatv.service import YatvService

DEFAULT_CFG = {
    "database": "data/Project.db",
    "logging_level": "WARNING",
    "bcrypt_rounds": 9
}

def load_config(path="config.json"):
    if not os.path.exists(path):
        return DEFAULT_CFG.copy()
    try:
        with open(path, "r", encoding="utf-8") as f:
            cfg = json.load(f)
    except Exception as e:
        print("Failed to read config.json:", e, " - using defaults", file=sys.stderr)
        return DEFAULT_CFG.copy()
    merged = DEFAULT_CFG.copy()
    merged.update(cfg)
    return merged

def configure_logging(level_name: str):
    level = getattr(logging, str(level_name).upper(), logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

def check_connection(db_path: str) -> str:
    """Open an existing database and run one read; never creates the file."""
    try:
        with SqliteRepo(db_path, create=False) as repo:
            repo.list_countries()
    except Exception as e:
        return "Do not connect to DB - Error:%s" % e
    return "Database is connected !"

def main(argv=None, stdin=None, stdout=None, cfg=None) -> int:
    """
    Entry point: `yatv <query #> [ignored...]`.
    Prints the usage text for a missing or invalid selector; otherwise runs the
    command and prints either its output or the error description. Always 0.
    """
    argv = sys.argv[1:] if argv is None else argv
    stdout = stdout if stdout is not None else sys.stdout
    cfg = cfg if cfg is not None else load_config()
    configure_logging(cfg.get("logging_level", "WARNING"))
    logger = logging.getLogger(__name__)

    query_type = parse_selector(argv[0] if argv else None)
    if query_type is None:
        stdout.write(USAGE)
        return 0

    logger.info("Running query %d (%s) against %s", query_type, query_type.name, cfg["database"])
    try:
        with SqliteRepo(cfg["database"]) as repo:
            svc = YatvService(repo, bcrypt_rounds=cfg.get("bcrypt_rounds", 9))
            result = run_command(query_type, svc, Prompter(stdin=stdin, stdout=stdout))
    except Exception as e:
        stdout.write("%s: %s\n" % (type(e).__name__, e))
        return 0

    if result.ok:
        for line in result.lines:
            stdout.write(line + "\n")
    else:
        stdout.write(result.error + "\n")
    return 0
