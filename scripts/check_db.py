# scripts/check_db.py
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from yatv.cli import check_connection, load_config

if __name__ == "__main__":
    print(check_connection(load_config()["database"]))
