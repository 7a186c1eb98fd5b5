# scripts/init_db.py
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from yatv.cli import load_config
from yatv.schema import init_schema

DB = load_config()["database"]
if os.path.dirname(DB):
    os.makedirs(os.path.dirname(DB), exist_ok=True)
init_schema(DB)
print("initialized db at", DB)
