# db.py
from functools import lru_cache
from os import getenv
from dotenv import load_dotenv
from pymongo import MongoClient

# this will read the .env file and set os.environ["MONGODB_URI"]
load_dotenv()


def should_use_real_data() -> bool:
    return getenv("ENABLE_REAL_DATA") == "true"


@lru_cache(maxsize=1)
def get_db():
    # grab it out of the environment on first use, so demo mode never needs it
    mongo_uri = getenv("MONGODB_URI")
    if not mongo_uri:
        raise RuntimeError("MONGODB_URI env var not set")

    mongo_client = MongoClient(mongo_uri)
    return mongo_client[getenv("MONGODB_DB", "fraudguard_db")]


def get_users_collection():
    return get_db()["users"]


def get_sessions_collection():
    return get_db()["sessions"]


def get_audit_logs_collection():
    return get_db()["audit_logs"]
