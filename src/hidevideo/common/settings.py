import os
import pathlib
from dotenv import load_dotenv

load_dotenv()


def boolean_env(key: str, default: bool = False) -> bool:
    return os.getenv(key, "1" if default else "0").lower() in ("1", "true", "yes")


# Storage settings
DATA_DIR = pathlib.Path(os.getenv("DATA_DIR", "./data"))
DB_PATH = pathlib.Path(os.getenv("DB_PATH", DATA_DIR / "hidevideo.db"))
DATA_DIR.mkdir(parents=True, exist_ok=True)


def make_db_url(path: pathlib.Path | str = DB_PATH) -> str:
    return f"sqlite:///{path}"


DB_URL = os.getenv("DATABASE_URL", make_db_url())
DB_ECHO = boolean_env("DB_ECHO", False)

# Covers are served from a static mount; the stored path is only used for its basename
COVERS_URL_PREFIX = os.getenv("COVERS_URL_PREFIX", "/covers/")

# Listing settings
DEFAULT_PAGE_SIZE = int(os.getenv("DEFAULT_PAGE_SIZE", 20))
MAX_PAGE_SIZE = int(os.getenv("MAX_PAGE_SIZE", 500))

# When no seed is given, "random" listings loaded into memory are shuffled.
# Set to false to keep the store's order instead.
SHUFFLE_WITHOUT_SEED = boolean_env("SHUFFLE_WITHOUT_SEED", True)
