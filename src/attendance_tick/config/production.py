from .config import *  # noqa: F401,F403
from .config import env_flag

DEBUG = False

AUTO_INIT_DB = env_flag("AUTO_INIT_DB", "0")
AUTO_SEED_EMPLOYEES = env_flag("AUTO_SEED_EMPLOYEES", "1")
