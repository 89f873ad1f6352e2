from .config import *  # noqa: F401,F403

DEBUG = False
TESTING = True

AUTO_INIT_DB = False
AUTO_SEED_EMPLOYEES = False
