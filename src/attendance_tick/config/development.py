from .config import *  # noqa: F401,F403
from .config import env_flag

DEBUG = True

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = env_flag("AUTO_INIT_DB", "1")
# Seed the default employee list when the employee set is empty
AUTO_SEED_EMPLOYEES = env_flag("AUTO_SEED_EMPLOYEES", "1")
