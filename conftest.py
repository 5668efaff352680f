import os
import sys
from pathlib import Path

# Ensure repo root on sys.path for imports from anywhere in tests tree.
ROOT = Path(__file__).resolve().parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("CRM_STORE_BACKEND", "memory")
os.environ.setdefault("DEV_TENANT_ID", "tenant-A")
os.environ.setdefault("DEV_USER_ID", "dev-user")
os.environ.pop("YT_API_KEY", None)
os.environ.pop("ELEVEN_API_KEY", None)
