import sys
from pathlib import Path

# --- Add ROOT for imports ---
ROOT = Path(__file__).resolve().parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from justnote.app import run

if __name__ == "__main__":
    sys.exit(run())
