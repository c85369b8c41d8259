import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parent
for path in (REPO_ROOT, REPO_ROOT / "src" / "attendance_ledger"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from attendance_ledger.main import create_app

# Create the Flask app using factory pattern
app = create_app()

if __name__ == "__main__":
    # For local testing
    app.run(host="0.0.0.0", port=5000, debug=app.config["DEBUG"])
