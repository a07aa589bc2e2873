"""Development server for the TutaLink API.

Configuration comes from the environment (see ``tutalink.config``); set
``STORAGE_BACKEND=sql`` and ``DATABASE_URL`` to run against a database.
"""
from __future__ import annotations
import os
from tutalink import create_app

def main() -> None:
    flask_app = create_app()

    print(f"\n=== TutaLink API ({flask_app.config['STORAGE_BACKEND']} storage) ===")
    for r in sorted(flask_app.url_map.iter_rules(), key=lambda x: x.rule):
        methods = ",".join(sorted(m for m in r.methods if m not in {"HEAD", "OPTIONS"}))
        print(f"{methods:<18} {r.rule}")
    print("=" * 40 + "\n")

    debug_enabled = os.environ.get("FLASK_DEBUG", "0") in {"1", "true", "True"}
    flask_app.run(host="0.0.0.0", port=int(os.environ.get("PORT", 5000)), debug=debug_enabled)

if __name__ == "__main__":
    main()
