# ==========================================
# ASDF-TRACKER – Flask Backend / app.py
# ==========================================

# ================
# 🔗 Standard Libs
# ================
from functools import wraps

# =====================
# 🧪 Flask & Extensions
# =====================
from flask import Flask, jsonify
from flask_cors import CORS

# ====================
# 🧠 Project Internals
# ====================
from core.config import load_tracker_env, load_settings, require_settings
from core.snapshot import CacheSnapshot
from workers.scheduler import build_cache_scheduler
from utils.log import debug_log
from utils.time_helpers import utc_now_ts_ms



## ================================================================================================================================================================ ##
## ================================================================================================================================================================ ##
## ================================================================================================================================================================ ##



# ===========================
# 🌐 Flask App initialisieren
# ===========================
def create_app(snapshot: CacheSnapshot, allowed_origins=("*",)) -> Flask:
    """Read-only API over the shared snapshot. No route ever writes to it."""

    app = Flask(__name__)

    # =====================
    # 🔸 Flask & CORS Setup
    CORS(app, resources={
        r"/api/*": {"origins": list(allowed_origins)},
        r"/": {"origins": list(allowed_origins)},
        r"/health": {"origins": list(allowed_origins)},
    })

    # ==============================
    # 🟢 Guard: Cache noch nie befüllt
    def require_cache(view_func):
        @wraps(view_func)
        def wrapper(*args, **kwargs):
            if not snapshot.is_initialized:
                debug_log("API_STATUS", "Serving 503: Cache initializing.")
                return jsonify({"error": "Service unavailable, initializing data cache."}), 503
            return view_func(*args, **kwargs)
        return wrapper

    # =====================
    # 🟢 Status-Route
    @app.route("/")
    @app.route("/health")
    def status():
        return jsonify(snapshot.read().health_payload(utc_now_ts_ms())), 200

    # =====================
    # 🔥 Burn + Forecast
    @app.route("/api/burn", methods=["GET"])
    @require_cache
    def api_burn():
        return jsonify(snapshot.read().burn_payload())

    # =====================
    # 💰 Wallet + Preise
    @app.route("/api/wallet", methods=["GET"])
    @require_cache
    def api_wallet():
        return jsonify(snapshot.read().wallet_payload())

    return app



## ================================================================================================================================================================ ##



# ============
# ▶️ START
# ============
def main():
    load_tracker_env()
    settings = require_settings(load_settings())

    snapshot = CacheSnapshot()
    scheduler = build_cache_scheduler(settings, snapshot)
    app = create_app(snapshot, settings.allowed_origins)

    # Fast-Cycle feuert sofort, Price-Cycle nach dem Stagger
    scheduler.start()

    debug_log("INIT", f"Server running on port {settings.port}")
    try:
        app.run(host="0.0.0.0", port=settings.port, threaded=True, use_reloader=False)
    except KeyboardInterrupt:
        debug_log("INIT", "Stopped by Ctrl+C")
    finally:
        scheduler.stop(timeout=5)
        debug_log("INIT", "Exited cleanly")


if __name__ == "__main__":
    main()
