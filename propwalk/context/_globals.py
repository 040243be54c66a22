# ─── File Names (resolved against the working directory at use) ──
CFG_FILENAME = "propwalk_settings.toml"
LOG_DIRNAME = "logs"

# ─── Default Config Values ───────────────────────────────────────
CFG_DEFAULT = {
    "search_threshold": 20,
    "breadcrumb_separator": " » ",
    "log_level": "INFO",
    "log_dir": LOG_DIRNAME,
    "output_format": "yaml",
}

# ─── Expected Types for Validation ───────────────────────────────
CFG_TYPES = {
    "search_threshold": int,
    "breadcrumb_separator": str,
    "log_level": str,
    "log_dir": str,
    "output_format": str,
}

LOG_LEVELS = ["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]
OUTPUT_FORMATS = ["yaml", "json", "toml"]
