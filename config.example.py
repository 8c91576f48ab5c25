# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.

Every variable is optional.
"""

ENV_VARS = {
    # App / logging
    "TASKGLITCH_APP_NAME": "App display name (default: TaskGlitch).",
    "TASKGLITCH_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    "TASKGLITCH_DATA_DIR": "Local directory for logs and exports (default: .local/taskglitch).",
    # Initial load
    "TASKGLITCH_TASKS_SOURCE": "http(s) URL or JSON file with the initial task array (default: tasks.json).",
    "TASKGLITCH_LOAD_TIMEOUT_SECONDS": "HTTP timeout for the initial load (default: 10).",
    "TASKGLITCH_FALLBACK_TASK_COUNT": "Generated tasks when no data can be loaded (default: 50).",
    "TASKGLITCH_FALLBACK_SEED": "Seed for the generated tasks (default: 42).",
    # Activity / export
    "TASKGLITCH_ACTIVITY_LIMIT": "Max activity log entries kept (default: 50).",
    "TASKGLITCH_EXPORT_PATH": "Default CSV export path (default: <data_dir>/tasks.csv).",
    # User profile (display only)
    "TASKGLITCH_USER_NAME": "Name used in the greeting (default: Alex Carter).",
    "TASKGLITCH_USER_EMAIL": "Email shown by /whoami.",
}
