# config.example.py

"""
Documentation-only module (safe to commit).

Configuration is read from environment variables, optionally via a local .env
file in the working directory. Real environment variables win over .env.

This file lists every variable the app understands.
"""

ENV_VARS = {
    # App / logging
    "TASKCLI_APP_NAME": "Name shown in the welcome banner and log lines (default: task-cli).",
    "TASKCLI_LOG_LEVEL": "Console log level (default: WARNING). The log file always gets DEBUG.",
    # Paths
    "TASKCLI_DATA_DIR": "Local data directory (default: ~/.task-cli).",
    "TASKCLI_TASKS_PATH": "Task file (default: <data_dir>/tasks.json).",
    "TASKCLI_BACKUP_PATH": "Copy of the previous task file, refreshed on every save (default: <data_dir>/tasks.backup.json).",
    "TASKCLI_LOG_DIR": "Directory for task-cli.log (default: <data_dir>).",
    # Terminal
    "TASKCLI_CLEAR_SCREEN": "Clear the screen between frames when stdout is a terminal (default: true).",
    "TASKCLI_HEADLESS": "Never wait for key presses; prompts take their default answer (default: false).",
}
