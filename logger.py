import logging
import os
import platform
import sys
import traceback
from datetime import datetime


class CrashHandler:
    def __init__(self, log_dir=None, bug_log_path=None, level=logging.INFO):
        base_dir = os.path.join(os.path.expanduser("~"), ".studyflow")

        self.log_dir = log_dir if log_dir else os.path.join(base_dir, "logs")
        self.bug_log_path = bug_log_path if bug_log_path else os.path.join(
            os.path.dirname(self.log_dir), "bugs.txt"
        )

        os.makedirs(self.log_dir, exist_ok=True)

        log_file = os.path.join(self.log_dir, f"app_{datetime.now().strftime('%Y%m%d')}.log")
        logging.basicConfig(
            level=level,
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            handlers=[
                logging.FileHandler(log_file, encoding="utf-8"),
                logging.StreamHandler(sys.stdout)
            ]
        )
        sys.excepthook = self.handle_exception
        self._rotate_logs()

    def handle_exception(self, exc_type, exc_value, exc_traceback):
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_traceback)
            return

        logging.error("Uncaught exception", exc_info=(exc_type, exc_value, exc_traceback))

        error_msg = "".join(traceback.format_exception(exc_type, exc_value, exc_traceback))
        self._write_bug_report(exc_type, exc_value, error_msg)
        self._show_dialog(exc_value)

    def _show_dialog(self, exc_value):
        import tkinter as tk
        from tkinter import messagebox

        # only when a window is up
        if tk._default_root is None:
            return
        try:
            messagebox.showerror("Critical Error", f"An unexpected error occurred.\n\n{exc_value}")
        except tk.TclError as exc:
            logging.error("Failed to show error dialog: %s", exc)

    def _write_bug_report(self, exc_type, exc_value, error_msg):
        try:
            sys_info = f"System: {platform.system()} {platform.release()}\n"
            sys_info += f"Python: {sys.version}\n"

            with open(self.bug_log_path, "a", encoding="utf-8") as f:
                f.write(f"[{datetime.now().strftime('%Y-%m-%d %H:%M:%S')}]\n")
                f.write(f"{sys_info}\n")
                f.write(f"{exc_type.__name__}: {exc_value}\n\n")
                f.write("Traceback:\n")
                f.write(error_msg)
                f.write(f"\n{'-' * 50}\n")
        except OSError as exc:
            logging.error("Failed to write bug report: %s", exc)

    def _rotate_logs(self, days_to_keep=7):
        """Removes log files older than the specified number of days."""
        try:
            now = datetime.now()
            for filename in os.listdir(self.log_dir):
                if filename.startswith("app_") and filename.endswith(".log"):
                    file_path = os.path.join(self.log_dir, filename)
                    file_mtime = datetime.fromtimestamp(os.path.getmtime(file_path))
                    if (now - file_mtime).days > days_to_keep:
                        os.remove(file_path)
                        logging.info(f"Deleted old log file: {filename}")
        except OSError as exc:
            logging.error(f"Failed to rotate logs: {exc}")
