"""
Centralized logging service for OrderDesk.
Writes structured entries to the app_logs table and mirrors them to the
standard logger so they also show up on the console.
"""

import json
import logging
import os
import sqlite3
import traceback
from datetime import datetime, timedelta

from flask import request, has_request_context

from .config import get_config_value

logger = logging.getLogger('orderdesk')


class LoggingService:
    """Centralized logging service for application-wide logging"""

    @staticmethod
    def _db_path():
        return get_config_value('LOG_DB')

    @staticmethod
    def _connect():
        path = LoggingService._db_path()
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        return sqlite3.connect(path)

    @staticmethod
    def _ensure_logs_table(conn):
        cursor = conn.cursor()
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS app_logs (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                timestamp TEXT NOT NULL,
                level TEXT NOT NULL,
                source TEXT NOT NULL,
                message TEXT NOT NULL,
                details TEXT,
                ip_address TEXT,
                request_path TEXT,
                admin_email TEXT
            )
        """)
        cursor.execute("""
            CREATE INDEX IF NOT EXISTS idx_logs_timestamp
            ON app_logs(timestamp)
        """)

    @staticmethod
    def _get_request_context():
        """Get IP, path and signed-in admin for the current request"""
        if not has_request_context():
            return None, None, None

        from flask import session

        ip_address = request.headers.get('X-Forwarded-For', request.remote_addr)
        if ip_address and ',' in ip_address:
            ip_address = ip_address.split(',')[0].strip()

        return ip_address, request.path, session.get('admin_email')

    @staticmethod
    def log(level, source, message, details=None):
        """
        Log a message to the console and the app_logs table

        Args:
            level (str): Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            source (str): Source component (orders, admin_users, setup, ...)
            message (str): Main log message
            details (str/dict): Additional details (JSON-encoded if dict)
        """
        level = level.upper()
        logger.log(getattr(logging, level, logging.INFO), f"[{source}] {message}")

        if isinstance(details, (dict, list)):
            details = json.dumps(details, indent=2, default=str)

        try:
            ip_address, request_path, admin_email = LoggingService._get_request_context()

            with LoggingService._connect() as conn:
                LoggingService._ensure_logs_table(conn)
                conn.execute("""
                    INSERT INTO app_logs
                    (timestamp, level, source, message, details, ip_address, request_path, admin_email)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """, (
                    datetime.now().isoformat(), level, source, message, details,
                    ip_address, request_path, admin_email
                ))
                conn.commit()

        except Exception as e:
            # Console only if the log database is unavailable
            print(f"[{datetime.now().isoformat()}] [{level}] [{source}] {message}")
            if details:
                print(f"Details: {details}")
            print(f"Logging service error: {e}")

    @staticmethod
    def info(source, message, details=None):
        LoggingService.log('INFO', source, message, details)

    @staticmethod
    def warning(source, message, details=None):
        LoggingService.log('WARNING', source, message, details)

    @staticmethod
    def error(source, message, details=None):
        LoggingService.log('ERROR', source, message, details)

    @staticmethod
    def log_error_with_traceback(source, error, details=None):
        """Log error with full traceback"""
        error_details = {
            'error_type': type(error).__name__,
            'error_message': str(error),
            'traceback': traceback.format_exc()
        }
        if details:
            error_details['additional_details'] = details

        LoggingService.error(source, f"Exception occurred: {type(error).__name__}", error_details)

    @staticmethod
    def log_security_event(message, details=None):
        """Log security-related events (failed sign-ins, rejected staff)"""
        LoggingService.warning('security', message, details)

    @staticmethod
    def count_errors_since(hours=1):
        """Count ERROR/CRITICAL entries in the last few hours"""
        path = LoggingService._db_path()
        if not path or not os.path.exists(path):
            return 0

        cutoff = (datetime.now() - timedelta(hours=hours)).isoformat()
        try:
            with sqlite3.connect(path) as conn:
                LoggingService._ensure_logs_table(conn)
                cursor = conn.execute("""
                    SELECT COUNT(*) FROM app_logs
                    WHERE level IN ('ERROR', 'CRITICAL')
                    AND timestamp > ?
                """, (cutoff,))
                return cursor.fetchone()[0]
        except sqlite3.Error as e:
            logger.debug(f"Could not count recent errors: {e}")
            return 0


# Convenience instance for easy importing
log = LoggingService()
