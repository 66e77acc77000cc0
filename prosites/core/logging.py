"""
Logging configuration for Pro Sites billing
"""
import os
import sys
import logging
import json
from datetime import datetime
from pathlib import Path
from typing import Dict, Any, Optional
from logging.handlers import RotatingFileHandler

DEFAULT_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s [%(filename)s:%(lineno)d]'

def setup_logging(config: Optional[Dict[str, Any]] = None) -> None:
    """
    Setup application logging

    Args:
        config: Logging configuration (log_level, log_format, log_file, json)
    """
    config = config or {}

    log_level_name = config.get('log_level') or os.environ.get('LOG_LEVEL', 'INFO')
    log_level = getattr(logging, str(log_level_name).upper(), logging.INFO)

    if config.get('json'):
        formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(config.get('log_format') or DEFAULT_LOG_FORMAT)

    # Clear existing handlers
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(log_level)
    root_logger.addHandler(console_handler)

    # File handler with rotation, only when a log file is configured
    log_file = config.get('log_file')
    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=10,
            encoding='utf-8'
        )
        file_handler.setFormatter(formatter)
        file_handler.setLevel(log_level)
        root_logger.addHandler(file_handler)

    root_logger.setLevel(log_level)

    # Set levels for specific loggers
    logging.getLogger('werkzeug').setLevel(logging.WARNING)
    logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)
    logging.getLogger('urllib3').setLevel(logging.WARNING)
    logging.getLogger('stripe').setLevel(logging.WARNING)

    startup_logger = logging.getLogger(__name__)
    startup_logger.info(f"Logging initialized. Level: {log_level_name}, File: {log_file or '-'}")

def get_logger(name: str) -> logging.Logger:
    """
    Get logger with specified name

    Args:
        name: Logger name

    Returns:
        logging.Logger: Logger instance
    """
    return logging.getLogger(name)

class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging"""

    # Attributes every LogRecord carries; anything else came in through ``extra``
    _RESERVED = set(vars(logging.makeLogRecord({}))) | {'message', 'asctime'}

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON"""
        log_data = {
            'timestamp': datetime.fromtimestamp(record.created).isoformat(),
            'logger': record.name,
            'level': record.levelname,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
            'process': record.process,
            'thread': record.threadName,
        }

        if record.exc_info:
            log_data['exception'] = {
                'type': record.exc_info[0].__name__,
                'message': str(record.exc_info[1]),
                'traceback': self.formatException(record.exc_info)
            }

        for key, value in vars(record).items():
            if key not in self._RESERVED and key not in log_data:
                log_data[key] = value

        return json.dumps(log_data, default=str)

def log_external_service_call(service: str, endpoint: str, method: str,
                              duration: float, success: bool,
                              status_code: Optional[int] = None,
                              error: Optional[str] = None) -> None:
    """
    Log external service call

    Args:
        service: Service name
        endpoint: API endpoint
        method: HTTP method
        duration: Call duration in seconds
        success: Whether call was successful
        status_code: HTTP status code
        error: Error message if failed
    """
    logger = get_logger('external_services')

    extra_data = {
        'service': service,
        'endpoint': endpoint,
        'method': method,
        'duration': duration,
        'success': success,
        'event': 'external_service_call'
    }

    if status_code:
        extra_data['status_code'] = status_code

    if error:
        extra_data['error'] = error

    if success:
        logger.info(f"External service call: {service} {endpoint}", extra=extra_data)
    else:
        logger.warning(f"External service call failed: {service} {endpoint}", extra=extra_data)

def log_database_operation(operation: str, table: str, duration: float,
                           success: bool, rows_affected: Optional[int] = None,
                           error: Optional[str] = None) -> None:
    """
    Log database operation

    Args:
        operation: Database operation (select, insert, update, upsert)
        table: Table name
        duration: Operation duration in seconds
        success: Whether operation was successful
        rows_affected: Number of rows affected
        error: Error message if failed
    """
    logger = get_logger('database')

    extra_data = {
        'operation': operation,
        'table': table,
        'duration': duration,
        'success': success,
        'event': 'database_operation'
    }

    if rows_affected is not None:
        extra_data['rows_affected'] = rows_affected

    if error:
        extra_data['error'] = error

    if success:
        logger.debug(f"Database operation: {operation} on {table}", extra=extra_data)
    else:
        logger.error(f"Database operation failed: {operation} on {table}", extra=extra_data)
