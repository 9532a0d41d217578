import logging
import logging.handlers
import time
from pathlib import Path

from inventory_replenishment.config import config

class Logger:
    """Named loggers configured from the LOGGING section."""

    _instance = None
    _loggers = {}

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(Logger, cls).__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return

        self._log_config = config.log_config
        self._log_dir = Path(self._log_config['directory'])
        self._formatter = logging.Formatter(self._log_config['format'])

        if self._log_config['file_output']:
            self._log_dir.mkdir(parents=True, exist_ok=True)

        self._initialized = True

    def get_logger(self, name):
        """Get a logger with the specified name.

        Each logger writes to its own rotating ``<name>.log`` file and/or the
        console, depending on the LOGGING section, and does not propagate.
        """
        if name in self._loggers:
            return self._loggers[name]

        log = logging.getLogger(name)
        log.setLevel(getattr(logging, self._log_config['level'].upper(), logging.INFO))

        for handler in log.handlers[:]:
            log.removeHandler(handler)

        for handler in self._handlers(name):
            handler.setFormatter(self._formatter)
            log.addHandler(handler)

        log.propagate = False

        self._loggers[name] = log
        return log

    def _handlers(self, name):
        if self._log_config['file_output']:
            yield logging.handlers.RotatingFileHandler(
                self._log_dir / f"{name}.log",
                maxBytes=self._log_config['max_size_mb'] * 1024 * 1024,
                backupCount=self._log_config['backup_count']
            )
        if self._log_config['console_output']:
            yield logging.StreamHandler()

    def log_exception(self, logger_name, exception, message=None):
        """Log an exception with its stack trace.

        Args:
            logger_name: Logger name
            exception: Exception object
            message: Optional message to include
        """
        text = f"{message}: {str(exception)}" if message else str(exception)
        self.get_logger(logger_name).error(text, exc_info=exception)

    def job_started(self, job_name, details=None):
        """Log the start of a monitor job.

        Returns:
            Dictionary to hand back to job_finished
        """
        job_logger = self.get_logger('monitor')
        job_logger.info(f"Starting job: {job_name}")
        if details:
            job_logger.info(f"Job details: {details}")

        return {'job_name': job_name, 'started': time.monotonic()}

    def job_finished(self, job, success=True, results=None):
        """Log the outcome and duration of a monitor job."""
        job_logger = self.get_logger('monitor')
        elapsed = time.monotonic() - job.get('started', time.monotonic())
        name = job.get('job_name', 'unknown')

        if success:
            job_logger.info(f"Finished job: {name} in {elapsed:.3f}s")
        else:
            job_logger.error(f"Job failed: {name} after {elapsed:.3f}s")

        if results:
            job_logger.info(f"Job results: {results}")

# Global logger instance
logger = Logger()

def get_logger(name):
    """Get a logger with the specified name."""
    return logger.get_logger(name)

def log_exception(logger_name, exception, message=None):
    """Log an exception with its stack trace."""
    logger.log_exception(logger_name, exception, message)
