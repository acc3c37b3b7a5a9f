"""
Logging utilities for the insights engine.
"""

import logging
import sys
from pathlib import Path
from datetime import datetime

import config


def setup_logger(
    name: str = "insights",
    level: str = None,
    log_file: str = None,
    console: bool = True
) -> logging.Logger:
    """
    Set up and configure a logger.

    Args:
        name: Logger name
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        log_file: File to write logs to
        console: Whether to also log to console

    Returns:
        Configured logger instance
    """
    level = level or config.LOG_LEVEL
    log_file = log_file or config.LOG_FILE

    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper()))

    # Remove existing handlers
    logger.handlers = []

    formatter = logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    if console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(getattr(logging, level.upper()))
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(getattr(logging, level.upper()))
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str = None) -> logging.Logger:
    """
    Get a logger instance.

    Module loggers propagate to the root "insights" logger configured by
    setup_logger, so they are returned without handlers of their own.

    Args:
        name: Logger name (uses the root insights logger if None)

    Returns:
        Logger instance
    """
    if name is None:
        name = "insights"
    elif not name.startswith("insights"):
        name = f"insights.{name}"

    return logging.getLogger(name)


class InsightLogger:
    """Appends generated recommendations to a dedicated log file."""

    def __init__(self, log_dir: str = "logs"):
        """
        Initialize insight logger.

        Args:
            log_dir: Directory for log files
        """
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)

        self.insight_log_file = self.log_dir / "insights.log"

        self.logger = get_logger("recommendations")

    def log_insight(
        self,
        symbol: str,
        recommendation: str,
        price: float,
        score: int,
        confidence: float,
        **kwargs
    ):
        """
        Log a generated recommendation.

        Args:
            symbol: Stock symbol
            recommendation: BUY, HOLD or SELL
            price: Price the analysis was scored against
            score: Technical score (0-100)
            confidence: Analysis confidence (30-95)
            **kwargs: Additional fields
        """
        timestamp = datetime.now().isoformat()

        log_entry = (
            f"{timestamp} | INSIGHT | {symbol} | "
            f"{recommendation.upper()} | price=${price:.4f} | "
            f"score={score} | confidence={confidence:.0f}%"
        )

        for key, value in kwargs.items():
            log_entry += f" | {key}={value}"

        self.logger.info(log_entry)

        with open(self.insight_log_file, "a") as f:
            f.write(log_entry + "\n")
