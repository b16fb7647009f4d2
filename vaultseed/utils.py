"""
Utility Functions Module

Provides essential utilities:
- Configuration file I/O (YAML, JSON)
- Fixture document creation and measurement
- Logging configuration
- Path management
"""

import sys
import json
import yaml
import logging
from pathlib import Path
from typing import Dict, Optional, Any, Union
from datetime import datetime
from logging.handlers import RotatingFileHandler


class FileHandler:
    """
    Handles file input/output operations

    Supports: YAML and JSON configuration files, plain text fixtures
    """

    @staticmethod
    def read_config(filepath: Union[str, Path]) -> Dict[str, Any]:
        """
        Read configuration file (YAML or JSON)

        Args:
            filepath: Path to config file

        Returns:
            Configuration dictionary
        """
        filepath = Path(filepath)

        if not filepath.exists():
            raise FileNotFoundError(f"Config file not found: {filepath}")

        extension = filepath.suffix.lower()

        try:
            with open(filepath, 'r', encoding='utf-8') as f:
                if extension in ['.yaml', '.yml']:
                    return yaml.safe_load(f)
                elif extension == '.json':
                    return json.load(f)
                else:
                    raise ValueError(f"Unsupported config format: {extension}")

        except Exception as e:
            logging.error(f"Failed to read config {filepath}: {e}")
            raise

    @staticmethod
    def write_json(data: Dict[str, Any], filepath: Union[str, Path]):
        """Write a JSON document, creating parent directories"""
        filepath = Path(filepath)
        PathManager.ensure_dir(filepath.parent)

        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, default=str)

        logging.info(f"File written successfully: {filepath}")

    @staticmethod
    def write_fixture_document(
        filepath: Union[str, Path],
        line: str,
        repeat: int
    ) -> Path:
        """
        Write the placeholder document: ``line`` repeated ``repeat`` times

        Args:
            filepath: Output path
            line: Line content (without newline)
            repeat: Number of lines

        Returns:
            Absolute path of the written file
        """
        filepath = Path(filepath)
        PathManager.ensure_dir(filepath.parent)

        # newline='' keeps the byte length identical across platforms
        with open(filepath, 'w', encoding='utf-8', newline='') as f:
            for _ in range(repeat):
                f.write(line + "\n")

        return filepath.resolve()

    @staticmethod
    def get_file_info(filepath: Union[str, Path]) -> Dict[str, Any]:
        """
        Get file information

        Args:
            filepath: Path to file

        Returns:
            Dictionary with file info
        """
        filepath = Path(filepath)

        if not filepath.exists():
            return {'exists': False}

        stat = filepath.stat()

        return {
            'exists': True,
            'path': str(filepath.resolve()),
            'size_bytes': stat.st_size,
            'size_mb': stat.st_size / (1024 * 1024),
            'modified': datetime.fromtimestamp(stat.st_mtime).isoformat(),
            'name': filepath.name,
        }


class LoggerConfig:
    """
    Logging configuration manager

    Sets up consistent logging across the application
    """

    @staticmethod
    def setup_logger(
        name: str = "vaultseed",
        level: int = logging.INFO,
        log_file: Optional[Union[str, Path]] = None,
        log_to_console: bool = True,
        log_format: Optional[str] = None
    ) -> logging.Logger:
        """
        Setup and configure logger

        Args:
            name: Logger name
            level: Logging level
            log_file: Optional file path for file logging
            log_to_console: Whether to log to console
            log_format: Custom log format

        Returns:
            Configured logger
        """
        logger = logging.getLogger(name)
        logger.setLevel(level)

        # Remove existing handlers
        logger.handlers.clear()

        if log_format is None:
            log_format = (
                '%(asctime)s - %(name)s - %(levelname)s - '
                '%(filename)s:%(lineno)d - %(message)s'
            )

        formatter = logging.Formatter(log_format)

        if log_to_console:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(level)
            console_handler.setFormatter(formatter)
            logger.addHandler(console_handler)

        if log_file:
            log_file = Path(log_file)
            PathManager.ensure_dir(log_file.parent)

            file_handler = RotatingFileHandler(
                log_file,
                maxBytes=10 * 1024 * 1024,  # 10 MB
                backupCount=5
            )
            file_handler.setLevel(level)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

        return logger


class PathManager:
    """Path helpers"""

    @staticmethod
    def ensure_dir(path: Union[str, Path]) -> Path:
        """
        Ensure directory exists

        Args:
            path: Directory path

        Returns:
            Path object
        """
        path = Path(path)
        path.mkdir(parents=True, exist_ok=True)
        return path

    @staticmethod
    def remove_file(path: Union[str, Path]) -> bool:
        """Delete a file if present; returns whether one was removed"""
        path = Path(path)
        if path.exists():
            path.unlink()
            return True
        return False


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[str] = None
):
    """
    Quick logging setup

    Args:
        level: Logging level
        log_file: Optional log file path
    """
    LoggerConfig.setup_logger(level=level, log_file=log_file)
