# SPDX-License-Identifier: Apache-2.0
"""
Input validation module for the zstd benchmark tools.

Checks run parameters before any work begins so that configuration
mistakes are reported up front instead of halfway through a batch.

Example:
    >>> from zbench_utils.validation import InputValidator
    >>> InputValidator.validate_record_type(" People ")
    'people'
"""

from typing import Optional


class ValidationError(ValueError):
    """Exception raised when validation fails."""

    pass


class InputValidator:
    """
    Validator for tool parameters.

    All checks are classmethods returning the (possibly normalized) value
    or raising ValidationError.
    """

    RECORD_TYPES = ("movies", "books", "people")

    MIN_LEVEL = 0  # 0 selects the library default
    MAX_LEVEL = 22

    MAX_TRAIN_LEVEL = 4

    # Run ids end up as Pushgateway grouping labels; the client escapes them
    MAX_RUN_ID_LENGTH = 128

    @classmethod
    def validate_record_type(cls, record_type: str) -> str:
        """
        Validate and normalize a record type.

        Args:
            record_type: One of movies, books, people (any case)

        Returns:
            Lowercased record type

        Raises:
            ValidationError: If the type is unknown

        Example:
            >>> InputValidator.validate_record_type("cars")
            ValidationError: unknown type: cars (expected movies, books, people)
        """
        if not isinstance(record_type, str):
            raise ValidationError(f"Record type must be a string, got {type(record_type).__name__}")

        value = record_type.strip().lower()
        if value not in cls.RECORD_TYPES:
            raise ValidationError(f"unknown type: {value} (expected {', '.join(cls.RECORD_TYPES)})")
        return value

    @classmethod
    def validate_positive(cls, value: int, name: str) -> int:
        """
        Validate that an integer parameter is positive.

        Args:
            value: Value to check
            name: Flag name used in the error message

        Returns:
            Validated value

        Raises:
            ValidationError: If value is not a positive integer
        """
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValidationError(f"{name} must be an integer, got {type(value).__name__}")

        if value <= 0:
            raise ValidationError(f"{name} must be positive")

        return value

    @classmethod
    def validate_compression_level(cls, level: int) -> int:
        """
        Validate compression level.

        Args:
            level: Compression level (0 for default, 1-22 for zstd)

        Returns:
            Validated level

        Raises:
            ValidationError: If level is out of range
        """
        if isinstance(level, bool) or not isinstance(level, int):
            raise ValidationError(f"Compression level must be an integer, got {type(level).__name__}")

        if not cls.MIN_LEVEL <= level <= cls.MAX_LEVEL:
            raise ValidationError(f"Compression level must be between {cls.MIN_LEVEL} and {cls.MAX_LEVEL}")

        return level

    @classmethod
    def validate_train_level(cls, level: int) -> int:
        """Validate the dictionary training speed level (0 = default, 1-4)."""
        if isinstance(level, bool) or not isinstance(level, int):
            raise ValidationError(f"zstd-level must be an integer, got {type(level).__name__}")

        if not 0 <= level <= cls.MAX_TRAIN_LEVEL:
            raise ValidationError(f"zstd-level must be between 0 and {cls.MAX_TRAIN_LEVEL}")

        return level

    @classmethod
    def validate_dict_option(cls, use_dict: bool, dict_path: Optional[str]) -> Optional[str]:
        """
        Validate the dictionary flag pair.

        Args:
            use_dict: Whether dictionary mode was requested
            dict_path: Path given with -dict

        Returns:
            Stripped dictionary path, or None when dictionaries are off

        Raises:
            ValidationError: If -use-dict is set without -dict
        """
        path = (dict_path or "").strip()
        if use_dict and not path:
            raise ValidationError("-dict is required when -use-dict is set")
        return path if use_dict else None

    @classmethod
    def validate_run_id(cls, run_id: str) -> str:
        """
        Validate a run identifier used as a metrics label.

        Raises:
            ValidationError: If the id is empty or too long
        """
        if not run_id:
            raise ValidationError("Run id cannot be empty")

        if len(run_id) > cls.MAX_RUN_ID_LENGTH:
            raise ValidationError(f"Run id exceeds maximum length of {cls.MAX_RUN_ID_LENGTH}")

        return run_id
