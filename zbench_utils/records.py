# SPDX-License-Identifier: Apache-2.0
"""
Synthetic record generation.

Records are flat dataclasses filled from small fixed vocabularies and
numeric ranges. The random generator is always passed in, so a fixed seed
gives a reproducible data set.

Example:
    >>> import random
    >>> from zbench_utils.records import generate_records
    >>> people = generate_records("people", 3, random.Random(7))
    >>> [p.id for p in people]
    [1, 2, 3]
"""

import os
import random
import time
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Callable, Dict, List, NamedTuple, Optional, Sequence, Union

import ujson  # type: ignore

from .config import GenerateConfig
from .logging import get_logger
from .validation import InputValidator

logger = get_logger("generate_data")

MOVIE_TITLES = ["Silent Horizon", "Crimson Valley", "Echoes of Tomorrow", "Northbound", "Astra Drift", "Blue Lantern", "Midnight Harbor", "Glass River"]
MOVIE_GENRES = ["Drama", "Sci-Fi", "Thriller", "Comedy", "Adventure", "Mystery"]
DIRECTORS = ["Avery Quinn", "Morgan Ellis", "Riley Chen", "Harper Singh", "Jordan Blake", "Taylor Reyes"]

BOOK_TITLES = ["The Last Orchard", "Paper Cities", "Sparks in Winter", "The River and the Road", "Atlas of Dust", "The Ninth Signal"]
BOOK_GENRES = ["Fantasy", "Historical", "Non-Fiction", "Mystery", "Romance", "Sci-Fi"]
AUTHORS = ["Samira Holt", "Eli Navarro", "Priya Kapoor", "Luca Moretti", "Noah Sterling", "Yuna Park"]

FIRST_NAMES = ["Ava", "Liam", "Maya", "Ethan", "Isla", "Noah", "Zoe", "Amir", "Nora", "Leo"]
LAST_NAMES = ["Johnson", "Khan", "Patel", "Garcia", "Nguyen", "Smith", "Rossi", "Wright"]
CITIES = ["Austin", "Seattle", "Denver", "Toronto", "Dublin", "Oslo", "Berlin", "Lisbon"]
COUNTRIES = ["USA", "Canada", "Ireland", "Norway", "Germany", "Portugal"]


@dataclass
class Movie:
    id: int
    title: str
    genre: str
    year: int
    director: str
    rating: float
    runtime_minutes: int
    created_at: str


@dataclass
class Book:
    id: int
    title: str
    author: str
    genre: str
    year: int
    pages: int
    rating: float
    created_at: str


@dataclass
class Person:
    id: int
    first_name: str
    last_name: str
    email: str
    city: str
    country: str
    age: int
    created_at: str


Record = Union[Movie, Book, Person]


def _timestamp() -> str:
    """RFC 3339 local time, seconds precision."""
    return datetime.now().astimezone().isoformat(timespec="seconds")


def _uniform(rng: random.Random, low: float, high: float) -> float:
    return low + rng.random() * (high - low)


def make_movie(rng: random.Random, record_id: int) -> Movie:
    return Movie(
        id=record_id,
        title=rng.choice(MOVIE_TITLES),
        genre=rng.choice(MOVIE_GENRES),
        year=rng.randrange(1980, 2025),
        director=rng.choice(DIRECTORS),
        rating=_uniform(rng, 5.5, 9.8),
        runtime_minutes=rng.randrange(80, 161),
        created_at=_timestamp(),
    )


def make_book(rng: random.Random, record_id: int) -> Book:
    return Book(
        id=record_id,
        title=rng.choice(BOOK_TITLES),
        author=rng.choice(AUTHORS),
        genre=rng.choice(BOOK_GENRES),
        year=rng.randrange(1965, 2025),
        pages=rng.randrange(150, 600),
        rating=_uniform(rng, 3.5, 5.0),
        created_at=_timestamp(),
    )


def make_person(rng: random.Random, record_id: int) -> Person:
    first = rng.choice(FIRST_NAMES)
    last = rng.choice(LAST_NAMES)
    return Person(
        id=record_id,
        first_name=first,
        last_name=last,
        email=f"{first}.{last}@example.com".lower(),
        city=rng.choice(CITIES),
        country=rng.choice(COUNTRIES),
        age=rng.randrange(18, 70),
        created_at=_timestamp(),
    )


MAKERS: Dict[str, Callable[[random.Random, int], Record]] = {
    "movies": make_movie,
    "books": make_book,
    "people": make_person,
}


def generate_records(record_type: str, count: int, rng: random.Random) -> List[Record]:
    """
    Build ``count`` records of ``record_type`` with ids 1..count.

    Raises:
        ValidationError: On an unknown type or non-positive count
    """
    record_type = InputValidator.validate_record_type(record_type)
    InputValidator.validate_positive(count, "n")
    make = MAKERS[record_type]
    return [make(rng, i + 1) for i in range(count)]


def write_json_array(path: str, records: Sequence[Record]) -> int:
    """
    Write records as a JSON array, one compact record per line.

    Returns:
        Number of bytes written
    """
    body = ",\n".join(ujson.dumps(asdict(r), ensure_ascii=False) for r in records)
    data = ("[\n" + body + "\n]\n").encode("utf-8")
    with open(path, "wb") as f:
        f.write(data)
    return len(data)


class GenerateResult(NamedTuple):
    count: int
    path: str
    duration_seconds: float
    bytes_written: int


def generate(config: GenerateConfig, rng: Optional[random.Random] = None, now: Optional[datetime] = None) -> GenerateResult:
    """
    Generate one output file for ``config``.

    Without an explicit ``rng`` the generator is seeded from ``config.seed``
    or, failing that, from the wall clock.
    """
    if rng is None:
        seed = config.seed if config.seed is not None else time.time_ns()
        rng = random.Random(seed)
        logger.debug("rng_seeded", seed=seed)

    os.makedirs(config.out_dir, exist_ok=True)

    start = time.perf_counter()
    stamp = (now or datetime.now()).strftime("%Y%m%d_%H%M%S")
    path = os.path.join(config.out_dir, f"{config.record_type}_{stamp}.json")

    records = generate_records(config.record_type, config.count, rng)
    written = write_json_array(path, records)
    duration = time.perf_counter() - start

    logger.info(
        "records_generated",
        type=config.record_type,
        count=len(records),
        path=path,
        bytes=written,
        duration_s=f"{duration:.3f}",
    )
    return GenerateResult(len(records), path, duration, written)
