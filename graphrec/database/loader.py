"""
CSV graph loader.

Imports a graph dump (one CSV file per node label / relationship type) into
the database. Expected files in the data directory:

    movies.csv     tmdb_id,title,genres[,movie_id,imdb_id,plot,year,released,
                   runtime,budget,revenue,imdb_rating,imdb_votes,poster,url,
                   languages,countries]
    people.csv     tmdb_id,name[,born,bio,poster]
    acted_in.csv   person_tmdb_id,movie_tmdb_id[,role]
    directed.csv   person_tmdb_id,movie_tmdb_id
    users.csv      user_id[,name]
    ratings.csv    user_id,movie_tmdb_id,rating[,timestamp]
    favorites.csv  user_id,movie_tmdb_id

Multi-valued columns (genres, languages, countries) are pipe-separated.
Only movies.csv is required.
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Optional

import pandas as pd
from sqlalchemy.orm import Session

from graphrec.database import crud
from graphrec.database.models import Movie, Person, User

logger = logging.getLogger(__name__)

LIST_SEPARATOR = "|"


def _read(path: Path) -> Optional[pd.DataFrame]:
    if not path.exists():
        logger.info(f"  {path.name} not found, skipping")
        return None
    df = pd.read_csv(path, dtype=str, keep_default_na=True)
    # Every cell becomes str or None
    return df.astype(object).where(pd.notna(df), None)


def _int(value) -> Optional[int]:
    if value is None or str(value).strip() == "":
        return None
    text = str(value).strip()
    try:
        return int(text)
    except ValueError:
        # "1.5e9", "120.0"
        return int(float(text))


def _float(value) -> Optional[float]:
    if value is None or str(value).strip() == "":
        return None
    return float(value)


def _date(value):
    if value is None or str(value).strip() == "":
        return None
    return pd.to_datetime(value).date()


def _timestamp(value) -> Optional[datetime]:
    if value is None or str(value).strip() == "":
        return None
    text = str(value).strip()
    if text.isdigit():
        return datetime.fromtimestamp(int(text), tz=timezone.utc).replace(tzinfo=None)
    return pd.to_datetime(text).to_pydatetime()


def _list(value) -> list:
    if value is None:
        return []
    return [part.strip() for part in str(value).split(LIST_SEPARATOR) if part.strip()]


def _load_movies(session: Session, df: pd.DataFrame) -> Dict[str, Movie]:
    movies: Dict[str, Movie] = {}
    for row in df.to_dict(orient="records"):
        movie = crud.create_movie(
            session,
            tmdb_id=row["tmdb_id"],
            title=row["title"],
            genres=_list(row.get("genres")),
            commit=False,
            movie_id=row.get("movie_id"),
            imdb_id=row.get("imdb_id"),
            plot=row.get("plot"),
            year=_int(row.get("year")),
            released=_date(row.get("released")),
            runtime=_int(row.get("runtime")),
            budget=_int(row.get("budget")),
            revenue=_int(row.get("revenue")),
            imdb_rating=_float(row.get("imdb_rating")),
            imdb_votes=_int(row.get("imdb_votes")),
            poster=row.get("poster"),
            url=row.get("url"),
            languages=_list(row.get("languages")) or None,
            countries=_list(row.get("countries")) or None,
        )
        movies[movie.tmdb_id] = movie
    return movies


def _load_people(session: Session, df: pd.DataFrame) -> Dict[str, Person]:
    people: Dict[str, Person] = {}
    for row in df.to_dict(orient="records"):
        person = crud.create_person(
            session,
            name=row["name"],
            tmdb_id=row["tmdb_id"],
            born=_date(row.get("born")),
            commit=False,
            bio=row.get("bio"),
            poster=row.get("poster"),
        )
        people[person.tmdb_id] = person
    return people


def _user(session: Session, users: Dict[str, User], user_id: str) -> User:
    if user_id not in users:
        users[user_id] = crud.get_or_create_user(session, user_id, commit=False)
    return users[user_id]


def load_graph_from_csv(session: Session, data_dir: str) -> Dict[str, int]:
    """
    Load a CSV graph dump into the database.

    Rows that reference unknown movies or people are skipped with a warning.

    Args:
        session: Database session (committed on success)
        data_dir: Directory containing the CSV files

    Returns:
        Dictionary with the number of imported rows per file

    Raises:
        FileNotFoundError: If movies.csv is missing
    """
    data_path = Path(data_dir)
    movies_df = _read(data_path / "movies.csv")
    if movies_df is None:
        raise FileNotFoundError(f"movies.csv not found in {data_path}")

    stats = {}
    logger.info(f"Loading graph from {data_path}")

    movies = _load_movies(session, movies_df)
    stats["movies"] = len(movies)

    people_df = _read(data_path / "people.csv")
    people = _load_people(session, people_df) if people_df is not None else {}
    stats["people"] = len(people)

    for name, adder in (("acted_in", crud.add_acted_in), ("directed", crud.add_directed)):
        df = _read(data_path / f"{name}.csv")
        count = 0
        for row in (df.to_dict(orient="records") if df is not None else []):
            person = people.get(row["person_tmdb_id"])
            movie = movies.get(row["movie_tmdb_id"])
            if person is None or movie is None:
                logger.warning(f"  Skipping {name} edge {row['person_tmdb_id']} -> {row['movie_tmdb_id']}")
                continue
            if name == "acted_in":
                adder(session, person, movie, role=row.get("role"), commit=False)
            else:
                adder(session, person, movie, commit=False)
            count += 1
        stats[name] = count

    users: Dict[str, User] = {}
    users_df = _read(data_path / "users.csv")
    for row in (users_df.to_dict(orient="records") if users_df is not None else []):
        users[row["user_id"]] = crud.get_or_create_user(
            session, row["user_id"], name=row.get("name"), commit=False
        )

    ratings_df = _read(data_path / "ratings.csv")
    count = 0
    for row in (ratings_df.to_dict(orient="records") if ratings_df is not None else []):
        movie = movies.get(row["movie_tmdb_id"])
        if movie is None:
            logger.warning(f"  Skipping rating for unknown movie {row['movie_tmdb_id']}")
            continue
        user = _user(session, users, row["user_id"])
        crud.rate_movie(
            session, user, movie, float(row["rating"]),
            timestamp=_timestamp(row.get("timestamp")),
            commit=False
        )
        count += 1
    stats["ratings"] = count

    favorites_df = _read(data_path / "favorites.csv")
    count = 0
    for row in (favorites_df.to_dict(orient="records") if favorites_df is not None else []):
        movie = movies.get(row["movie_tmdb_id"])
        if movie is None:
            logger.warning(f"  Skipping favorite for unknown movie {row['movie_tmdb_id']}")
            continue
        crud.add_favorite(session, _user(session, users, row["user_id"]), movie, commit=False)
        count += 1
    stats["favorites"] = count
    stats["users"] = len(users)

    session.commit()
    logger.info(f"Graph loaded: {stats}")
    return stats
